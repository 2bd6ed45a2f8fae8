# ecobazaar/data/seed.py
from decimal import Decimal

from ecobazaar.data.store import RecordStore
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)

# platform listings, no seller
PLATFORM_PRODUCTS = [
    {
        "name": "Bamboo Toothbrush Set",
        "description": "Biodegradable bamboo handles, plant-based bristles",
        "price": Decimal("12.99"),
        "carbon_footprint": 0.3,
        "eco_rating": 5,
        "category": "Personal Care",
        "stock": 150,
        "is_eco_friendly": True,
    },
    {
        "name": "Plastic Toothbrush Pack",
        "description": "Standard nylon toothbrushes",
        "price": Decimal("6.49"),
        "carbon_footprint": 3.4,
        "eco_rating": 1,
        "category": "Personal Care",
        "stock": 200,
        "is_eco_friendly": False,
    },
    {
        "name": "Recycled Steel Water Bottle",
        "description": "Insulated bottle made from recycled steel",
        "price": Decimal("24.00"),
        "carbon_footprint": 1.8,
        "eco_rating": 4,
        "category": "Kitchen",
        "stock": 80,
        "is_eco_friendly": True,
    },
    {
        "name": "Non-stick Frying Pan",
        "description": "PTFE coated aluminium pan",
        "price": Decimal("34.50"),
        "carbon_footprint": 6.2,
        "eco_rating": 2,
        "category": "Kitchen",
        "stock": 60,
        "is_eco_friendly": False,
    },
    {
        "name": "Cast Iron Skillet",
        "description": "Lasts generations, no coating",
        "price": Decimal("39.00"),
        "carbon_footprint": 2.9,
        "eco_rating": 4,
        "category": "Kitchen",
        "stock": 40,
        "is_eco_friendly": True,
    },
    {
        "name": "Organic Cotton T-Shirt",
        "description": "GOTS certified organic cotton",
        "price": Decimal("22.00"),
        "carbon_footprint": 2.1,
        "eco_rating": 5,
        "category": "Clothing",
        "stock": 120,
        "is_eco_friendly": True,
    },
]


def seed(store: RecordStore) -> int:
    """Insert the platform catalog when the products table is empty."""
    #not forcing: only seed if empty
    if store.select("products"):
        return 0

    created = store.insert("products", [dict(p, seller_id=None) for p in PLATFORM_PRODUCTS])
    logger.info(f"Seeded {len(created)} platform products")
    return len(created)
