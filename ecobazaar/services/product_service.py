# ecobazaar/services/product_service.py
from decimal import Decimal
from typing import List

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.roles import Capability, require_capability, require_user
from ecobazaar.domain.schemas import Product, ProductCreate, SellerStats, SessionContext
from ecobazaar.repos.product_repo import ProductRepo
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE_URL = (
    "https://images.pexels.com/photos/1174775/pexels-photo-1174775.jpeg"
    "?auto=compress&cs=tinysrgb&w=800"
)

# stock a listing is assumed to start with when estimating seller revenue
INITIAL_STOCK_BASELINE = 200


class ProductService:
    def __init__(self, store: RecordStore):
        self.repo = ProductRepo(store)

    def list_catalog(self) -> List[Product]:
        return self.repo.list_catalog()

    def list_seller_products(self, session: SessionContext) -> List[Product]:
        user_id = require_user(session)
        require_capability(session.profile, Capability.SELL)
        return self.repo.list_by_seller(user_id)

    def create_product(self, session: SessionContext, payload: ProductCreate) -> Product:
        user_id = require_user(session)
        require_capability(session.profile, Capability.SELL)

        values = payload.model_dump()
        values["seller_id"] = user_id
        values["image_url"] = payload.image_url or DEFAULT_IMAGE_URL

        product = self.repo.create_product(values)
        logger.info(f"Seller {user_id} listed product {product.id} ({product.name})")
        return product

    def seller_stats(self, session: SessionContext) -> SellerStats:
        products = self.list_seller_products(session)
        return SellerStats(
            total_products=len(products),
            total_carbon=float(sum(p.carbon_footprint for p in products)),
            estimated_revenue=sum(
                (p.price * (INITIAL_STOCK_BASELINE - p.stock) for p in products),
                Decimal("0.00"),
            ),
        )
