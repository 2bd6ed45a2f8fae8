# ecobazaar/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    SELLER = "seller"
    ADMIN = "admin"


# =====================================================
# records as stored in the record store
# =====================================================
class Profile(BaseModel):
    """Row of the ``profiles`` table."""

    id: str
    name: str | None = None
    role: Role | None = None
    carbon_points: int = 0
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class Product(BaseModel):
    """Row of the ``products`` table."""

    id: str
    seller_id: str | None = None
    name: str
    description: str | None = None
    price: Decimal
    carbon_footprint: float
    eco_rating: int = 3
    image_url: str | None = None
    category: str | None = None
    stock: int = 0
    is_eco_friendly: bool = False
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartItem(BaseModel):
    """Row of the ``cart_items`` table, optionally joined with its product."""

    id: str
    user_id: str
    product_id: str
    quantity: int
    added_at: datetime | None = None
    product: Product | None = Field(None, alias="products")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Order(BaseModel):
    """Row of the ``orders`` table."""

    id: str
    user_id: str
    total_price: Decimal
    total_carbon: float
    carbon_points_earned: int
    status: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderItem(BaseModel):
    """Row of the ``order_items`` table; price and carbon are purchase-time snapshots."""

    id: str
    order_id: str
    product_id: str
    quantity: int
    price: Decimal
    carbon_footprint: float

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# session
# =====================================================
class SessionContext(BaseModel):
    """Acting identity handed into every service call."""

    user_id: str | None = None
    profile: Profile | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def authenticated(self) -> bool:
        return bool(self.user_id)


# =====================================================
# requests
# =====================================================
class CartItemIn(BaseModel):
    product_id: str = Field(..., min_length=1, description="ID of the product to add")


class QuantityIn(BaseModel):
    # clamped by the router, see cart_service.clamp_quantity
    quantity: int = Field(..., description="Requested quantity")


class RoleIn(BaseModel):
    role: Role


class ProductCreate(BaseModel):
    """Seller listing form."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    carbon_footprint: float = Field(..., ge=0, description="kg CO2e per unit")
    eco_rating: int = Field(3, ge=1, le=5)
    image_url: str | None = None
    category: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0)
    is_eco_friendly: bool = False


# =====================================================
# responses
# =====================================================
class CartTotals(BaseModel):
    total_price: Decimal
    total_carbon: float
    eco_points: int


class CartView(BaseModel):
    items: List[CartItem]
    totals: CartTotals
    item_count: int


class Recommendation(BaseModel):
    candidate: Product
    alternatives: List[Product]


class AlternativeOut(BaseModel):
    product: Product
    carbon_savings_percent: int
    price_saving: Decimal | None = None


class RecommendationOut(BaseModel):
    candidate: Product
    alternatives: List[AlternativeOut]


class AddToCartOut(BaseModel):
    """Either the product went into the cart, or a recommendation intercepted it."""

    added: bool
    cart: CartView | None = None
    recommendation: RecommendationOut | None = None


class CheckoutResult(BaseModel):
    checkout_key: str
    order: Order
    cart: CartView
    catalog: List[Product]
    replayed: bool = False


class ProfileSummary(BaseModel):
    profile: Profile
    eco_level: str


class SellerStats(BaseModel):
    total_products: int
    total_carbon: float
    estimated_revenue: Decimal


class PlatformStats(BaseModel):
    total_users: int
    total_products: int
    total_orders: int
    total_carbon: float
    total_revenue: Decimal
    category_counts: Dict[str, int]
