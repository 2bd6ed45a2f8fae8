from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float, Numeric, ForeignKey, CheckConstraint

from ecobazaar.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    seller_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    carbon_footprint = Column(Float, nullable=False)  # kg CO2e per unit
    eco_rating = Column(Integer, nullable=False, default=3)
    image_url = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    stock = Column(Integer, nullable=False, default=0)
    is_eco_friendly = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock"),
        CheckConstraint("price >= 0", name="ck_products_price"),
        CheckConstraint("carbon_footprint >= 0", name="ck_products_carbon"),
        CheckConstraint("eco_rating BETWEEN 1 AND 5", name="ck_products_eco_rating"),
    )
