from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Integer, String, DateTime, Float, Numeric, ForeignKey

from ecobazaar.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)

    total_price = Column(Numeric(10, 2), nullable=False)
    total_carbon = Column(Float, nullable=False)
    carbon_points_earned = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="completed")  # completed, processing
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # no FK to products: the line must survive the product being removed
    product_id = Column(String(36), nullable=False)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # unit price at purchase
    carbon_footprint = Column(Float, nullable=False)  # unit footprint at purchase
