from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint

from ecobazaar.data.database import Base


class ProfileModel(Base):
    __tablename__ = "profiles"

    # same id as the auth user
    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=True)
    role = Column(String(20), nullable=True)  # user, seller, admin; null until chosen
    carbon_points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (CheckConstraint("carbon_points >= 0", name="ck_profiles_points"),)
