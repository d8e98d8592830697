"""SQLAlchemy model for published ads (owned by the ads module)."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from listing_alerts.infrastructure.database import Base
from listing_alerts.utils import now_in_app_naive_datetime

from ._types import json_type


class AdModel(Base):
    """Database representation of a marketplace ad."""

    __tablename__ = "ad"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("category.id"), nullable=False)
    city_id = Column(String(36), ForeignKey("city.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(String(30), nullable=False, index=True)
    ad_type = Column(String(30), nullable=True)
    price = Column(Float, nullable=True)
    custom_fields = Column(json_type, nullable=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    user = relationship("UserModel", lazy="joined")
    category = relationship("CategoryModel", lazy="joined")
    city = relationship("CityModel", lazy="joined")


__all__ = ["AdModel"]
