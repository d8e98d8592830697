"""Reference data tables read when rendering notification emails."""

from sqlalchemy import Column, String

from listing_alerts.infrastructure.database import Base


class CategoryModel(Base):
    __tablename__ = "category"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    name_he = Column(String(100), nullable=True)


class CityModel(Base):
    __tablename__ = "city"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    name_he = Column(String(100), nullable=True)


__all__ = ["CategoryModel", "CityModel"]
