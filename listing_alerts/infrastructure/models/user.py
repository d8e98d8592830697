"""SQLAlchemy model for marketplace users (owned by the accounts module)."""

from sqlalchemy import Column, String

from listing_alerts.infrastructure.database import Base


class UserModel(Base):
    """Database representation of the users that may receive notifications."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=True)
    role = Column(String(30), nullable=False, default="USER")
    user_type = Column(String(30), nullable=True)


__all__ = ["UserModel"]
