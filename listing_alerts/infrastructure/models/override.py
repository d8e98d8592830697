"""SQLAlchemy model for per-user notification overrides."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from listing_alerts.infrastructure.database import Base
from listing_alerts.utils import now_in_app_naive_datetime


class NotificationOverrideModel(Base):
    """Administrator override; the unique ``user_id`` keeps one row per user."""

    __tablename__ = "user_notification_override"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, unique=True)
    mode = Column(String(10), nullable=False)
    expires_at = Column(DateTime(), nullable=False)
    reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(), nullable=True, onupdate=now_in_app_naive_datetime
    )


__all__ = ["NotificationOverrideModel"]
