"""SQLAlchemy model for the global notification switch."""

from sqlalchemy import Boolean, Column, DateTime, Integer
from sqlalchemy.sql import expression

from listing_alerts.infrastructure.database import Base
from listing_alerts.utils import now_in_app_naive_datetime


class NotificationSettingsModel(Base):
    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True, index=True)
    enabled = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    updated_at = Column(
        DateTime(),
        nullable=True,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationSettingsModel"]
