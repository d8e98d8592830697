"""SQLAlchemy model for user notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.sql import expression

from listing_alerts.infrastructure.database import Base
from listing_alerts.utils import now_in_app_naive_datetime

from ._types import json_type


class UserPreferenceModel(Base):
    """One row per user holding the new-listing subscription and filters."""

    __tablename__ = "user_preference"

    user_id = Column(String(36), ForeignKey("user.id"), primary_key=True)
    notify_new_matches = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    weekly_digest = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    filters = Column(json_type, nullable=True)
    updated_at = Column(
        DateTime(),
        nullable=True,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["UserPreferenceModel"]
