"""SQLAlchemy model for queued new-listing notifications."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from listing_alerts.infrastructure.database import Base
from listing_alerts.utils import now_in_app_naive_datetime


class NotificationQueueModel(Base):
    """Delivery record; at most one row may exist per ``(user_id, ad_id)``."""

    __tablename__ = "notification_queue"
    __table_args__ = (
        UniqueConstraint("user_id", "ad_id", name="uq_notification_queue_user_ad"),
        Index("ix_notification_queue_status_retry", "status", "retry_count"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    ad_id = Column(String(36), ForeignKey("ad.id"), nullable=False, index=True)
    status = Column(String(10), nullable=False)
    retry_count = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime(), nullable=True)
    claimed_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=True,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationQueueModel"]
