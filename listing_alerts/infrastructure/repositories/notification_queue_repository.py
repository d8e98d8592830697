"""Persistence helpers for the new-listing notification queue."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from listing_alerts.domain.entities import (
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENDING,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_STATUSES,
    NotificationQueueItem,
)
from listing_alerts.infrastructure.models import NotificationQueueModel
from listing_alerts.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)

logger = logging.getLogger(__name__)

_ERROR_MESSAGE_MAX_LENGTH = 1000
STALE_CLAIM_ERROR = "Delivery did not complete before the claim expired"


class NotificationQueueRepository:
    """Queue operations keyed by ``(user_id, ad_id)``.

    Every state transition is a single conditional ``UPDATE`` so that
    concurrent publish runs and retry sweeps never process the same row twice.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def enqueue(self, ad_id: str, user_ids: Iterable[str]) -> list[NotificationQueueItem]:
        """Create a PENDING row per user and return only the rows created now.

        Existing rows are left exactly as they are, whatever their status.
        """

        created: list[NotificationQueueModel] = []
        for user_id in sorted(set(user_ids)):
            now = now_in_app_naive_datetime()
            model = NotificationQueueModel(
                user_id=user_id,
                ad_id=ad_id,
                status=NOTIFICATION_STATUS_PENDING,
                retry_count=0,
                created_at=now,
                updated_at=now,
            )
            try:
                with self.session.begin_nested():
                    self.session.add(model)
            except IntegrityError:
                logger.debug(
                    "Notification already queued for user %s and ad %s", user_id, ad_id
                )
                continue
            created.append(model)
        self.session.commit()
        return [self._to_entity(model) for model in created]

    def claim(self, item_id: int, *, expected_status: str) -> bool:
        """Move ``item_id`` to SENDING if it is still in ``expected_status``."""

        updated = (
            self.session.query(NotificationQueueModel)
            .filter(
                NotificationQueueModel.id == item_id,
                NotificationQueueModel.status == expected_status,
            )
            .update(
                {
                    NotificationQueueModel.status: NOTIFICATION_STATUS_SENDING,
                    NotificationQueueModel.claimed_at: now_in_app_naive_datetime(),
                    NotificationQueueModel.updated_at: now_in_app_naive_datetime(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def mark_sent(self, item_id: int) -> bool:
        now = now_in_app_naive_datetime()
        updated = (
            self.session.query(NotificationQueueModel)
            .filter(
                NotificationQueueModel.id == item_id,
                NotificationQueueModel.status == NOTIFICATION_STATUS_SENDING,
            )
            .update(
                {
                    NotificationQueueModel.status: NOTIFICATION_STATUS_SENT,
                    NotificationQueueModel.sent_at: now,
                    NotificationQueueModel.error_message: None,
                    NotificationQueueModel.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        if updated != 1:
            logger.warning("Notification %s was no longer SENDING when marked sent", item_id)
        return updated == 1

    def mark_failed(self, item_id: int, error_message: str) -> bool:
        updated = (
            self.session.query(NotificationQueueModel)
            .filter(
                NotificationQueueModel.id == item_id,
                NotificationQueueModel.status == NOTIFICATION_STATUS_SENDING,
            )
            .update(
                {
                    NotificationQueueModel.status: NOTIFICATION_STATUS_FAILED,
                    NotificationQueueModel.retry_count: NotificationQueueModel.retry_count + 1,
                    NotificationQueueModel.error_message: error_message[:_ERROR_MESSAGE_MAX_LENGTH],
                    NotificationQueueModel.updated_at: now_in_app_naive_datetime(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        if updated != 1:
            logger.warning("Notification %s was no longer SENDING when marked failed", item_id)
        return updated == 1

    def release_stale_claims(self, *, claimed_before: datetime) -> int:
        """Turn SENDING rows claimed before ``claimed_before`` into retryable failures."""

        cutoff = ensure_app_naive_datetime(claimed_before)
        released = (
            self.session.query(NotificationQueueModel)
            .filter(
                NotificationQueueModel.status == NOTIFICATION_STATUS_SENDING,
                NotificationQueueModel.claimed_at < cutoff,
            )
            .update(
                {
                    NotificationQueueModel.status: NOTIFICATION_STATUS_FAILED,
                    NotificationQueueModel.retry_count: NotificationQueueModel.retry_count + 1,
                    NotificationQueueModel.error_message: STALE_CLAIM_ERROR,
                    NotificationQueueModel.updated_at: now_in_app_naive_datetime(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return released

    def list_retryable(
        self,
        *,
        max_retries: int,
        limit: int | None = 50,
        failed_before: datetime | None = None,
    ) -> Sequence[NotificationQueueItem]:
        query = (
            self.session.query(NotificationQueueModel)
            .populate_existing()
            .filter(NotificationQueueModel.status == NOTIFICATION_STATUS_FAILED)
            .filter(NotificationQueueModel.retry_count < max_retries)
        )
        if failed_before is not None:
            query = query.filter(
                NotificationQueueModel.updated_at < ensure_app_naive_datetime(failed_before)
            )
        query = query.order_by(NotificationQueueModel.updated_at.asc(), NotificationQueueModel.id.asc())
        if limit is not None:
            query = query.limit(limit)
        items = [self._to_entity(model) for model in query.all()]
        self.session.commit()
        return items

    def list_pending(
        self,
        *,
        ad_id: str | None = None,
        created_before: datetime | None = None,
        limit: int | None = None,
    ) -> Sequence[NotificationQueueItem]:
        """Return PENDING rows, oldest first.

        Rows stay PENDING only when the run that enqueued them stopped before
        claiming them.
        """

        query = (
            self.session.query(NotificationQueueModel)
            .populate_existing()
            .filter(NotificationQueueModel.status == NOTIFICATION_STATUS_PENDING)
        )
        if ad_id is not None:
            query = query.filter(NotificationQueueModel.ad_id == ad_id)
        if created_before is not None:
            query = query.filter(
                NotificationQueueModel.created_at < ensure_app_naive_datetime(created_before)
            )
        query = query.order_by(NotificationQueueModel.created_at.asc(), NotificationQueueModel.id.asc())
        if limit is not None:
            query = query.limit(limit)
        items = [self._to_entity(model) for model in query.all()]
        self.session.commit()
        return items

    def get(self, item_id: int) -> NotificationQueueItem | None:
        model = self.session.get(NotificationQueueModel, item_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def get_by_key(self, *, user_id: str, ad_id: str) -> NotificationQueueItem | None:
        model = (
            self.session.query(NotificationQueueModel)
            .populate_existing()
            .filter(
                NotificationQueueModel.user_id == user_id,
                NotificationQueueModel.ad_id == ad_id,
            )
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def list_for_ad(self, ad_id: str) -> Sequence[NotificationQueueItem]:
        query = (
            self.session.query(NotificationQueueModel)
            .populate_existing()
            .filter(NotificationQueueModel.ad_id == ad_id)
            .order_by(NotificationQueueModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def count_by_status(self) -> dict[str, int]:
        rows = (
            self.session.query(NotificationQueueModel.status, func.count(NotificationQueueModel.id))
            .group_by(NotificationQueueModel.status)
            .all()
        )
        counts = {status: 0 for status in NOTIFICATION_STATUSES}
        counts.update({status: total for status, total in rows})
        return counts

    @staticmethod
    def _to_entity(model: NotificationQueueModel) -> NotificationQueueItem:
        return NotificationQueueItem(
            id=model.id,
            user_id=model.user_id,
            ad_id=model.ad_id,
            status=model.status,
            retry_count=model.retry_count or 0,
            error_message=model.error_message,
            sent_at=ensure_app_timezone(model.sent_at),
            claimed_at=ensure_app_timezone(model.claimed_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationQueueRepository", "STALE_CLAIM_ERROR"]
