"""Retry sweep for notifications whose delivery failed or never started."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from listing_alerts.config import get_settings
from listing_alerts.domain.entities import DispatchReport
from listing_alerts.infrastructure.repositories import NotificationQueueRepository
from listing_alerts.utils import now_in_app_timezone

from .dispatch import NotificationDispatcher, claim_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryReport:
    """``count`` is the number of items that left FAILED for SENT.

    ``recovered_count`` counts abandoned PENDING items that were delivered;
    the totals cover both kinds.
    """

    count: int = 0
    total_recipients: int = 0
    success_count: int = 0
    failed_count: int = 0
    released_count: int = 0
    recovered_count: int = 0


def retry_failed_notifications(
    session: Session,
    *,
    dispatcher: NotificationDispatcher,
    max_retries: int | None = None,
    limit: int | None = None,
    failed_before: datetime | None = None,
    now: datetime | None = None,
) -> RetryReport:
    """Re-deliver FAILED items that still have attempts left.

    Items stuck in SENDING longer than ``sending_stale_after_minutes`` are
    first released to FAILED so an interrupted run cannot strand them, and
    PENDING items older than the same cutoff (enqueued by a run that stopped
    before claiming them) are delivered too. Items that reached
    ``max_retries`` attempts are left alone. ``limit`` bounds the whole sweep.
    """

    settings = get_settings()
    if max_retries is None:
        max_retries = settings.notification_max_retries
    if limit is None:
        limit = settings.retry_batch_size
    now = now or now_in_app_timezone()

    queue = NotificationQueueRepository(session)
    stale_cutoff = now - timedelta(minutes=settings.sending_stale_after_minutes)
    released = queue.release_stale_claims(claimed_before=stale_cutoff)
    if released:
        logger.warning("Released %s notifications stuck in SENDING", released)

    abandoned = claim_items(
        queue, queue.list_pending(created_before=stale_cutoff, limit=limit)
    )
    if abandoned:
        logger.warning("Recovering %s notifications left in PENDING", len(abandoned))
    recovered_report = dispatcher.dispatch(abandoned)

    remaining = max(limit - len(abandoned), 0)
    candidates = (
        queue.list_retryable(
            max_retries=max_retries, limit=remaining, failed_before=failed_before
        )
        if remaining
        else []
    )
    claimed = claim_items(queue, candidates)
    logger.info(
        "Retrying %s of %s failed notifications", len(claimed), len(candidates)
    )
    retry_report = dispatcher.dispatch(claimed)

    return RetryReport(
        count=retry_report.success_count,
        total_recipients=_total(recovered_report, retry_report, "total_recipients"),
        success_count=_total(recovered_report, retry_report, "success_count"),
        failed_count=_total(recovered_report, retry_report, "failed_count"),
        released_count=released,
        recovered_count=recovered_report.success_count,
    )


def _total(first: DispatchReport, second: DispatchReport, field: str) -> int:
    return getattr(first, field) + getattr(second, field)


__all__ = ["RetryReport", "retry_failed_notifications"]
