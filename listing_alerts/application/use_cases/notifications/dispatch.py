"""Deliver claimed queue items through the notification sender."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from sqlalchemy.orm import Session

from listing_alerts.config import get_settings
from listing_alerts.domain.delivery import NotificationSender
from listing_alerts.domain.entities import DispatchReport, NotificationQueueItem
from listing_alerts.infrastructure.repositories import NotificationQueueRepository

logger = logging.getLogger(__name__)


def claim_items(
    repository: NotificationQueueRepository, items: Iterable[NotificationQueueItem]
) -> list[NotificationQueueItem]:
    """Claim each item from the status it was read in, skipping lost races."""

    claimed: list[NotificationQueueItem] = []
    for item in items:
        if item.id is None:
            continue
        if repository.claim(item.id, expected_status=item.status):
            claimed.append(item)
        else:
            logger.info(
                "Notification %s was claimed by another worker; skipping", item.id
            )
    return claimed


class NotificationDispatcher:
    """Send a batch of claimed items with bounded concurrency.

    Each item is delivered and recorded independently: a failing sender, a
    timeout or a storage error only affects the item it happened to. Items
    whose outcome cannot be recorded stay in SENDING until a retry sweep
    releases the stale claim.
    """

    def __init__(
        self,
        sender: NotificationSender,
        session_factory: Callable[[], Session],
        *,
        max_workers: int | None = None,
        send_timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._sender = sender
        self._session_factory = session_factory
        if max_workers is None:
            max_workers = settings.dispatch_max_workers
        if send_timeout is None:
            send_timeout = settings.send_timeout_seconds
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if send_timeout <= 0:
            raise ValueError("send_timeout must be positive")
        self._max_workers = max_workers
        self._send_timeout = send_timeout

    def dispatch(self, items: Sequence[NotificationQueueItem]) -> DispatchReport:
        if not items:
            return DispatchReport()

        workers = min(self._max_workers, len(items))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="listing-dispatch"
        ) as pool:
            outcomes = list(pool.map(self._deliver, items))

        success_count = sum(1 for delivered in outcomes if delivered)
        report = DispatchReport(
            total_recipients=len(items),
            success_count=success_count,
            failed_count=len(items) - success_count,
        )
        logger.info(
            "Dispatched %s notifications: %s sent, %s failed",
            report.total_recipients,
            report.success_count,
            report.failed_count,
        )
        return report

    def _deliver(self, item: NotificationQueueItem) -> bool:
        try:
            self._send_with_timeout(item)
        except FutureTimeoutError:
            logger.warning(
                "Sending notification %s to user %s timed out after %ss",
                item.id,
                item.user_id,
                self._send_timeout,
            )
            return self._record(item, error=f"Send timed out after {self._send_timeout}s")
        except Exception as exc:
            logger.error(
                "Error sending notification %s to user %s for ad %s: %s",
                item.id,
                item.user_id,
                item.ad_id,
                exc,
            )
            return self._record(item, error=str(exc) or exc.__class__.__name__)
        return self._record(item, error=None)

    def _send_with_timeout(self, item: NotificationQueueItem) -> None:
        # A hung transport call keeps its thread; the item is still marked failed.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="listing-send")
        try:
            future = executor.submit(self._sender.send, item.user_id, item.ad_id)
            future.result(timeout=self._send_timeout)
        finally:
            executor.shutdown(wait=False)

    def _record(self, item: NotificationQueueItem, *, error: str | None) -> bool:
        session = self._session_factory()
        try:
            repository = NotificationQueueRepository(session)
            if error is None:
                # False when the claim was released while the send was in flight.
                return repository.mark_sent(item.id)
            repository.mark_failed(item.id, error)
            return False
        except Exception:
            session.rollback()
            logger.exception(
                "Could not record the outcome of notification %s; it stays SENDING", item.id
            )
            return False
        finally:
            session.close()


__all__ = ["NotificationDispatcher", "claim_items"]
