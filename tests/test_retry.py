"""Tests for the failed-notification retry sweep."""

from __future__ import annotations

from datetime import timedelta

from listing_alerts.application.use_cases.notifications import (
    NotificationDispatcher,
    claim_items,
    retry_failed_notifications,
)
from listing_alerts.infrastructure.repositories import NotificationQueueRepository
from listing_alerts.utils import now_in_app_timezone


def _fail(queue: NotificationQueueRepository, item_id: int, times: int = 1) -> None:
    for _ in range(times):
        queue.claim(item_id, expected_status=queue.get(item_id).status)
        queue.mark_failed(item_id, "SMTP 451")


def test_retry_resends_failed_items(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    first, second, sent = queue.enqueue("ad-1", ["user-1", "user-2", "user-3"])
    _fail(queue, first.id)
    _fail(queue, second.id)
    claim_items(queue, [sent])
    queue.mark_sent(sent.id)
    sender.failing_users.add("user-2")
    dispatcher = NotificationDispatcher(sender, session_factory, send_timeout=5)

    report = retry_failed_notifications(session, dispatcher=dispatcher)

    assert report.count == 1
    assert (report.total_recipients, report.success_count, report.failed_count) == (2, 1, 1)
    assert sender.sent == [("user-1", "ad-1")]
    assert queue.get(first.id).status == "SENT"
    assert queue.get(second.id).retry_count == 2


def test_exhausted_items_are_not_retried(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    (item,) = queue.enqueue("ad-1", ["user-1"])
    _fail(queue, item.id, times=3)
    dispatcher = NotificationDispatcher(sender, session_factory)

    report = retry_failed_notifications(session, dispatcher=dispatcher, max_retries=3)

    assert report.total_recipients == 0
    assert sender.sent == []
    assert queue.get(item.id).status == "FAILED"


def test_stale_sending_items_are_released_then_retried(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    (item,) = queue.enqueue("ad-1", ["user-1"])
    queue.claim(item.id, expected_status="PENDING")
    dispatcher = NotificationDispatcher(sender, session_factory)

    report = retry_failed_notifications(
        session, dispatcher=dispatcher, now=now_in_app_timezone() + timedelta(hours=1)
    )

    assert report.released_count == 1
    assert report.count == 1
    stored = queue.get(item.id)
    assert stored.status == "SENT"
    assert stored.retry_count == 1


def test_recent_sending_items_are_left_alone(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    (item,) = queue.enqueue("ad-1", ["user-1"])
    queue.claim(item.id, expected_status="PENDING")

    report = retry_failed_notifications(
        session, dispatcher=NotificationDispatcher(sender, session_factory)
    )

    assert report.released_count == 0
    assert queue.get(item.id).status == "SENDING"


def test_limit_bounds_the_sweep(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    for item in queue.enqueue("ad-1", [f"user-{index}" for index in range(5)]):
        _fail(queue, item.id)

    report = retry_failed_notifications(
        session, dispatcher=NotificationDispatcher(sender, session_factory), limit=2
    )

    assert report.total_recipients == 2
    assert queue.count_by_status()["FAILED"] == 3


def test_abandoned_pending_items_are_recovered(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    pending, failed = queue.enqueue("ad-1", ["user-1", "user-2"])
    _fail(queue, failed.id)

    report = retry_failed_notifications(
        session,
        dispatcher=NotificationDispatcher(sender, session_factory),
        now=now_in_app_timezone() + timedelta(hours=1),
    )

    assert report.recovered_count == 1
    assert report.count == 1
    assert report.total_recipients == 2
    assert queue.get(pending.id).status == "SENT"
    assert queue.get(pending.id).retry_count == 0
    assert sorted(sender.sent) == [("user-1", "ad-1"), ("user-2", "ad-1")]


def test_recent_pending_items_are_left_to_their_run(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    (item,) = queue.enqueue("ad-1", ["user-1"])

    report = retry_failed_notifications(
        session, dispatcher=NotificationDispatcher(sender, session_factory)
    )

    assert report.recovered_count == 0
    assert queue.get(item.id).status == "PENDING"


def test_explicit_zero_limit_is_respected(session, session_factory, sender) -> None:
    queue = NotificationQueueRepository(session)
    (item,) = queue.enqueue("ad-1", ["user-1"])
    _fail(queue, item.id)

    report = retry_failed_notifications(
        session, dispatcher=NotificationDispatcher(sender, session_factory), limit=0
    )

    assert report.total_recipients == 0
    assert queue.get(item.id).status == "FAILED"
