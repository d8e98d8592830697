"""On-publish trigger: match a newly active ad and notify subscribers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import (
    InvalidSearchFilterError,
    ListingSnapshot,
    UserSubscription,
)
from listing_alerts.infrastructure.repositories import (
    ListingRepository,
    NotificationQueueRepository,
    SubscriptionRepository,
)

from .dispatch import NotificationDispatcher, claim_items
from .matching import matches
from .policy import NotificationDecision, PolicySnapshot, load_policy_snapshot, resolve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishReport:
    matched_count: int = 0
    queued_count: int = 0
    total_recipients: int = 0
    success_count: int = 0
    failed_count: int = 0


def find_matching_users(
    listing: ListingSnapshot,
    subscriptions: Iterable[UserSubscription],
    snapshot: PolicySnapshot,
) -> set[str]:
    """Return the IDs of subscribers that should hear about ``listing``.

    A subscriber whose data cannot be evaluated is logged and skipped; the
    rest of the run continues.
    """

    matched: set[str] = set()
    for subscription in subscriptions:
        user_id = subscription.user_id
        try:
            decision = resolve(
                snapshot, user_id, notify_enabled=subscription.notify_enabled
            )
            if decision is NotificationDecision.SUPPRESS:
                logger.debug("User %s blocked from receiving notifications", user_id)
                continue
            if not matches(subscription.search_filter(), listing):
                logger.debug(
                    "Ad %s doesn't match filters for user %s", listing.ad_id, user_id
                )
                continue
        except InvalidSearchFilterError as exc:
            logger.warning("Ignoring malformed filter for user %s: %s", user_id, exc)
            continue
        except Exception:
            logger.exception("Error processing subscription for user %s", user_id)
            continue
        matched.add(user_id)
    return matched


def notify_new_listing(
    session: Session, ad_id: str, *, dispatcher: NotificationDispatcher
) -> PublishReport:
    """Queue and deliver notifications for ``ad_id`` once it is active.

    Safe to call again for the same ad: users who already have a queue item
    for it are neither re-queued nor re-sent, except that items a previous
    run left unclaimed in PENDING are delivered now.
    """

    logger.info("Starting notification process for ad: %s", ad_id)

    listing = ListingRepository(session).get_snapshot(ad_id)
    if listing is None or not listing.is_active():
        session.commit()
        logger.warning("Ad %s not found or not active", ad_id)
        return PublishReport()

    subscriptions = SubscriptionRepository(session).list_enabled()
    logger.info("Found %s active subscriptions", len(subscriptions))

    snapshot = load_policy_snapshot(
        session, user_ids=[subscription.user_id for subscription in subscriptions]
    )
    if not snapshot.global_enabled:
        logger.info("Global notifications are disabled; only ALLOW overrides apply")

    matched = find_matching_users(listing, subscriptions, snapshot)

    queue = NotificationQueueRepository(session)
    created = queue.enqueue(ad_id, matched)
    # Includes rows left PENDING by an earlier run for this ad that stopped before claiming.
    pending = [item for item in queue.list_pending(ad_id=ad_id) if item.user_id in matched]
    if len(pending) > len(created):
        logger.info(
            "Resuming %s notifications left pending for ad %s",
            len(pending) - len(created),
            ad_id,
        )
    claimed = claim_items(queue, pending)
    dispatch_report = dispatcher.dispatch(claimed)

    report = PublishReport(
        matched_count=len(matched),
        queued_count=len(created),
        total_recipients=dispatch_report.total_recipients,
        success_count=dispatch_report.success_count,
        failed_count=dispatch_report.failed_count,
    )
    logger.info(
        "Notification process completed for ad %s: %s matched, %s queued, %s sent, %s failed",
        ad_id,
        report.matched_count,
        report.queued_count,
        report.success_count,
        report.failed_count,
    )
    return report


__all__ = ["PublishReport", "find_matching_users", "notify_new_listing"]
