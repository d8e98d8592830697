"""Run one retry sweep over failed new-listing notifications.

Intended for a scheduler (cron, a container job) between manual sweeps from
the admin endpoint.
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from listing_alerts.application.use_cases.notifications import (
    NotificationDispatcher,
    retry_failed_notifications,
)
from listing_alerts.infrastructure.database import SessionLocal, initialize_database
from listing_alerts.infrastructure.notifications import EmailNotificationSender


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Retry failed new-listing notifications that still have attempts left.",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Skip items with this many attempts (default: NOTIFICATION_MAX_RETRIES)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of items to retry (default: RETRY_BATCH_SIZE)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level for the run (default: INFO)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    initialize_database()

    dispatcher = NotificationDispatcher(EmailNotificationSender(SessionLocal), SessionLocal)
    session = SessionLocal()
    try:
        report = retry_failed_notifications(
            session,
            dispatcher=dispatcher,
            max_retries=args.max_retries,
            limit=args.limit,
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Retry sweep aborted by a database error: {exc}") from exc
    finally:
        session.close()

    print(
        f"Retried {report.count} notifications successfully\n"
        f"  Attempted: {report.total_recipients}\n"
        f"  Still failing: {report.failed_count}\n"
        f"  Released stale claims: {report.released_count}\n"
        f"  Recovered pending: {report.recovered_count}"
    )


if __name__ == "__main__":
    main()
