"""Administrative endpoints for new-listing notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from listing_alerts.application.use_cases.notifications import (
    NotificationDispatcher,
    OverrideExpiredError,
    UserNotFoundError,
    get_active_user_override,
    get_global_settings,
    get_queue_summary,
    notify_new_listing,
    remove_user_override,
    retry_failed_notifications,
    set_user_override,
    update_global_settings,
)
from listing_alerts.domain.entities import NotificationOverride, Recipient
from listing_alerts.infrastructure.database import get_db
from listing_alerts.interfaces.api.dependencies import (
    get_notification_dispatcher,
    require_admin,
)
from listing_alerts.interfaces.api.schemas import (
    GlobalSettingsRead,
    GlobalSettingsUpdate,
    OverrideRead,
    OverrideUpsertRequest,
    PublishResponse,
    QueueSummaryRead,
    RetryFailedRequest,
    RetryFailedResponse,
)

router = APIRouter(prefix="/notifications/admin", tags=["notifications"])
logger = logging.getLogger(__name__)


def _override_to_read_model(override: NotificationOverride | None) -> OverrideRead | None:
    if override is None:
        return None
    return OverrideRead.model_validate(override)


def _storage_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Notification storage is unavailable, try again later",
    )


@router.get("/settings", response_model=GlobalSettingsRead)
def read_global_settings(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(require_admin),
) -> GlobalSettingsRead:
    setting = get_global_settings(db)
    return GlobalSettingsRead(id=setting.id, enabled=setting.enabled, updated_at=setting.updated_at)


@router.put("/settings", response_model=GlobalSettingsRead)
def write_global_settings(
    payload: GlobalSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(require_admin),
) -> GlobalSettingsRead:
    """Turn new-listing notifications on or off for everyone without an override."""

    setting = update_global_settings(db, enabled=payload.enabled)
    logger.info("Global notifications set to %s by %s", setting.enabled, current_user.id)
    return GlobalSettingsRead(id=setting.id, enabled=setting.enabled, updated_at=setting.updated_at)


@router.post("/override", response_model=OverrideRead)
def upsert_override(
    payload: OverrideUpsertRequest,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(require_admin),
) -> OverrideRead:
    """Create or replace a user's temporary ALLOW/BLOCK override."""

    try:
        override = set_user_override(
            db,
            mode=payload.mode,
            expires_at=payload.expires_at,
            reason=payload.reason,
            user_id=payload.user_id,
            email=payload.email,
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return OverrideRead.model_validate(override)


@router.get("/override/{user_id}", response_model=OverrideRead | None)
def read_override(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(require_admin),
) -> OverrideRead | None:
    return _override_to_read_model(get_active_user_override(db, user_id))


@router.delete("/override/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_override(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(require_admin),
) -> Response:
    if not remove_user_override(db, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Override not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/retry-failed", response_model=RetryFailedResponse)
def retry_failed(
    payload: RetryFailedRequest | None = None,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: Recipient = Depends(require_admin),
) -> RetryFailedResponse:
    """Re-send FAILED notifications that have attempts left."""

    payload = payload or RetryFailedRequest()
    try:
        report = retry_failed_notifications(
            db,
            dispatcher=dispatcher,
            max_retries=payload.max_retries,
            limit=payload.limit,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Retry sweep aborted by a storage error")
        raise _storage_unavailable() from exc

    return RetryFailedResponse(
        message=f"Retried {report.count} notifications successfully",
        count=report.count,
        total_recipients=report.total_recipients,
        success_count=report.success_count,
        failed_count=report.failed_count,
    )


@router.post("/ads/{ad_id}/publish", response_model=PublishResponse)
def publish_ad(
    ad_id: str,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: Recipient = Depends(require_admin),
) -> PublishResponse:
    """Run the new-listing trigger for ``ad_id``; repeated calls do not re-send."""

    try:
        report = notify_new_listing(db, ad_id, dispatcher=dispatcher)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Notification run for ad %s aborted by a storage error", ad_id)
        raise _storage_unavailable() from exc

    return PublishResponse(
        ad_id=ad_id,
        matched_count=report.matched_count,
        queued_count=report.queued_count,
        total_recipients=report.total_recipients,
        success_count=report.success_count,
        failed_count=report.failed_count,
    )


@router.get("/queue/summary", response_model=QueueSummaryRead)
def queue_summary(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(require_admin),
) -> QueueSummaryRead:
    return QueueSummaryRead(**get_queue_summary(db))
