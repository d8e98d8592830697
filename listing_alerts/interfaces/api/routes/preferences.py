"""Endpoints a user calls about their own new-listing notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from listing_alerts.application.use_cases.notifications import (
    get_active_user_override,
    get_preferences,
    get_user_notification_status,
    update_preferences,
)
from listing_alerts.domain.entities import InvalidSearchFilterError, Recipient, UserSubscription
from listing_alerts.infrastructure.database import get_db
from listing_alerts.interfaces.api.dependencies import get_current_user
from listing_alerts.interfaces.api.schemas import (
    NotificationStatusRead,
    OverrideRead,
    PreferencesRead,
    PreferencesUpdate,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _preferences_to_read_model(subscription: UserSubscription) -> PreferencesRead:
    return PreferencesRead(
        notify_new_matches=subscription.notify_enabled,
        weekly_digest=subscription.weekly_digest,
        filters=subscription.filter_payload,
    )


@router.get("/my-status", response_model=NotificationStatusRead)
def read_my_status(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_user),
) -> NotificationStatusRead:
    """Tell the user whether new-listing emails currently reach them."""

    notification_status = get_user_notification_status(db, current_user.id)
    override = notification_status.override
    return NotificationStatusRead(
        can_receive=notification_status.can_receive,
        is_blocked=notification_status.is_blocked,
        block_reason=notification_status.block_reason,
        global_enabled=notification_status.global_enabled,
        notify_enabled=notification_status.notify_enabled,
        override=OverrideRead.model_validate(override) if override else None,
    )


@router.get("/my-override", response_model=OverrideRead | None)
def read_my_override(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_user),
) -> OverrideRead | None:
    override = get_active_user_override(db, current_user.id)
    return OverrideRead.model_validate(override) if override else None


@router.get("/preferences", response_model=PreferencesRead)
def read_preferences(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_user),
) -> PreferencesRead:
    return _preferences_to_read_model(get_preferences(db, current_user.id))


@router.put("/preferences", response_model=PreferencesRead)
def write_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_user),
) -> PreferencesRead:
    """Update the subscription; sending ``filters: null`` clears the saved filter."""

    changes: dict = {
        "notify_enabled": payload.notify_enabled,
        "weekly_digest": payload.weekly_digest,
    }
    if "filters" in payload.model_fields_set:
        changes["filters"] = (
            payload.filters.model_dump(by_alias=True, exclude_none=True)
            if payload.filters is not None
            else None
        )

    try:
        subscription = update_preferences(db, current_user.id, **changes)
    except InvalidSearchFilterError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return _preferences_to_read_model(subscription)
