"""Persistence helpers for per-user notification overrides."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import NotificationOverride
from listing_alerts.infrastructure.models import NotificationOverrideModel
from listing_alerts.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class NotificationOverrideRepository:
    """Provide upsert and lookup operations for :class:`NotificationOverride`.

    Expired rows are returned like any other; callers decide whether an
    override is still in force.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_for_user(self, user_id: str) -> NotificationOverride | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def map_by_user(self, user_ids: Iterable[str] | None = None) -> dict[str, NotificationOverride]:
        query = self.session.query(NotificationOverrideModel)
        if user_ids is not None:
            ids = list(set(user_ids))
            if not ids:
                return {}
            query = query.filter(NotificationOverrideModel.user_id.in_(ids))
        return {model.user_id: self._to_entity(model) for model in query.all()}

    def upsert(
        self,
        *,
        user_id: str,
        mode: str,
        expires_at: datetime,
        reason: str | None,
    ) -> NotificationOverride:
        model = self._get_model(user_id)
        if model is None:
            model = NotificationOverrideModel(
                user_id=user_id, created_at=now_in_app_naive_datetime()
            )
        else:
            model.updated_at = now_in_app_naive_datetime()
        model.mode = mode
        model.expires_at = ensure_app_naive_datetime(expires_at)
        model.reason = reason
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete_for_user(self, user_id: str) -> int:
        deleted = (
            self.session.query(NotificationOverrideModel)
            .filter(NotificationOverrideModel.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _get_model(self, user_id: str) -> NotificationOverrideModel | None:
        return (
            self.session.query(NotificationOverrideModel)
            .filter(NotificationOverrideModel.user_id == user_id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: NotificationOverrideModel) -> NotificationOverride:
        return NotificationOverride(
            id=model.id,
            user_id=model.user_id,
            mode=model.mode,
            expires_at=ensure_app_timezone(model.expires_at),
            reason=model.reason,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationOverrideRepository"]
