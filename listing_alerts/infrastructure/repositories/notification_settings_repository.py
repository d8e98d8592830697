"""Persistence helpers for the global notification switch."""

from __future__ import annotations

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import GlobalNotificationSetting
from listing_alerts.infrastructure.models import NotificationSettingsModel
from listing_alerts.utils import ensure_app_timezone, now_in_app_naive_datetime


class NotificationSettingsRepository:
    """Read and update the singleton settings row, creating it on first use."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self) -> GlobalNotificationSetting:
        return self._to_entity(self._get_or_create_model())

    def set_enabled(self, enabled: bool) -> GlobalNotificationSetting:
        model = self._get_or_create_model()
        model.enabled = enabled
        model.updated_at = now_in_app_naive_datetime()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_or_create_model(self) -> NotificationSettingsModel:
        model = (
            self.session.query(NotificationSettingsModel)
            .order_by(NotificationSettingsModel.id.asc())
            .first()
        )
        if model is not None:
            return model
        model = NotificationSettingsModel(enabled=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return model

    @staticmethod
    def _to_entity(model: NotificationSettingsModel) -> GlobalNotificationSetting:
        return GlobalNotificationSetting(
            id=model.id,
            enabled=bool(model.enabled),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationSettingsRepository"]
