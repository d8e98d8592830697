"""Persistence helpers for user subscriptions."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import SubscriptionUpdate, UserSubscription
from listing_alerts.infrastructure.models import UserPreferenceModel
from listing_alerts.utils import ensure_app_timezone, now_in_app_naive_datetime


class SubscriptionRepository:
    """Read subscriptions for match runs and apply preference updates."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_enabled(self) -> Sequence[UserSubscription]:
        query = (
            self.session.query(UserPreferenceModel)
            .filter(UserPreferenceModel.notify_new_matches.is_(True))
            .order_by(UserPreferenceModel.user_id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get(self, user_id: str) -> UserSubscription | None:
        model = self.session.get(UserPreferenceModel, user_id)
        return self._to_entity(model) if model else None

    def get_or_create(self, user_id: str) -> UserSubscription:
        model = self.session.get(UserPreferenceModel, user_id)
        if model is None:
            model = UserPreferenceModel(
                user_id=user_id, notify_new_matches=False, weekly_digest=False
            )
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def apply_update(self, user_id: str, update: SubscriptionUpdate) -> UserSubscription:
        model = self.session.get(UserPreferenceModel, user_id)
        if model is None:
            model = UserPreferenceModel(
                user_id=user_id, notify_new_matches=False, weekly_digest=False
            )
        if update.notify_enabled is not None:
            model.notify_new_matches = update.notify_enabled
        if update.weekly_digest is not None:
            model.weekly_digest = update.weekly_digest
        if update.search_filter is not None:
            model.filters = update.search_filter.to_payload() or None
        model.updated_at = now_in_app_naive_datetime()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserPreferenceModel) -> UserSubscription:
        return UserSubscription(
            user_id=model.user_id,
            notify_enabled=bool(model.notify_new_matches),
            filter_payload=model.filters,
            weekly_digest=bool(model.weekly_digest),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["SubscriptionRepository"]
