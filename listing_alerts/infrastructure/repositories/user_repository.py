"""Read-only access to marketplace users."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from listing_alerts.domain.entities import Recipient
from listing_alerts.infrastructure.models import UserModel


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> Recipient | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> Recipient | None:
        model = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: UserModel) -> Recipient:
        return Recipient(
            id=model.id,
            email=model.email,
            name=model.name,
            role=model.role or "USER",
            user_type=model.user_type,
        )


__all__ = ["UserRepository"]
