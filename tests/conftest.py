"""Shared fixtures: a throwaway SQLite database and in-memory senders."""

from __future__ import annotations

import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{Path(tempfile.gettempdir()) / 'listing_alerts_test.db'}"
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_TIMEZONE", "Asia/Jerusalem")

from sqlalchemy.orm import Session, sessionmaker

from listing_alerts.config import reset_settings_cache
from listing_alerts.domain.delivery import SendError
from listing_alerts.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from listing_alerts.infrastructure.models import (
    AdModel,
    CategoryModel,
    CityModel,
    UserModel,
    UserPreferenceModel,
)


class RecordingSender:
    """Sender double that records deliveries and fails for selected users."""

    def __init__(self, failing_users: set[str] | None = None) -> None:
        self.failing_users = set(failing_users or ())
        self.sent: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def send(self, user_id: str, ad_id: str) -> None:
        if user_id in self.failing_users:
            raise SendError(f"Mailbox unavailable for {user_id}")
        with self._lock:
            self.sent.append((user_id, ad_id))


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def engine(tmp_path: Path):
    db_engine = build_engine(f"sqlite:///{tmp_path / 'alerts.db'}")
    initialize_database(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture()
def session(session_factory) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture()
def marketplace(session: Session) -> Session:
    """Seed reference data shared by most tests: cities, categories and publishers."""

    session.add_all(
        [
            CategoryModel(id="cat-apartments", name="Apartments", name_he="דירות"),
            CategoryModel(id="cat-commercial", name="Commercial", name_he="מסחרי"),
            CityModel(id="city-tlv", name="Tel Aviv", name_he="תל אביב"),
            CityModel(id="city-hfa", name="Haifa", name_he="חיפה"),
            UserModel(id="publisher-owner", email="owner@example.com", name="Owner"),
            UserModel(
                id="publisher-broker",
                email="broker@example.com",
                name="Broker",
                user_type="BROKER",
            ),
        ]
    )
    session.commit()
    return session


@pytest.fixture()
def make_user(marketplace: Session) -> Callable[..., str]:
    """Insert a user and, unless ``notify`` is ``None``, their preference row."""

    def _make_user(
        user_id: str,
        *,
        role: str = "USER",
        notify: bool | None = True,
        filters: dict | None = None,
    ) -> str:
        marketplace.add(
            UserModel(id=user_id, email=f"{user_id}@example.com", name=user_id, role=role)
        )
        if notify is not None:
            marketplace.add(
                UserPreferenceModel(user_id=user_id, notify_new_matches=notify, filters=filters)
            )
        marketplace.commit()
        return user_id

    return _make_user


@pytest.fixture()
def make_ad(marketplace: Session) -> Callable[..., str]:
    def _make_ad(
        ad_id: str,
        *,
        status: str = "ACTIVE",
        category_id: str = "cat-apartments",
        city_id: str | None = "city-tlv",
        price: float | None = 1_500_000,
        property_type: str | None = "APARTMENT",
        publisher_id: str = "publisher-owner",
        description: str = "Bright apartment close to the beach",
    ) -> str:
        marketplace.add(
            AdModel(
                id=ad_id,
                user_id=publisher_id,
                category_id=category_id,
                city_id=city_id,
                title=f"Ad {ad_id}",
                description=description,
                status=status,
                ad_type="FOR_SALE",
                price=price,
                custom_fields={"propertyType": property_type} if property_type else None,
                image_url=None,
            )
        )
        marketplace.commit()
        return ad_id

    return _make_ad
