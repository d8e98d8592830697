"""FastAPI dependency utilities."""

from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from listing_alerts.application.use_cases.notifications import NotificationDispatcher
from listing_alerts.domain.delivery import NotificationSender
from listing_alerts.domain.entities import Recipient
from listing_alerts.infrastructure.database import SessionLocal, get_db
from listing_alerts.infrastructure.notifications import EmailNotificationSender
from listing_alerts.infrastructure.repositories import UserRepository
from listing_alerts.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Recipient:
    """Return the user identified by the bearer token's ``sub`` claim."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _credentials_exception()

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _credentials_exception("User not found")
    return user


def require_admin(current_user: Recipient = Depends(get_current_user)) -> Recipient:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    return current_user


def get_session_factory() -> Callable[[], Session]:
    """Session factory handed to dispatcher workers (one session per delivery)."""

    return SessionLocal


def get_notification_sender(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> NotificationSender:
    return EmailNotificationSender(session_factory)


def get_notification_dispatcher(
    sender: NotificationSender = Depends(get_notification_sender),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> NotificationDispatcher:
    return NotificationDispatcher(sender, session_factory)
