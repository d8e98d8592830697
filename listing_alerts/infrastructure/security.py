"""Validation of the access tokens issued by the accounts service."""

from jose import JWTError, jwt

from listing_alerts.config import get_settings

ALGORITHM = "HS256"


def decode_access_token(token: str) -> dict:
    """Return the claims of ``token``; raise ``ValueError`` if it is invalid or expired."""

    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
