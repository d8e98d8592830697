"""Transactional email delivery through SendGrid."""

from __future__ import annotations

import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from listing_alerts.config import get_settings

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    """Raised when SendGrid credentials are missing."""


class EmailDeliveryError(RuntimeError):
    """Raised when SendGrid rejects or fails to accept a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def describe_sendgrid_error(body: Any) -> str | None:
    """Return a readable summary of a SendGrid error payload, if any."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not body:
        return None

    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        messages = []
        for item in body["errors"]:
            if not isinstance(item, dict) or not item.get("message"):
                continue
            help_link = item.get("help")
            messages.append(
                f"{item['message']} (help: {help_link})" if help_link else str(item["message"])
            )
        if messages:
            return "; ".join(messages)
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return str(body)


def send_email(subject: str, html_content: str, recipient: str) -> None:
    """Send an email with the configured SendGrid credentials.

    Raises :class:`EmailNotConfiguredError` or :class:`EmailDeliveryError`.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        raise EmailNotConfiguredError("SendGrid configuration incomplete")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as exc:
        status_code = getattr(exc, "status_code", None)
        details = describe_sendgrid_error(getattr(exc, "body", None)) or str(exc)
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
        raise EmailDeliveryError(details, status_code=status_code) from exc

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = describe_sendgrid_error(getattr(response, "body", None))
        logger.error("SendGrid API responded with status %s: %s", status_code, details)
        raise EmailDeliveryError(
            details or f"Unexpected SendGrid status {status_code}", status_code=status_code
        )


__all__ = [
    "EmailDeliveryError",
    "EmailNotConfiguredError",
    "describe_sendgrid_error",
    "send_email",
]
