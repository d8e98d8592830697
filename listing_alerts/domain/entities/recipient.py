"""Minimal view of a marketplace user as seen by the notification engine."""

from __future__ import annotations

from dataclasses import dataclass

ADMIN_ROLES = frozenset({"ADMIN", "SUPER_ADMIN"})


@dataclass
class Recipient:
    """Account details needed to authorize requests and address emails."""

    id: str
    email: str
    name: str | None
    role: str
    user_type: str | None = None

    def is_admin(self) -> bool:
        """Return ``True`` when the user may operate the notification engine."""

        return self.role.upper() in ADMIN_ROLES


__all__ = ["ADMIN_ROLES", "Recipient"]
