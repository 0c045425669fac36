"""Domain entity describing a contact identity resolved from the directory."""

from __future__ import annotations

from dataclasses import dataclass

from .notification import TargetRole


@dataclass(frozen=True)
class UserEmailInfo:
    """Contact information for a user, resolved per delivery attempt."""

    id: str
    email: str
    role: TargetRole
    name: str | None = None
    franchise_id: str | None = None


__all__ = ["UserEmailInfo"]
