"""Interfaces for the collaborators consumed by the notification engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from .entities import (
    BatchUpdateResult,
    EmailMessage,
    Notification,
    NotificationFilters,
    NotificationStatus,
    TargetRole,
    TransportResult,
    UserEmailInfo,
)


class NotificationStore(ABC):
    """Persistence for notifications."""

    @abstractmethod
    def create(self, notification: Notification) -> Notification:
        """Persist ``notification`` and return it with its identifier.

        Any exception raised here aborts notification creation.
        """

    @abstractmethod
    def query(self, filters: NotificationFilters) -> Sequence[Notification]:
        """Return notifications matching ``filters``, newest first."""

    @abstractmethod
    def count(self, filters: NotificationFilters) -> int:
        """Return how many notifications match ``filters`` ignoring pagination."""

    @abstractmethod
    def batch_update_status(
        self,
        ids: Sequence[str],
        *,
        status: NotificationStatus,
        read_at: datetime,
        target_role: TargetRole,
    ) -> BatchUpdateResult:
        """Move the given notifications to ``status``.

        Only ``UNREAD`` notifications are updated; a request to set ``UNREAD``
        is rejected with :class:`ValueError`.
        """


class RecipientDirectory(ABC):
    """Read-only lookups translating domain references into contacts.

    Implementations return ``None`` or an empty list when nothing matches.
    """

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> UserEmailInfo | None: ...

    @abstractmethod
    def get_franchise_owner(self, franchise_id: str) -> UserEmailInfo | None: ...

    @abstractmethod
    def get_franchise_name(self, franchise_id: str) -> str | None: ...

    @abstractmethod
    def list_active_admins(self) -> Sequence[UserEmailInfo]: ...


class EmailTransport(ABC):
    """Abstract interface for email dispatch adapters."""

    @abstractmethod
    def send_email(self, message: EmailMessage) -> TransportResult:
        """Send ``message`` to a single recipient."""


__all__ = ["EmailTransport", "NotificationStore", "RecipientDirectory"]
