"""Shared fixtures and in-memory collaborators for the notification tests."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest

# Ensure the project root (which contains the ``franchise_notifications`` package) is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the module level engine away from the working directory during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

from franchise_notifications.domain.entities import (  # noqa: E402
    BatchUpdateResult,
    EmailMessage,
    Notification,
    NotificationFilters,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
    TransportResult,
    UserEmailInfo,
)
from franchise_notifications.domain.ports import (  # noqa: E402
    EmailTransport,
    NotificationStore,
    RecipientDirectory,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryNotificationStore(NotificationStore):
    """Dictionary backed store mirroring the SQL repository semantics."""

    def __init__(self) -> None:
        self.notifications: dict[str, Notification] = {}
        self.batch_calls: list[tuple[str, ...]] = []
        self.fail_on_create: Exception | None = None

    def create(self, notification: Notification) -> Notification:
        if self.fail_on_create is not None:
            raise self.fail_on_create
        saved = replace(notification, id=notification.id or str(uuid4()), data=dict(notification.data))
        self.notifications[saved.id] = saved
        return replace(saved, data=dict(saved.data))

    def query(self, filters: NotificationFilters) -> Sequence[Notification]:
        matches = sorted(
            self._matching(filters),
            key=lambda item: (item.created_at or BASE_TIME, item.id),
            reverse=True,
        )
        matches = matches[filters.offset :]
        if filters.limit is not None:
            matches = matches[: filters.limit]
        return [replace(item) for item in matches]

    def count(self, filters: NotificationFilters) -> int:
        return len(self._matching(filters))

    def batch_update_status(self, ids, *, status, read_at, target_role) -> BatchUpdateResult:
        if status is not NotificationStatus.READ:
            raise ValueError("Notifications cannot be moved back to UNREAD")
        self.batch_calls.append(tuple(ids))
        updated: list[str] = []
        for notification_id in ids:
            notification = self.notifications.get(notification_id)
            if notification is None or notification.target_role is not target_role:
                continue
            if notification.status is not NotificationStatus.UNREAD:
                continue
            notification.mark_read(read_at)
            updated.append(notification_id)
        return BatchUpdateResult(updated_count=len(updated), updated_ids=tuple(updated))

    def _matching(self, filters: NotificationFilters) -> list[Notification]:
        results = []
        for item in self.notifications.values():
            if item.target_role is not filters.target_role:
                continue
            if filters.types and item.type not in filters.types:
                continue
            if filters.priorities and item.priority not in filters.priorities:
                continue
            if filters.statuses and item.status not in filters.statuses:
                continue
            if filters.franchise_id and item.franchise_id != filters.franchise_id:
                continue
            results.append(item)
        return results


class FakeDirectory(RecipientDirectory):
    """Directory returning canned users and franchises."""

    def __init__(self) -> None:
        self.users: dict[str, UserEmailInfo] = {}
        self.franchises: dict[str, tuple[str, str | None]] = {}
        self.admins: list[UserEmailInfo] = []
        self.fail = False
        self.admin_lookups = 0

    def add_owner(self, franchise_id: str, business_name: str, owner: UserEmailInfo | None) -> None:
        self.franchises[franchise_id] = (business_name, owner.id if owner else None)
        if owner is not None:
            self.users[owner.id] = owner

    def get_user_by_id(self, user_id: str) -> UserEmailInfo | None:
        self._maybe_fail()
        return self.users.get(user_id)

    def get_franchise_owner(self, franchise_id: str) -> UserEmailInfo | None:
        self._maybe_fail()
        franchise = self.franchises.get(franchise_id)
        if franchise is None or franchise[1] is None:
            return None
        return self.users.get(franchise[1])

    def get_franchise_name(self, franchise_id: str) -> str | None:
        self._maybe_fail()
        franchise = self.franchises.get(franchise_id)
        return franchise[0] if franchise else None

    def list_active_admins(self) -> Sequence[UserEmailInfo]:
        self._maybe_fail()
        self.admin_lookups += 1
        return list(self.admins)

    def _maybe_fail(self) -> None:
        if self.fail:
            raise ConnectionError("directory unavailable")


class RecordingTransport(EmailTransport):
    """Transport storing every message and failing for selected addresses."""

    def __init__(self, failing: Sequence[str] = (), raising: Sequence[str] = ()) -> None:
        self.sent: list[EmailMessage] = []
        self.failing = set(failing)
        self.raising = set(raising)

    @property
    def recipients(self) -> list[str]:
        return sorted(message.to for message in self.sent)

    def send_email(self, message: EmailMessage) -> TransportResult:
        self.sent.append(message)
        if message.to in self.raising:
            raise RuntimeError(f"connection reset for {message.to}")
        if message.to in self.failing:
            return TransportResult(success=False, error=f"rejected {message.to}")
        return TransportResult(success=True, message_id=f"msg-{message.to}")


def make_notification(
    *,
    notification_type: NotificationType = NotificationType.SYSTEM,
    target_role: TargetRole = TargetRole.ADMIN,
    priority: NotificationPriority = NotificationPriority.MEDIUM,
    status: NotificationStatus = NotificationStatus.UNREAD,
    minutes_ago: int = 0,
    **overrides,
) -> Notification:
    values = dict(
        id=str(uuid4()),
        type=notification_type,
        priority=priority,
        status=status,
        title="Titre",
        message="Message",
        target_role=target_role,
        created_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )
    values.update(overrides)
    return Notification(**values)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def directory() -> FakeDirectory:
    directory = FakeDirectory()
    directory.admins = [
        UserEmailInfo(id="admin-1", email="alice@drivncook.com", role=TargetRole.ADMIN, name="Alice Martin"),
        UserEmailInfo(id="admin-2", email="bruno@drivncook.com", role=TargetRole.ADMIN, name="Bruno Petit"),
    ]
    directory.add_owner(
        "franchise-1",
        "Burger Nomade",
        UserEmailInfo(
            id="owner-1",
            email="chloe@burger-nomade.fr",
            role=TargetRole.FRANCHISEE,
            name="Chloé Durand",
            franchise_id="franchise-1",
        ),
    )
    return directory


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
