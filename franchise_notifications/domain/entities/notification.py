"""Domain entities describing persisted notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Business events that can produce a notification."""

    SYSTEM = "SYSTEM"

    ORDER_CREATED = "ORDER_CREATED"
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    ORDER_SHIPPED = "ORDER_SHIPPED"
    ORDER_DELIVERED = "ORDER_DELIVERED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    ORDER_OVERDUE = "ORDER_OVERDUE"

    VEHICLE_MAINTENANCE_DUE = "VEHICLE_MAINTENANCE_DUE"
    VEHICLE_INSPECTION_DUE = "VEHICLE_INSPECTION_DUE"
    VEHICLE_ASSIGNED = "VEHICLE_ASSIGNED"
    VEHICLE_BREAKDOWN = "VEHICLE_BREAKDOWN"

    INVOICE_GENERATED = "INVOICE_GENERATED"
    INVOICE_OVERDUE = "INVOICE_OVERDUE"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    ROYALTY_PROCESSED = "ROYALTY_PROCESSED"

    FRANCHISE_APPROVED = "FRANCHISE_APPROVED"
    FRANCHISE_SUSPENDED = "FRANCHISE_SUSPENDED"
    FRANCHISE_TERMINATED = "FRANCHISE_TERMINATED"
    FRANCHISE_PERFORMANCE_ALERT = "FRANCHISE_PERFORMANCE_ALERT"

    STOCK_LOW = "STOCK_LOW"
    STOCK_OUT = "STOCK_OUT"
    STOCK_RECEIVED = "STOCK_RECEIVED"

    USER_REGISTERED = "USER_REGISTERED"
    USER_PROFILE_UPDATED = "USER_PROFILE_UPDATED"
    PASSWORD_CHANGED = "PASSWORD_CHANGED"

    REPORT_GENERATED = "REPORT_GENERATED"
    SALES_TARGET_MISSED = "SALES_TARGET_MISSED"
    SALES_TARGET_ACHIEVED = "SALES_TARGET_ACHIEVED"
    DOCUMENT_TRANSMITTED = "DOCUMENT_TRANSMITTED"


class NotificationPriority(str, Enum):
    """Severity of a notification, from ``LOW`` to ``URGENT``."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationStatus(str, Enum):
    UNREAD = "UNREAD"
    READ = "READ"


class TargetRole(str, Enum):
    """Organizational role a notification is addressed to."""

    ADMIN = "ADMIN"
    FRANCHISEE = "FRANCHISEE"


@dataclass
class Notification:
    """Persisted record of a business event addressed to a role or a user."""

    id: str | None
    type: NotificationType
    priority: NotificationPriority
    status: NotificationStatus
    title: str
    message: str
    target_role: TargetRole
    data: dict[str, Any] = field(default_factory=dict)
    target_user_id: str | None = None
    franchise_id: str | None = None
    related_entity_id: str | None = None
    related_entity_type: str | None = None
    action_url: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.status is NotificationStatus.READ

    def mark_read(self, read_at: datetime) -> None:
        """Move the notification to ``READ``; already read notifications keep their timestamp."""

        if self.is_read:
            return
        self.status = NotificationStatus.READ
        self.read_at = read_at


@dataclass
class NotificationCreateRequest:
    """Input accepted when creating a notification."""

    type: NotificationType
    title: str
    message: str
    target_role: TargetRole
    priority: NotificationPriority = NotificationPriority.MEDIUM
    data: dict[str, Any] = field(default_factory=dict)
    target_user_id: str | None = None
    franchise_id: str | None = None
    related_entity_id: str | None = None
    related_entity_type: str | None = None
    action_url: str | None = None
    expires_at: datetime | None = None


@dataclass
class NotificationFilters:
    """Predicates used to query stored notifications."""

    target_role: TargetRole
    types: list[NotificationType] = field(default_factory=list)
    priorities: list[NotificationPriority] = field(default_factory=list)
    statuses: list[NotificationStatus] = field(default_factory=list)
    franchise_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int | None = 20
    offset: int = 0


@dataclass
class NotificationPage:
    notifications: list[Notification]
    total: int
    unread_count: int
    has_more: bool


@dataclass(frozen=True)
class BatchUpdateResult:
    """Outcome of a batch status update."""

    updated_count: int
    updated_ids: tuple[str, ...] = ()


__all__ = [
    "BatchUpdateResult",
    "Notification",
    "NotificationCreateRequest",
    "NotificationFilters",
    "NotificationPage",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "TargetRole",
]
