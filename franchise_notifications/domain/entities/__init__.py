"""Domain entities exposed by the application."""

from .delivery import (
    ChannelResult,
    DeliveryOutcome,
    EmailChannelConfig,
    EmailMessage,
    EnrichmentResult,
    TransportResult,
)
from .notification import (
    BatchUpdateResult,
    Notification,
    NotificationCreateRequest,
    NotificationFilters,
    NotificationPage,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
)
from .recipient import UserEmailInfo

__all__ = [
    "BatchUpdateResult",
    "ChannelResult",
    "DeliveryOutcome",
    "EmailChannelConfig",
    "EmailMessage",
    "EnrichmentResult",
    "Notification",
    "NotificationCreateRequest",
    "NotificationFilters",
    "NotificationPage",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "TargetRole",
    "TransportResult",
    "UserEmailInfo",
]
