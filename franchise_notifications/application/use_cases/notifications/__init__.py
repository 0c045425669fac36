"""Create, deliver and query franchise notifications."""

from .builders import (
    build_financial_notification,
    build_order_notification,
    build_vehicle_notification,
)
from .channels import EMAIL_CHANNEL, ChannelRegistry, EmailChannel, NotificationChannel
from .feed import FeedItem, format_relative_time, to_feed_item
from .policy import DELIVERY_POLICY, get_email_config
from .recipients import CONTEXTUAL_GROUPS, RecipientResolver, is_valid_email
from .service import (
    MAX_PAGE_SIZE,
    CreateNotificationResult,
    NotificationPersistenceError,
    NotificationService,
    build_notification_service,
)

__all__ = [
    "CONTEXTUAL_GROUPS",
    "ChannelRegistry",
    "CreateNotificationResult",
    "DELIVERY_POLICY",
    "EMAIL_CHANNEL",
    "EmailChannel",
    "FeedItem",
    "MAX_PAGE_SIZE",
    "NotificationChannel",
    "NotificationPersistenceError",
    "NotificationService",
    "RecipientResolver",
    "build_financial_notification",
    "build_notification_service",
    "build_order_notification",
    "build_vehicle_notification",
    "format_relative_time",
    "get_email_config",
    "is_valid_email",
    "to_feed_item",
]
