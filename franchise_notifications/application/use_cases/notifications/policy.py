"""Default email delivery policy for every notification type."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from franchise_notifications.domain.entities import EmailChannelConfig, NotificationType

_NOTIFY_WITH_STAFF = EmailChannelConfig(send_email=True, include_default_recipients=True)
_NOTIFY_ADDRESSEE = EmailChannelConfig(send_email=True)
_DO_NOT_SEND = EmailChannelConfig(send_email=False)

_POLICY: dict[NotificationType, EmailChannelConfig] = {
    NotificationType.SYSTEM: _NOTIFY_WITH_STAFF,
    NotificationType.ORDER_CREATED: _NOTIFY_WITH_STAFF,
    NotificationType.ORDER_CONFIRMED: _NOTIFY_ADDRESSEE,
    NotificationType.ORDER_SHIPPED: _NOTIFY_ADDRESSEE,
    NotificationType.ORDER_DELIVERED: _NOTIFY_ADDRESSEE,
    NotificationType.ORDER_CANCELLED: _NOTIFY_WITH_STAFF,
    NotificationType.ORDER_OVERDUE: _NOTIFY_WITH_STAFF,
    NotificationType.VEHICLE_MAINTENANCE_DUE: _NOTIFY_WITH_STAFF,
    NotificationType.VEHICLE_INSPECTION_DUE: _NOTIFY_WITH_STAFF,
    NotificationType.VEHICLE_ASSIGNED: _NOTIFY_ADDRESSEE,
    NotificationType.VEHICLE_BREAKDOWN: _NOTIFY_WITH_STAFF,
    NotificationType.INVOICE_GENERATED: _NOTIFY_ADDRESSEE,
    NotificationType.INVOICE_OVERDUE: _NOTIFY_WITH_STAFF,
    NotificationType.PAYMENT_RECEIVED: _NOTIFY_ADDRESSEE,
    NotificationType.PAYMENT_FAILED: _NOTIFY_WITH_STAFF,
    NotificationType.ROYALTY_PROCESSED: _NOTIFY_WITH_STAFF,
    NotificationType.FRANCHISE_APPROVED: _NOTIFY_WITH_STAFF,
    NotificationType.FRANCHISE_SUSPENDED: _NOTIFY_WITH_STAFF,
    NotificationType.FRANCHISE_TERMINATED: _NOTIFY_WITH_STAFF,
    NotificationType.FRANCHISE_PERFORMANCE_ALERT: _NOTIFY_WITH_STAFF,
    NotificationType.STOCK_LOW: _NOTIFY_WITH_STAFF,
    NotificationType.STOCK_OUT: _NOTIFY_WITH_STAFF,
    NotificationType.STOCK_RECEIVED: _DO_NOT_SEND,
    NotificationType.USER_REGISTERED: _NOTIFY_WITH_STAFF,
    NotificationType.USER_PROFILE_UPDATED: _DO_NOT_SEND,
    NotificationType.PASSWORD_CHANGED: _NOTIFY_ADDRESSEE,
    NotificationType.REPORT_GENERATED: _NOTIFY_ADDRESSEE,
    NotificationType.SALES_TARGET_MISSED: _NOTIFY_WITH_STAFF,
    NotificationType.SALES_TARGET_ACHIEVED: _NOTIFY_WITH_STAFF,
    NotificationType.DOCUMENT_TRANSMITTED: _NOTIFY_WITH_STAFF,
}

_missing = [member.value for member in NotificationType if member not in _POLICY]
if _missing:
    raise RuntimeError(
        "Email delivery policy is missing notification types: %s" % ", ".join(_missing)
    )

DELIVERY_POLICY: Mapping[NotificationType, EmailChannelConfig] = MappingProxyType(_POLICY)


def get_email_config(notification_type: NotificationType) -> EmailChannelConfig:
    """Return the default email configuration for ``notification_type``."""

    return DELIVERY_POLICY[notification_type]


__all__ = ["DELIVERY_POLICY", "get_email_config"]
