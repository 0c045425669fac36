"""Compute the email addresses a notification is delivered to."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from franchise_notifications.domain.entities import (
    EmailChannelConfig,
    Notification,
    NotificationType,
    TargetRole,
    UserEmailInfo,
)
from franchise_notifications.domain.ports import RecipientDirectory

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_ORDER_MANAGERS = "order_managers"
_FLEET_MANAGERS = "fleet_managers"
_ACCOUNTING = "accounting"

# Staff group copied on admin notifications of each type; ``None`` adds nobody.
CONTEXTUAL_GROUPS: dict[NotificationType, str | None] = {
    NotificationType.SYSTEM: None,
    NotificationType.ORDER_CREATED: _ORDER_MANAGERS,
    NotificationType.ORDER_CONFIRMED: None,
    NotificationType.ORDER_SHIPPED: None,
    NotificationType.ORDER_DELIVERED: None,
    NotificationType.ORDER_CANCELLED: None,
    NotificationType.ORDER_OVERDUE: _ORDER_MANAGERS,
    NotificationType.VEHICLE_MAINTENANCE_DUE: _FLEET_MANAGERS,
    NotificationType.VEHICLE_INSPECTION_DUE: None,
    NotificationType.VEHICLE_ASSIGNED: None,
    NotificationType.VEHICLE_BREAKDOWN: _FLEET_MANAGERS,
    NotificationType.INVOICE_GENERATED: None,
    NotificationType.INVOICE_OVERDUE: _ACCOUNTING,
    NotificationType.PAYMENT_RECEIVED: None,
    NotificationType.PAYMENT_FAILED: _ACCOUNTING,
    NotificationType.ROYALTY_PROCESSED: None,
    NotificationType.FRANCHISE_APPROVED: None,
    NotificationType.FRANCHISE_SUSPENDED: None,
    NotificationType.FRANCHISE_TERMINATED: None,
    NotificationType.FRANCHISE_PERFORMANCE_ALERT: None,
    NotificationType.STOCK_LOW: None,
    NotificationType.STOCK_OUT: None,
    NotificationType.STOCK_RECEIVED: None,
    NotificationType.USER_REGISTERED: None,
    NotificationType.USER_PROFILE_UPDATED: None,
    NotificationType.PASSWORD_CHANGED: None,
    NotificationType.REPORT_GENERATED: None,
    NotificationType.SALES_TARGET_MISSED: None,
    NotificationType.SALES_TARGET_ACHIEVED: None,
    NotificationType.DOCUMENT_TRANSMITTED: None,
}

_missing = [member.value for member in NotificationType if member not in CONTEXTUAL_GROUPS]
if _missing:
    raise RuntimeError(
        "Contextual recipient table is missing notification types: %s" % ", ".join(_missing)
    )


def is_valid_email(address: str) -> bool:
    """Return ``True`` when ``address`` has a ``local@domain.tld`` shape."""

    return bool(_EMAIL_PATTERN.match(address))


class RecipientResolver:
    """Combine overrides, the addressed user, defaults and contextual staff.

    Franchisee-addressed notifications never reach the administrative default
    list nor the contextual lookups.
    """

    def __init__(
        self,
        directory: RecipientDirectory,
        default_admin_emails: Iterable[str] = (),
    ) -> None:
        self._directory = directory
        self._default_admin_emails = tuple(default_admin_emails)
        self._group_lookups: dict[str, Callable[[Notification], list[str]]] = {
            _ORDER_MANAGERS: self._order_manager_emails,
            _FLEET_MANAGERS: self._fleet_manager_emails,
            _ACCOUNTING: self._accounting_emails,
        }

    @property
    def default_admin_emails(self) -> tuple[str, ...]:
        return self._default_admin_emails

    def resolve(
        self,
        notification: Notification,
        actor_info: UserEmailInfo | None,
        config: EmailChannelConfig,
    ) -> list[str]:
        """Return the deduplicated, validated recipients for ``notification``."""

        recipients: dict[str, None] = {}

        for address in config.email_recipients:
            recipients.setdefault(address, None)

        if actor_info is not None and actor_info.email:
            recipients.setdefault(actor_info.email, None)

        if notification.target_role is TargetRole.ADMIN:
            if config.include_default_recipients:
                for address in self._default_admin_emails:
                    recipients.setdefault(address, None)
            for address in self.contextual_recipients(notification):
                recipients.setdefault(address, None)
        elif not recipients:
            logger.warning(
                "Franchisee notification %s has no resolvable recipient "
                "(franchise=%s, target_user=%s)",
                notification.id,
                notification.franchise_id,
                notification.target_user_id,
            )

        return [address for address in recipients if is_valid_email(address)]

    def contextual_recipients(self, notification: Notification) -> list[str]:
        """Return type-specific recipients for admin notifications."""

        if notification.target_role is TargetRole.FRANCHISEE:
            return []
        group = CONTEXTUAL_GROUPS[notification.type]
        if group is None:
            return []
        return self._group_lookups[group](notification)

    def _order_manager_emails(self, notification: Notification) -> list[str]:
        return self._active_admin_emails()

    def _fleet_manager_emails(self, notification: Notification) -> list[str]:
        return self._active_admin_emails()

    def _accounting_emails(self, notification: Notification) -> list[str]:
        return self._active_admin_emails()

    def _active_admin_emails(self) -> list[str]:
        return [admin.email for admin in self._directory.list_active_admins() if admin.email]


__all__ = ["CONTEXTUAL_GROUPS", "RecipientResolver", "is_valid_email"]
