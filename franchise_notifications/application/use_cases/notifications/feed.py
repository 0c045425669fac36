"""Format notifications as compact activity feed entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from franchise_notifications.domain.entities import (
    Notification,
    NotificationStatus,
    NotificationType,
    TargetRole,
)
from franchise_notifications.utils import ensure_utc, now_utc

ENTRY_FEE_PREFIX = "ENTRY_FEE"

_ACTIONS = {
    NotificationType.ORDER_CREATED: "a créé la commande",
    NotificationType.ORDER_CONFIRMED: "a confirmé la commande",
    NotificationType.ORDER_SHIPPED: "a expédié la commande",
    NotificationType.ORDER_DELIVERED: "a livré la commande",
    NotificationType.ORDER_CANCELLED: "a annulé la commande",
    NotificationType.ORDER_OVERDUE: "a une commande en retard",
    NotificationType.VEHICLE_MAINTENANCE_DUE: "doit programmer la maintenance de",
    NotificationType.VEHICLE_INSPECTION_DUE: "doit programmer l'inspection de",
    NotificationType.VEHICLE_ASSIGNED: "a été assigné le véhicule",
    NotificationType.VEHICLE_BREAKDOWN: "signale une panne sur",
    NotificationType.INVOICE_GENERATED: "a reçu la facture",
    NotificationType.INVOICE_OVERDUE: "a une facture en retard",
    NotificationType.PAYMENT_RECEIVED: "a reçu le paiement de",
    NotificationType.PAYMENT_FAILED: "a un échec de paiement pour",
    NotificationType.FRANCHISE_APPROVED: "a été approuvé pour",
    NotificationType.STOCK_LOW: "a un stock faible de",
    NotificationType.SALES_TARGET_ACHIEVED: "a atteint l'objectif de",
    NotificationType.SALES_TARGET_MISSED: "n'a pas atteint l'objectif de",
    NotificationType.USER_REGISTERED: "s'est inscrit pour",
    NotificationType.SYSTEM: "informe sur",
}
_DEFAULT_ACTION = "a une notification concernant"

_TARGET_KEYS = (
    "orderNumber",
    "licensePlate",
    "invoiceNumber",
    "productName",
    "franchiseName",
    "businessName",
)


@dataclass(frozen=True)
class FeedItem:
    """One line of the activity feed: ``{actor} {action} {target}``."""

    id: str
    actor: str
    action: str
    target: str
    timestamp: str
    unread: bool


def _is_entry_fee(notification: Notification) -> bool:
    if notification.type is not NotificationType.PAYMENT_RECEIVED:
        return False
    entity_number = notification.data.get("entityNumber")
    return isinstance(entity_number, str) and entity_number.startswith(ENTRY_FEE_PREFIX)


def feed_actor(notification: Notification) -> str:
    data = notification.data
    if data.get("userName"):
        return str(data["userName"])
    if data.get("franchiseName"):
        return str(data["franchiseName"])
    if notification.target_role is TargetRole.FRANCHISEE:
        return "Franchise"
    return "Admin"


def feed_action(notification: Notification) -> str:
    if _is_entry_fee(notification):
        return "a payé le"
    return _ACTIONS.get(notification.type, _DEFAULT_ACTION)


def feed_target(notification: Notification) -> str:
    if _is_entry_fee(notification):
        return "Droit d'entrée"
    for key in _TARGET_KEYS:
        value = notification.data.get(key)
        if value:
            return str(value)
    return notification.title


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def format_relative_time(moment: datetime | None, now: datetime) -> str:
    """Return how long ago ``moment`` happened, in French.

    Anything older than four weeks is shown as ``dd/mm/YYYY``.
    """

    moment = ensure_utc(moment)
    if moment is None:
        return ""
    elapsed = (ensure_utc(now) - moment).total_seconds()
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "À l'instant"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "heure")
    if days < 7:
        return _plural(days, "jour")
    if days < 30:
        return _plural(days // 7, "semaine")
    return moment.strftime("%d/%m/%Y")


def to_feed_item(notification: Notification, now: datetime | None = None) -> FeedItem:
    """Convert ``notification`` into a :class:`FeedItem` relative to ``now``."""

    return FeedItem(
        id=notification.id or "",
        actor=feed_actor(notification),
        action=feed_action(notification),
        target=feed_target(notification),
        timestamp=format_relative_time(notification.created_at, now or now_utc()),
        unread=notification.status is NotificationStatus.UNREAD,
    )


__all__ = [
    "ENTRY_FEE_PREFIX",
    "FeedItem",
    "feed_action",
    "feed_actor",
    "feed_target",
    "format_relative_time",
    "to_feed_item",
]
