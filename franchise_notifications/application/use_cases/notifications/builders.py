"""Build notification requests for common order, vehicle and financial events."""

from __future__ import annotations

from decimal import Decimal

from franchise_notifications.domain.entities import (
    NotificationCreateRequest,
    NotificationPriority,
    NotificationType,
    TargetRole,
)

_ORDER_TITLES = {
    NotificationType.ORDER_CREATED: "Nouvelle commande",
    NotificationType.ORDER_CONFIRMED: "Commande confirmée",
    NotificationType.ORDER_SHIPPED: "Commande expédiée",
    NotificationType.ORDER_DELIVERED: "Commande livrée",
    NotificationType.ORDER_CANCELLED: "Commande annulée",
    NotificationType.ORDER_OVERDUE: "Commande en retard",
}

_ORDER_MESSAGES = {
    NotificationType.ORDER_CREATED: "Nouvelle commande {number} créée",
    NotificationType.ORDER_CONFIRMED: "La commande {number} a été confirmée",
    NotificationType.ORDER_SHIPPED: "La commande {number} a été expédiée",
    NotificationType.ORDER_DELIVERED: "La commande {number} a été livrée",
    NotificationType.ORDER_CANCELLED: "La commande {number} a été annulée",
    NotificationType.ORDER_OVERDUE: "La commande {number} est en retard",
}

_VEHICLE_TITLES = {
    NotificationType.VEHICLE_MAINTENANCE_DUE: "Maintenance requise",
    NotificationType.VEHICLE_INSPECTION_DUE: "Inspection requise",
    NotificationType.VEHICLE_ASSIGNED: "Véhicule assigné",
    NotificationType.VEHICLE_BREAKDOWN: "Panne véhicule",
}

_VEHICLE_MESSAGES = {
    NotificationType.VEHICLE_MAINTENANCE_DUE: "Le véhicule {plate} nécessite une maintenance",
    NotificationType.VEHICLE_INSPECTION_DUE: "Le véhicule {plate} doit passer une inspection",
    NotificationType.VEHICLE_ASSIGNED: "Le véhicule {plate} vous a été assigné",
    NotificationType.VEHICLE_BREAKDOWN: "Panne signalée sur le véhicule {plate}",
}

_FINANCIAL_TITLES = {
    NotificationType.INVOICE_GENERATED: "Nouvelle facture",
    NotificationType.INVOICE_OVERDUE: "Facture en retard",
    NotificationType.PAYMENT_RECEIVED: "Paiement reçu",
    NotificationType.PAYMENT_FAILED: "Échec du paiement",
    NotificationType.ROYALTY_PROCESSED: "Redevances traitées",
}

_FINANCIAL_MESSAGES = {
    NotificationType.INVOICE_GENERATED: "Nouvelle facture {number} générée ({amount}€)",
    NotificationType.INVOICE_OVERDUE: "La facture {number} est en retard ({amount}€)",
    NotificationType.PAYMENT_RECEIVED: "Paiement de {amount}€ reçu pour {number}",
    NotificationType.PAYMENT_FAILED: "Échec du paiement de {amount}€ pour {number}",
    NotificationType.ROYALTY_PROCESSED: "Redevances de {amount}€ traitées",
}

_INVOICE_TYPES = frozenset(
    {NotificationType.INVOICE_GENERATED, NotificationType.INVOICE_OVERDUE}
)


def _ensure_family(
    notification_type: NotificationType, family: dict[NotificationType, str], label: str
) -> None:
    if notification_type not in family:
        msg = f"{notification_type.value} is not a {label} notification type"
        raise ValueError(msg)


def _format_amount(amount: float | int | Decimal) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    if isinstance(amount, Decimal) and amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return str(amount)


def build_order_notification(
    notification_type: NotificationType,
    order_id: str,
    order_number: str,
    *,
    franchise_id: str | None = None,
    target_role: TargetRole = TargetRole.ADMIN,
    target_user_id: str | None = None,
) -> NotificationCreateRequest:
    """Return the request describing an order lifecycle event."""

    _ensure_family(notification_type, _ORDER_TITLES, "order")
    priority = (
        NotificationPriority.HIGH
        if notification_type is NotificationType.ORDER_OVERDUE
        else NotificationPriority.MEDIUM
    )
    return NotificationCreateRequest(
        type=notification_type,
        priority=priority,
        title=_ORDER_TITLES[notification_type],
        message=_ORDER_MESSAGES[notification_type].format(number=order_number),
        target_role=target_role,
        target_user_id=target_user_id,
        data={"orderNumber": order_number},
        franchise_id=franchise_id,
        related_entity_id=order_id,
        related_entity_type="order",
        action_url=f"/orders/{order_id}",
    )


def build_vehicle_notification(
    notification_type: NotificationType,
    vehicle_id: str,
    license_plate: str,
    franchise_id: str,
    *,
    target_role: TargetRole = TargetRole.ADMIN,
    target_user_id: str | None = None,
) -> NotificationCreateRequest:
    """Return the request describing a vehicle event; breakdowns are ``URGENT``."""

    _ensure_family(notification_type, _VEHICLE_TITLES, "vehicle")
    priority = (
        NotificationPriority.URGENT
        if notification_type is NotificationType.VEHICLE_BREAKDOWN
        else NotificationPriority.MEDIUM
    )
    return NotificationCreateRequest(
        type=notification_type,
        priority=priority,
        title=_VEHICLE_TITLES[notification_type],
        message=_VEHICLE_MESSAGES[notification_type].format(plate=license_plate),
        target_role=target_role,
        target_user_id=target_user_id,
        data={"licensePlate": license_plate},
        franchise_id=franchise_id,
        related_entity_id=vehicle_id,
        related_entity_type="vehicle",
        action_url=f"/vehicles/{vehicle_id}",
    )


def build_financial_notification(
    notification_type: NotificationType,
    entity_id: str,
    amount: float | int | Decimal,
    entity_number: str,
    *,
    franchise_id: str | None = None,
    target_role: TargetRole = TargetRole.ADMIN,
    target_user_id: str | None = None,
) -> NotificationCreateRequest:
    """Return the request describing an invoice, payment or royalty event.

    Invoice events link to ``/invoices/{id}``; every other financial event links
    to ``/payments/{id}``.
    """

    _ensure_family(notification_type, _FINANCIAL_TITLES, "financial")
    priority = (
        NotificationPriority.HIGH
        if notification_type is NotificationType.INVOICE_OVERDUE
        else NotificationPriority.MEDIUM
    )
    is_invoice = notification_type in _INVOICE_TYPES
    return NotificationCreateRequest(
        type=notification_type,
        priority=priority,
        title=_FINANCIAL_TITLES[notification_type],
        message=_FINANCIAL_MESSAGES[notification_type].format(
            number=entity_number, amount=_format_amount(amount)
        ),
        target_role=target_role,
        target_user_id=target_user_id,
        data={
            "amount": float(amount) if isinstance(amount, Decimal) else amount,
            "entityNumber": entity_number,
        },
        franchise_id=franchise_id,
        related_entity_id=entity_id,
        related_entity_type="invoice" if is_invoice else "payment",
        action_url=f"/invoices/{entity_id}" if is_invoice else f"/payments/{entity_id}",
    )


__all__ = [
    "build_financial_notification",
    "build_order_notification",
    "build_vehicle_notification",
]
