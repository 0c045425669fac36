"""Tests for the default email delivery policy."""

from __future__ import annotations

import pytest

from franchise_notifications.application.use_cases.notifications import (
    DELIVERY_POLICY,
    get_email_config,
)
from franchise_notifications.domain.entities import NotificationType


def test_every_notification_type_has_a_policy() -> None:
    assert set(DELIVERY_POLICY) == set(NotificationType)


def test_policy_cannot_be_mutated() -> None:
    with pytest.raises(TypeError):
        DELIVERY_POLICY[NotificationType.SYSTEM] = get_email_config(  # type: ignore[index]
            NotificationType.STOCK_RECEIVED
        )


@pytest.mark.parametrize(
    "notification_type",
    [NotificationType.STOCK_RECEIVED, NotificationType.USER_PROFILE_UPDATED],
)
def test_silent_types_do_not_send(notification_type: NotificationType) -> None:
    assert get_email_config(notification_type).send_email is False


@pytest.mark.parametrize(
    "notification_type",
    [
        NotificationType.ORDER_CONFIRMED,
        NotificationType.ORDER_SHIPPED,
        NotificationType.ORDER_DELIVERED,
        NotificationType.VEHICLE_ASSIGNED,
        NotificationType.INVOICE_GENERATED,
        NotificationType.PAYMENT_RECEIVED,
        NotificationType.PASSWORD_CHANGED,
        NotificationType.REPORT_GENERATED,
    ],
)
def test_routine_transitions_only_reach_the_addressee(notification_type: NotificationType) -> None:
    config = get_email_config(notification_type)

    assert config.send_email is True
    assert config.include_default_recipients is False


@pytest.mark.parametrize(
    "notification_type",
    [
        NotificationType.VEHICLE_BREAKDOWN,
        NotificationType.INVOICE_OVERDUE,
        NotificationType.FRANCHISE_SUSPENDED,
        NotificationType.ORDER_CREATED,
    ],
)
def test_critical_events_copy_the_default_administrators(
    notification_type: NotificationType,
) -> None:
    config = get_email_config(notification_type)

    assert config.send_email is True
    assert config.include_default_recipients is True
