"""Tests for the email channel delivery and outcome aggregation."""

from __future__ import annotations

import threading

import pytest

from conftest import RecordingTransport, make_notification
from franchise_notifications.application.use_cases.notifications import (
    ChannelRegistry,
    EmailChannel,
    RecipientResolver,
)
from franchise_notifications.domain.entities import (
    DeliveryOutcome,
    EmailChannelConfig,
    NotificationPriority,
    NotificationType,
    TargetRole,
    UserEmailInfo,
)

pytestmark = pytest.mark.anyio

THREE_RECIPIENTS = EmailChannelConfig(
    send_email=True,
    email_recipients=("a@drivncook.com", "b@drivncook.com", "c@drivncook.com"),
)


def _channel(directory, transport, **kwargs) -> EmailChannel:
    resolver = RecipientResolver(directory, ("admin@drivncook.com",))
    return EmailChannel(resolver, transport, brand="DRIV'N COOK", **kwargs)


async def test_silent_type_is_skipped_without_transmission(directory, transport) -> None:
    notification = make_notification(notification_type=NotificationType.STOCK_RECEIVED)

    result = await _channel(directory, transport).send(notification)

    assert result.success is True
    assert result.outcome is DeliveryOutcome.SKIPPED
    assert transport.sent == []


async def test_override_replaces_the_type_default(directory, transport) -> None:
    notification = make_notification(notification_type=NotificationType.STOCK_RECEIVED)
    config = EmailChannelConfig(send_email=True, email_recipients=("ops@drivncook.com",))

    result = await _channel(directory, transport).send(notification, config)

    assert result.outcome is DeliveryOutcome.DELIVERED
    assert transport.recipients == ["ops@drivncook.com"]


async def test_partial_failure_is_reported_as_success_with_warning(directory) -> None:
    transport = RecordingTransport(failing=["b@drivncook.com"])

    result = await _channel(directory, transport).send(make_notification(), THREE_RECIPIENTS)

    assert result.success is True
    assert result.outcome is DeliveryOutcome.PARTIALLY_DELIVERED
    assert result.warning == "1/3 emails failed"
    assert result.failed_count == 1
    assert result.attempted_count == 3
    assert transport.recipients == ["a@drivncook.com", "b@drivncook.com", "c@drivncook.com"]


async def test_transport_exception_counts_as_failed_transmission(directory) -> None:
    transport = RecordingTransport(raising=["c@drivncook.com"])

    result = await _channel(directory, transport).send(make_notification(), THREE_RECIPIENTS)

    assert result.outcome is DeliveryOutcome.PARTIALLY_DELIVERED
    assert result.warning == "1/3 emails failed"


async def test_total_failure_carries_first_error(directory) -> None:
    transport = RecordingTransport(failing=["a@drivncook.com", "b@drivncook.com", "c@drivncook.com"])

    result = await _channel(directory, transport).send(make_notification(), THREE_RECIPIENTS)

    assert result.success is False
    assert result.outcome is DeliveryOutcome.FAILED
    assert result.error is not None and result.error.startswith("rejected ")
    assert result.failed_count == 3


async def test_no_recipient_is_a_failure_not_an_exception(directory, transport) -> None:
    notification = make_notification(
        notification_type=NotificationType.INVOICE_GENERATED,
        target_role=TargetRole.FRANCHISEE,
    )

    result = await _channel(directory, transport).send(notification)

    assert result.success is False
    assert result.error == "No email recipient found"
    assert transport.sent == []


async def test_messages_are_rendered_per_recipient(directory, transport) -> None:
    actor = UserEmailInfo(
        id="owner-1", email="chloe@burger-nomade.fr", role=TargetRole.FRANCHISEE, name="Chloé Durand"
    )
    notification = make_notification(
        notification_type=NotificationType.VEHICLE_BREAKDOWN,
        target_role=TargetRole.FRANCHISEE,
        priority=NotificationPriority.URGENT,
        title="Panne véhicule",
        action_url="/vehicles/v-1",
    )
    channel = _channel(directory, transport, base_url="https://app.drivncook.com")
    config = EmailChannelConfig(send_email=True, email_recipients=("ops@drivncook.com",))

    result = await channel.send(notification, config, actor)

    assert result.outcome is DeliveryOutcome.DELIVERED
    by_address = {message.to: message for message in transport.sent}
    assert by_address["chloe@burger-nomade.fr"].subject == "URGENT: Panne véhicule - DRIV'N COOK"
    assert "Bonjour Chloé Durand," in by_address["chloe@burger-nomade.fr"].html
    assert "Bonjour," in by_address["ops@drivncook.com"].html
    assert "https://app.drivncook.com/vehicles/v-1" in by_address["ops@drivncook.com"].text


def test_registry_keeps_registration_order(directory, transport) -> None:
    registry = ChannelRegistry()
    first = _channel(directory, transport)
    second = _channel(directory, transport)

    registry.register("email", first)
    registry.register("backup", second)
    registry.unregister("missing")

    assert list(registry) == ["email", "backup"]
    assert "email" in registry
    assert len(registry) == 2

    registry.unregister("email")

    assert registry.get("email") is None
    assert registry.items() == [("backup", second)]


class BarrierTransport(RecordingTransport):
    """Transport whose sends only return once every expected send is in flight."""

    def __init__(self, parties: int) -> None:
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)

    def send_email(self, message):
        self.barrier.wait()
        return super().send_email(message)


async def test_recipients_are_sent_to_concurrently(directory) -> None:
    transport = BarrierTransport(parties=3)

    result = await _channel(directory, transport).send(make_notification(), THREE_RECIPIENTS)

    assert result.outcome is DeliveryOutcome.DELIVERED
    assert result.attempted_count == 3
    assert transport.recipients == ["a@drivncook.com", "b@drivncook.com", "c@drivncook.com"]
