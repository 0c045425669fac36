"""Pluggable delivery channels and the registry the notification service iterates."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence
from functools import partial

import anyio

from franchise_notifications.domain.entities import (
    ChannelResult,
    DeliveryOutcome,
    EmailChannelConfig,
    EmailMessage,
    Notification,
    NotificationType,
    TransportResult,
    UserEmailInfo,
)
from franchise_notifications.domain.ports import EmailTransport
from franchise_notifications.utils import now_utc

from .policy import get_email_config
from .recipients import RecipientResolver
from .rendering import render_html, render_subject, render_text, resolve_action_url

logger = logging.getLogger(__name__)

EMAIL_CHANNEL = "email"


class NotificationChannel(ABC):
    """A transport able to render and send a notification for one medium."""

    @abstractmethod
    async def send(
        self,
        notification: Notification,
        config: EmailChannelConfig | None = None,
        actor_info: UserEmailInfo | None = None,
    ) -> ChannelResult:
        """Deliver ``notification`` and report the outcome without raising."""


class ChannelRegistry:
    """Ordered mapping of channel names to channel implementations."""

    def __init__(self) -> None:
        self._channels: dict[str, NotificationChannel] = {}

    def register(self, name: str, channel: NotificationChannel) -> None:
        self._channels[name] = channel

    def unregister(self, name: str) -> None:
        self._channels.pop(name, None)

    def get(self, name: str) -> NotificationChannel | None:
        return self._channels.get(name)

    def items(self) -> list[tuple[str, NotificationChannel]]:
        return list(self._channels.items())

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._channels))

    def __contains__(self, name: object) -> bool:
        return name in self._channels

    def __len__(self) -> int:
        return len(self._channels)


class EmailChannel(NotificationChannel):
    """Send notifications by email to every resolved recipient concurrently."""

    def __init__(
        self,
        resolver: RecipientResolver,
        transport: EmailTransport,
        *,
        brand: str,
        base_url: str | None = None,
        policy: Callable[[NotificationType], EmailChannelConfig] = get_email_config,
    ) -> None:
        self._resolver = resolver
        self._transport = transport
        self._brand = brand
        self._base_url = base_url
        self._policy = policy

    async def send(
        self,
        notification: Notification,
        config: EmailChannelConfig | None = None,
        actor_info: UserEmailInfo | None = None,
    ) -> ChannelResult:
        final_config = config or self._policy(notification.type)
        if not final_config.send_email:
            return ChannelResult.skipped()

        recipients = await anyio.to_thread.run_sync(
            self._resolver.resolve, notification, actor_info, final_config
        )
        return await self.send_to(notification, recipients, actor_info)

    async def send_to(
        self,
        notification: Notification,
        recipients: Sequence[str],
        actor_info: UserEmailInfo | None = None,
    ) -> ChannelResult:
        """Send ``notification`` to an already resolved list of addresses."""

        if not recipients:
            return ChannelResult.failed("No email recipient found")

        logger.info(
            "Sending %s notification %s (%s) to %d recipient(s)",
            notification.type.value,
            notification.id,
            notification.target_role.value,
            len(recipients),
        )
        messages = [
            self.build_message(notification, address, actor_info) for address in recipients
        ]
        results = await self._transmit(messages)
        return self._aggregate(results)

    def build_message(
        self,
        notification: Notification,
        address: str,
        actor_info: UserEmailInfo | None = None,
    ) -> EmailMessage:
        """Render the email sent to ``address``."""

        recipient_name = None
        if actor_info is not None and actor_info.email == address:
            recipient_name = actor_info.name
        action_url = resolve_action_url(notification.action_url, self._base_url)
        return EmailMessage(
            to=address,
            subject=render_subject(notification, brand=self._brand),
            html=render_html(
                notification,
                brand=self._brand,
                year=now_utc().year,
                recipient_name=recipient_name,
                action_url=action_url,
            ),
            text=render_text(
                notification,
                brand=self._brand,
                recipient_name=recipient_name,
                action_url=action_url,
            ),
        )

    async def _transmit(self, messages: Sequence[EmailMessage]) -> list[TransportResult]:
        results: list[TransportResult | None] = [None] * len(messages)

        async def deliver(index: int, message: EmailMessage) -> None:
            results[index] = await anyio.to_thread.run_sync(
                partial(self._send_one, message)
            )

        async with anyio.create_task_group() as task_group:
            for index, message in enumerate(messages):
                task_group.start_soon(deliver, index, message)

        return [result for result in results if result is not None]

    def _send_one(self, message: EmailMessage) -> TransportResult:
        try:
            return self._transport.send_email(message)
        except Exception as exc:
            logger.exception("Email transport raised while sending to %s", message.to)
            return TransportResult(success=False, error=str(exc) or exc.__class__.__name__)

    @staticmethod
    def _aggregate(results: Sequence[TransportResult]) -> ChannelResult:
        total = len(results)
        failures = [result for result in results if not result.success]
        if not failures:
            return ChannelResult(
                success=True,
                outcome=DeliveryOutcome.DELIVERED,
                message_id=results[0].message_id if results else None,
                attempted_count=total,
            )
        if len(failures) < total:
            first_success = next(result for result in results if result.success)
            warning = f"{len(failures)}/{total} emails failed"
            logger.warning("Partial email delivery: %s", warning)
            return ChannelResult(
                success=True,
                outcome=DeliveryOutcome.PARTIALLY_DELIVERED,
                warning=warning,
                message_id=first_success.message_id,
                failed_count=len(failures),
                attempted_count=total,
            )
        error = failures[0].error or "Email delivery failed"
        logger.error("All %d email(s) failed: %s", total, error)
        return ChannelResult.failed(error, failed_count=total, attempted_count=total)


__all__ = [
    "ChannelRegistry",
    "EMAIL_CHANNEL",
    "EmailChannel",
    "NotificationChannel",
]
