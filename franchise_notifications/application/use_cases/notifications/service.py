"""Create notifications, enrich them and fan them out to the registered channels."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

import anyio

from franchise_notifications.domain.entities import (
    BatchUpdateResult,
    ChannelResult,
    EmailChannelConfig,
    EnrichmentResult,
    Notification,
    NotificationCreateRequest,
    NotificationFilters,
    NotificationPage,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
    UserEmailInfo,
)
from franchise_notifications.domain.ports import (
    EmailTransport,
    NotificationStore,
    RecipientDirectory,
)
from franchise_notifications.utils import now_utc

from .channels import EMAIL_CHANNEL, ChannelRegistry, EmailChannel
from .recipients import RecipientResolver, is_valid_email

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class NotificationPersistenceError(RuntimeError):
    """Raised when the store could not persist a new notification."""


@dataclass
class CreateNotificationResult:
    """Persisted notification plus the outcome reported by each channel."""

    notification: Notification
    channel_results: dict[str, ChannelResult] = field(default_factory=dict)


class NotificationService:
    """Orchestrate enrichment, persistence and channel fan-out."""

    def __init__(
        self,
        store: NotificationStore,
        directory: RecipientDirectory,
        channels: ChannelRegistry,
    ) -> None:
        self._store = store
        self._directory = directory
        self._channels = channels

    @property
    def channels(self) -> ChannelRegistry:
        return self._channels

    async def create(
        self,
        request: NotificationCreateRequest,
        actor_info: UserEmailInfo | None = None,
        email_config: EmailChannelConfig | None = None,
    ) -> CreateNotificationResult:
        """Persist a notification and deliver it through every registered channel.

        Only persistence can fail the call: it raises
        :class:`NotificationPersistenceError` and no channel is invoked. Channel
        failures are reported in ``channel_results``. Store and directory calls
        run in worker threads.
        """

        data = await anyio.to_thread.run_sync(self._enriched_data, request, actor_info)
        notification = Notification(
            id=None,
            type=request.type,
            priority=request.priority or NotificationPriority.MEDIUM,
            status=NotificationStatus.UNREAD,
            title=request.title,
            message=request.message,
            target_role=request.target_role,
            data=data,
            target_user_id=request.target_user_id,
            franchise_id=request.franchise_id,
            related_entity_id=request.related_entity_id,
            related_entity_type=request.related_entity_type,
            action_url=request.action_url,
            created_at=now_utc(),
            read_at=None,
            expires_at=request.expires_at,
        )

        try:
            saved = await anyio.to_thread.run_sync(self._store.create, notification)
        except Exception as exc:
            logger.exception("Failed to persist %s notification", request.type.value)
            raise NotificationPersistenceError("Notification could not be saved") from exc

        addressee = actor_info
        if addressee is None:
            addressee = await anyio.to_thread.run_sync(self.resolve_addressee, saved)
        channel_results = await self.deliver(saved, addressee, email_config)
        return CreateNotificationResult(notification=saved, channel_results=channel_results)

    async def deliver(
        self,
        notification: Notification,
        actor_info: UserEmailInfo | None = None,
        email_config: EmailChannelConfig | None = None,
    ) -> dict[str, ChannelResult]:
        """Invoke every registered channel and collect their outcomes."""

        results: dict[str, ChannelResult] = {}
        for name, channel in self._channels.items():
            try:
                results[name] = await channel.send(notification, email_config, actor_info)
            except Exception as exc:
                logger.exception(
                    "Channel %s raised while delivering notification %s", name, notification.id
                )
                results[name] = ChannelResult.failed(str(exc) or exc.__class__.__name__)
        return results

    def resolve_addressee(self, notification: Notification) -> UserEmailInfo | None:
        """Return the user a notification is directly addressed to, if any."""

        try:
            if notification.target_user_id:
                user = self._directory.get_user_by_id(notification.target_user_id)
                if user is not None:
                    return user
            if notification.franchise_id:
                return self._directory.get_franchise_owner(notification.franchise_id)
        except Exception:
            logger.warning(
                "Could not resolve the addressee of notification %s",
                notification.id,
                exc_info=True,
            )
        return None

    def enrich(self, franchise_id: str | None) -> EnrichmentResult:
        """Look up display data for ``franchise_id`` without ever raising."""

        if not franchise_id:
            return EnrichmentResult()
        try:
            franchise_name = self._directory.get_franchise_name(franchise_id)
            owner = self._directory.get_franchise_owner(franchise_id)
        except Exception:
            logger.warning(
                "Enrichment lookup failed for franchise %s", franchise_id, exc_info=True
            )
            return EnrichmentResult()
        return EnrichmentResult(
            franchise_name=franchise_name,
            user_name=owner.name if owner is not None else None,
        )

    def _enriched_data(
        self, request: NotificationCreateRequest, actor_info: UserEmailInfo | None
    ) -> dict[str, Any]:
        data = dict(request.data or {})
        if actor_info is not None and actor_info.name and not data.get("userName"):
            data["userName"] = actor_info.name

        if request.franchise_id and (not data.get("franchiseName") or not data.get("userName")):
            enrichment = self.enrich(request.franchise_id)
            if enrichment.franchise_name and not data.get("franchiseName"):
                data["franchiseName"] = enrichment.franchise_name
            if enrichment.user_name and not data.get("userName"):
                data["userName"] = enrichment.user_name
        return data

    def list_notifications(
        self, role: TargetRole, filters: NotificationFilters | None = None
    ) -> NotificationPage:
        """Return one page of notifications addressed to ``role``."""

        filters = filters or NotificationFilters(target_role=role)
        limit = min(filters.limit or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        offset = max(filters.offset, 0)
        scoped = replace(filters, target_role=role, limit=limit, offset=offset)

        notifications = list(self._store.query(scoped))
        total = self._store.count(scoped)
        if scoped.statuses and NotificationStatus.UNREAD not in scoped.statuses:
            unread_count = 0
        else:
            unread_count = self._store.count(
                replace(scoped, statuses=[NotificationStatus.UNREAD])
            )
        return NotificationPage(
            notifications=notifications,
            total=total,
            unread_count=unread_count,
            has_more=offset + limit < total,
        )

    def mark_read(self, ids: Iterable[str], role: TargetRole) -> BatchUpdateResult:
        """Transition the given ``UNREAD`` notifications of ``role`` to ``READ``."""

        unique_ids = _unique(ids)
        if not unique_ids:
            raise ValueError("At least one notification id is required")
        return self._store.batch_update_status(
            unique_ids,
            status=NotificationStatus.READ,
            read_at=now_utc(),
            target_role=role,
        )

    def mark_all_read(self, role: TargetRole) -> BatchUpdateResult:
        """Mark every ``UNREAD`` notification addressed to ``role`` as read."""

        unread = self._store.query(
            NotificationFilters(
                target_role=role, statuses=[NotificationStatus.UNREAD], limit=None
            )
        )
        unread_ids = [notification.id for notification in unread if notification.id]
        if not unread_ids:
            return BatchUpdateResult(updated_count=0)
        return self.mark_read(unread_ids, role)

    async def send_test_email(
        self,
        address: str,
        notification_type: NotificationType = NotificationType.SYSTEM,
    ) -> ChannelResult:
        """Send a sample notification to ``address`` to check the email setup."""

        channel = self._channels.get(EMAIL_CHANNEL)
        if not isinstance(channel, EmailChannel):
            return ChannelResult.failed("Email channel is not registered")
        if not is_valid_email(address):
            return ChannelResult.failed("No email recipient found")

        sample = Notification(
            id="test",
            type=notification_type,
            priority=NotificationPriority.LOW,
            status=NotificationStatus.UNREAD,
            title="Email de test",
            message=(
                "Ceci est un email de test pour vérifier la configuration "
                "de votre service d'email."
            ),
            target_role=TargetRole.ADMIN,
            data={"testMessage": "Configuration réussie !"},
            created_at=now_utc(),
        )
        return await channel.send_to(sample, [address])


def build_notification_service(
    store: NotificationStore,
    directory: RecipientDirectory,
    transport: EmailTransport,
    *,
    default_admin_emails: Sequence[str] = (),
    brand: str,
    base_url: str | None = None,
) -> NotificationService:
    """Wire a :class:`NotificationService` with the email channel registered."""

    resolver = RecipientResolver(directory, default_admin_emails)
    registry = ChannelRegistry()
    registry.register(
        EMAIL_CHANNEL, EmailChannel(resolver, transport, brand=brand, base_url=base_url)
    )
    return NotificationService(store, directory, registry)


def _unique(ids: Iterable[str]) -> list[str]:
    unique: list[str] = []
    seen: set[str] = set()
    for notification_id in ids:
        if not notification_id or notification_id in seen:
            continue
        seen.add(notification_id)
        unique.append(notification_id)
    return unique


__all__ = [
    "CreateNotificationResult",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "NotificationPersistenceError",
    "NotificationService",
    "build_notification_service",
]
