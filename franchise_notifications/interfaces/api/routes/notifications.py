"""Routes pour créer, lister et marquer comme lues les notifications."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query, status

from franchise_notifications.application.use_cases.notifications import (
    NotificationPersistenceError,
    NotificationService,
    to_feed_item,
)
from franchise_notifications.domain.entities import (
    BatchUpdateResult,
    ChannelResult,
    EmailChannelConfig,
    Notification,
    NotificationCreateRequest,
    NotificationFilters,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
    UserEmailInfo,
)
from franchise_notifications.interfaces.api.dependencies import get_notification_service
from franchise_notifications.interfaces.api.schemas import (
    BatchUpdateResponse,
    ChannelResultRead,
    EmailTestRequest,
    FeedItemRead,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationRead,
)
from franchise_notifications.utils import now_utc

logger = logging.getLogger(__name__)


class NotificationScope(str, Enum):
    ADMIN = "admin"
    FRANCHISE = "franchise"


_SCOPE_ROLES = {
    NotificationScope.ADMIN: TargetRole.ADMIN,
    NotificationScope.FRANCHISE: TargetRole.FRANCHISEE,
}

router = APIRouter(prefix="/{scope}/notifications", tags=["notifications"])
test_email_router = APIRouter(prefix="/admin/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        type=notification.type,
        priority=notification.priority,
        status=notification.status,
        title=notification.title,
        message=notification.message,
        target_role=notification.target_role,
        data=notification.data or {},
        target_user_id=notification.target_user_id,
        franchise_id=notification.franchise_id,
        related_entity_id=notification.related_entity_id,
        related_entity_type=notification.related_entity_type,
        action_url=notification.action_url,
        created_at=notification.created_at,
        read_at=notification.read_at,
        expires_at=notification.expires_at,
    )


def _channel_result_to_schema(result: ChannelResult) -> ChannelResultRead:
    return ChannelResultRead(
        success=result.success,
        outcome=result.outcome,
        error=result.error,
        warning=result.warning,
        message_id=result.message_id,
        failed_count=result.failed_count,
        attempted_count=result.attempted_count,
    )


def _batch_to_schema(result: BatchUpdateResult) -> BatchUpdateResponse:
    return BatchUpdateResponse(
        updated_count=result.updated_count, updated_ids=list(result.updated_ids)
    )


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    scope: NotificationScope,
    types: list[NotificationType] | None = Query(default=None),
    priorities: list[NotificationPriority] | None = Query(default=None),
    statuses: list[NotificationStatus] | None = Query(default=None),
    franchise_id: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = Query(20, ge=1, description="Plafonné à 100"),
    offset: int = Query(0, ge=0),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """Retourne une page de notifications adressées au rôle du périmètre."""

    role = _SCOPE_ROLES[scope]
    page = service.list_notifications(
        role,
        NotificationFilters(
            target_role=role,
            types=types or [],
            priorities=priorities or [],
            statuses=statuses or [],
            franchise_id=franchise_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        ),
    )
    return NotificationListResponse(
        notifications=[_notification_to_schema(item) for item in page.notifications],
        total=page.total,
        unread_count=page.unread_count,
        has_more=page.has_more,
    )


@router.post("", response_model=NotificationCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    scope: NotificationScope,
    payload: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCreateResponse:
    """Crée une notification pour le rôle du périmètre et la diffuse sur chaque canal."""

    request = NotificationCreateRequest(
        type=payload.type,
        title=payload.title,
        message=payload.message,
        target_role=_SCOPE_ROLES[scope],
        priority=payload.priority,
        data=dict(payload.data),
        target_user_id=payload.target_user_id,
        franchise_id=payload.franchise_id,
        related_entity_id=payload.related_entity_id,
        related_entity_type=payload.related_entity_type,
        action_url=payload.action_url,
        expires_at=payload.expires_at,
    )
    actor = None
    if payload.actor is not None:
        actor = UserEmailInfo(
            id=payload.actor.id,
            email=payload.actor.email,
            role=payload.actor.role,
            name=payload.actor.name,
            franchise_id=payload.actor.franchise_id,
        )
    email_config = None
    if payload.email_config is not None:
        email_config = EmailChannelConfig(
            send_email=payload.email_config.send_email,
            email_recipients=tuple(payload.email_config.email_recipients),
            include_default_recipients=payload.email_config.include_default_recipients,
        )

    try:
        result = await service.create(request, actor, email_config)
    except NotificationPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Impossible d'enregistrer la notification",
        ) from exc

    for channel, channel_result in result.channel_results.items():
        if not channel_result.success:
            logger.warning(
                "Le canal %s n'a pas pu livrer la notification %s: %s",
                channel,
                result.notification.id,
                channel_result.error,
            )

    return NotificationCreateResponse(
        notification=_notification_to_schema(result.notification),
        channel_results={
            name: _channel_result_to_schema(channel_result)
            for name, channel_result in result.channel_results.items()
        },
    )


@router.get("/feed", response_model=list[FeedItemRead])
def read_feed(
    scope: NotificationScope,
    limit: int = Query(20, ge=1),
    service: NotificationService = Depends(get_notification_service),
) -> list[FeedItemRead]:
    """Retourne les notifications récentes au format du fil d'activité."""

    role = _SCOPE_ROLES[scope]
    page = service.list_notifications(role, NotificationFilters(target_role=role, limit=limit))
    now = now_utc()
    items = [to_feed_item(notification, now) for notification in page.notifications]
    return [
        FeedItemRead(
            id=item.id,
            actor=item.actor,
            action=item.action,
            target=item.target,
            timestamp=item.timestamp,
            unread=item.unread,
        )
        for item in items
    ]


@router.patch("/read", response_model=BatchUpdateResponse)
def mark_notifications_read(
    scope: NotificationScope,
    payload: NotificationMarkReadRequest,
    service: NotificationService = Depends(get_notification_service),
) -> BatchUpdateResponse:
    """Marque comme lues les notifications indiquées."""

    try:
        result = service.mark_read(payload.ids, _SCOPE_ROLES[scope])
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _batch_to_schema(result)


@router.post("/read-all", response_model=BatchUpdateResponse)
def mark_all_notifications_read(
    scope: NotificationScope,
    service: NotificationService = Depends(get_notification_service),
) -> BatchUpdateResponse:
    """Marque comme lues toutes les notifications non lues du périmètre."""

    try:
        result = service.mark_all_read(_SCOPE_ROLES[scope])
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _batch_to_schema(result)


@test_email_router.post("/test-email", response_model=ChannelResultRead)
async def send_test_email(
    payload: EmailTestRequest,
    service: NotificationService = Depends(get_notification_service),
) -> ChannelResultRead:
    """Envoie un email de test pour vérifier la configuration SendGrid."""

    result = await service.send_test_email(str(payload.email), payload.type)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=result.error or "L'envoi de l'email de test a échoué",
        )
    return _channel_result_to_schema(result)


__all__ = ["NotificationScope", "router", "test_email_router"]
