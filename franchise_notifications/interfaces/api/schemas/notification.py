"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from franchise_notifications.domain.entities import (
    DeliveryOutcome,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
)


class EmailConfigOverride(BaseModel):
    """Replace the default email policy of the notification type for one call."""

    send_email: bool
    email_recipients: list[str] = Field(default_factory=list)
    include_default_recipients: bool = False


class ActorInfo(BaseModel):
    """User on whose behalf the notification is created."""

    id: str
    email: str
    role: TargetRole
    name: str | None = None
    franchise_id: str | None = None


class NotificationCreate(BaseModel):
    """Payload used to create a notification."""

    model_config = ConfigDict(extra="forbid")

    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    data: dict[str, Any] = Field(default_factory=dict)
    target_user_id: str | None = None
    franchise_id: str | None = None
    related_entity_id: str | None = None
    related_entity_type: str | None = None
    action_url: str | None = Field(default=None, max_length=500)
    expires_at: datetime | None = None
    email_config: EmailConfigOverride | None = None
    actor: ActorInfo | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: NotificationType
    priority: NotificationPriority
    status: NotificationStatus
    title: str
    message: str
    target_role: TargetRole
    data: dict[str, Any] = Field(default_factory=dict)
    target_user_id: str | None = None
    franchise_id: str | None = None
    related_entity_id: str | None = None
    related_entity_type: str | None = None
    action_url: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None
    expires_at: datetime | None = None


class ChannelResultRead(BaseModel):
    success: bool
    outcome: DeliveryOutcome
    error: str | None = None
    warning: str | None = None
    message_id: str | None = None
    failed_count: int = 0
    attempted_count: int = 0


class NotificationCreateResponse(BaseModel):
    notification: NotificationRead
    channel_results: dict[str, ChannelResultRead] = Field(default_factory=dict)


class NotificationListResponse(BaseModel):
    """One page of notifications with counters for the notification bell."""

    notifications: list[NotificationRead]
    total: int
    unread_count: int
    has_more: bool


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Identifiants des notifications")


class BatchUpdateResponse(BaseModel):
    updated_count: int
    updated_ids: list[str] = Field(default_factory=list)


class FeedItemRead(BaseModel):
    id: str
    actor: str
    action: str
    target: str
    timestamp: str
    unread: bool


class EmailTestRequest(BaseModel):
    """Recipient and notification type used for a configuration test email."""

    email: EmailStr
    type: NotificationType = NotificationType.SYSTEM


__all__ = [
    "ActorInfo",
    "BatchUpdateResponse",
    "ChannelResultRead",
    "EmailConfigOverride",
    "FeedItemRead",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "EmailTestRequest",
]
