"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from franchise_notifications.domain.entities import (
    BatchUpdateResult,
    Notification,
    NotificationFilters,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
)
from franchise_notifications.domain.ports import NotificationStore
from franchise_notifications.infrastructure.models import NotificationModel
from franchise_notifications.utils import ensure_naive_utc, ensure_utc, now_utc


class NotificationRepository(NotificationStore):
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def query(self, filters: NotificationFilters) -> Sequence[Notification]:
        query = self._filtered(filters).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit is not None:
            query = query.limit(filters.limit)
        return [self._to_entity(model) for model in query.all()]

    def count(self, filters: NotificationFilters) -> int:
        query = self._filtered(filters).with_entities(func.count(NotificationModel.id))
        return int(query.scalar() or 0)

    def batch_update_status(
        self,
        ids: Sequence[str],
        *,
        status: NotificationStatus,
        read_at: datetime,
        target_role: TargetRole,
    ) -> BatchUpdateResult:
        if status is not NotificationStatus.READ:
            msg = f"Notifications cannot be moved to {status.value}"
            raise ValueError(msg)
        requested = [notification_id for notification_id in ids if notification_id]
        if not requested:
            return BatchUpdateResult(updated_count=0)

        eligible = self.session.query(NotificationModel.id).filter(
            NotificationModel.id.in_(requested),
            NotificationModel.target_role == target_role.value,
            NotificationModel.status == NotificationStatus.UNREAD.value,
        )
        updated_ids = tuple(row.id for row in eligible.all())
        if not updated_ids:
            return BatchUpdateResult(updated_count=0)

        self.session.query(NotificationModel).filter(
            NotificationModel.id.in_(updated_ids),
            NotificationModel.status == NotificationStatus.UNREAD.value,
        ).update(
            {
                NotificationModel.status: status.value,
                NotificationModel.read_at: ensure_naive_utc(read_at or now_utc()),
            },
            synchronize_session=False,
        )
        self.session.commit()
        return BatchUpdateResult(updated_count=len(updated_ids), updated_ids=updated_ids)

    def _filtered(self, filters: NotificationFilters) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.target_role == filters.target_role.value
        )
        if filters.types:
            query = query.filter(
                NotificationModel.type.in_([member.value for member in filters.types])
            )
        if filters.priorities:
            query = query.filter(
                NotificationModel.priority.in_([member.value for member in filters.priorities])
            )
        if filters.statuses:
            query = query.filter(
                NotificationModel.status.in_([member.value for member in filters.statuses])
            )
        if filters.franchise_id:
            query = query.filter(NotificationModel.franchise_id == filters.franchise_id)
        if filters.start_date is not None:
            query = query.filter(
                NotificationModel.created_at >= ensure_naive_utc(filters.start_date)
            )
        if filters.end_date is not None:
            query = query.filter(
                NotificationModel.created_at <= ensure_naive_utc(filters.end_date)
            )
        return query

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        if notification.id is not None:
            model.id = notification.id
        model.type = notification.type.value
        model.priority = notification.priority.value
        model.status = notification.status.value
        model.title = notification.title
        model.message = notification.message
        model.data = dict(notification.data or {})
        model.target_user_id = notification.target_user_id
        model.target_role = notification.target_role.value
        model.franchise_id = notification.franchise_id
        model.related_entity_id = notification.related_entity_id
        model.related_entity_type = notification.related_entity_type
        model.action_url = notification.action_url
        model.created_at = ensure_naive_utc(notification.created_at or now_utc())
        model.read_at = ensure_naive_utc(notification.read_at)
        model.expires_at = ensure_naive_utc(notification.expires_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            type=NotificationType(model.type),
            priority=NotificationPriority(model.priority),
            status=NotificationStatus(model.status),
            title=model.title,
            message=model.message,
            target_role=TargetRole(model.target_role),
            data=dict(model.data or {}),
            target_user_id=model.target_user_id,
            franchise_id=model.franchise_id,
            related_entity_id=model.related_entity_id,
            related_entity_type=model.related_entity_type,
            action_url=model.action_url,
            created_at=ensure_utc(model.created_at),
            read_at=ensure_utc(model.read_at),
            expires_at=ensure_utc(model.expires_at),
        )


__all__ = ["NotificationRepository"]
