"""SQLAlchemy model for persisted notifications."""

import uuid

from sqlalchemy import Column, DateTime, JSON, String, Text

from franchise_notifications.infrastructure.database import Base
from franchise_notifications.utils import ensure_naive_utc, now_utc


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_naive():
    return ensure_naive_utc(now_utc())


class NotificationModel(Base):
    """Database representation of a notification addressed to a role."""

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=_new_id)
    type = Column(String(50), nullable=False, index=True)
    priority = Column(String(10), nullable=False, default="MEDIUM")
    status = Column(String(10), nullable=False, default="UNREAD", index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    target_user_id = Column(String(36), nullable=True, index=True)
    target_role = Column(String(20), nullable=False, index=True)
    franchise_id = Column(String(36), nullable=True, index=True)
    related_entity_id = Column(String(64), nullable=True)
    related_entity_type = Column(String(50), nullable=True)
    action_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=_now_naive, index=True)
    read_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
