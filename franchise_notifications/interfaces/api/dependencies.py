"""FastAPI dependency utilities."""

from fastapi import Depends
from sqlalchemy.orm import Session

from franchise_notifications.application.use_cases.notifications import (
    NotificationService,
    build_notification_service,
)
from franchise_notifications.config import get_settings
from franchise_notifications.infrastructure.database import get_db
from franchise_notifications.infrastructure.directory import SqlRecipientDirectory
from franchise_notifications.infrastructure.email import SendGridEmailTransport
from franchise_notifications.infrastructure.repositories import NotificationRepository


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Return a :class:`NotificationService` bound to the request session."""

    settings = get_settings()
    return build_notification_service(
        NotificationRepository(db),
        SqlRecipientDirectory(db),
        SendGridEmailTransport(settings),
        default_admin_emails=settings.default_admin_emails,
        brand=settings.brand_name,
        base_url=settings.app_base_url,
    )


__all__ = ["get_db", "get_notification_service"]
