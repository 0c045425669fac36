"""Utility script to send a test notification email with the configured SendGrid account."""

from __future__ import annotations

import argparse

import anyio

from franchise_notifications.application.use_cases.notifications import (
    build_notification_service,
)
from franchise_notifications.config import get_settings
from franchise_notifications.domain.entities import NotificationType
from franchise_notifications.infrastructure.database import SessionLocal, initialize_database
from franchise_notifications.infrastructure.directory import SqlRecipientDirectory
from franchise_notifications.infrastructure.email import SendGridEmailTransport
from franchise_notifications.infrastructure.repositories import NotificationRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the test email."""

    parser = argparse.ArgumentParser(
        description="Envoie un email de test pour vérifier la configuration SendGrid.",
    )
    parser.add_argument("email", help="Adresse qui recevra l'email de test")
    parser.add_argument(
        "--type",
        default=NotificationType.SYSTEM.value,
        choices=[member.value for member in NotificationType],
        help="Type de notification simulé (par défaut : SYSTEM)",
    )
    return parser.parse_args()


def main() -> None:
    """Send the test email and report the outcome."""

    args = parse_args()
    settings = get_settings()
    initialize_database()

    session = SessionLocal()
    try:
        service = build_notification_service(
            NotificationRepository(session),
            SqlRecipientDirectory(session),
            SendGridEmailTransport(settings),
            default_admin_emails=settings.default_admin_emails,
            brand=settings.brand_name,
            base_url=settings.app_base_url,
        )
        result = anyio.run(service.send_test_email, args.email, NotificationType(args.type))
    finally:
        session.close()

    if not result.success:
        raise SystemExit(f"Échec de l'envoi de l'email de test : {result.error}")
    print(
        "Email de test envoyé avec succès :\n"
        f"  Destinataire : {args.email}\n"
        f"  Message ID : {result.message_id or '-'}"
    )


if __name__ == "__main__":
    main()
