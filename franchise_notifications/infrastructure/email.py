"""Email transport delivering notification emails through SendGrid."""

from __future__ import annotations

import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from franchise_notifications.config import Settings, get_settings
from franchise_notifications.domain.entities import EmailMessage, TransportResult
from franchise_notifications.domain.ports import EmailTransport

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                if not message:
                    continue
                field = item.get("field")
                help_link = item.get("help")
                text = f"{field}: {message}" if field else str(message)
                messages.append(f"{text} (help: {help_link})" if help_link else text)
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(source: Any) -> str:
    """Log a failed SendGrid call and return the error reported to the channel."""

    status_code = getattr(source, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(source, "body", None))

    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
        return f"SendGrid error {status_code}: {details}"
    if status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
        return f"SendGrid error {status_code}"
    if details:
        logger.error("SendGrid API request failed: %s", details)
        return details
    if isinstance(source, Exception):
        logger.error("Error sending email via SendGrid: %s", source)
        return str(source) or source.__class__.__name__
    return "SendGrid request failed"


def _message_id(response: Any) -> str | None:
    headers = getattr(response, "headers", None) or {}
    try:
        value = headers.get("X-Message-Id")
    except AttributeError:
        return None
    return str(value) if value else None


class SendGridEmailTransport(EmailTransport):
    """Send one rendered :class:`EmailMessage` per call through the SendGrid API."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.sendgrid_api_key and self._settings.sendgrid_sender)

    def send_email(self, message: EmailMessage) -> TransportResult:
        if not self.is_configured:
            logger.info("SendGrid configuration incomplete; skipping email to %s", message.to)
            return TransportResult(success=False, error="SendGrid configuration incomplete")

        sender: Any = self._settings.sendgrid_sender
        if self._settings.sendgrid_sender_name:
            sender = (self._settings.sendgrid_sender, self._settings.sendgrid_sender_name)

        mail = Mail(
            from_email=sender,
            to_emails=message.to,
            subject=message.subject,
            html_content=message.html,
            plain_text_content=message.text,
        )

        try:
            client = SendGridAPIClient(self._settings.sendgrid_api_key)
            response = client.send(mail)
        except Exception as exc:
            return TransportResult(success=False, error=_describe_failure(exc))

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            return TransportResult(success=False, error=_describe_failure(response))

        message_id = _message_id(response)
        logger.info("Email sent to %s (message id %s)", message.to, message_id)
        return TransportResult(success=True, message_id=message_id)


__all__ = ["SendGridEmailTransport"]
