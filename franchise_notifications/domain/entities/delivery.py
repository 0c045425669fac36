"""Value objects exchanged between the notification service and its channels."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class EmailChannelConfig:
    """Whether and to whom the email channel sends a notification."""

    send_email: bool
    email_recipients: tuple[str, ...] = ()
    include_default_recipients: bool = False


class DeliveryOutcome(str, Enum):
    DELIVERED = "DELIVERED"
    PARTIALLY_DELIVERED = "PARTIALLY_DELIVERED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class ChannelResult:
    """Outcome reported by a channel for one notification.

    ``success`` stays ``True`` for partial deliveries: one bounced address does
    not hide delivery to the other recipients. ``warning`` then describes the
    failed fraction.
    """

    success: bool
    outcome: DeliveryOutcome
    error: str | None = None
    warning: str | None = None
    message_id: str | None = None
    failed_count: int = 0
    attempted_count: int = 0

    @classmethod
    def skipped(cls) -> "ChannelResult":
        return cls(success=True, outcome=DeliveryOutcome.SKIPPED)

    @classmethod
    def failed(cls, error: str, *, failed_count: int = 0, attempted_count: int = 0) -> "ChannelResult":
        return cls(
            success=False,
            outcome=DeliveryOutcome.FAILED,
            error=error,
            failed_count=failed_count,
            attempted_count=attempted_count,
        )


@dataclass(frozen=True)
class EnrichmentResult:
    """Display data looked up for a notification; every field is optional."""

    franchise_name: str | None = None
    user_name: str | None = None


@dataclass(frozen=True)
class EmailMessage:
    """Rendered email handed to a transport."""

    to: str
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class TransportResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


__all__ = [
    "ChannelResult",
    "DeliveryOutcome",
    "EmailChannelConfig",
    "EmailMessage",
    "EnrichmentResult",
    "TransportResult",
]
