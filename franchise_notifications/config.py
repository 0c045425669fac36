"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_ADMIN_EMAIL = "admin@drivncook.com"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    sendgrid_sender_name: str | None = Field(
        default=None,
        description="Display name attached to the sender address",
    )
    admin_emails: str = Field(
        default=DEFAULT_ADMIN_EMAIL,
        description="Comma separated administrative addresses copied on admin notifications",
    )
    brand_name: str = Field(
        default="DRIV'N COOK",
        description="Brand appended to every email subject and shown in the email header",
        min_length=1,
    )
    app_base_url: str | None = Field(
        default=None,
        description="Public URL used to turn relative action links into absolute ones",
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def default_admin_emails(self) -> tuple[str, ...]:
        """Return the configured administrative addresses, in declaration order."""

        addresses: list[str] = []
        for raw in self.admin_emails.split(","):
            address = raw.strip()
            if address and address not in addresses:
                addresses.append(address)
        return tuple(addresses)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
