"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notifyhub.domain.exceptions import ProviderConfigurationError

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifyhub.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )
    default_country_code: str = Field(
        default="55",
        description="Country calling code prepended to phone numbers lacking one",
        pattern=r"^\d{1,4}$",
    )

    default_sms_provider: str = Field(default="twilio")
    default_email_provider: str = Field(default="sendgrid")
    default_whatsapp_provider: str = Field(default="meta-api")

    provider_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for a single request issued to a delivery provider",
        gt=0,
    )
    health_check_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound for a single provider health probe",
        gt=0,
    )

    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_phone_number: str | None = None

    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_sns_sender_id: str = "NOTIFICATION"

    aws_ses_region: str = "us-east-1"
    aws_ses_access_key_id: str | None = None
    aws_ses_secret_access_key: str | None = None
    aws_ses_from_email: str | None = None

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending email via the REST API",
    )
    sendgrid_from_email: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of messages",
        min_length=3,
    )
    sendgrid_from_name: str | None = None

    meta_api_access_token: str | None = None
    meta_api_phone_number_id: str | None = None
    meta_api_base_url: str = "https://graph.facebook.com/v16.0"
    meta_api_language_code: str = "pt_BR"

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_from_email):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_FROM_EMAIL must both be provided to enable email"
            )
        if self.sendgrid_from_email and "@" not in self.sendgrid_from_email:
            raise ValueError("SENDGRID_FROM_EMAIL must be a valid email address")
        return self

    def default_provider(self, channel: str) -> str:
        """Return the name of the provider used when a request names none."""

        defaults = {
            "sms": self.default_sms_provider,
            "email": self.default_email_provider,
            "whatsapp": self.default_whatsapp_provider,
        }
        try:
            return defaults[channel]
        except KeyError:
            raise ProviderConfigurationError(f"Channel not supported: {channel}") from None


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
