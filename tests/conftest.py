"""Shared fixtures: in-memory database and in-process delivery providers."""

from __future__ import annotations

import os
import time

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEFAULT_COUNTRY_CODE"] = "55"

import pytest

from notifyhub.config import reset_settings_cache
from notifyhub.domain.exceptions import ProviderError
from notifyhub.infrastructure import database, models  # noqa: F401
from notifyhub.infrastructure.providers import (
    ProviderRegistry,
    ProviderResult,
    ProviderStatus,
)
from notifyhub.utils import now_utc, to_isoformat

reset_settings_cache()

DEFAULT_PROVIDERS = {"sms": "twilio", "email": "sendgrid", "whatsapp": "meta-api"}


class FakeProvider:
    """Scripted provider recording every message it is asked to send."""

    def __init__(
        self,
        name: str,
        channel: str,
        *,
        fail: bool = False,
        error: Exception | None = None,
        healthy: bool = True,
        health_error: Exception | None = None,
        health_delay: float = 0.0,
    ) -> None:
        self.name = name
        self.channel = channel
        self.fail = fail
        self.error = error
        self.healthy = healthy
        self.health_error = health_error
        self.health_delay = health_delay
        self.sent: list[tuple] = []

    def send(self, to, content, options):
        self.sent.append((to, content, options))
        if self.error is not None:
            raise self.error
        if self.fail:
            raise ProviderError(f"{self.name} is down", provider=self.name, channel=self.channel)
        return ProviderResult(
            success=True,
            provider=self.name,
            message_id=f"{self.name}-{len(self.sent)}",
            timestamp=to_isoformat(now_utc()),
            status="sent",
            details={"to": to},
        )

    def get_status(self, message_id: str) -> ProviderStatus:
        return ProviderStatus(message_id=message_id, status="delivered", provider=self.name)

    def check_health(self) -> bool:
        if self.health_delay:
            time.sleep(self.health_delay)
        if self.health_error is not None:
            raise self.health_error
        return self.healthy


@pytest.fixture(autouse=True)
def fresh_database():
    """Give every test empty tables."""

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def providers() -> dict[str, FakeProvider]:
    return {
        "twilio": FakeProvider("twilio", "sms"),
        "aws-sns": FakeProvider("aws-sns", "sms"),
        "sendgrid": FakeProvider("sendgrid", "email"),
        "aws-ses": FakeProvider("aws-ses", "email"),
        "meta-api": FakeProvider("meta-api", "whatsapp"),
        "twilio-whatsapp": FakeProvider("twilio-whatsapp", "whatsapp"),
    }


@pytest.fixture()
def registry(providers: dict[str, FakeProvider]) -> ProviderRegistry:
    return ProviderRegistry(providers.values(), DEFAULT_PROVIDERS)


@pytest.fixture()
def make_provider():
    """Factory for one-off providers with scripted behaviour."""

    return FakeProvider


@pytest.fixture()
def make_registry():
    def factory(providers, defaults=None) -> ProviderRegistry:
        return ProviderRegistry(providers, defaults or DEFAULT_PROVIDERS)

    return factory
