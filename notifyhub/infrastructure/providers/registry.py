"""Registry of delivery providers keyed by channel and provider name."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import anyio

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNELS
from notifyhub.domain.exceptions import ProviderConfigurationError
from notifyhub.infrastructure.providers.base import NotificationProvider
from notifyhub.infrastructure.providers.email import AwsSesEmailProvider, SendGridEmailProvider
from notifyhub.infrastructure.providers.sms import AwsSnsSmsProvider, TwilioSmsProvider
from notifyhub.infrastructure.providers.whatsapp import (
    MetaWhatsAppProvider,
    TwilioWhatsAppProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_TIMEOUT_SECONDS = 5.0


class ProviderRegistry:
    """Read-only mapping ``channel -> provider name -> provider``.

    Built once when the process starts and shared by every request.
    """

    def __init__(
        self,
        providers: Iterable[NotificationProvider],
        defaults: Mapping[str, str],
    ) -> None:
        self._providers: dict[str, dict[str, NotificationProvider]] = {}
        for provider in providers:
            self._providers.setdefault(provider.channel, {})[provider.name] = provider
        self._defaults = dict(defaults)

    def get_provider(self, channel: str, name: str | None = None) -> NotificationProvider:
        """Return the provider ``name`` for ``channel`` or the channel default.

        Raises:
            ProviderConfigurationError: If the channel has no providers or the
                requested provider is not registered.
        """

        channel_providers = self._providers.get(channel)
        if not channel_providers:
            raise ProviderConfigurationError(f"Channel not supported: {channel}")
        provider_name = name or self.default_provider(channel)
        provider = channel_providers.get(provider_name)
        if provider is None:
            raise ProviderConfigurationError(
                f"Provider not found: {provider_name} for channel {channel}"
            )
        return provider

    def default_provider(self, channel: str) -> str:
        try:
            return self._defaults[channel]
        except KeyError:
            raise ProviderConfigurationError(f"Channel not supported: {channel}") from None

    def list_providers(self, channel: str) -> list[str]:
        if channel not in self._providers:
            raise ProviderConfigurationError(f"Channel not supported: {channel}")
        return list(self._providers[channel])

    def channels(self) -> list[str]:
        return list(self._providers)

    def close(self) -> None:
        """Release vendor clients held by providers that expose ``close``."""

        for channel_providers in self._providers.values():
            for provider in channel_providers.values():
                close = getattr(provider, "close", None)
                if callable(close):
                    close()

    async def check_health(
        self, *, timeout: float = DEFAULT_HEALTH_TIMEOUT_SECONDS
    ) -> dict[str, dict[str, Any]]:
        """Probe every registered provider concurrently.

        Each probe runs in a worker thread bounded by ``timeout``. A probe that
        raises or times out reports ``False`` for its own provider only.
        """

        results: dict[tuple[str, str], bool] = {}

        async def probe(provider: NotificationProvider) -> None:
            results[(provider.channel, provider.name)] = await _probe_provider(provider, timeout)

        async with anyio.create_task_group() as task_group:
            for channel_providers in self._providers.values():
                for provider in channel_providers.values():
                    task_group.start_soon(probe, provider)

        report: dict[str, dict[str, Any]] = {}
        for channel, channel_providers in self._providers.items():
            report[channel] = {
                "active": self._defaults.get(channel),
                "providers": {name: results[(channel, name)] for name in channel_providers},
            }
        return report


async def _probe_provider(provider: NotificationProvider, timeout: float) -> bool:
    try:
        with anyio.fail_after(timeout):
            healthy = await anyio.to_thread.run_sync(
                provider.check_health, abandon_on_cancel=True
            )
    except TimeoutError:
        logger.warning(
            "Health check for %s/%s timed out after %ss", provider.channel, provider.name, timeout
        )
        return False
    except Exception:
        logger.warning(
            "Health check for %s/%s raised", provider.channel, provider.name, exc_info=True
        )
        return False
    return bool(healthy)


def build_provider_registry(settings: Settings) -> ProviderRegistry:
    """Instantiate every known adapter from ``settings``.

    Vendor clients are created lazily, so missing credentials only surface
    when a provider is used.
    """

    providers: list[NotificationProvider] = [
        TwilioSmsProvider(settings),
        AwsSnsSmsProvider(settings),
        SendGridEmailProvider(settings),
        AwsSesEmailProvider(settings),
        MetaWhatsAppProvider(settings),
        TwilioWhatsAppProvider(settings),
    ]
    defaults = {channel: settings.default_provider(channel) for channel in CHANNELS}
    registry = ProviderRegistry(providers, defaults)
    for channel, name in defaults.items():
        if name not in registry.list_providers(channel):
            logger.warning("Default %s provider %r is not registered", channel, name)
    return registry


__all__ = ["DEFAULT_HEALTH_TIMEOUT_SECONDS", "ProviderRegistry", "build_provider_registry"]
