"""
Provider Registry

Name -> adapter lookup. A registry instance is built for each request from
the stored provider configurations and handed to the gateway; there is no
process-wide registry.
"""

import builtins
from collections.abc import Iterable

import httpx
import structlog

from metadesc.services.ai.interface import ProviderConfig
from metadesc.services.ai.providers import PROVIDER_CLASSES, BaseProvider

logger = structlog.get_logger()


class ProviderRegistry:
    """Holds adapters keyed by their name. Insertion order is kept."""

    def __init__(self) -> None:
        self._providers: dict[str, BaseProvider] = {}

    def register(self, provider: BaseProvider) -> None:
        """Add an adapter. A second adapter with the same name replaces the first."""
        name = provider.get_name()
        if name in self._providers:
            logger.warning("provider_registration_overwritten", provider=name)
        self._providers[name] = provider

    def get(self, name: str) -> BaseProvider | None:
        return self._providers.get(name)

    def list(self) -> builtins.list[BaseProvider]:
        return list(self._providers.values())

    def list_names(self) -> builtins.list[str]:
        return list(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)


def build_registry(
    configs: Iterable[ProviderConfig] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    models_timeout: float | None = None,
    generate_timeout: float | None = None,
) -> ProviderRegistry:
    """Instantiate every known adapter with its stored configuration.

    Adapters without a stored configuration get their defaults (no key,
    disabled).
    """
    by_name = {config.name: config for config in configs or ()}
    registry = ProviderRegistry()

    for provider_cls in PROVIDER_CLASSES:
        registry.register(
            provider_cls(
                by_name.get(provider_cls.get_name()),
                transport=transport,
                models_timeout=models_timeout,
                generate_timeout=generate_timeout,
            )
        )
    return registry
