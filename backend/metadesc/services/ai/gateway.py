"""
AI Gateway

Single entry point the API layer uses to reach a provider. Looks up the
adapter by name and delegates; adapter errors pass through unchanged.
"""

import structlog

from metadesc.core.exceptions import ProviderNotFoundError
from metadesc.core.models import ModelDescriptor
from metadesc.services.ai.providers import BaseProvider
from metadesc.services.ai.registry import ProviderRegistry

logger = structlog.get_logger()


class AIGateway:
    """Facade over a provider registry."""

    def __init__(self, registry: ProviderRegistry):
        """Initialize gateway.

        Args:
            registry: Registry built for the current request
        """
        self.registry = registry

    def get_provider(self, provider_name: str) -> BaseProvider:
        """Look up an adapter.

        Raises:
            ProviderNotFoundError: If no adapter has that name
        """
        provider = self.registry.get(provider_name)
        if provider is None:
            logger.warning("ai_provider_not_found", provider=provider_name)
            raise ProviderNotFoundError(provider_name)
        return provider

    async def fetch_models(self, provider_name: str) -> list[ModelDescriptor]:
        provider = self.get_provider(provider_name)
        return await provider.fetch_models()

    async def generate_summary(
        self,
        provider_name: str,
        content: str,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> str:
        provider = self.get_provider(provider_name)
        return await provider.generate_summary(content, min_length=min_length, max_length=max_length)
