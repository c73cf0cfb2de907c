"""
Provider Adapters Package

Contains implementations for each supported AI provider.
To add a new provider:
1. Create a new module implementing BaseProvider
2. Import it here and append it to PROVIDER_CLASSES
"""

from typing import Any

from metadesc.services.ai.providers.anthropic import AnthropicProvider
from metadesc.services.ai.providers.base import BaseProvider, ErrorEnvelope, extract_error_message
from metadesc.services.ai.providers.cohere import CohereProvider
from metadesc.services.ai.providers.gemini import GeminiProvider
from metadesc.services.ai.providers.mistral import MistralProvider
from metadesc.services.ai.providers.openai import OpenAIProvider

# Explicit, ordered list of adapter classes. Order is the display order.
PROVIDER_CLASSES: tuple[type[BaseProvider], ...] = (
    GeminiProvider,
    MistralProvider,
    OpenAIProvider,
    AnthropicProvider,
    CohereProvider,
)


def get_provider_class(name: str) -> type[BaseProvider] | None:
    for provider_cls in PROVIDER_CLASSES:
        if provider_cls.get_name() == name:
            return provider_cls
    return None


def get_all_providers() -> dict[str, dict[str, Any]]:
    """Return display info for every known provider, keyed by name."""
    return {cls.get_name(): cls.get_provider_info() for cls in PROVIDER_CLASSES}


__all__ = [
    "PROVIDER_CLASSES",
    "AnthropicProvider",
    "BaseProvider",
    "CohereProvider",
    "ErrorEnvelope",
    "GeminiProvider",
    "MistralProvider",
    "OpenAIProvider",
    "extract_error_message",
    "get_all_providers",
    "get_provider_class",
]
