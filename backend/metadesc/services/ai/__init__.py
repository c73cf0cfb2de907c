"""
AI Service Package

Multi-provider summary gateway with:
- Provider adapters (Gemini, Mistral, OpenAI, Anthropic, Cohere)
- Per-request provider registry built from stored settings
- Encrypted API key storage
"""

from metadesc.services.ai.config_service import ProviderConfigService
from metadesc.services.ai.gateway import AIGateway
from metadesc.services.ai.interface import AIProviderInterface, ProviderConfig
from metadesc.services.ai.registry import ProviderRegistry, build_registry

__all__ = [
    "AIGateway",
    "AIProviderInterface",
    "ProviderConfig",
    "ProviderConfigService",
    "ProviderRegistry",
    "build_registry",
]
