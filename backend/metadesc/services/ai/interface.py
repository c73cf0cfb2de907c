"""
AI Provider Interface

Abstract base class defining the contract that all AI providers must
implement, and the configuration each provider instance is built from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from metadesc.core.models import ModelDescriptor


@dataclass(frozen=True)
class ProviderConfig:
    """Stored configuration of one provider.

    Read from the options store on every request; api_key is already
    decrypted here.
    """

    name: str
    api_base_url: str
    default_model: str
    api_key: str = ""
    selected_model: str = ""
    enabled: bool = False
    custom_prompt_template: str | None = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def model(self) -> str:
        """Selected model, falling back to the provider default."""
        return self.selected_model or self.default_model

    @property
    def is_usable(self) -> bool:
        """Both gates: explicitly enabled AND a key is present."""
        return self.enabled and self.has_api_key


class AIProviderInterface(ABC):
    """Abstract interface for AI providers.

    All provider adapters (Gemini, Mistral, OpenAI, Anthropic, Cohere)
    must implement this interface.
    """

    @classmethod
    @abstractmethod
    def get_name(cls) -> str:
        """Stable lowercase identifier, e.g. "mistral"."""
        pass

    @classmethod
    @abstractmethod
    def get_default_model(cls) -> str:
        """Model used when none is selected."""
        pass

    @abstractmethod
    async def fetch_models(self) -> list[ModelDescriptor]:
        """List the vendor's models that can generate text.

        Raises:
            ApiKeyMissingError, ProviderAPIError, DecodeError, ParseError, TransportError
        """
        pass

    @abstractmethod
    async def generate_summary(
        self,
        content: str,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> str:
        """Generate a trimmed meta description for content.

        Raises:
            ApiKeyMissingError, ProviderAPIError, DecodeError, ParseError, TransportError
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name being used."""
        pass
