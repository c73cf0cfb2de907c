"""
Mistral Provider
"""

from typing import Any

from metadesc.services.ai.providers.base import ErrorEnvelope
from metadesc.services.ai.providers.openai import ChatCompletionsProvider


class MistralProvider(ChatCompletionsProvider):
    """Mistral adapter (OpenAI-compatible chat completions, flat error body)."""

    NAME = "mistral"
    TITLE = "Mistral"
    API_KEY_URL = "https://console.mistral.ai/api-keys"
    API_BASE = "https://api.mistral.ai/v1/"
    DEFAULT_MODEL = "mistral-small-latest"

    ERROR_ENVELOPE = ErrorEnvelope.FLAT
    MAX_OUTPUT_TOKENS = 70

    def include_model(self, model: dict[str, Any]) -> bool:
        # Embedding and moderation models report completion_chat: false
        capabilities = model.get("capabilities")
        if not isinstance(capabilities, dict):
            return True
        return capabilities.get("completion_chat") is not False
