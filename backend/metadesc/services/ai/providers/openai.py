"""
OpenAI Provider

Also the base for vendors that speak the OpenAI chat-completions dialect
(Mistral).
"""

from typing import Any

from metadesc.core.models import ModelDescriptor
from metadesc.services.ai.providers.base import BaseProvider, ErrorEnvelope, dig


class ChatCompletionsProvider(BaseProvider):
    """Shared request/response handling for `chat/completions` APIs."""

    SUMMARY_ENDPOINT = "chat/completions"

    def include_model(self, model: dict[str, Any]) -> bool:
        return True

    def parse_model_list(self, data: dict[str, Any]) -> list[ModelDescriptor]:
        models = data.get("data")
        if not isinstance(models, list):
            raise self._parse_error('model list is missing the "data" array.')

        return [
            ModelDescriptor(id=model["id"], display_name=model["id"])
            for model in models
            if isinstance(model, dict)
            and isinstance(model.get("id"), str)
            and model["id"]
            and self.include_model(model)
        ]

    def build_summary_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.MAX_OUTPUT_TOKENS,
            "temperature": self.TEMPERATURE,
        }

    def parse_summary(self, data: dict[str, Any]) -> str:
        text = dig(data, "choices", 0, "message", "content")
        if not isinstance(text, str):
            raise self._parse_error("response missing expected summary data or invalid format.")
        return text


class OpenAIProvider(ChatCompletionsProvider):
    """OpenAI adapter. Only GPT chat models are offered."""

    NAME = "openai"
    TITLE = "OpenAI"
    API_KEY_URL = "https://platform.openai.com/api-keys"
    API_BASE = "https://api.openai.com/v1/"
    DEFAULT_MODEL = "gpt-4o-mini"

    ERROR_ENVELOPE = ErrorEnvelope.NESTED
    MAX_OUTPUT_TOKENS = 70

    MODEL_PREFIXES = ("gpt-3.5", "gpt-4")

    def include_model(self, model: dict[str, Any]) -> bool:
        return model["id"].startswith(self.MODEL_PREFIXES)
