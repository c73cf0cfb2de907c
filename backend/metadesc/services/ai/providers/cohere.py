"""
Cohere Provider

Chat runs on the v2 API; the model listing only exists on v1, so the models
endpoint is an absolute URL.
"""

from typing import Any

from metadesc.core.models import ModelDescriptor
from metadesc.services.ai.providers.base import BaseProvider, ErrorEnvelope, dig

CHAT_ENDPOINT = "chat"


class CohereProvider(BaseProvider):
    """Cohere Command adapter."""

    NAME = "cohere"
    TITLE = "Cohere"
    API_KEY_URL = "https://dashboard.cohere.com/api-keys"
    API_BASE = "https://api.cohere.com/v2/"
    DEFAULT_MODEL = "command-a-03-2025"

    MODELS_ENDPOINT = "https://api.cohere.com/v1/models"
    SUMMARY_ENDPOINT = CHAT_ENDPOINT
    ERROR_ENVELOPE = ErrorEnvelope.FLAT
    MAX_OUTPUT_TOKENS = 150

    def models_params(self) -> dict[str, Any]:
        return {"endpoint": CHAT_ENDPOINT}

    def parse_model_list(self, data: dict[str, Any]) -> list[ModelDescriptor]:
        models = data.get("models")
        if not isinstance(models, list):
            raise self._parse_error('model list is missing the "models" array.')

        result = []
        for model in models:
            if not isinstance(model, dict) or not model.get("name"):
                continue
            if CHAT_ENDPOINT not in (model.get("endpoints") or []):
                continue
            result.append(ModelDescriptor(id=model["name"], display_name=model["name"]))
        return result

    def build_summary_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.MAX_OUTPUT_TOKENS,
            "temperature": self.TEMPERATURE,
            "stream": False,
        }

    def parse_summary(self, data: dict[str, Any]) -> str:
        if dig(data, "message", "content", 0, "type") != "text":
            raise self._parse_error("response missing expected summary data or invalid format.")
        text = dig(data, "message", "content", 0, "text")
        if not isinstance(text, str):
            raise self._parse_error("response missing expected summary data or invalid format.")
        return text
