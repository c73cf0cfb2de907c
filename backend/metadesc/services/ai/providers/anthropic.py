"""
Anthropic Provider

Messages API. Authenticates with `x-api-key` and pins `anthropic-version`.
"""

from typing import Any

from metadesc.core.models import ModelDescriptor
from metadesc.services.ai.providers.base import BaseProvider, ErrorEnvelope, dig

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(BaseProvider):
    """Anthropic Claude adapter."""

    NAME = "anthropic"
    TITLE = "Anthropic"
    API_KEY_URL = "https://console.anthropic.com/settings/keys"
    API_BASE = "https://api.anthropic.com/v1/"
    DEFAULT_MODEL = "claude-3-5-haiku-latest"

    SUMMARY_ENDPOINT = "messages"
    ERROR_ENVELOPE = ErrorEnvelope.NESTED
    MAX_OUTPUT_TOKENS = 150

    def _auth_headers(self) -> dict[str, str]:
        return {"x-api-key": self.config.api_key}

    def _extra_headers(self) -> dict[str, str]:
        return {"anthropic-version": ANTHROPIC_VERSION}

    def parse_model_list(self, data: dict[str, Any]) -> list[ModelDescriptor]:
        models = data.get("data")
        if not isinstance(models, list):
            raise self._parse_error('model list is missing the "data" array.')

        result = []
        for model in models:
            if not isinstance(model, dict) or not model.get("id"):
                continue
            result.append(
                ModelDescriptor(id=model["id"], display_name=model.get("display_name") or model["id"])
            )
        return result

    def build_summary_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.MAX_OUTPUT_TOKENS,
            "temperature": self.TEMPERATURE,
        }

    def parse_summary(self, data: dict[str, Any]) -> str:
        if dig(data, "content", 0, "type") != "text":
            raise self._parse_error("response missing expected summary data or invalid format.")
        text = dig(data, "content", 0, "text")
        if not isinstance(text, str):
            raise self._parse_error("response missing expected summary data or invalid format.")
        return text
