"""
Gemini Provider

Google Generative Language API (v1beta). Authenticates with a `key` query
parameter instead of an Authorization header.
"""

from typing import Any

from metadesc.core.models import ModelDescriptor
from metadesc.services.ai.providers.base import BaseProvider, ErrorEnvelope, dig

GENERATE_METHOD = "generateContent"
LEGACY_DISPLAY_PREFIX = "Gemini 1.0"


class GeminiProvider(BaseProvider):
    """Google Gemini adapter."""

    NAME = "gemini"
    TITLE = "Gemini"
    API_KEY_URL = "https://aistudio.google.com/app/apikey"
    API_BASE = "https://generativelanguage.googleapis.com/v1beta/"
    DEFAULT_MODEL = "gemini-2.0-flash"

    ERROR_ENVELOPE = ErrorEnvelope.NESTED
    MAX_OUTPUT_TOKENS = 90

    def _auth_headers(self) -> dict[str, str]:
        return {}

    def _auth_params(self) -> dict[str, str]:
        return {"key": self.config.api_key}

    def summary_endpoint(self) -> str:
        return f"models/{self.model_name}:{GENERATE_METHOD}"

    def parse_model_list(self, data: dict[str, Any]) -> list[ModelDescriptor]:
        models = data.get("models")
        if not isinstance(models, list):
            raise self._parse_error('model list is missing the "models" array.')

        result = []
        for model in models:
            if not isinstance(model, dict):
                continue
            methods = model.get("supportedGenerationMethods") or []
            if GENERATE_METHOD not in methods:
                continue
            display_name = model.get("displayName") or ""
            if display_name.startswith(LEGACY_DISPLAY_PREFIX):
                continue

            model_id = (model.get("name") or "").removeprefix("models/")
            if not model_id:
                continue
            result.append(ModelDescriptor(id=model_id, display_name=display_name or model_id))
        return result

    def build_summary_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self.MAX_OUTPUT_TOKENS,
                "temperature": self.TEMPERATURE,
            },
        }

    def parse_summary(self, data: dict[str, Any]) -> str:
        text = dig(data, "candidates", 0, "content", "parts", 0, "text")
        if not isinstance(text, str):
            raise self._parse_error("response missing expected summary data or invalid format.")
        return text
