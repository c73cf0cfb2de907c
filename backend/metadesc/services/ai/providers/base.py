"""
Base Provider Implementation

Common functionality shared across all provider adapters: authenticated
requests, status/JSON handling, error-message extraction and the
fetch_models / generate_summary template methods. Concrete adapters only
describe their endpoints, request bodies and response shapes.
"""

import json
from enum import Enum
from typing import Any, ClassVar

import httpx
import structlog

from metadesc.core.exceptions import (
    ApiKeyMissingError,
    DecodeError,
    ParseError,
    ProviderAPIError,
    TransportError,
)
from metadesc.core.logging import redact_secrets
from metadesc.core.models import ModelDescriptor
from metadesc.services.ai.interface import AIProviderInterface, ProviderConfig
from metadesc.services.ai.prompts import DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH, build_summary_prompt

logger = structlog.get_logger()

UNKNOWN_API_ERROR = "Unknown API error occurred."
MAX_ERROR_MESSAGE_LEN = 500


class ErrorEnvelope(Enum):
    """Where a vendor puts the human-readable message in an error body."""

    NESTED = "error.message"  # {"error": {"message": "..."}}
    FLAT = "message"  # {"message": "..."}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)


def _nested_message(data: dict[str, Any]) -> str:
    error = data.get("error")
    if isinstance(error, dict):
        return _stringify(error.get("message"))
    if isinstance(error, str):
        return error.strip()
    return ""


def _flat_message(data: dict[str, Any]) -> str:
    return _stringify(data.get("message"))


_EXTRACTORS = {
    ErrorEnvelope.NESTED: (_nested_message, _flat_message),
    ErrorEnvelope.FLAT: (_flat_message, _nested_message),
}


def dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, returning None at the first missing step."""
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict) or step not in current:
            return None
        current = current[step]
    return current


def extract_error_message(envelope: ErrorEnvelope, data: Any, raw_body: str = "") -> str:
    """Pull the vendor's error text out of an error response.

    Tries the vendor's own envelope first, then the other known shape,
    then the raw body.
    """
    if isinstance(data, dict):
        for extractor in _EXTRACTORS[envelope]:
            message = extractor(data)
            if message:
                return message[:MAX_ERROR_MESSAGE_LEN]

    raw = raw_body.strip()
    if raw:
        return raw[:MAX_ERROR_MESSAGE_LEN]
    return UNKNOWN_API_ERROR


class BaseProvider(AIProviderInterface):
    """Base class for HTTP/JSON provider adapters.

    Subclasses set the class attributes below and implement
    parse_model_list, build_summary_request_body and parse_summary.
    """

    NAME: ClassVar[str] = ""
    TITLE: ClassVar[str] = ""
    API_KEY_URL: ClassVar[str] = ""
    API_BASE: ClassVar[str] = ""
    DEFAULT_MODEL: ClassVar[str] = ""

    MODELS_ENDPOINT: ClassVar[str] = "models"
    SUMMARY_ENDPOINT: ClassVar[str] = "chat/completions"
    ERROR_ENVELOPE: ClassVar[ErrorEnvelope] = ErrorEnvelope.NESTED

    # Roughly 120-160 characters of output
    MAX_OUTPUT_TOKENS: ClassVar[int] = 70
    TEMPERATURE: ClassVar[float] = 0.6

    MODELS_TIMEOUT: ClassVar[float] = 15.0
    GENERATE_TIMEOUT: ClassVar[float] = 30.0

    def __init__(
        self,
        config: ProviderConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        models_timeout: float | None = None,
        generate_timeout: float | None = None,
    ):
        """Initialize provider from config.

        Args:
            config: Provider configuration; defaults to an unconfigured one
            transport: Optional httpx transport (tests inject a MockTransport)
            models_timeout: Timeout for model listing, seconds
            generate_timeout: Timeout for summary generation, seconds
        """
        self.config = config or self.default_config()
        self._transport = transport
        self.models_timeout = models_timeout or self.MODELS_TIMEOUT
        self.generate_timeout = generate_timeout or self.GENERATE_TIMEOUT

    # -------------------------------------------------------------------------
    # Class Methods (no config needed)
    # -------------------------------------------------------------------------

    @classmethod
    def get_name(cls) -> str:
        return cls.NAME

    @classmethod
    def get_default_model(cls) -> str:
        return cls.DEFAULT_MODEL

    @classmethod
    def get_default_url(cls) -> str:
        return cls.API_BASE

    @classmethod
    def get_provider_info(cls) -> dict[str, Any]:
        """Return provider display info for settings screens."""
        return {
            "name": cls.NAME,
            "title": cls.TITLE,
            "api_key_url": cls.API_KEY_URL,
            "default_model": cls.DEFAULT_MODEL,
        }

    @classmethod
    def default_config(cls, **overrides: Any) -> ProviderConfig:
        """Build a ProviderConfig carrying this provider's hard-coded defaults."""
        values: dict[str, Any] = {
            "name": cls.NAME,
            "api_base_url": cls.API_BASE,
            "default_model": cls.DEFAULT_MODEL,
        }
        values.update(overrides)
        return ProviderConfig(**values)

    # -------------------------------------------------------------------------
    # Instance Methods
    # -------------------------------------------------------------------------

    @property
    def provider_name(self) -> str:
        return self.NAME

    @property
    def model_name(self) -> str:
        return self.config.model

    @property
    def api_base(self) -> str:
        base = self.config.api_base_url or self.API_BASE
        return base if base.endswith("/") else f"{base}/"

    def _check_api_key(self) -> None:
        if not self.config.has_api_key:
            raise ApiKeyMissingError(self.NAME, self.TITLE)

    def _auth_headers(self) -> dict[str, str]:
        """Authentication headers. Bearer token unless overridden."""
        return {"Authorization": f"Bearer {self.config.api_key}"}

    def _auth_params(self) -> dict[str, str]:
        """Authentication query parameters. None unless overridden."""
        return {}

    def _extra_headers(self) -> dict[str, str]:
        """Provider-specific non-auth headers."""
        return {}

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.api_base}{endpoint.lstrip('/')}"

    def _parse_error(self, what: str) -> ParseError:
        return ParseError(
            f"{self.TITLE} {what}",
            details={"provider": self.NAME},
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        timeout: float,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and return the decoded JSON object.

        Raises:
            ApiKeyMissingError: No key configured (nothing is sent)
            TransportError: Network failure or timeout
            ProviderAPIError: Non-2xx status
            DecodeError: 2xx body is not JSON
            ParseError: 2xx body is JSON but not an object
        """
        self._check_api_key()

        url = self._url(endpoint)
        headers = {
            "Accept": "application/json",
            **self._extra_headers(),
            **self._auth_headers(),
        }
        query = {**(params or {}), **self._auth_params()}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    params=query or None,
                    json=json_body,
                )
        except httpx.TimeoutException as e:
            logger.warning("provider_request_timeout", provider=self.NAME, endpoint=endpoint, timeout=timeout)
            raise TransportError(
                f"{self.TITLE} API request timed out.",
                details={"provider": self.NAME},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("provider_request_failed", provider=self.NAME, endpoint=endpoint, error=redact_secrets(str(e)))
            raise TransportError(
                f"{self.TITLE} API request failed: {redact_secrets(str(e))}",
                details={"provider": self.NAME},
            ) from e

        body = response.text

        if not response.is_success:
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            message = extract_error_message(self.ERROR_ENVELOPE, error_data, body)
            logger.error(
                "provider_api_error",
                provider=self.NAME,
                endpoint=endpoint,
                status=response.status_code,
                message=message,
            )
            raise ProviderAPIError(self.NAME, response.status_code, message)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("provider_json_decode_error", provider=self.NAME, endpoint=endpoint, status=response.status_code)
            raise DecodeError(
                "Failed to decode API response.",
                details={"provider": self.NAME, "status": response.status_code},
            ) from e

        if not isinstance(data, dict):
            logger.error("provider_response_not_object", provider=self.NAME, endpoint=endpoint)
            raise self._parse_error("response is not a JSON object.")

        return data

    # -------------------------------------------------------------------------
    # Template methods
    # -------------------------------------------------------------------------

    def models_params(self) -> dict[str, Any]:
        """Extra query parameters for the model listing call."""
        return {}

    def summary_endpoint(self) -> str:
        return self.SUMMARY_ENDPOINT

    def parse_model_list(self, data: dict[str, Any]) -> list[ModelDescriptor]:
        raise NotImplementedError

    def build_summary_request_body(self, prompt: str) -> dict[str, Any]:
        raise NotImplementedError

    def parse_summary(self, data: dict[str, Any]) -> str:
        raise NotImplementedError

    async def fetch_models(self) -> list[ModelDescriptor]:
        """Fetch and normalize the provider's text-capable models."""
        data = await self._request(
            "GET",
            self.MODELS_ENDPOINT,
            params=self.models_params(),
            timeout=self.models_timeout,
        )
        models = self.parse_model_list(data)

        logger.info("provider_models_fetched", provider=self.NAME, count=len(models))
        return models

    async def generate_summary(
        self,
        content: str,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> str:
        """Generate a meta description for content."""
        prompt = build_summary_prompt(
            content,
            template=self.config.custom_prompt_template,
            min_length=DEFAULT_MIN_LENGTH if min_length is None else min_length,
            max_length=DEFAULT_MAX_LENGTH if max_length is None else max_length,
        )

        logger.info(
            "provider_generate_summary_start",
            provider=self.NAME,
            model=self.model_name,
            content_len=len(content),
            custom_prompt=bool(self.config.custom_prompt_template),
        )

        data = await self._request(
            "POST",
            self.summary_endpoint(),
            json_body=self.build_summary_request_body(prompt),
            timeout=self.generate_timeout,
        )

        summary = self.parse_summary(data).strip()
        if not summary:
            raise self._parse_error("returned an empty summary.")

        logger.info(
            "provider_generate_summary_success",
            provider=self.NAME,
            model=self.model_name,
            summary_len=len(summary),
        )
        return summary
