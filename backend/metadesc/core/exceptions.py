"""
Application exception hierarchy.

Provider adapters raise these for every expected failure mode; the gateway
lets them pass through untouched and the API layer is the only place that
turns an error kind into an HTTP status code.
"""

from typing import Any


class MetaDescriptionError(Exception):
    """Base class for all application errors."""

    code = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Provider / gateway errors
# =============================================================================


class ApiKeyMissingError(MetaDescriptionError):
    """The provider has no API key configured. No HTTP call was made."""

    code = "api_key_missing"

    def __init__(self, provider: str, title: str | None = None):
        super().__init__(
            f"API key for {title or provider.capitalize()} is not set.",
            details={"provider": provider},
        )
        self.provider = provider


class ProviderAPIError(MetaDescriptionError):
    """The vendor answered with a non-2xx status."""

    code = "api_error"

    def __init__(self, provider: str, status: int, message: str):
        super().__init__(message, details={"provider": provider, "status": status})
        self.provider = provider
        self.status = status


class DecodeError(MetaDescriptionError):
    """The vendor response body could not be decoded as JSON."""

    code = "json_decode_error"


class ParseError(MetaDescriptionError):
    """Well-formed JSON that lacks the expected structure."""

    code = "parse_error"


class TransportError(MetaDescriptionError):
    """Network failure or timeout talking to the vendor."""

    code = "transport_error"


class ProviderNotFoundError(MetaDescriptionError):
    """No adapter is registered under the requested name."""

    code = "provider_not_found"

    def __init__(self, provider: str):
        super().__init__(
            f'AI provider "{provider}" is not registered or supported.',
            details={"provider": provider},
        )
        self.provider = provider


# =============================================================================
# Request errors
# =============================================================================


class ValidationError(MetaDescriptionError):
    """Caller input failed validation."""

    code = "validation_error"


class AuthenticationError(MetaDescriptionError):
    """Caller is not authenticated."""

    code = "authentication_error"


class InvalidTokenError(MetaDescriptionError):
    """Anti-forgery token is missing, expired or bound to another user/action."""

    code = "invalid_nonce"

    def __init__(self, message: str = "Invalid nonce."):
        super().__init__(message)


class PermissionDeniedError(MetaDescriptionError):
    """Caller lacks the capability required by the endpoint."""

    code = "permission_denied"

    def __init__(self, message: str = "Permission denied."):
        super().__init__(message)


# =============================================================================
# Storage errors
# =============================================================================


class DatabaseError(MetaDescriptionError):
    """The options or post-meta store could not be read or written."""

    code = "database_error"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
