"""
Wide Events Middleware for FastAPI.

Every request except health probes gets one canonical log line. Routes
attach the caller and the vendor call they make:

    add_user_to_wide_event(user)
    add_provider_to_wide_event(name="mistral", model="mistral-small-latest", operation="generate_summary")

The request id (taken from X-Request-ID or generated) is echoed back in the
response headers so a client report can be matched to its log line.
"""

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from metadesc.core.auth import User
from metadesc.core.logging import (
    emit_wide_event,
    enrich_event,
    finalize_request_event,
    init_request_event,
)

REQUEST_ID_HEADER = "X-Request-ID"


class WideEventMiddleware(BaseHTTPMiddleware):
    """Captures a wide event for every request except health probes."""

    SKIP_PATHS = frozenset({"/api/health", "/api/ready", "/favicon.ico"})

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        event = init_request_event(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            method=request.method,
            path=request.url.path,
            client_ip=client_ip(request),
            user_agent=request.headers.get("user-agent", ""),
        )

        status_code = 500
        error: Exception | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = event["request_id"]
            return response
        except Exception as e:
            error = e
            raise
        finally:
            emit_wide_event(finalize_request_event(status_code, error))


def client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if real_ip := request.headers.get("x-real-ip"):
        return real_ip
    return request.client.host if request.client else "unknown"


def add_user_to_wide_event(user: User) -> None:
    enrich_event(user={"id": user.id, "roles": list(user.roles), "is_admin": user.is_admin})


def add_provider_to_wide_event(name: str, model: str | None = None, operation: str | None = None) -> None:
    """Attach the vendor call to the wide event. Never pass the API key."""
    enrich_event(**{"ai.provider": name, "ai.model": model, "ai.operation": operation})
