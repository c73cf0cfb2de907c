"""
Logging configuration with Wide Events / Canonical Log Lines pattern.

Each request accumulates one event dict (request, user, provider call,
error) and emits it once when the response is ready. Successful fast
requests are tail-sampled. Errors, slow requests, vendor calls and
settings writes are always kept.

References:
- https://charity.wtf/2019/02/05/logs-vs-structured-events/
- Stripe's "canonical log lines" pattern
"""

import logging
import random
import re
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from metadesc.core.config import settings

_request_event: ContextVar[dict[str, Any]] = ContextVar("request_event")
_request_start: ContextVar[float] = ContextVar("request_start", default=0.0)

# Gemini takes its key as ?key=...
_KEY_PARAM_RE = re.compile(r"([?&]key=)[^&\s\"']+", re.IGNORECASE)
_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+")

# Field names whose values are never logged
SECRET_FIELDS = frozenset({"api_key", "x-api-key", "authorization", "x-nonce", "nonce", "key"})

REDACTED = "[REDACTED]"
SAMPLE_RATE = 0.10
SLOW_REQUEST_MS = 2000
MAX_ERROR_MESSAGE = 500


def redact_secrets(value: Any) -> Any:
    """Redact API keys and bearer tokens from strings, dicts and lists."""
    if isinstance(value, str):
        return _BEARER_RE.sub(rf"\1{REDACTED}", _KEY_PARAM_RE.sub(rf"\1{REDACTED}", value))
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SECRET_FIELDS and v else redact_secrets(v)
            for k, v in value.items()
        }
    if isinstance(value, list | tuple):
        return [redact_secrets(item) for item in value]
    return value


def _set_path(target: dict[str, Any], dotted_key: str, value: Any) -> None:
    *parents, leaf = dotted_key.split(".")
    for part in parents:
        target = target.setdefault(part, {})
    target[leaf] = value


def enrich_event(**kwargs: Any) -> None:
    """
    Add fields to the current request's wide event.

        enrich_event(**{"ai.provider": "mistral", "ai.content_len": 812})

    Dotted keys are stored as nested objects. Outside a request this is a no-op.
    """
    event = _request_event.get(None)
    if event is None:
        return
    for key, value in kwargs.items():
        _set_path(event, key, value)


def init_request_event(
    request_id: str | None = None,
    method: str = "",
    path: str = "",
    client_ip: str = "",
    user_agent: str = "",
) -> dict[str, Any]:
    """Start the wide event for a request."""
    event: dict[str, Any] = {
        "request_id": request_id or uuid.uuid4().hex[:8],
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "http": {"method": method, "path": path, "client_ip": client_ip},
        "service": {
            "name": "meta-description-api",
            "version": settings.app_version,
            "environment": settings.environment,
        },
    }
    if user_agent:
        event["http"]["user_agent"] = user_agent[:200]

    _request_event.set(event)
    _request_start.set(time.monotonic())
    return event


def finalize_request_event(status_code: int, error: Exception | None = None) -> dict[str, Any]:
    """Stamp status, duration and outcome on the wide event."""
    event = _request_event.get({})

    event.setdefault("http", {})["status_code"] = status_code
    event["duration_ms"] = int((time.monotonic() - _request_start.get()) * 1000)
    event["outcome"] = "success" if status_code < 400 else "error"

    if error is not None:
        error_info = event.setdefault("error", {})
        error_info["type"] = type(error).__name__
        error_info["message"] = redact_secrets(str(error))[:MAX_ERROR_MESSAGE]

    return event


def should_sample(event: dict[str, Any]) -> bool:
    """
    Tail sampling decision for wide events.

    Kept: any 4xx/5xx, anything slower than SLOW_REQUEST_MS, every request
    that reached a vendor, and every non-GET settings call. The rest is
    sampled at SAMPLE_RATE.
    """
    http = event.get("http", {})
    if http.get("status_code", 200) >= 400:
        return True
    if event.get("duration_ms", 0) > SLOW_REQUEST_MS:
        return True
    if event.get("ai", {}).get("provider"):
        return True
    if "/settings" in http.get("path", "") and http.get("method") != "GET":
        return True
    return random.random() < SAMPLE_RATE


def add_request_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor to add request_id to all log entries."""
    request_id = _request_event.get({}).get("request_id")
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def redact_processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor that redacts secrets from every logged value."""
    return redact_secrets(event_dict)


def configure_logging(json_logs: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog for wide events logging.

    Args:
        json_logs: JSON output for production, colored console otherwise.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_request_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        redact_processor,
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # uvicorn and SQLAlchemy log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def emit_wide_event(event: dict[str, Any]) -> None:
    """Emit the canonical log line for a request, subject to sampling."""
    if not should_sample(event):
        return

    logger = structlog.get_logger("wide_event")
    status_code = event.get("http", {}).get("status_code", 200)

    if status_code >= 500:
        logger.error("request_completed", **event)
    elif status_code >= 400:
        logger.warning("request_completed", **event)
    else:
        logger.info("request_completed", **event)
