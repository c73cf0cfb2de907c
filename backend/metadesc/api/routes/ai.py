"""
AI Routes

Endpoints used by the post editor and the settings screen.

Routes:
- POST /generate-summary  - Generate a meta description (edit_posts + nonce)
- POST /fetch-models      - List a provider's models (manage_options + nonce)
- GET  /providers         - Providers offered for generation (edit_posts)

Checks run in this order: authentication, nonce, capability, input
validation, then the gateway.
"""

import httpx
import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from metadesc.api.middleware import add_provider_to_wide_event, add_user_to_wide_event
from metadesc.core.auth import User, require_capability
from metadesc.core.config import settings
from metadesc.core.exceptions import ValidationError
from metadesc.core.models import APIResponse, Capability, NonceAction
from metadesc.core.nonce import require_nonce
from metadesc.core.sanitize import sanitize_text_field
from metadesc.db import get_db
from metadesc.services.ai import AIGateway, ProviderConfigService, build_registry
from metadesc.services.ai.providers import get_provider_class

logger = structlog.get_logger()

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================

# Fields default to "" so that missing input is reported by the handler with
# the regular envelope, after the nonce and capability checks.


class GenerateSummaryRequest(BaseModel):
    content: str = ""
    provider: str = ""


class FetchModelsRequest(BaseModel):
    provider: str = ""


# ============================================================================
# Dependencies
# ============================================================================


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for outbound vendor calls. None means real network."""
    return None


async def get_gateway(db: AsyncSession, transport: httpx.AsyncBaseTransport | None) -> AIGateway:
    """Build a gateway over a registry loaded from the stored settings."""
    configs = await ProviderConfigService(db).load_all()
    registry = build_registry(
        configs,
        transport=transport,
        models_timeout=settings.models_timeout_seconds,
        generate_timeout=settings.generate_timeout_seconds,
    )
    return AIGateway(registry)


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/generate-summary")
async def generate_summary(
    request: GenerateSummaryRequest,
    user: User = Depends(require_nonce(NonceAction.AJAX, Capability.EDIT_POSTS)),
    db: AsyncSession = Depends(get_db),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> APIResponse:
    """Generate a meta description for the given content."""
    add_user_to_wide_event(user)

    content = sanitize_text_field(request.content)
    provider_name = sanitize_text_field(request.provider)

    if not content:
        raise ValidationError("Content cannot be empty.")

    gateway = await get_gateway(db, transport)
    provider = gateway.registry.get(provider_name) if provider_name else None
    if provider is None or not provider.config.is_usable:
        logger.info("ai_provider_not_usable", provider=provider_name)
        raise ValidationError("Invalid AI provider specified.")

    add_provider_to_wide_event(name=provider_name, model=provider.model_name, operation="generate_summary")
    logger.info("ai_generate_summary_start", provider=provider_name, content_len=len(content))

    summary = await gateway.generate_summary(
        provider_name,
        content,
        min_length=settings.description_min_length,
        max_length=settings.description_max_length,
    )

    logger.info("ai_generate_summary_success", provider=provider_name, summary_len=len(summary))
    return APIResponse(success=True, data={"summary": summary})


@router.post("/fetch-models")
async def fetch_models(
    request: FetchModelsRequest,
    user: User = Depends(require_nonce(NonceAction.AJAX, Capability.MANAGE_OPTIONS)),
    db: AsyncSession = Depends(get_db),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> APIResponse:
    """List the text-capable models of a registered provider."""
    add_user_to_wide_event(user)

    provider_name = sanitize_text_field(request.provider)
    if not provider_name or get_provider_class(provider_name) is None:
        raise ValidationError("Invalid API type specified.")

    add_provider_to_wide_event(name=provider_name, operation="fetch_models")

    gateway = await get_gateway(db, transport)
    models = await gateway.fetch_models(provider_name)

    return APIResponse(
        success=True,
        data={"models": [model.model_dump() for model in models]},
    )


@router.get("/providers")
async def list_usable_providers(
    user: User = Depends(require_capability(Capability.EDIT_POSTS)),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    """Providers offered in the editor: enabled AND with a stored key."""
    configs = await ProviderConfigService(db).load_all()

    providers = []
    for config in configs:
        if not config.is_usable:
            continue
        provider_cls = get_provider_class(config.name)
        providers.append(
            {
                "name": config.name,
                "title": provider_cls.TITLE if provider_cls else config.name,
                "model": config.model,
            }
        )

    return APIResponse(
        success=True,
        data={
            "providers": providers,
            "min_length": settings.description_min_length,
            "max_length": settings.description_max_length,
        },
    )
