"""
Settings Routes

Provider keys, model selection, custom prompts and enable flags, plus the
front page description. All endpoints need manage_options; writes also need
a nonce.

Routes:
- GET /                   - Full settings view (keys never returned)
- PUT /providers/{name}   - Update one provider
- PUT /general            - Enable/disable providers, front page description
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from metadesc.api.middleware import add_provider_to_wide_event
from metadesc.core.auth import User, require_capability
from metadesc.core.models import APIResponse, Capability, NonceAction
from metadesc.core.nonce import require_nonce
from metadesc.db import get_db
from metadesc.services.ai import ProviderConfig, ProviderConfigService
from metadesc.services.ai.prompts import get_default_prompt_template
from metadesc.services.ai.providers import get_provider_class
from metadesc.services.descriptions import DescriptionService

logger = structlog.get_logger()

router = APIRouter()

MASKED_KEY = "***"


class ProviderSettingsUpdate(BaseModel):
    """Absent fields are left unchanged; an empty string clears the field."""
    api_key: str | None = None
    model: str | None = None
    custom_summary_prompt: str | None = None


class GeneralSettingsUpdate(BaseModel):
    enabled: dict[str, bool] = Field(default_factory=dict)
    front_page_description: str | None = None


def provider_view(config: ProviderConfig) -> dict:
    """Settings-screen view of a provider. The key is only ever masked."""
    provider_cls = get_provider_class(config.name)
    info = provider_cls.get_provider_info() if provider_cls else {"name": config.name}
    return {
        **info,
        "api_key": MASKED_KEY if config.has_api_key else "",
        "has_api_key": config.has_api_key,
        "model": config.model,
        "selected_model": config.selected_model,
        "enabled": config.enabled,
        "custom_summary_prompt": config.custom_prompt_template or "",
    }


@router.get("")
async def read_settings(
    user: User = Depends(require_capability(Capability.MANAGE_OPTIONS)),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    configs = await ProviderConfigService(db).load_all()
    front_page = await DescriptionService(db).get_front_page()

    return APIResponse(
        success=True,
        data={
            "providers": [provider_view(config) for config in configs],
            "default_prompt": get_default_prompt_template(),
            "front_page_description": front_page,
        },
    )


@router.put("/providers/{name}")
async def update_provider_settings(
    name: str,
    request: ProviderSettingsUpdate,
    user: User = Depends(require_nonce(NonceAction.AJAX, Capability.MANAGE_OPTIONS)),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    add_provider_to_wide_event(name=name, operation="update_settings")

    config = await ProviderConfigService(db).save_provider(
        name,
        api_key=request.api_key,
        model=request.model,
        custom_prompt=request.custom_summary_prompt,
    )
    await db.commit()

    return APIResponse(success=True, data=provider_view(config))


@router.put("/general")
async def update_general_settings(
    request: GeneralSettingsUpdate,
    user: User = Depends(require_nonce(NonceAction.AJAX, Capability.MANAGE_OPTIONS)),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    configs = await ProviderConfigService(db).set_enabled(request.enabled)

    descriptions = DescriptionService(db)
    if request.front_page_description is not None:
        front_page = await descriptions.save_front_page(request.front_page_description)
    else:
        front_page = await descriptions.get_front_page()
    await db.commit()

    logger.info("general_settings_saved", enabled=request.enabled)
    return APIResponse(
        success=True,
        data={
            "providers": [provider_view(config) for config in configs],
            "front_page_description": front_page,
        },
    )
