"""
AI Provider Configuration Service

Reads and writes per-provider settings in the options store:

    <prefix><provider>_api_key                 Fernet-encrypted key
    <prefix><provider>_model                   selected model id
    <prefix><provider>_custom_summary_prompt   optional prompt template
    <prefix><provider>_provider_enabled        bool
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from metadesc.core.exceptions import ProviderNotFoundError
from metadesc.core.sanitize import sanitize_text_field, sanitize_textarea_field
from metadesc.services.ai.encryption import encrypt_secret, try_decrypt_secret
from metadesc.services.ai.interface import ProviderConfig
from metadesc.services.ai.providers import PROVIDER_CLASSES, BaseProvider, get_provider_class
from metadesc.services.options import OptionsStore

logger = structlog.get_logger()

FIELD_API_KEY = "api_key"
FIELD_MODEL = "model"
FIELD_CUSTOM_PROMPT = "custom_summary_prompt"
FIELD_ENABLED = "provider_enabled"

PROVIDER_FIELDS = (FIELD_API_KEY, FIELD_MODEL, FIELD_CUSTOM_PROMPT, FIELD_ENABLED)


def option_name(provider: str, field: str) -> str:
    return f"{provider}_{field}"


class ProviderConfigService:
    """Service for managing provider configurations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.options = OptionsStore(db)

    def _provider_class(self, name: str) -> type[BaseProvider]:
        provider_cls = get_provider_class(name)
        if provider_cls is None:
            raise ProviderNotFoundError(name)
        return provider_cls

    async def load(self, name: str) -> ProviderConfig:
        """Load one provider's configuration with the API key decrypted.

        Raises:
            ProviderNotFoundError: Unknown provider name
        """
        provider_cls = self._provider_class(name)
        values = await self.options.get_many(option_name(name, field) for field in PROVIDER_FIELDS)

        def value(field: str):
            return values.get(option_name(name, field))

        return provider_cls.default_config(
            api_key=try_decrypt_secret(value(FIELD_API_KEY) or "", provider=name),
            selected_model=value(FIELD_MODEL) or "",
            enabled=bool(value(FIELD_ENABLED)),
            custom_prompt_template=value(FIELD_CUSTOM_PROMPT) or None,
        )

    async def load_all(self) -> list[ProviderConfig]:
        """Load configurations for every known provider, in display order."""
        return [await self.load(provider_cls.get_name()) for provider_cls in PROVIDER_CLASSES]

    async def save_provider(
        self,
        name: str,
        api_key: str | None = None,
        model: str | None = None,
        custom_prompt: str | None = None,
    ) -> ProviderConfig:
        """Update a provider's stored settings.

        None leaves a field unchanged; an empty string clears it. When a key
        is stored and no model is selected, the provider default is selected.

        Raises:
            ProviderNotFoundError: Unknown provider name
        """
        provider_cls = self._provider_class(name)

        if api_key is not None:
            api_key = sanitize_text_field(api_key)
            if api_key:
                await self.options.set(option_name(name, FIELD_API_KEY), encrypt_secret(api_key))
            else:
                await self.options.delete(option_name(name, FIELD_API_KEY))

        if model is not None:
            model = sanitize_text_field(model)
            if model:
                await self.options.set(option_name(name, FIELD_MODEL), model)
            else:
                await self.options.delete(option_name(name, FIELD_MODEL))

        if custom_prompt is not None:
            custom_prompt = sanitize_textarea_field(custom_prompt)
            if custom_prompt:
                await self.options.set(option_name(name, FIELD_CUSTOM_PROMPT), custom_prompt)
            else:
                await self.options.delete(option_name(name, FIELD_CUSTOM_PROMPT))

        config = await self.load(name)
        if config.has_api_key and not config.selected_model:
            await self.options.set(option_name(name, FIELD_MODEL), provider_cls.get_default_model())
            config = await self.load(name)

        logger.info(
            "ai_provider_settings_saved",
            provider=name,
            has_api_key=config.has_api_key,
            model=config.model,
            custom_prompt=bool(config.custom_prompt_template),
        )
        return config

    async def set_enabled(self, enabled: dict[str, bool]) -> list[ProviderConfig]:
        """Set the enabled flag of several providers at once.

        Providers not named keep their current flag.

        Raises:
            ProviderNotFoundError: If any name is unknown (nothing is written)
        """
        for name in enabled:
            self._provider_class(name)

        for name, is_enabled in enabled.items():
            await self.options.set(option_name(name, FIELD_ENABLED), bool(is_enabled))
            logger.info("ai_provider_toggled", provider=name, enabled=bool(is_enabled))

        return await self.load_all()
