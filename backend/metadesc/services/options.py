"""
Options Store

Key-value access to the options table. Every key is namespaced with the
configured option prefix, so callers pass the bare field name:

    store = OptionsStore(db)
    await store.get("mistral_api_key")      # reads "<prefix>mistral_api_key"
"""

from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from metadesc.core.config import settings
from metadesc.db import OptionModel

logger = structlog.get_logger()


class OptionsStore:
    """Read/write access to prefixed options."""

    def __init__(self, db: AsyncSession, prefix: str | None = None):
        self.db = db
        self.prefix = settings.option_prefix if prefix is None else prefix

    def key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    async def get(self, name: str, default: Any = None) -> Any:
        """Get an option value, or default when it does not exist."""
        result = await self.db.execute(
            select(OptionModel.value).where(OptionModel.name == self.key(name))
        )
        row = result.first()
        if row is None or row[0] is None:
            return default
        return row[0]

    async def get_many(self, names: Iterable[str]) -> dict[str, Any]:
        """Fetch several options in one query. Missing names are omitted."""
        keys = {self.key(name): name for name in names}
        if not keys:
            return {}
        result = await self.db.execute(
            select(OptionModel.name, OptionModel.value).where(OptionModel.name.in_(keys))
        )
        return {keys[full_name]: value for full_name, value in result.all()}

    async def set(self, name: str, value: Any) -> None:
        """Insert or update an option."""
        full_name = self.key(name)
        option = await self.db.get(OptionModel, full_name)
        if option is None:
            self.db.add(OptionModel(name=full_name, value=value))
        else:
            option.value = value
        await self.db.flush()

    async def delete(self, name: str) -> bool:
        """Delete an option. Returns True if it existed."""
        result = await self.db.execute(
            delete(OptionModel).where(OptionModel.name == self.key(name))
        )
        await self.db.flush()
        return bool(result.rowcount)
