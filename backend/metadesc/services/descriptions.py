"""
Description Service

Stores the meta description of each content item in post meta, plus the
site-wide front page description kept in the options store.
"""

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from metadesc.core.sanitize import sanitize_text_field
from metadesc.db import PostMetaModel
from metadesc.services.options import OptionsStore

logger = structlog.get_logger()

META_KEY = "_meta_description"
FRONT_PAGE_OPTION = "front_page"


class DescriptionService:
    """CRUD for meta descriptions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.options = OptionsStore(db)

    async def get(self, post_id: int) -> str:
        """Return the stored description, or an empty string."""
        result = await self.db.execute(
            select(PostMetaModel.meta_value).where(
                PostMetaModel.post_id == post_id,
                PostMetaModel.meta_key == META_KEY,
            )
        )
        value = result.scalar_one_or_none()
        return value or ""

    async def save(self, post_id: int, description: str | None) -> str:
        """Sanitize and store a description. An empty value deletes it.

        Returns:
            The value actually stored ("" when deleted)
        """
        value = sanitize_text_field(description)

        if not value:
            await self.delete(post_id)
            return ""

        result = await self.db.execute(
            select(PostMetaModel).where(
                PostMetaModel.post_id == post_id,
                PostMetaModel.meta_key == META_KEY,
            )
        )
        meta = result.scalar_one_or_none()
        if meta is None:
            self.db.add(PostMetaModel(post_id=post_id, meta_key=META_KEY, meta_value=value))
        else:
            meta.meta_value = value
        await self.db.flush()

        logger.info("description_saved", post_id=post_id, length=len(value))
        return value

    async def delete(self, post_id: int) -> bool:
        result = await self.db.execute(
            delete(PostMetaModel).where(
                PostMetaModel.post_id == post_id,
                PostMetaModel.meta_key == META_KEY,
            )
        )
        await self.db.flush()
        deleted = bool(result.rowcount)
        if deleted:
            logger.info("description_deleted", post_id=post_id)
        return deleted

    async def get_front_page(self) -> str:
        return await self.options.get(FRONT_PAGE_OPTION, "") or ""

    async def save_front_page(self, description: str | None) -> str:
        value = sanitize_text_field(description)
        if value:
            await self.options.set(FRONT_PAGE_OPTION, value)
        else:
            await self.options.delete(FRONT_PAGE_OPTION)
        return value
