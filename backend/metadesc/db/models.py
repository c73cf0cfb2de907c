"""
SQLAlchemy ORM models.

- Options: site-wide key-value settings (provider keys, models, prompts, flags)
- Post meta: per content item key-value data (meta descriptions)
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from metadesc.db.database import Base


class TimestampMixin:
    """Mixin for created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class OptionModel(Base, TimestampMixin):
    """A single named option. Values are stored as JSON."""

    __tablename__ = "options"

    name: Mapped[str] = mapped_column(String(191), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<Option {self.name}>"


class PostMetaModel(Base, TimestampMixin):
    """Key-value data attached to one content item."""

    __tablename__ = "post_meta"
    __table_args__ = (
        UniqueConstraint("post_id", "meta_key", name="uq_post_meta_post_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<PostMeta {self.post_id}:{self.meta_key}>"
