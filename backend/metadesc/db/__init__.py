"""
Database package initialization.
"""

from metadesc.db.database import (
    Base,
    DatabaseError,
    async_session_maker,
    close_db,
    drop_db,
    engine,
    get_db,
    init_db,
)
from metadesc.db.models import OptionModel, PostMetaModel

__all__ = [
    # Database
    "Base",
    "engine",
    "async_session_maker",
    "get_db",
    "init_db",
    "drop_db",
    "close_db",
    "DatabaseError",
    # Models
    "OptionModel",
    "PostMetaModel",
]
