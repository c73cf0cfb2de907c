"""
Core package initialization.
"""

from metadesc.core.config import Settings, get_settings, settings
from metadesc.core.models import (
    APIResponse,
    Capability,
    ModelDescriptor,
    NonceAction,
    Role,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "settings",
    # Enums
    "Role",
    "Capability",
    "NonceAction",
    # Models
    "ModelDescriptor",
    "APIResponse",
]
