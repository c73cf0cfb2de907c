"""
Core models and types shared across the service.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    ADMINISTRATOR = "administrator"
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"


class Capability(str, Enum):
    EDIT_POSTS = "edit_posts"
    MANAGE_OPTIONS = "manage_options"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.ADMINISTRATOR: frozenset({Capability.MANAGE_OPTIONS, Capability.EDIT_POSTS}),
    Role.EDITOR: frozenset({Capability.EDIT_POSTS}),
    Role.AUTHOR: frozenset({Capability.EDIT_POSTS}),
    Role.CONTRIBUTOR: frozenset({Capability.EDIT_POSTS}),
    Role.SUBSCRIBER: frozenset(),
}


class NonceAction(str, Enum):
    """Actions an anti-forgery token can be bound to."""

    AJAX = "meta_description_ajax_actions"
    SAVE_DESCRIPTION = "meta_description_save_description"


# =============================================================================
# Base Models
# =============================================================================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class ModelDescriptor(BaseSchema):
    """A model offered by a provider, normalized across vendors."""
    id: str
    display_name: str


# =============================================================================
# API Response Models
# =============================================================================


class APIResponse(BaseSchema):
    """Success envelope. Failures use the same shape with data={"message": ...}."""
    success: bool = True
    data: Any = None
