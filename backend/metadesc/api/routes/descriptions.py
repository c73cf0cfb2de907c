"""
Description Routes

Per-post meta descriptions as edited in the post editor.
"""

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from metadesc.core.auth import User, require_capability
from metadesc.core.models import APIResponse, Capability, NonceAction
from metadesc.core.nonce import require_nonce
from metadesc.db import get_db
from metadesc.services.descriptions import DescriptionService

router = APIRouter()


class DescriptionUpdate(BaseModel):
    description: str = ""


@router.get("/{post_id}/description")
async def get_description(
    post_id: int = Path(..., ge=1),
    user: User = Depends(require_capability(Capability.EDIT_POSTS)),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    description = await DescriptionService(db).get(post_id)
    return APIResponse(success=True, data={"post_id": post_id, "description": description})


@router.put("/{post_id}/description")
async def save_description(
    request: DescriptionUpdate,
    post_id: int = Path(..., ge=1),
    user: User = Depends(require_nonce(NonceAction.SAVE_DESCRIPTION, Capability.EDIT_POSTS)),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    """Store the description. An empty value removes it."""
    description = await DescriptionService(db).save(post_id, request.description)
    await db.commit()
    return APIResponse(success=True, data={"post_id": post_id, "description": description})
