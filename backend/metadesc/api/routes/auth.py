"""
Authentication routes.

Access tokens are issued elsewhere; this module only provides:
- /me for the current user and capabilities
- /nonce for anti-forgery tokens bound to the user and an action
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from metadesc.core.auth import User, get_current_user
from metadesc.core.config import settings
from metadesc.core.exceptions import ValidationError
from metadesc.core.models import APIResponse, NonceAction
from metadesc.core.nonce import NONCE_HEADER, create_nonce

router = APIRouter()


class UserInfoResponse(BaseModel):
    id: str
    name: str
    roles: list[str]
    capabilities: list[str]
    is_admin: bool


class NonceRequest(BaseModel):
    action: str = NonceAction.AJAX.value


@router.get("/me")
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> UserInfoResponse:
    """Get current user information from the access token."""
    return UserInfoResponse(
        id=current_user.id,
        name=current_user.name,
        roles=current_user.roles,
        capabilities=sorted(cap.value for cap in current_user.capabilities),
        is_admin=current_user.is_admin,
    )


@router.post("/nonce")
async def issue_nonce(
    request: NonceRequest,
    current_user: User = Depends(get_current_user),
) -> APIResponse:
    """Issue an anti-forgery token for one action."""
    try:
        action = NonceAction(request.action)
    except ValueError:
        raise ValidationError("Unknown nonce action.") from None

    return APIResponse(
        success=True,
        data={
            "nonce": create_nonce(current_user.id, action),
            "action": action.value,
            "header": NONCE_HEADER,
            "expires_in": settings.nonce_lifetime_seconds,
        },
    )
