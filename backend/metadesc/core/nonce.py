"""
Anti-forgery tokens ("nonces") for state-changing and AI endpoints.

A nonce is a short signed token bound to one user and one action. Clients
obtain it from POST /api/v1/auth/nonce and send it back in the X-Nonce
header. Verification happens before any capability check or input
validation, so a forged request never reaches the gateway.
"""

import time
import uuid

import jwt
import structlog
from fastapi import Depends, Header

from metadesc.core.auth import User, get_current_user
from metadesc.core.config import settings
from metadesc.core.exceptions import InvalidTokenError, PermissionDeniedError
from metadesc.core.models import Capability, NonceAction

logger = structlog.get_logger()

NONCE_HEADER = "X-Nonce"
NONCE_ALGORITHM = "HS256"
NONCE_TYPE = "nonce"


def create_nonce(user_id: str, action: NonceAction, lifetime: int | None = None) -> str:
    """Issue a nonce for (user, action)."""
    now = int(time.time())
    claims = {
        "typ": NONCE_TYPE,
        "sub": user_id,
        "act": action.value,
        "jti": uuid.uuid4().hex[:12],
        "iat": now,
        "exp": now + (lifetime or settings.nonce_lifetime_seconds),
    }
    return jwt.encode(claims, settings.get_secret(), algorithm=NONCE_ALGORITHM)


def verify_nonce(token: str | None, user_id: str, action: NonceAction) -> bool:
    """Check a nonce was issued to this user for this action and has not expired."""
    if not token:
        return False

    try:
        claims = jwt.decode(
            token,
            settings.get_secret(),
            algorithms=[NONCE_ALGORITHM],
            options={"require": ["sub", "act", "exp"]},
        )
    except jwt.InvalidTokenError as e:
        logger.info("nonce_rejected", reason=type(e).__name__, action=action.value)
        return False

    return (
        claims.get("typ") == NONCE_TYPE
        and claims.get("sub") == user_id
        and claims.get("act") == action.value
    )


def require_nonce(action: NonceAction, capability: Capability):
    """
    Dependency factory: authenticated user + valid nonce + capability.

    Checks run in that order; the first failure aborts the request.

    Usage:
        @router.post("/generate-summary")
        async def generate(user: User = Depends(require_nonce(NonceAction.AJAX, Capability.EDIT_POSTS))):
            ...
    """

    async def dependency(
        user: User = Depends(get_current_user),
        x_nonce: str | None = Header(default=None, alias=NONCE_HEADER),
    ) -> User:
        if not verify_nonce(x_nonce, user.id, action):
            raise InvalidTokenError()
        if not user.can(capability):
            raise PermissionDeniedError()
        return user

    return dependency
