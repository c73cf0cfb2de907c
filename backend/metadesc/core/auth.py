"""
Bearer-token authentication and capability checks for FastAPI.

Features:
- HS256 access tokens signed with SESSION_SECRET
- User model with role -> capability mapping
- Dependencies for protected endpoints
- Mock administrator when auth is disabled outside production
"""

import time
from dataclasses import dataclass, field

import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from metadesc.core.config import settings
from metadesc.core.exceptions import AuthenticationError, PermissionDeniedError
from metadesc.core.models import ROLE_CAPABILITIES, Capability, Role

_auth_logger = structlog.get_logger()

# Security scheme for Swagger UI
bearer_scheme = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS256"
JWT_LEEWAY_SECONDS = 30


@dataclass
class User:
    """Authenticated user extracted from the access token."""

    id: str
    name: str
    roles: list[str] = field(default_factory=list)

    @property
    def capabilities(self) -> set[Capability]:
        caps: set[Capability] = set()
        for role in self.roles:
            try:
                caps |= ROLE_CAPABILITIES[Role(role.lower())]
            except ValueError:
                # Unknown roles grant nothing
                continue
        return caps

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def is_admin(self) -> bool:
        return self.can(Capability.MANAGE_OPTIONS)


MOCK_ADMIN = User(id="mock-admin-id", name="Mock Admin", roles=[Role.ADMINISTRATOR.value])


def create_access_token(user_id: str, name: str, roles: list[str], lifetime: int | None = None) -> str:
    """Issue a signed access token for a user."""
    now = int(time.time())
    claims = {
        "sub": user_id,
        "name": name,
        "roles": roles,
        "iat": now,
        "exp": now + (lifetime or settings.access_token_lifetime_seconds),
    }
    return jwt.encode(claims, settings.get_secret(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> User:
    """Validate an access token and build the User from its claims."""
    try:
        claims = jwt.decode(
            token,
            settings.get_secret(),
            algorithms=[JWT_ALGORITHM],
            leeway=JWT_LEEWAY_SECONDS,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        _auth_logger.warning("Invalid token", error=str(e))
        raise AuthenticationError("Invalid token") from e

    # Nonces share the signing secret; never accept one as a session
    if claims.get("typ") is not None:
        raise AuthenticationError("Invalid token")

    roles = claims.get("roles") or []
    if not isinstance(roles, list):
        roles = [str(roles)]

    return User(
        id=str(claims["sub"]),
        name=claims.get("name", ""),
        roles=[str(role) for role in roles],
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Dependency to get the current authenticated user.

    usage:
        @router.get("/protected")
        async def protected(user: User = Depends(get_current_user)):
            return {"user": user.name}
    """
    if not settings.is_auth_enabled:
        if settings.is_production:
            _auth_logger.critical(
                "AUTH DISABLED IN PRODUCTION! Set AUTH_ENABLED=true. "
                "Rejecting all requests until auth is configured."
            )
            raise AuthenticationError("Authentication is not configured.")
        return MOCK_ADMIN

    if not credentials:
        raise AuthenticationError("Missing authorization header")

    return decode_access_token(credentials.credentials)


def require_capability(capability: Capability):
    """
    Factory for capability-specific dependencies.

    Usage:
        @router.get("/settings")
        async def read_settings(user: User = Depends(require_capability(Capability.MANAGE_OPTIONS))):
            ...
    """

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.can(capability):
            _auth_logger.info("permission_denied", user_id=user.id, capability=capability.value)
            raise PermissionDeniedError()
        return user

    return dependency
