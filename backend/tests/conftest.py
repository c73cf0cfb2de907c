"""
Pytest configuration and fixtures for AI Meta Description tests.
"""

import os
import tempfile
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

# Settings are read at import time; configure them before importing the app
_TEST_DIR = tempfile.mkdtemp(prefix="metadesc-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_TEST_DIR) / 'test.db'}"
os.environ["AUTH_ENABLED"] = "true"
os.environ["ENVIRONMENT"] = "development"
os.environ["SESSION_SECRET"] = "test-session-secret-with-enough-entropy-0123456789"
os.environ.pop("ENCRYPTION_KEY", None)

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from metadesc.api.main import app  # noqa: E402
from metadesc.api.routes.ai import get_http_transport  # noqa: E402
from metadesc.core.auth import create_access_token  # noqa: E402
from metadesc.core.models import NonceAction, Role  # noqa: E402
from metadesc.core.nonce import NONCE_HEADER, create_nonce  # noqa: E402
from metadesc.db.database import async_session_maker, close_db, drop_db, init_db  # noqa: E402


class VendorStub:
    """Stands in for the vendor APIs behind an httpx.MockTransport.

    Records every outbound request and answers with the configured
    response (or handler).
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            500, json={"error": {"message": "no response configured"}}
        )

    def respond(self, status_code: int = 200, json: Any = None, text: str | None = None) -> None:
        if text is not None:
            self._handler = lambda request: httpx.Response(status_code, text=text)
        else:
            self._handler = lambda request: httpx.Response(status_code, json=json)

    def handle_with(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no outbound request was made"
        return self.requests[-1]


@pytest.fixture
def vendor() -> VendorStub:
    """Stubbed vendor HTTP API; also wired into the app's transport dependency."""
    stub = VendorStub()
    app.dependency_overrides[get_http_transport] = lambda: stub.transport
    yield stub
    app.dependency_overrides.pop(get_http_transport, None)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    await init_db()

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    await drop_db()
    await close_db()


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing with a fresh database."""
    await init_db()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    await drop_db()
    # Pooled connections belong to this test's event loop
    await close_db()


# =============================================================================
# Auth helpers
# =============================================================================


def auth_headers(user_id: str, role: Role, action: NonceAction | None = None) -> dict[str, str]:
    """Bearer token for a user, plus a nonce for action when given."""
    headers = {
        "Authorization": f"Bearer {create_access_token(user_id, user_id.title(), [role.value])}",
    }
    if action is not None:
        headers[NONCE_HEADER] = create_nonce(user_id, action)
    return headers


@pytest.fixture
def make_headers() -> Callable[..., dict[str, str]]:
    return auth_headers


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return auth_headers("admin", Role.ADMINISTRATOR, NonceAction.AJAX)


@pytest.fixture
def editor_headers() -> dict[str, str]:
    return auth_headers("editor", Role.EDITOR, NonceAction.AJAX)


@pytest.fixture
def subscriber_headers() -> dict[str, str]:
    return auth_headers("subscriber", Role.SUBSCRIBER, NonceAction.AJAX)


@pytest_asyncio.fixture
async def configure_provider(client: AsyncClient, admin_headers: dict[str, str]):
    """Store a key (and optionally enable) a provider through the settings API."""

    async def _configure(name: str, api_key: str = "test-key", enabled: bool = True, **fields: Any) -> dict:
        response = await client.put(
            f"/api/v1/settings/providers/{name}",
            json={"api_key": api_key, **fields},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        response = await client.put(
            "/api/v1/settings/general",
            json={"enabled": {name: enabled}},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _configure
