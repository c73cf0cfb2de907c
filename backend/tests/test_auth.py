"""
Tests for authentication, nonces and capability checks.
"""

import pytest
from httpx import AsyncClient

from metadesc.core.models import NonceAction, Role
from metadesc.core.nonce import NONCE_HEADER, create_nonce

pytestmark = pytest.mark.asyncio


class TestMeEndpoint:
    async def test_me_requires_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_me_rejects_garbage_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    async def test_me_returns_admin_capabilities(self, client: AsyncClient, admin_headers) -> None:
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "admin"
        assert data["roles"] == ["administrator"]
        assert data["capabilities"] == ["edit_posts", "manage_options"]
        assert data["is_admin"] is True

    async def test_me_editor_is_not_admin(self, client: AsyncClient, editor_headers) -> None:
        response = await client.get("/api/v1/auth/me", headers=editor_headers)
        data = response.json()
        assert data["capabilities"] == ["edit_posts"]
        assert data["is_admin"] is False

    async def test_nonce_is_not_accepted_as_bearer_token(self, client: AsyncClient) -> None:
        nonce = create_nonce("admin", NonceAction.AJAX)
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {nonce}"})
        assert response.status_code == 401

    async def test_request_id_is_echoed(self, client: AsyncClient, editor_headers) -> None:
        response = await client.get("/api/v1/auth/me", headers={**editor_headers, "X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"


class TestNonceEndpoint:
    async def test_issue_nonce_for_default_action(self, client: AsyncClient, make_headers) -> None:
        headers = make_headers("editor", Role.EDITOR)
        response = await client.post("/api/v1/auth/nonce", json={}, headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["action"] == NonceAction.AJAX.value
        assert data["header"] == NONCE_HEADER
        assert data["nonce"]

    async def test_issued_nonce_unlocks_protected_endpoint(self, client: AsyncClient, make_headers) -> None:
        headers = make_headers("editor", Role.EDITOR)
        response = await client.post(
            "/api/v1/auth/nonce",
            json={"action": NonceAction.SAVE_DESCRIPTION.value},
            headers=headers,
        )
        nonce = response.json()["data"]["nonce"]

        response = await client.put(
            "/api/v1/posts/7/description",
            json={"description": "Hello"},
            headers={**headers, NONCE_HEADER: nonce},
        )
        assert response.status_code == 200

    async def test_unknown_action_is_rejected(self, client: AsyncClient, make_headers) -> None:
        headers = make_headers("editor", Role.EDITOR)
        response = await client.post("/api/v1/auth/nonce", json={"action": "delete_everything"}, headers=headers)
        assert response.status_code == 400
        assert response.json() == {"success": False, "data": {"message": "Unknown nonce action."}}
