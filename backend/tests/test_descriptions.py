"""
Tests for per-post meta description endpoints.
"""

import pytest
from httpx import AsyncClient

from metadesc.core.models import NonceAction, Role

pytestmark = pytest.mark.asyncio


@pytest.fixture
def save_headers(make_headers) -> dict[str, str]:
    return make_headers("author", Role.AUTHOR, NonceAction.SAVE_DESCRIPTION)


class TestDescriptions:
    async def test_missing_description_is_empty(self, client: AsyncClient, save_headers) -> None:
        response = await client.get("/api/v1/posts/42/description", headers=save_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {"post_id": 42, "description": ""}}

    async def test_save_sanitizes_and_reads_back(self, client: AsyncClient, save_headers) -> None:
        response = await client.put(
            "/api/v1/posts/42/description",
            json={"description": "  A <strong>short</strong>\n description<script>alert(1)</script> "},
            headers=save_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["description"] == "A short description"

        response = await client.get("/api/v1/posts/42/description", headers=save_headers)
        assert response.json()["data"]["description"] == "A short description"

    async def test_empty_value_deletes(self, client: AsyncClient, save_headers) -> None:
        await client.put("/api/v1/posts/42/description", json={"description": "Keep me"}, headers=save_headers)

        response = await client.put("/api/v1/posts/42/description", json={"description": ""}, headers=save_headers)
        assert response.json()["data"]["description"] == ""

        response = await client.get("/api/v1/posts/42/description", headers=save_headers)
        assert response.json()["data"]["description"] == ""

    async def test_ajax_nonce_is_not_valid_for_saving(self, client: AsyncClient, editor_headers) -> None:
        response = await client.put("/api/v1/posts/42/description", json={"description": "x"}, headers=editor_headers)
        assert response.status_code == 403

    async def test_subscriber_cannot_read(self, client: AsyncClient, subscriber_headers) -> None:
        response = await client.get("/api/v1/posts/42/description", headers=subscriber_headers)
        assert response.status_code == 403

    async def test_invalid_post_id(self, client: AsyncClient, save_headers) -> None:
        response = await client.get("/api/v1/posts/0/description", headers=save_headers)
        assert response.status_code == 400
