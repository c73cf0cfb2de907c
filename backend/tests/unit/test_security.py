"""
Unit tests for access tokens, nonces and role capabilities.
"""

import time

import jwt
import pytest

from metadesc.core.auth import MOCK_ADMIN, User, create_access_token, decode_access_token
from metadesc.core.exceptions import AuthenticationError
from metadesc.core.models import Capability, NonceAction
from metadesc.core.nonce import create_nonce, verify_nonce


class TestUserCapabilities:
    @pytest.mark.parametrize(
        ("role", "expected"),
        [
            ("administrator", {Capability.EDIT_POSTS, Capability.MANAGE_OPTIONS}),
            ("editor", {Capability.EDIT_POSTS}),
            ("author", {Capability.EDIT_POSTS}),
            ("contributor", {Capability.EDIT_POSTS}),
            ("subscriber", set()),
            ("unknown-role", set()),
        ],
    )
    def test_role_capabilities(self, role, expected):
        assert User(id="u", name="U", roles=[role]).capabilities == expected

    def test_roles_are_combined(self):
        user = User(id="u", name="U", roles=["subscriber", "Editor"])
        assert user.can(Capability.EDIT_POSTS)
        assert not user.can(Capability.MANAGE_OPTIONS)

    def test_mock_admin(self):
        assert MOCK_ADMIN.is_admin


class TestAccessTokens:
    def test_round_trip(self):
        token = create_access_token("42", "Ada", ["editor"])
        user = decode_access_token(token)

        assert user.id == "42"
        assert user.name == "Ada"
        assert user.roles == ["editor"]

    def test_expired(self):
        token = create_access_token("42", "Ada", ["editor"], lifetime=-120)
        with pytest.raises(AuthenticationError, match="expired"):
            decode_access_token(token)

    def test_foreign_signature(self):
        token = jwt.encode({"sub": "42", "exp": int(time.time()) + 60}, "some-other-secret-long-enough-for-hs256-keys", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_nonce_is_not_an_access_token(self):
        with pytest.raises(AuthenticationError):
            decode_access_token(create_nonce("42", NonceAction.AJAX))


class TestNonces:
    def test_valid_for_user_and_action(self):
        nonce = create_nonce("7", NonceAction.AJAX)
        assert verify_nonce(nonce, "7", NonceAction.AJAX) is True

    def test_bound_to_user(self):
        nonce = create_nonce("7", NonceAction.AJAX)
        assert verify_nonce(nonce, "8", NonceAction.AJAX) is False

    def test_bound_to_action(self):
        nonce = create_nonce("7", NonceAction.AJAX)
        assert verify_nonce(nonce, "7", NonceAction.SAVE_DESCRIPTION) is False

    def test_expired(self):
        nonce = create_nonce("7", NonceAction.AJAX, lifetime=-10)
        assert verify_nonce(nonce, "7", NonceAction.AJAX) is False

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_missing_or_garbage(self, token):
        assert verify_nonce(token, "7", NonceAction.AJAX) is False

    def test_access_token_is_not_a_nonce(self):
        token = create_access_token("7", "Seven", ["editor"])
        assert verify_nonce(token, "7", NonceAction.AJAX) is False
