"""
Tests for the authentication session.

Tests cover:
- Reading the user out of a JWT (without verifying its signature)
- Discarding expired or incomplete tokens
- Login, logout and restoring a stored session
- Forced logout on 401 through the application context
"""

from unittest.mock import MagicMock

import pytest

from alici_erp.services.auth_service import AuthSession, decode_token, has_role
from alici_erp.services.exceptions import RequestFailed, Unauthorized, ValidationError
from alici_erp.services.local_storage import MemoryStorage
from alici_erp.utils.constants import TOKEN_STORAGE_KEY


class TestDecodeToken:
    def test_valid_token(self, token_factory):
        user = decode_token(token_factory(nombre="Alicia"))

        assert user.id == "u1"
        assert user.username == "admin"
        assert user.role == "ADMIN"
        assert user.nombre == "Alicia"

    def test_user_id_alias(self, token_factory):
        token = token_factory(id=None, userId=42)
        assert decode_token(token).id == "42"

    def test_expired_token(self, token_factory):
        assert decode_token(token_factory(expires_in=-60)) is None

    def test_missing_role(self, token_factory):
        assert decode_token(token_factory(role=None)) is None

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
    def test_malformed(self, token):
        assert decode_token(token) is None


class TestHasRole:
    def test_role_allowed(self, token_factory):
        user = decode_token(token_factory(role="CAJERO"))
        assert has_role(user, ["ADMIN", "CAJERO"]) is True
        assert has_role(user, ["ADMIN"]) is False

    def test_anonymous(self):
        assert has_role(None, ["ADMIN"]) is False


class TestAuthSession:
    def test_set_auth_persists_token(self, token_factory):
        storage = MemoryStorage()
        session = AuthSession(storage)
        token = token_factory()

        assert session.set_auth(token) is True
        assert session.is_authenticated
        assert storage.get_item(TOKEN_STORAGE_KEY) == token

    def test_set_auth_rejects_bad_token(self):
        session = AuthSession(MemoryStorage())
        assert session.set_auth("garbage") is False
        assert session.is_authenticated is False

    def test_init_auth_restores_user(self, token_factory):
        storage = MemoryStorage()
        storage.set_item(TOKEN_STORAGE_KEY, token_factory(username="caja"))

        user = AuthSession(storage).init_auth()

        assert user.username == "caja"

    def test_init_auth_drops_expired_token(self, token_factory):
        storage = MemoryStorage()
        storage.set_item(TOKEN_STORAGE_KEY, token_factory(expires_in=-1))

        assert AuthSession(storage).init_auth() is None
        assert storage.get_item(TOKEN_STORAGE_KEY) is None

    def test_logout_runs_listeners(self, token_factory):
        session = AuthSession(MemoryStorage())
        session.set_auth(token_factory())
        listener = MagicMock()
        session.on_logout(listener)

        session.logout()

        assert session.token is None
        assert session.user is None
        listener.assert_called_once_with()


class TestLogin:
    def test_login_success(self, ctx, api, token_factory):
        api.add("POST", "/auth/login", {"token": token_factory(username="ana", role="PANADERO")})

        user = ctx.auth.login(ctx.client, " ana ", "secreto")

        assert user.role == "PANADERO"
        assert api.calls[0].json == {"username": "ana", "password": "secreto"}
        assert ctx.auth.get_token() is not None

    def test_missing_credentials(self, ctx, api):
        with pytest.raises(ValidationError) as exc_info:
            ctx.auth.login(ctx.client, "", "")

        assert len(exc_info.value.errors) == 2
        assert api.calls == []

    def test_bad_credentials_are_not_a_session_expiry(self, ctx, api):
        ctx.cache.set(("productos",), ["pan"])
        api.add("POST", "/auth/login", {"error": "Credenciales inválidas"}, status_code=401)

        with pytest.raises(RequestFailed) as exc_info:
            ctx.auth.login(ctx.client, "ana", "mal")

        assert exc_info.value.message == "Credenciales inválidas"
        assert exc_info.value.status_code == 401
        assert ctx.notifier.history == []
        assert ctx.cache.get(("productos",)) == ["pan"]

    def test_bad_credentials_without_body(self, ctx, api):
        api.add("POST", "/auth/login", status_code=401)

        with pytest.raises(RequestFailed) as exc_info:
            ctx.auth.login(ctx.client, "ana", "mal")

        assert exc_info.value.message == "Credenciales inválidas"
        assert ctx.notifier.history == []

    def test_server_returns_unusable_token(self, ctx, api):
        api.add("POST", "/auth/login", {"token": "nope"})

        with pytest.raises(ValidationError):
            ctx.auth.login(ctx.client, "ana", "secreto")


class TestForcedLogout:
    def test_401_logs_out_and_clears_cache(self, ctx, api, token_factory):
        ctx.auth.set_auth(token_factory())
        ctx.cache.set(("productos",), ["pan"])
        api.add("GET", "/inventory", {"error": "jwt expired"}, status_code=401)

        with pytest.raises(Unauthorized):
            ctx.client.get("/inventory")

        assert ctx.auth.is_authenticated is False
        assert ctx.cache.keys() == []
        assert ctx.notifier.messages("error") == ["Tu sesión expiró. Inicia sesión nuevamente."]

    def test_token_sent_after_login(self, ctx, api, token_factory):
        token = token_factory()
        ctx.auth.set_auth(token)
        api.add("GET", "/config", {"tasaCambio": 36.5})

        ctx.client.get("/config")

        assert api.calls[0].headers["Authorization"] == f"Bearer {token}"
