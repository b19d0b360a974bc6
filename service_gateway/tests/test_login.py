"""
Unit tests for LoginOrchestrator.
"""

import pytest
from unittest.mock import AsyncMock

from service_gateway.app.adapters.rpc import GetUserResponse, RpcCode, RpcError
from service_gateway.app.auth.passwords import BcryptPasswordHasher
from service_gateway.app.domain.error_translator import ErrorTranslator
from service_gateway.app.domain.login import Credential, LoginOrchestrator
from shared.errors import BackendUnavailable, InvalidLogin

from factories import EXPIRED_AT, make_session_response, make_user


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def backend(hasher):
    backend = AsyncMock()
    backend.get_user_by_username.return_value = GetUserResponse(
        user=make_user(user_id=1),
        password=hasher.hash("s3cret"),
    )
    backend.create_session.return_value = make_session_response(user_id=1)
    return backend


@pytest.fixture
def orchestrator(backend, hasher):
    return LoginOrchestrator(backend, ErrorTranslator(), hasher)


class TestLoginOrchestrator:
    """Test cases for LoginOrchestrator."""

    @pytest.mark.asyncio
    async def test_login_success(self, orchestrator, backend):
        result = await orchestrator.login(Credential("alice", "s3cret"), "10.0.0.1", "curl/8.0")

        assert result.user.id == 1
        assert result.access_token == "access-token"
        assert result.access_expires_at == EXPIRED_AT
        assert result.refresh_token == "refresh-token"
        backend.get_user_by_username.assert_awaited_once_with("alice")
        backend.create_session.assert_awaited_once_with(1, "10.0.0.1", "curl/8.0")

    @pytest.mark.asyncio
    async def test_wrong_password_opens_no_session(self, orchestrator, backend):
        with pytest.raises(InvalidLogin) as exc_info:
            await orchestrator.login(Credential("alice", "wrong"), "10.0.0.1", "curl/8.0")

        assert exc_info.value.status_code == 401
        backend.create_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_are_indistinguishable(self, orchestrator, backend):
        with pytest.raises(InvalidLogin) as wrong_password:
            await orchestrator.login(Credential("alice", "wrong"), "", "")

        backend.get_user_by_username.side_effect = RpcError("GetUserByUsername", RpcCode.NOT_FOUND, "no rows")
        with pytest.raises(InvalidLogin) as unknown_user:
            await orchestrator.login(Credential("mallory", "wrong"), "", "")

        assert wrong_password.value.status_code == unknown_user.value.status_code
        assert wrong_password.value.to_response() == unknown_user.value.to_response()

    @pytest.mark.asyncio
    async def test_session_rejected_is_invalid_login(self, orchestrator, backend):
        backend.create_session.side_effect = RpcError("CreateSession", RpcCode.INVALID_ARGUMENT, "bad user agent")

        with pytest.raises(InvalidLogin):
            await orchestrator.login(Credential("alice", "s3cret"), "", "")

    @pytest.mark.asyncio
    async def test_lookup_outage_is_internal_error(self, orchestrator, backend):
        backend.get_user_by_username.side_effect = RpcError("GetUserByUsername", RpcCode.UNAVAILABLE, "down")

        with pytest.raises(BackendUnavailable):
            await orchestrator.login(Credential("alice", "s3cret"), "", "")

    def test_credential_repr_hides_secret(self):
        assert "s3cret" not in repr(Credential("alice", "s3cret"))


class TestBcryptPasswordHasher:
    """Test cases for BcryptPasswordHasher."""

    def test_hash_and_verify(self, hasher):
        hashed = hasher.hash("s3cret")

        assert hashed != "s3cret"
        assert hasher.verify("s3cret", hashed)
        assert not hasher.verify("other", hashed)

    def test_non_bcrypt_hash_is_a_mismatch(self, hasher):
        assert hasher.verify("s3cret", "plain-text") is False
