"""
Login flow: look up the user, verify the secret, open a session.

Failing the lookup and failing the verification produce the same
``InvalidLogin`` error so responses never reveal whether a username exists.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from starlette.concurrency import run_in_threadpool

from shared.errors import InvalidLogin
from shared.logging import get_logger

from ..adapters.backend_client import BackendClient
from ..adapters.rpc import RpcError, User
from .error_translator import Endpoint, ErrorTranslator


class PasswordVerifier(Protocol):
    def verify(self, plain: str, hashed: str) -> bool:
        ...


@dataclass(frozen=True)
class Credential:
    username: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str = field(repr=False)
    access_expires_at: datetime
    refresh_token: str = field(repr=False)
    refresh_expires_at: datetime


class LoginOrchestrator:
    def __init__(self, backend: BackendClient, translator: ErrorTranslator, verifier: PasswordVerifier):
        self.backend = backend
        self.translator = translator
        self.verifier = verifier
        self.logger = get_logger("gateway.login")

    async def login(self, credential: Credential, client_ip: str, user_agent: str) -> LoginResult:
        try:
            found = await self.backend.get_user_by_username(credential.username)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.LOGIN_LOOKUP, exc) from exc

        matched = await run_in_threadpool(self.verifier.verify, credential.secret, found.password)
        if not matched:
            self.logger.info("Login rejected", stage="verify")
            raise InvalidLogin({"stage": "verify"})

        try:
            session = await self.backend.create_session(found.user.id, client_ip, user_agent)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.LOGIN_SESSION, exc) from exc

        self.logger.info("Login succeeded", subject_id=found.user.id, session_id=session.session.id)
        return LoginResult(
            user=found.user,
            access_token=session.access_token,
            access_expires_at=session.expired_at,
            refresh_token=session.session.refresh_token,
            refresh_expires_at=session.session.expired_at,
        )
