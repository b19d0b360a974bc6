"""
Authentication middleware for the gateway.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import Request

from shared.cancellation import cancel_on_disconnect
from shared.errors import (
    AuthContextMissing,
    AuthenticationError,
    Forbidden,
    MalformedCredential,
    MissingCredential,
)
from shared.logging import get_logger, set_subject_context
from shared.metrics import MetricsCollector

from ..adapters.backend_client import BackendClient
from ..adapters.rpc import RpcError
from .error_translator import Endpoint, ErrorTranslator


@dataclass(frozen=True)
class AuthIdentity:
    """Identity resolved from a bearer token; lives for one request."""

    session_id: str
    subject_id: int
    issued_at: datetime
    expires_at: datetime


class TokenValidator:
    """Resolve an ``Authorization`` header to an ``AuthIdentity``."""

    def __init__(self, backend: BackendClient, translator: ErrorTranslator):
        self.backend = backend
        self.translator = translator
        self.logger = get_logger("gateway.token_validator")

    @staticmethod
    def parse_authorization_header(header: Optional[str]) -> str:
        """Return the bearer value or raise a credential error."""
        if not header:
            raise MissingCredential({"reason": "authorization header is required"})

        fields = header.split()
        if len(fields) < 2:
            raise MalformedCredential({"reason": "authorization header is invalid"})

        if fields[0].lower() != "bearer":
            raise MalformedCredential({"reason": "unsupported authorization type"})

        token = fields[1]
        if not token:
            raise MalformedCredential({"reason": "access token is required"})

        return token

    async def validate(self, header: Optional[str]) -> AuthIdentity:
        token = self.parse_authorization_header(header)

        try:
            result = await self.backend.authorize(token)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.AUTHORIZE, exc) from exc

        return AuthIdentity(
            session_id=result.id,
            subject_id=result.user_id,
            issued_at=result.created_at,
            expires_at=result.expired_at,
        )


class AuthMiddleware:
    """Authenticates the caller of a protected route.

    Protected routes call ``authenticate_request`` after request parsing and
    before any business logic; the returned identity is handed on by
    parameter.
    """

    def __init__(self, validator: TokenValidator, metrics: Optional[MetricsCollector] = None):
        self.validator = validator
        self.metrics = metrics
        self.logger = get_logger("gateway.auth_middleware")

    async def authenticate_request(self, request: Request) -> AuthIdentity:
        header = request.headers.get("Authorization")
        try:
            identity = await cancel_on_disconnect(request, self.validator.validate(header))
        except AuthenticationError as e:
            self.logger.warning("Authentication failed", kind=e.kind.value, **e.details)
            if self.metrics:
                self.metrics.record_auth_failure(e.kind.value)
            raise

        set_subject_context(identity.subject_id)
        self.logger.info("Request authenticated", session_id=identity.session_id)
        return identity


class OwnershipGuard:
    """Restrict per-user resources to their owner."""

    @staticmethod
    def check(identity: Optional[AuthIdentity], owner_id: int) -> None:
        if identity is None:
            raise AuthContextMissing("ownership check reached without an authenticated identity")
        if identity.subject_id != owner_id:
            raise Forbidden(details={"subject_id": identity.subject_id, "owner_id": owner_id})
