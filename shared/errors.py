"""
Shared error handling for the Galaxy gateway.

Every failure that can reach a client is a ``GatewayError``: a tagged value
carrying its ``kind``, the HTTP ``status_code`` and the client-facing
``message``. ``details`` hold diagnostics for the server log only and are
never serialized into a response.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

GENERIC_UNAUTHORIZED = "unauthorized"
GENERIC_INTERNAL = "internal server error"
GENERIC_FORBIDDEN = "you are not allowed to access this resource"
GENERIC_INVALID_LOGIN = "username or password is incorrect"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str


class ErrorKind(str, Enum):
    """Classification of gateway failures."""

    VALIDATION = "validation"
    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_CREDENTIAL = "malformed_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    FORBIDDEN = "forbidden"
    INVALID_LOGIN = "invalid_login"
    BACKEND_REJECTED = "backend_rejected"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    CLIENT_DISCONNECTED = "client_disconnected"


class GatewayError(Exception):
    """Base exception for gateway failures."""

    kind: ErrorKind = ErrorKind.BACKEND_UNAVAILABLE
    status_code: int = 500
    default_message: str = GENERIC_INTERNAL

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *,
        kind: Optional[ErrorKind] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message if message is not None else self.default_message
        self.details = details or {}
        if kind is not None:
            self.kind = kind
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, status_code={self.status_code}, message={self.message!r})"


class ValidationError(GatewayError):
    """Malformed JSON body, URI or query parameters."""

    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "invalid request"


class AuthenticationError(GatewayError):
    """Caller could not be authenticated."""

    kind = ErrorKind.INVALID_CREDENTIAL
    status_code = 401
    default_message = GENERIC_UNAUTHORIZED

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(GENERIC_UNAUTHORIZED, details)


class MissingCredential(AuthenticationError):
    """No Authorization header was supplied."""

    kind = ErrorKind.MISSING_CREDENTIAL


class MalformedCredential(AuthenticationError):
    """Authorization header is not a usable bearer credential."""

    kind = ErrorKind.MALFORMED_CREDENTIAL


class InvalidCredential(AuthenticationError):
    """Backend rejected the bearer token."""

    kind = ErrorKind.INVALID_CREDENTIAL


class Forbidden(GatewayError):
    """Authenticated caller does not own the requested resource."""

    kind = ErrorKind.FORBIDDEN
    status_code = 403
    default_message = GENERIC_FORBIDDEN


class InvalidLogin(GatewayError):
    """Login failed; same message whatever step failed."""

    kind = ErrorKind.INVALID_LOGIN
    status_code = 401
    default_message = GENERIC_INVALID_LOGIN

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(GENERIC_INVALID_LOGIN, details)


class BackendRejected(GatewayError):
    """Backend failure mapped to a client-facing status by endpoint policy."""

    kind = ErrorKind.BACKEND_REJECTED
    status_code = 400
    default_message = "request rejected"


class BackendUnavailable(GatewayError):
    """Backend failure with no client-facing classification."""

    kind = ErrorKind.BACKEND_UNAVAILABLE
    status_code = 500
    default_message = GENERIC_INTERNAL

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(GENERIC_INTERNAL, details)


class ClientDisconnected(GatewayError):
    """Client went away while the gateway waited on the backend."""

    kind = ErrorKind.CLIENT_DISCONNECTED
    status_code = 499
    default_message = "client closed request"


class AuthContextMissing(RuntimeError):
    """A handler needing an identity was reached without token validation."""
