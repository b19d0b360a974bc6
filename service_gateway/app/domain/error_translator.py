"""
Per-endpoint translation of backend failures into client-facing errors.

The same backend code deliberately maps to different statuses on different
endpoints (a missing user is a 400 when referenced by an entry, a 404 when
fetched directly, and an indistinguishable login failure during login).
Clients depend on these mappings, so they are kept per endpoint rather than
unified.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from shared.errors import (
    BackendRejected,
    BackendUnavailable,
    ErrorKind,
    GatewayError,
    InvalidCredential,
    InvalidLogin,
    GENERIC_INVALID_LOGIN,
    GENERIC_UNAUTHORIZED,
)
from shared.logging import get_logger

from ..adapters.rpc import RpcCode, RpcError


class Endpoint(str, Enum):
    """Backend call sites that carry their own error policy."""

    AUTHORIZE = "authorize"
    LOGIN_LOOKUP = "user.login.lookup"
    LOGIN_SESSION = "user.login.session"
    USER_CREATE_LOOKUP = "user.create.lookup"
    USER_CREATE = "user.create"
    USER_GET = "user.get"
    USER_UPDATE = "user.update"
    TOKEN_RENEW = "token.renew"
    ITEM_CREATE = "item.create"
    ITEM_GET = "item.get"
    ITEM_LIST = "item.list"
    ITEM_UPDATE = "item.update"
    ITEM_DELETE = "item.delete"
    ENTRY_CREATE_USER = "entry.create.user"
    ENTRY_CREATE_ITEM = "entry.create.item"
    ENTRY_CREATE = "entry.create"
    ENTRY_GET = "entry.get"
    ENTRY_LIST = "entry.list"
    ENTRY_LIST_BY_USER = "entry.list.user"
    ENTRY_LIST_BY_ITEM = "entry.list.item"


@dataclass(frozen=True)
class ErrorRule:
    kind: ErrorKind
    status_code: int
    message: str


def _rejected(status_code: int, message: str) -> ErrorRule:
    return ErrorRule(ErrorKind.BACKEND_REJECTED, status_code, message)


_INVALID_LOGIN = ErrorRule(ErrorKind.INVALID_LOGIN, 401, GENERIC_INVALID_LOGIN)

_ENTRY_RULES = {
    (endpoint, code): rule
    for endpoint in (
        Endpoint.ENTRY_CREATE,
        Endpoint.ENTRY_GET,
        Endpoint.ENTRY_LIST,
        Endpoint.ENTRY_LIST_BY_USER,
        Endpoint.ENTRY_LIST_BY_ITEM,
    )
    for code, rule in (
        (RpcCode.NOT_FOUND, _rejected(404, "entry not found")),
        (RpcCode.INVALID_ARGUMENT, _rejected(400, "invalid entry request")),
    )
}

ERROR_MAPPING: Mapping[Tuple[Endpoint, RpcCode], ErrorRule] = MappingProxyType({
    (Endpoint.AUTHORIZE, RpcCode.UNAUTHENTICATED): ErrorRule(ErrorKind.INVALID_CREDENTIAL, 401, GENERIC_UNAUTHORIZED),
    (Endpoint.LOGIN_LOOKUP, RpcCode.NOT_FOUND): _INVALID_LOGIN,
    (Endpoint.LOGIN_SESSION, RpcCode.INVALID_ARGUMENT): _INVALID_LOGIN,
    (Endpoint.USER_CREATE, RpcCode.INVALID_ARGUMENT): _rejected(400, "invalid user data"),
    (Endpoint.USER_GET, RpcCode.NOT_FOUND): _rejected(404, "user not found"),
    (Endpoint.USER_UPDATE, RpcCode.INVALID_ARGUMENT): _rejected(400, "invalid user data"),
    (Endpoint.TOKEN_RENEW, RpcCode.UNAUTHENTICATED): _rejected(401, "invalid refresh token"),
    (Endpoint.ITEM_UPDATE, RpcCode.NOT_FOUND): _rejected(400, "item not found"),
    (Endpoint.ITEM_DELETE, RpcCode.NOT_FOUND): _rejected(400, "item not found"),
    (Endpoint.ENTRY_CREATE_USER, RpcCode.NOT_FOUND): _rejected(400, "user not found"),
    (Endpoint.ENTRY_CREATE_ITEM, RpcCode.NOT_FOUND): _rejected(400, "item not found"),
    **_ENTRY_RULES,
})


class ErrorTranslator:
    """Map (endpoint, backend code) to a classified ``GatewayError``."""

    def __init__(self, mapping: Mapping[Tuple[Endpoint, RpcCode], ErrorRule] = ERROR_MAPPING):
        self.mapping = mapping
        self.logger = get_logger("gateway.error_translator")

    def lookup(self, endpoint: Endpoint, code: RpcCode) -> Optional[ErrorRule]:
        return self.mapping.get((endpoint, code))

    def translate(self, endpoint: Endpoint, error: RpcError) -> GatewayError:
        details = {
            "endpoint": endpoint.value,
            "method": error.method,
            "code": error.code.value,
            "detail": error.detail,
        }
        rule = self.lookup(endpoint, error.code)

        if rule is None:
            self.logger.error("Unclassified backend failure", **details)
            return BackendUnavailable(details)

        self.logger.info("Backend failure classified", status_code=rule.status_code, **details)
        if rule.kind is ErrorKind.INVALID_LOGIN:
            return InvalidLogin(details)
        if rule.kind is ErrorKind.INVALID_CREDENTIAL:
            return InvalidCredential(details)
        return BackendRejected(rule.message, details, kind=rule.kind, status_code=rule.status_code)
