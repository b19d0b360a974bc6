"""
Domain logic for the Gateway Service.

Authentication, ownership checks, the login flow, partial-update encoding
and backend error translation, plus the per-resource handlers built on them.
"""

from .auth_middleware import AuthIdentity, AuthMiddleware, OwnershipGuard, TokenValidator
from .error_translator import Endpoint, ErrorTranslator
from .login import Credential, LoginOrchestrator
from .partial_update import UNSET, PartialUpdateCodec, SetValue

__all__ = [
    "AuthIdentity",
    "AuthMiddleware",
    "Credential",
    "Endpoint",
    "ErrorTranslator",
    "LoginOrchestrator",
    "OwnershipGuard",
    "PartialUpdateCodec",
    "SetValue",
    "TokenValidator",
    "UNSET",
]
