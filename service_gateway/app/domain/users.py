"""
User resource handlers.
"""

from typing import Protocol

from starlette.concurrency import run_in_threadpool

from shared.errors import BackendRejected
from shared.logging import get_logger

from ..adapters.backend_client import BackendClient
from ..adapters.rpc import RpcCode, RpcError
from ..models import CreateUserRequest, UpdateUserRequest, User
from .auth_middleware import AuthIdentity, OwnershipGuard
from .error_translator import Endpoint, ErrorTranslator
from .partial_update import PartialUpdateCodec, SetValue

USER_CODEC = PartialUpdateCodec(("username", "fullname", "email", "password", "plan", "auto_renew"))


class PasswordHasher(Protocol):
    def hash(self, plain: str) -> str:
        ...


class UserService:
    def __init__(self, backend: BackendClient, translator: ErrorTranslator, hasher: PasswordHasher):
        self.backend = backend
        self.translator = translator
        self.hasher = hasher
        self.logger = get_logger("gateway.users")

    async def create_user(self, request: CreateUserRequest) -> User:
        """Create a user after checking the username is free."""
        try:
            await self.backend.get_user_by_username(request.username)
        except RpcError as exc:
            if exc.code is not RpcCode.NOT_FOUND:
                raise self.translator.translate(Endpoint.USER_CREATE_LOOKUP, exc) from exc
        else:
            raise BackendRejected("username already exists", status_code=400)

        hashed = await run_in_threadpool(self.hasher.hash, request.password)
        payload = {
            "username": request.username,
            "fullname": request.fullname,
            "email": request.email,
            "password": hashed,
            "plan": request.plan,
            "auto_renew": request.auto_renew,
        }

        try:
            result = await self.backend.create_user(payload)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.USER_CREATE, exc) from exc

        self.logger.info("User created", user_id=result.user.id)
        return User.from_rpc(result.user)

    async def get_user(self, identity: AuthIdentity, user_id: int) -> User:
        OwnershipGuard.check(identity, user_id)

        try:
            result = await self.backend.get_user(user_id)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.USER_GET, exc) from exc

        return User.from_rpc(result.user)

    async def update_user(self, identity: AuthIdentity, request: UpdateUserRequest) -> User:
        OwnershipGuard.check(identity, request.id)

        fields = USER_CODEC.from_request(request)
        password = fields["password"]
        if isinstance(password, SetValue):
            fields["password"] = SetValue(await run_in_threadpool(self.hasher.hash, password.value))

        try:
            result = await self.backend.update_user(request.id, USER_CODEC.encode(fields))
        except RpcError as exc:
            raise self.translator.translate(Endpoint.USER_UPDATE, exc) from exc

        self.logger.info("User updated", user_id=result.user.id)
        return User.from_rpc(result.user)
