"""
API Gateway service for the Galaxy backend.
"""

from typing import Dict, Optional

from fastapi import Path, Request

from shared.base_service import BaseService
from shared.cancellation import cancel_on_disconnect
from shared.config import ServiceConfig

from .adapters.backend_client import BackendClient
from .auth.passwords import BcryptPasswordHasher
from .domain.auth_middleware import AuthMiddleware, TokenValidator
from .domain.entries import EntryService
from .domain.error_translator import ErrorTranslator
from .domain.items import ItemService
from .domain.login import Credential, LoginOrchestrator
from .domain.tokens import TokenService
from .domain.users import UserService
from .models import (
    CreateEntryRequest,
    CreateItemRequest,
    CreateUserRequest,
    Entry,
    Item,
    ListEntriesByItemRequest,
    ListEntriesByUserRequest,
    INT32_MAX,
    ListEntriesResponse,
    ListItemsResponse,
    LoginRequest,
    LoginResponse,
    PageRequest,
    RenewAccessTokenRequest,
    RenewAccessTokenResponse,
    UpdateItemRequest,
    UpdateUserRequest,
    User,
)

DEFAULT_PORT = 8080


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        backend: Optional[BackendClient] = None,
        password_hasher: Optional[BcryptPasswordHasher] = None,
    ):
        super().__init__("gateway", DEFAULT_PORT, config=config)
        self.backend = backend or BackendClient(
            self.config.backend_rpc_url,
            timeout=self.config.backend_timeout_seconds,
            metrics=self.metrics,
        )
        self.password_hasher = password_hasher or BcryptPasswordHasher()

        self.error_translator = ErrorTranslator()
        self.token_validator = TokenValidator(self.backend, self.error_translator)
        self.auth_middleware = AuthMiddleware(self.token_validator, self.metrics)
        self.login_orchestrator = LoginOrchestrator(self.backend, self.error_translator, self.password_hasher)

        self.user_service = UserService(self.backend, self.error_translator, self.password_hasher)
        self.token_service = TokenService(self.backend, self.error_translator)
        self.item_service = ItemService(self.backend, self.error_translator)
        self.entry_service = EntryService(self.backend, self.error_translator)

        self._setup_user_routes()
        self._setup_token_routes()
        self._setup_item_routes()
        self._setup_entry_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    async def on_shutdown(self) -> None:
        await self.backend.close()

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check gateway dependencies."""
        return {"backend": "ok" if await self.backend.check_health() else "error"}

    def _get_client_ip(self, request: Request) -> str:
        """Extract the caller IP from standard headers."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip
        if request.client:
            return request.client.host
        return ""

    def _setup_user_routes(self):
        """Set up login and user routes."""

        @self.app.post("/user/login", response_model=LoginResponse)
        async def login(request: Request, body: LoginRequest):
            """Exchange a username and password for a session."""
            result = await cancel_on_disconnect(
                request,
                self.login_orchestrator.login(
                    Credential(username=body.username, secret=body.password),
                    client_ip=self._get_client_ip(request),
                    user_agent=request.headers.get("User-Agent", ""),
                ),
            )
            return LoginResponse(
                user=User.from_rpc(result.user),
                access_token=result.access_token,
                access_expired_at=result.access_expires_at,
                refresh_token=result.refresh_token,
                refresh_expired_at=result.refresh_expires_at,
            )

        @self.app.post("/user/create", response_model=User)
        async def create_user(request: Request, body: CreateUserRequest):
            return await cancel_on_disconnect(request, self.user_service.create_user(body))

        @self.app.get("/user/get/{user_id}", response_model=User)
        async def get_user(request: Request, user_id: int = Path(..., ge=1, le=INT32_MAX)):
            """Fetch the caller's own profile."""
            identity = await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.user_service.get_user(identity, user_id))

        @self.app.post("/user/update", response_model=User)
        async def update_user(request: Request, body: UpdateUserRequest):
            """Partially update the caller's own profile."""
            identity = await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.user_service.update_user(identity, body))

    def _setup_token_routes(self):
        """Set up token routes."""

        @self.app.post("/token/renew", response_model=RenewAccessTokenResponse)
        async def renew_access_token(request: Request, body: RenewAccessTokenRequest):
            return await cancel_on_disconnect(request, self.token_service.renew_access_token(body.refresh_token))

    def _setup_item_routes(self):
        """Set up item routes. Items are not scoped to the caller."""

        @self.app.post("/item/create", response_model=Item)
        async def create_item(request: Request, body: CreateItemRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.item_service.create_item(body))

        @self.app.get("/item/get/{item_id}", response_model=Item)
        async def get_item(request: Request, item_id: int = Path(..., ge=1, le=INT32_MAX)):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.item_service.get_item(item_id))

        @self.app.post("/item/list", response_model=ListItemsResponse)
        async def list_items(request: Request, body: PageRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.item_service.list_items(body))

        @self.app.post("/item/update", response_model=Item)
        async def update_item(request: Request, body: UpdateItemRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.item_service.update_item(body))

        @self.app.delete("/item/delete/{item_id}")
        async def delete_item(request: Request, item_id: int = Path(..., ge=1, le=INT32_MAX)):
            await self.auth_middleware.authenticate_request(request)
            await cancel_on_disconnect(request, self.item_service.delete_item(item_id))
            return None

    def _setup_entry_routes(self):
        """Set up ledger entry routes. Entries are not scoped to the caller."""

        @self.app.post("/entry/create", response_model=Entry)
        async def create_entry(request: Request, body: CreateEntryRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.entry_service.create_entry(body))

        @self.app.get("/entry/get/{entry_id}", response_model=Entry)
        async def get_entry(request: Request, entry_id: int = Path(..., ge=1, le=INT32_MAX)):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.entry_service.get_entry(entry_id))

        @self.app.post("/entry/list", response_model=ListEntriesResponse)
        async def list_entries(request: Request, body: PageRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.entry_service.list_entries(body))

        @self.app.post("/entry/list/user", response_model=ListEntriesResponse)
        async def list_entries_by_user(request: Request, body: ListEntriesByUserRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.entry_service.list_entries_by_user(body))

        @self.app.post("/entry/list/item", response_model=ListEntriesResponse)
        async def list_entries_by_item(request: Request, body: ListEntriesByItemRequest):
            await self.auth_middleware.authenticate_request(request)
            return await cancel_on_disconnect(request, self.entry_service.list_entries_by_item(body))


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = GatewayService(config=config)
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
