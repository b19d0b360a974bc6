"""
Backend RPC client for the gateway.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .rpc import (
    AuthResponse,
    CreateSessionResponse,
    EntryResponse,
    GetUserResponse,
    ItemResponse,
    ListEntriesResponse,
    ListItemsResponse,
    RenewAccessTokenResponse,
    RpcCode,
    RpcError,
    RpcMessage,
    UserResponse,
)

M = TypeVar("M", bound=RpcMessage)

# Fallback when an error response carries no RPC code
_HTTP_STATUS_CODES = {
    400: RpcCode.INVALID_ARGUMENT,
    401: RpcCode.UNAUTHENTICATED,
    403: RpcCode.PERMISSION_DENIED,
    404: RpcCode.NOT_FOUND,
    409: RpcCode.ALREADY_EXISTS,
    503: RpcCode.UNAVAILABLE,
    504: RpcCode.DEADLINE_EXCEEDED,
}


class BackendClient:
    """Client for the backend RPC service.

    Every method issues exactly one call. Failures surface as ``RpcError``
    with the backend status code; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.metrics = metrics
        self.logger = get_logger("gateway.backend_client")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def check_health(self) -> bool:
        """Return True if the backend answers HTTP at all."""
        try:
            await self._client.get("/health")
        except httpx.HTTPError as exc:
            self.logger.warning("Backend health check failed", error=str(exc))
            return False
        return True

    async def _call(self, method: str, payload: Dict[str, Any], response_type: Optional[Type[M]]) -> Optional[M]:
        start_time = time.time()
        code = RpcCode.OK
        try:
            try:
                response = await self._client.post(f"/rpc/{method}", json=payload)
            except httpx.TimeoutException as exc:
                code = RpcCode.DEADLINE_EXCEEDED
                raise RpcError(method, code, str(exc)) from exc
            except httpx.HTTPError as exc:
                code = RpcCode.UNAVAILABLE
                raise RpcError(method, code, str(exc)) from exc

            if response.status_code != 200:
                code, detail = self._parse_error(response)
                raise RpcError(method, code, detail)

            if response_type is None:
                return None

            try:
                return response_type.model_validate(response.json())
            except (ValueError, PydanticValidationError) as exc:
                code = RpcCode.INTERNAL
                raise RpcError(method, code, f"malformed response: {exc}") from exc
        except asyncio.CancelledError:
            code = RpcCode.CANCELLED
            raise
        finally:
            duration = time.time() - start_time
            self.logger.debug("Backend call", method=method, code=code.value, duration_ms=round(duration * 1000, 2))
            if self.metrics:
                self.metrics.record_backend_call(method, code.value, duration)

    @staticmethod
    def _parse_error(response: httpx.Response):
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("code"):
            return RpcCode.parse(str(body["code"])), str(body.get("message", ""))

        code = _HTTP_STATUS_CODES.get(response.status_code, RpcCode.INTERNAL)
        return code, f"backend returned HTTP {response.status_code}"

    # Sessions and tokens

    async def authorize(self, token: str) -> AuthResponse:
        return await self._call("Authorize", {"token": token}, AuthResponse)

    async def create_session(self, user_id: int, client_ip: str, user_agent: str) -> CreateSessionResponse:
        payload = {"user_id": user_id, "client_ip": client_ip, "user_agent": user_agent}
        return await self._call("CreateSession", payload, CreateSessionResponse)

    async def renew_access_token(self, refresh_token: str) -> RenewAccessTokenResponse:
        return await self._call("RenewAccessToken", {"refresh_token": refresh_token}, RenewAccessTokenResponse)

    # Users

    async def get_user_by_username(self, username: str) -> GetUserResponse:
        return await self._call("GetUserByUsername", {"username": username}, GetUserResponse)

    async def get_user(self, user_id: int) -> UserResponse:
        return await self._call("GetUser", {"id": user_id}, UserResponse)

    async def create_user(self, user: Dict[str, Any]) -> UserResponse:
        return await self._call("CreateUser", user, UserResponse)

    async def update_user(self, user_id: int, fields: Dict[str, Any]) -> UserResponse:
        """Update a user; keys absent from ``fields`` are left untouched."""
        return await self._call("UpdateUser", {"id": user_id, **fields}, UserResponse)

    # Items

    async def create_item(self, name: str, quantity: int, price: int) -> ItemResponse:
        payload = {"name": name, "quantity": quantity, "price": price}
        return await self._call("CreateItem", payload, ItemResponse)

    async def get_item(self, item_id: int) -> ItemResponse:
        return await self._call("GetItem", {"id": item_id}, ItemResponse)

    async def list_items(self, offset: int, limit: int) -> ListItemsResponse:
        return await self._call("ListItems", {"offset": offset, "limit": limit}, ListItemsResponse)

    async def update_item(self, item_id: int, fields: Dict[str, Any]) -> ItemResponse:
        """Update an item; keys absent from ``fields`` are left untouched."""
        return await self._call("UpdateItem", {"id": item_id, **fields}, ItemResponse)

    async def delete_item(self, item_id: int) -> None:
        await self._call("DeleteItem", {"id": item_id}, None)

    # Entries

    async def create_entry(self, user_id: int, item_id: int, quantity: int, total: int) -> EntryResponse:
        payload = {"user_id": user_id, "item_id": item_id, "quantity": quantity, "total": total}
        return await self._call("CreateEntry", payload, EntryResponse)

    async def get_entry(self, entry_id: int) -> EntryResponse:
        return await self._call("GetEntry", {"id": entry_id}, EntryResponse)

    async def list_entries(self, offset: int, limit: int) -> ListEntriesResponse:
        return await self._call("ListEntries", {"offset": offset, "limit": limit}, ListEntriesResponse)

    async def list_entries_by_user(self, user_id: int, offset: int, limit: int) -> ListEntriesResponse:
        payload = {"user_id": user_id, "offset": offset, "limit": limit}
        return await self._call("ListEntriesByUser", payload, ListEntriesResponse)

    async def list_entries_by_item(self, item_id: int, offset: int, limit: int) -> ListEntriesResponse:
        payload = {"item_id": item_id, "offset": offset, "limit": limit}
        return await self._call("ListEntriesByItem", payload, ListEntriesResponse)
