"""
Backend RPC contract: status codes and message shapes.

Message field names follow the backend's RPC definitions, not the public
JSON surface; the domain services translate between the two.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RpcCode(str, Enum):
    """Status codes returned by the backend (gRPC status names)."""

    OK = "OK"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    ABORTED = "ABORTED"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    UNIMPLEMENTED = "UNIMPLEMENTED"
    INTERNAL = "INTERNAL"
    UNAVAILABLE = "UNAVAILABLE"
    DATA_LOSS = "DATA_LOSS"
    UNAUTHENTICATED = "UNAUTHENTICATED"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RpcCode":
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.upper())
        except ValueError:
            return cls.UNKNOWN


class RpcError(Exception):
    """A failed backend call, carrying the backend status code."""

    def __init__(self, method: str, code: RpcCode, detail: str = ""):
        self.method = method
        self.code = code
        self.detail = detail
        super().__init__(f"{method}: {code.value}: {detail}")


class RpcMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AuthResponse(RpcMessage):
    id: str
    user_id: int
    created_at: datetime
    expired_at: datetime


class User(RpcMessage):
    id: int
    username: str
    fullname: str = ""
    email: str = ""
    plan: int = 0
    created_at: datetime
    expired_at: datetime
    auto_renew: bool = False


class GetUserResponse(RpcMessage):
    user: User
    # Only populated by GetUserByUsername
    password: str = Field(default="", repr=False)


class UserResponse(RpcMessage):
    user: User


class Session(RpcMessage):
    id: str
    user_id: int
    refresh_token: str = Field(repr=False)
    client_ip: str = ""
    user_agent: str = ""
    created_at: datetime
    expired_at: datetime


class CreateSessionResponse(RpcMessage):
    access_token: str = Field(repr=False)
    expired_at: datetime
    session: Session


class RenewAccessTokenResponse(RpcMessage):
    access_token: str = Field(repr=False)
    expired_at: datetime


class Item(RpcMessage):
    id: int
    name: str
    quantity: int
    price: int


class ItemResponse(RpcMessage):
    item: Item


class ListItemsResponse(RpcMessage):
    items: List[Item] = Field(default_factory=list)


class Entry(RpcMessage):
    id: int
    user_id: int
    item_id: int
    quantity: int
    total: int
    created_at: datetime


class EntryResponse(RpcMessage):
    entry: Entry


class ListEntriesResponse(RpcMessage):
    entries: List[Entry] = Field(default_factory=list)
