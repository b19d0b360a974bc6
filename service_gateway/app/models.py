"""
Public JSON shapes served by the gateway.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .adapters import rpc

INT32_MIN = -2_147_483_648
INT32_MAX = 2_147_483_647

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
ResourceID = Annotated[int, Field(ge=1, le=INT32_MAX)]

# bcrypt only reads the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return value


class RequestModel(BaseModel):
    """Base for JSON request bodies; mistyped values are rejected, not coerced."""

    model_config = ConfigDict(strict=True)


# Users and sessions

class User(BaseModel):
    id: int
    username: str
    fullname: str
    email: str
    plan: int
    created_at: datetime
    expired_at: datetime
    auto_renew: bool

    @classmethod
    def from_rpc(cls, user: rpc.User) -> "User":
        return cls(
            id=user.id,
            username=user.username,
            fullname=user.fullname,
            email=user.email,
            plan=user.plan,
            created_at=user.created_at,
            expired_at=user.expired_at,
            auto_renew=user.auto_renew,
        )


class LoginRequest(RequestModel):
    username: str
    password: str = Field(repr=False)


class LoginResponse(BaseModel):
    user: User
    access_token: str
    access_expired_at: datetime
    refresh_token: str
    refresh_expired_at: datetime


class CreateUserRequest(RequestModel):
    username: str = Field(min_length=1)
    fullname: str = ""
    email: str = ""
    password: str = Field(min_length=1, repr=False)
    plan: Int32 = 0
    auto_renew: bool = False

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class UpdateUserRequest(RequestModel):
    id: ResourceID
    username: Optional[str] = None
    fullname: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    plan: Optional[Int32] = None
    auto_renew: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class RenewAccessTokenRequest(RequestModel):
    refresh_token: str = Field(repr=False)


class RenewAccessTokenResponse(BaseModel):
    access_token: str
    access_expired_at: datetime


# Pagination

class PageRequest(RequestModel):
    offset: Int32 = Field(default=0, ge=0)
    limit: Int32 = Field(ge=1)


# Items

class Item(BaseModel):
    id: int
    name: str
    quantity: int
    price: int

    @classmethod
    def from_rpc(cls, item: rpc.Item) -> "Item":
        return cls(id=item.id, name=item.name, quantity=item.quantity, price=item.price)


class CreateItemRequest(RequestModel):
    name: str
    quantity: Int32 = 0
    price: Int32 = 0


class UpdateItemRequest(RequestModel):
    id: ResourceID
    name: Optional[str] = None
    quantity: Optional[Int32] = None
    price: Optional[Int32] = None


class ListItemsResponse(BaseModel):
    items: List[Item]


# Entries

class Entry(BaseModel):
    id: int
    member_id: int
    item_id: int
    quantity: int
    total: int
    created_at: datetime

    @classmethod
    def from_rpc(cls, entry: rpc.Entry) -> "Entry":
        return cls(
            id=entry.id,
            member_id=entry.user_id,
            item_id=entry.item_id,
            quantity=entry.quantity,
            total=entry.total,
            created_at=entry.created_at,
        )


class CreateEntryRequest(RequestModel):
    member_id: ResourceID
    item_id: ResourceID
    quantity: Int32 = 0
    total: Int32 = 0


class ListEntriesByUserRequest(PageRequest):
    user_id: ResourceID


class ListEntriesByItemRequest(PageRequest):
    item_id: ResourceID


class ListEntriesResponse(BaseModel):
    entries: List[Entry]
