"""
Partial-update codec.

Every mutable attribute of an update request is an ``OptionalField``: either
``UNSET`` (leave the stored value alone) or ``SetValue(v)`` (store ``v``,
even when ``v`` is a zero value or equals the current value). Only
``SetValue`` entries are encoded into the backend payload; the backend reads
an absent key as "do not touch".
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, Mapping, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class SetValue(Generic[T]):
    value: T


OptionalField = Union[_Unset, SetValue[T]]


class PartialUpdateCodec:
    """Convert update requests into the backend's optional-field contract."""

    def __init__(self, mutable_fields: Iterable[str]):
        self.mutable_fields = tuple(mutable_fields)

    def from_request(self, request: BaseModel) -> Dict[str, "OptionalField[Any]"]:
        """Read presence from a parsed request.

        A field that was omitted, or sent as JSON ``null``, is ``UNSET``.
        """
        provided = request.model_fields_set
        fields: Dict[str, OptionalField[Any]] = {}
        for name in self.mutable_fields:
            value = getattr(request, name)
            if name in provided and value is not None:
                fields[name] = SetValue(value)
            else:
                fields[name] = UNSET
        return fields

    def encode(self, fields: Mapping[str, "OptionalField[Any]"]) -> Dict[str, Any]:
        """Build the backend payload from the ``SetValue`` entries only."""
        payload: Dict[str, Any] = {}
        for name, field in fields.items():
            if name not in self.mutable_fields:
                raise KeyError(f"{name!r} is not a mutable attribute")
            if isinstance(field, SetValue):
                payload[name] = field.value
            elif field is not UNSET:
                raise TypeError(f"{name!r} must be UNSET or SetValue, got {type(field).__name__}")
        return payload

    @staticmethod
    def map_value(field: "OptionalField[T]", func: Callable[[T], Any]) -> "OptionalField[Any]":
        """Apply ``func`` to a set value; ``UNSET`` passes through."""
        if isinstance(field, SetValue):
            return SetValue(func(field.value))
        return UNSET
