# app/patch.py
"""Partial-update values: each field is `Present(value)` or `ABSENT`."""
from dataclasses import dataclass, fields
from typing import Any, Dict, Generic, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")


class _Absent:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


Field = Union[Present[T], _Absent]


@dataclass(frozen=True)
class Patch:
    """Base for patch types; subclasses declare `Field[...]` attributes defaulting to ABSENT."""

    @classmethod
    def from_model(cls, model: BaseModel):
        sent = model.model_fields_set
        values = {
            f.name: Present(getattr(model, f.name))
            for f in fields(cls)
            if f.name in sent
        }
        return cls(**values)

    def is_set(self, name: str) -> bool:
        return isinstance(getattr(self, name), Present)

    def get(self, name: str, default: Any = None) -> Any:
        value = getattr(self, name)
        return value.value if isinstance(value, Present) else default

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name).value
            for f in fields(self)
            if isinstance(getattr(self, f.name), Present)
        }

    def replace(self, **values: Any):
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update({k: Present(v) for k, v in values.items()})
        return type(self)(**current)


@dataclass(frozen=True)
class UserPatch(Patch):
    name: Field[str] = ABSENT
    email: Field[str] = ABSENT
    password: Field[str] = ABSENT
    role_type: Field[str] = ABSENT


@dataclass(frozen=True)
class ListingPatch(Patch):
    name: Field[str] = ABSENT
    description: Field[Any] = ABSENT
    latitude: Field[float] = ABSENT
    longitude: Field[float] = ABSENT
    user_id: Field[int] = ABSENT
