# app/validation.py
"""Per-shape request validation returning field-level problems."""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ValidationFailed
from .schemas import ListingCreate, ListingUpdate, LoginIn, UserCreate, UserUpdate

M = TypeVar("M")

LOGIN_MESSAGES = {
    "email": "Valid email is required",
    "password": "Password is required",
}

USER_MESSAGES = {
    "name": "Name is required and must be less than 255 characters",
    "email": "Valid email is required",
    "password": "Password must be at least 6 characters",
    "role_type": 'Role type must be either "u" or "a"',
}

LISTING_MESSAGES = {
    "name": "Name is required and must be less than 255 characters",
    "latitude": "Latitude must be between -90 and 90",
    "longitude": "Longitude must be between -180 and 180",
    "user_id": "User ID must be a positive integer",
    "description": "Description must be less than 1000 characters",
}

COORDINATES_REQUIRED = "Valid latitude and longitude are required"
COORDINATES_RANGE = "Latitude must be between -90 and 90, longitude between -180 and 180"


@dataclass
class Validated(Generic[M]):
    value: Optional[M] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)
    message: str = ValidationFailed.message

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> M:
        if self.errors:
            raise ValidationFailed(self.message, errors=self.errors)
        return self.value


def _problems(exc: ValidationError, messages: Dict[str, str]) -> List[Dict[str, Any]]:
    seen = set()
    problems = []
    for err in exc.errors():
        loc = err.get("loc") or ("body",)
        name = str(loc[0])
        if name in seen:
            continue
        seen.add(name)
        problems.append({"field": name, "message": messages.get(name, err.get("msg"))})
    return problems


def _validate(model_cls: Type[BaseModel], data: Any, messages: Dict[str, str]) -> Validated:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return Validated(errors=[{"field": "body", "message": "Request body must be a JSON object"}])
    try:
        return Validated(value=model_cls.model_validate(data))
    except ValidationError as exc:
        return Validated(errors=_problems(exc, messages))


def validate_login(data: Any) -> Validated[LoginIn]:
    return _validate(LoginIn, data, LOGIN_MESSAGES)


def validate_user_create(data: Any) -> Validated[UserCreate]:
    return _validate(UserCreate, data, USER_MESSAGES)


def validate_user_update(data: Any) -> Validated[UserUpdate]:
    return _validate(UserUpdate, data, USER_MESSAGES)


def validate_listing_create(data: Any) -> Validated[ListingCreate]:
    return _validate(ListingCreate, data, LISTING_MESSAGES)


def validate_listing_update(data: Any) -> Validated[ListingUpdate]:
    return _validate(ListingUpdate, data, LISTING_MESSAGES)


def _parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def validate_coordinates(latitude: Any, longitude: Any) -> Validated[Tuple[float, float]]:
    lat = _parse_float(latitude)
    lon = _parse_float(longitude)
    if lat is None or lon is None:
        errors = []
        if lat is None:
            errors.append({"field": "latitude", "message": COORDINATES_REQUIRED})
        if lon is None:
            errors.append({"field": "longitude", "message": COORDINATES_REQUIRED})
        return Validated(errors=errors, message=COORDINATES_REQUIRED)
    errors = []
    if not -90 <= lat <= 90:
        errors.append({"field": "latitude", "message": LISTING_MESSAGES["latitude"]})
    if not -180 <= lon <= 180:
        errors.append({"field": "longitude", "message": LISTING_MESSAGES["longitude"]})
    if errors:
        return Validated(errors=errors, message=COORDINATES_RANGE)
    return Validated(value=(lat, lon))
