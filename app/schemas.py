# app/schemas.py
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from .models import Role

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
RoleCode = Literal["u", "a"]
Latitude = Annotated[float, Field(ge=-90, le=90, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180, le=180, allow_inf_nan=False)]


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserCreate(BaseModel):
    name: Name
    email: EmailStr
    password: str = Field(min_length=6)
    role_type: RoleCode


class UserUpdate(BaseModel):
    name: Optional[Name] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role_type: Optional[RoleCode] = None

    @field_validator("name", "email", "password", "role_type")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class ListingCreate(BaseModel):
    name: Name
    latitude: Latitude
    longitude: Longitude
    user_id: int = Field(ge=1)
    description: Optional[str] = Field(default=None, max_length=1000)


class ListingUpdate(BaseModel):
    name: Optional[Name] = None
    latitude: Optional[Latitude] = None
    longitude: Optional[Longitude] = None
    user_id: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name", "latitude", "longitude", "user_id")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role_type: Role
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    class Config:
        from_attributes = True


class ListingOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    latitude: float
    longitude: float
    user_id: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    class Config:
        from_attributes = True


class ListingWithOwner(ListingOut):
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class ListingSummary(BaseModel):
    """Mobile listing row: no description or coordinates, distance as a 2-decimal string."""
    id: int
    name: str
    distance: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
