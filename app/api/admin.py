# app/api/admin.py
"""Admin endpoints. Everything except login requires an admin token."""
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from .. import services
from ..config import Settings, get_settings
from ..db import get_db
from ..models import Role
from ..pagination import page_params
from ..patch import ListingPatch, UserPatch
from ..security import Claim, require_roles
from ..utils import envelope
from ..validation import (
    validate_listing_create, validate_listing_update, validate_login,
    validate_user_create, validate_user_update,
)

router = APIRouter(prefix="/api/admin", tags=["admin"])
admin_only = require_roles(Role.ADMIN)


def created(message: str, result: Any) -> JSONResponse:
    return JSONResponse(status_code=201, content=jsonable_encoder(envelope(201, message, result)))


@router.post("/login")
def admin_login(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    credentials = validate_login(payload).unwrap()
    result = services.login(db, credentials, Role.ADMIN, settings)
    return envelope(200, "Admin logged in successfully", result)


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db), _: Claim = Depends(admin_only)):
    return envelope(200, "Success", services.dashboard_stats(db))


# users

@router.get("/users")
def list_users(
    page: str | None = None,
    per_page: str | None = None,
    db: Session = Depends(get_db),
    _: Claim = Depends(admin_only),
):
    p, pp = page_params(page, per_page)
    return envelope(200, "Success", services.list_users(db, p, pp))


@router.post("/users", status_code=201)
def create_user(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: Claim = Depends(admin_only),
):
    data = validate_user_create(payload).unwrap()
    return created("User created successfully", services.create_user(db, data, settings))


@router.put("/users/{user_id}")
def update_user(
    user_id: int,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: Claim = Depends(admin_only),
):
    data = validate_user_update(payload).unwrap()
    user = services.update_user(db, user_id, UserPatch.from_model(data), settings)
    return envelope(200, "User updated successfully", user)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    claim: Claim = Depends(admin_only),
):
    services.delete_user(db, user_id, actor_id=claim.user_id)
    return envelope(200, "User deleted successfully")


# listings

@router.get("/listings")
def list_listings(
    page: str | None = None,
    per_page: str | None = None,
    db: Session = Depends(get_db),
    _: Claim = Depends(admin_only),
):
    p, pp = page_params(page, per_page)
    return envelope(200, "Success", services.list_listings(db, p, pp))


@router.get("/listings/{listing_id}")
def get_listing(listing_id: int, db: Session = Depends(get_db), _: Claim = Depends(admin_only)):
    return envelope(200, "Success", services.get_listing(db, listing_id))


@router.post("/listings", status_code=201)
def create_listing(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: Claim = Depends(admin_only),
):
    data = validate_listing_create(payload).unwrap()
    return created("Listing created successfully", services.create_listing(db, data, settings))


@router.put("/listings/{listing_id}")
def update_listing(
    listing_id: int,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: Claim = Depends(admin_only),
):
    data = validate_listing_update(payload).unwrap()
    listing = services.update_listing(db, listing_id, ListingPatch.from_model(data), settings)
    return envelope(200, "Listing updated successfully", listing)


@router.delete("/listings/{listing_id}")
def delete_listing(listing_id: int, db: Session = Depends(get_db), _: Claim = Depends(admin_only)):
    services.delete_listing(db, listing_id)
    return envelope(200, "Listing deleted successfully")
