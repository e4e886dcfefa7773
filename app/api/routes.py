# app/api/routes.py
"""Public and mobile (role = user) endpoints."""
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from .. import services
from ..config import Settings, get_settings
from ..db import get_db
from ..models import Role
from ..pagination import page_params
from ..security import Claim, require_roles
from ..utils import envelope
from ..validation import validate_coordinates, validate_login

router = APIRouter()

@router.get("/")
def root():
    return {
        "message": "Listings API Server",
        "endpoints": {
            "mobile": {
                "login": "POST /api/login",
                "listings": "GET /api/listing/get?latitude=X&longitude=Y",
            },
            "admin": {
                "login": "POST /api/admin/login",
                "dashboard": "GET /api/admin/dashboard",
                "users": "GET /api/admin/users",
                "listings": "GET /api/admin/listings",
            },
            "documentation": "/api-docs",
        },
    }

@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/api/login", tags=["mobile"])
def login(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    credentials = validate_login(payload).unwrap()
    result = services.login(db, credentials, Role.USER, settings)
    return envelope(200, "Logged in", result)


@router.get("/api/listing/get", tags=["mobile"])
def get_listings(
    latitude: str | None = None,
    longitude: str | None = None,
    page: str | None = None,
    per_page: str | None = None,
    claim: Claim = Depends(require_roles(Role.USER)),
    db: Session = Depends(get_db),
):
    lat, lon = validate_coordinates(latitude, longitude).unwrap()
    p, pp = page_params(page, per_page)
    result = services.get_listings(db, claim.user_id, lat, lon, p, pp)
    return envelope(200, "Success", result)
