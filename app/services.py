# app/services.py
from typing import Any, Dict, Iterable

from sqlalchemy.orm import Session

from . import crud
from .config import Settings
from .describe import describe_location
from .errors import Conflict, Forbidden, NotFound, Unauthorized
from .geo import rank_by_distance
from .models import Role
from .pagination import offset_for, paginate
from .patch import ListingPatch, UserPatch
from .schemas import (
    ListingCreate, ListingOut, ListingSummary, ListingWithOwner, LoginIn, UserCreate, UserOut,
)
from .security import create_access_token, dummy_verify, hash_password, verify_password
from .utils import logger


def user_out(user) -> Dict[str, Any]:
    return UserOut.model_validate(user).model_dump()

def listing_out(listing) -> Dict[str, Any]:
    return ListingOut.model_validate(listing).model_dump()

def listing_with_owner(row) -> Dict[str, Any]:
    listing, user_name, user_email = row
    return ListingWithOwner(
        **listing_out(listing), user_name=user_name, user_email=user_email
    ).model_dump()


# auth

def login(db: Session, credentials: LoginIn, role: Role, settings: Settings) -> Dict[str, Any]:
    """Check email/password and issue a token for a user of `role`."""
    user = crud.get_user_by_email(db, credentials.email)
    if user is None:
        dummy_verify()
        raise Unauthorized("Invalid credentials")
    if not verify_password(credentials.password, user.password):
        raise Unauthorized("Invalid credentials")
    if Role(user.role_type) != role:
        raise Forbidden("Admin access required" if role == Role.ADMIN else "Forbidden")

    issued = create_access_token(user.id, role, settings)
    logger.info("User %s logged in (role=%s)", user.id, role.value)
    result = {
        "user_id": user.id,
        "access_token": issued.access_token,
        "token_type": "Bearer",
        "role_type": role.value,
        "expires_at": issued.expires_at_display,
    }
    if role == Role.ADMIN:
        result["name"] = user.name
        result["email"] = user.email
    return result


# mobile listings

def get_listings(
    db: Session, user_id: int, latitude: float, longitude: float, page: int, per_page: int
) -> Dict[str, Any]:
    """The caller's listings, nearest to (latitude, longitude) first, one page at a time.

    The sort key is computed, so the whole owned set is loaded and ranked in
    memory before slicing.
    """
    listings = crud.listings_for_user(db, user_id)
    ranked = rank_by_distance(listings, latitude, longitude)
    data = [
        ListingSummary(
            id=s.listing.id,
            name=s.listing.name,
            distance=s.display_distance,
            created_at=s.listing.created_at,
            updated_at=s.listing.updated_at,
        ).model_dump()
        for s in paginate(ranked, page, per_page)
    ]
    return {"current_page": page, "data": data}


# admin: users

def list_users(db: Session, page: int, per_page: int) -> Dict[str, Any]:
    res = crud.list_users(db, skip=offset_for(page, per_page), limit=per_page)
    return {
        "current_page": page,
        "per_page": per_page,
        "total": res["total"],
        "data": [user_out(u) for u in res["items"]],
    }

def create_user(db: Session, payload: UserCreate, settings: Settings) -> Dict[str, Any]:
    if crud.email_taken(db, payload.email):
        raise Conflict("Email already exists")
    user = crud.create_user(db, {
        "name": payload.name,
        "email": payload.email,
        "password": hash_password(payload.password, settings),
        "role_type": Role(payload.role_type),
    })
    logger.info("Created user %s (%s)", user.id, user.email)
    return user_out(user)

def update_user(db: Session, user_id: int, patch: UserPatch, settings: Settings) -> Dict[str, Any]:
    user = crud.get_user(db, user_id)
    if user is None:
        raise NotFound("User not found")
    email = patch.get("email")
    if email is not None and email != user.email and crud.email_taken(db, email, exclude_id=user_id):
        raise Conflict("Email already exists")

    updates = patch.changes()
    if "password" in updates:
        updates["password"] = hash_password(updates["password"], settings)
    if "role_type" in updates:
        updates["role_type"] = Role(updates["role_type"])
    user = crud.update_user(db, user, updates)
    logger.info("Updated user %s fields=%s", user_id, sorted(updates))
    return user_out(user)

def delete_user(db: Session, user_id: int, actor_id: int) -> None:
    user = crud.get_user(db, user_id)
    if user is None:
        raise NotFound("User not found")
    if user_id == actor_id:
        raise Forbidden("Cannot delete your own account")
    crud.delete_user(db, user)
    logger.info("Deleted user %s (by %s)", user_id, actor_id)


# admin: listings

def list_listings(db: Session, page: int, per_page: int) -> Dict[str, Any]:
    res = crud.list_listings(db, skip=offset_for(page, per_page), limit=per_page)
    return {
        "current_page": page,
        "per_page": per_page,
        "total": res["total"],
        "data": [listing_with_owner(row) for row in res["items"]],
    }

def get_listing(db: Session, listing_id: int) -> Dict[str, Any]:
    row = crud.get_listing_with_owner(db, listing_id)
    if row is None:
        raise NotFound("Listing not found")
    return listing_with_owner(row)

def create_listing(db: Session, payload: ListingCreate, settings: Settings) -> Dict[str, Any]:
    if crud.get_user(db, payload.user_id) is None:
        raise NotFound("User not found")
    description = payload.description or describe_location(payload.name, settings)
    listing = crud.create_listing(db, {
        "name": payload.name,
        "description": description,
        "latitude": payload.latitude,
        "longitude": payload.longitude,
        "user_id": payload.user_id,
    })
    logger.info("Created listing %s for user %s", listing.id, listing.user_id)
    return listing_out(listing)

def update_listing(db: Session, listing_id: int, patch: ListingPatch, settings: Settings) -> Dict[str, Any]:
    listing = crud.get_listing(db, listing_id)
    if listing is None:
        raise NotFound("Listing not found")
    if patch.is_set("user_id") and crud.get_user(db, patch.get("user_id")) is None:
        raise NotFound("User not found")
    # a rename without a new description gets a fresh one
    if patch.is_set("name") and not patch.get("description"):
        patch = patch.replace(description=describe_location(patch.get("name"), settings))

    updates = patch.changes()
    listing = crud.update_listing(db, listing, updates)
    logger.info("Updated listing %s fields=%s", listing_id, sorted(updates))
    return listing_out(listing)

def delete_listing(db: Session, listing_id: int) -> None:
    listing = crud.get_listing(db, listing_id)
    if listing is None:
        raise NotFound("Listing not found")
    crud.delete_listing(db, listing)
    logger.info("Deleted listing %s", listing_id)


# admin: dashboard

def _rows(rows: Iterable) -> list:
    return [dict(r._mapping) for r in rows]

def dashboard_stats(db: Session) -> Dict[str, Any]:
    return {
        "total_users": crud.count_users(db),
        "total_listings": crud.count_listings(db),
        "total_admins": crud.count_users(db, Role.ADMIN),
        "recent_listings": _rows(crud.recent_listings(db, limit=5)),
    }
