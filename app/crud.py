# app/crud.py
"""Single-statement persistence helpers for `User` and `Listing`.

Each write commits on its own; there is no multi-statement transaction.
"""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import Listing, Role, User


# users

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return q.first() is not None

def list_users(db: Session, skip: int = 0, limit: int = 10) -> Dict[str, Any]:
    q = db.query(User)
    total = q.count()
    items = q.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit).all()
    return {"total": total, "items": items}

def create_user(db: Session, data: Dict[str, Any]) -> User:
    obj = User(**data)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def update_user(db: Session, obj: User, updates: Dict[str, Any]) -> User:
    for k, v in updates.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj

def delete_user(db: Session, obj: User) -> None:
    # ORM cascade removes the user's listings as well
    db.delete(obj)
    db.commit()

def count_users(db: Session, role: Optional[Role] = None) -> int:
    q = db.query(func.count(User.id))
    if role is not None:
        q = q.filter(User.role_type == role)
    return q.scalar() or 0


# listings

def get_listing(db: Session, listing_id: int) -> Optional[Listing]:
    return db.get(Listing, listing_id)

def get_listing_with_owner(db: Session, listing_id: int) -> Optional[Tuple[Listing, str, str]]:
    stmt = (
        select(Listing, User.name, User.email)
        .join(User, Listing.user_id == User.id)
        .where(Listing.id == listing_id)
    )
    return db.execute(stmt).first()

def listings_for_user(db: Session, user_id: int) -> List[Listing]:
    """Every listing owned by `user_id`, in id order; ranking happens in memory."""
    return db.query(Listing).filter(Listing.user_id == user_id).order_by(Listing.id).all()

def list_listings(db: Session, skip: int = 0, limit: int = 10) -> Dict[str, Any]:
    total = db.query(func.count(Listing.id)).scalar() or 0
    stmt = (
        select(Listing, User.name, User.email)
        .join(User, Listing.user_id == User.id)
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return {"total": total, "items": db.execute(stmt).all()}

def recent_listings(db: Session, limit: int = 5) -> list:
    stmt = (
        select(Listing.name, Listing.created_at, User.name.label("user_name"))
        .join(User, Listing.user_id == User.id)
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .limit(limit)
    )
    return db.execute(stmt).all()

def count_listings(db: Session) -> int:
    return db.query(func.count(Listing.id)).scalar() or 0

def create_listing(db: Session, data: Dict[str, Any]) -> Listing:
    obj = Listing(**data)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def update_listing(db: Session, obj: Listing, updates: Dict[str, Any]) -> Listing:
    for k, v in updates.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj

def delete_listing(db: Session, obj: Listing) -> None:
    db.delete(obj)
    db.commit()
