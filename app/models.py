# app/models.py
"""SQLAlchemy ORM models for persisted entities.

Defines `User` and `Listing`. A listing always belongs to exactly one user and
is removed together with it.
"""
import enum

from sqlalchemy import (
    Column, Integer, String, Text, Float, TIMESTAMP, Enum, ForeignKey,
    CheckConstraint, Index, func,
)
from sqlalchemy.orm import relationship

from .db import Base


class Role(str, enum.Enum):
    USER = "u"
    ADMIN = "a"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role_type = Column(
        Enum(Role, values_callable=lambda roles: [r.value for r in roles], name="role_type"),
        nullable=False,
        default=Role.USER,
        comment="u = user, a = admin",
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    listings = relationship("Listing", back_populates="owner", cascade="all, delete-orphan")


class Listing(Base):
    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_listings_latitude"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_listings_longitude"),
    )
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="listings")

Index("idx_listings_lat_lon", Listing.latitude, Listing.longitude)
