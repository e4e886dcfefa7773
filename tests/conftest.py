# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import crud
from app.config import get_settings
from app.db import Base, get_db
from app.main import app
from app.models import Role
from app.security import create_access_token, hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


def make_user(db, settings, name, email, password, role):
    return crud.create_user(db, {
        "name": name,
        "email": email,
        "password": hash_password(password, settings),
        "role_type": role,
    })


@pytest.fixture
def users(db, settings):
    return {
        "user": make_user(db, settings, "John Doe", "user@example.com", "password123", Role.USER),
        "admin": make_user(db, settings, "Admin User", "admin@example.com", "admin123", Role.ADMIN),
        "jane": make_user(db, settings, "Jane Smith", "jane@example.com", "password123", Role.USER),
    }


@pytest.fixture
def listings(db, users):
    owner = users["user"].id
    rows = [
        ("Starbucks Mid Valley", 3.1189, 101.6767, owner),
        ("Burger King", 3.1205, 101.6785, owner),
        ("Pizza Hut", 3.158, 101.7123, owner),
        ("Pavilion KL", 3.1494, 101.7131, users["jane"].id),
    ]
    return [
        crud.create_listing(db, {
            "name": name, "description": f"{name} description",
            "latitude": lat, "longitude": lon, "user_id": user_id,
        })
        for name, lat, lon, user_id in rows
    ]


def bearer(user, settings, **kwargs):
    token = create_access_token(user.id, Role(user.role_type), settings, **kwargs).access_token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(users, settings):
    return bearer(users["user"], settings)


@pytest.fixture
def admin_headers(users, settings):
    return bearer(users["admin"], settings)
