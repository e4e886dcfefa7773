"""Recreate the schema and load sample data.

Usage: python setup_db.py
"""
from app.config import get_settings
from app.db import Base, SessionLocal, engine
from app.models import Listing, Role, User
from app.security import hash_password
from app.utils import get_logger

logger = get_logger("setup-db")

USERS = [
    {"name": "John Doe", "email": "user@example.com", "password": "password123", "role_type": Role.USER},
    {"name": "Admin User", "email": "admin@example.com", "password": "admin123", "role_type": Role.ADMIN},
    {"name": "Jane Smith", "email": "jane@example.com", "password": "password123", "role_type": Role.USER},
]

# around Kuala Lumpur
LISTINGS = [
    {"name": "Starbucks Mid Valley", "description": "Coffee shop located in Mid Valley Megamall",
     "latitude": 3.1189, "longitude": 101.6767, "owner": "user@example.com"},
    {"name": "Burger King", "description": "Fast food restaurant serving burgers and fries",
     "latitude": 3.1205, "longitude": 101.6785, "owner": "user@example.com"},
    {"name": "Pizza Hut", "description": "Italian-American restaurant chain serving pizza",
     "latitude": 3.158, "longitude": 101.7123, "owner": "user@example.com"},
    {"name": "Sunway Pyramid", "description": "Large shopping mall with retail stores and entertainment",
     "latitude": 3.0733, "longitude": 101.6067, "owner": "user@example.com"},
    {"name": "KLCC Twin Towers", "description": "Iconic twin skyscrapers and shopping center",
     "latitude": 3.1581, "longitude": 101.7117, "owner": "admin@example.com"},
    {"name": "Pavilion KL", "description": "Upscale shopping mall in Bukit Bintang",
     "latitude": 3.1494, "longitude": 101.7131, "owner": "jane@example.com"},
]


def reset_schema(bind=engine):
    logger.info("Dropping existing tables...")
    Base.metadata.drop_all(bind=bind)
    logger.info("Creating tables...")
    Base.metadata.create_all(bind=bind)


def seed(db, settings=None):
    settings = settings or get_settings()
    hashes = {}
    users = {}
    for u in USERS:
        if u["password"] not in hashes:
            hashes[u["password"]] = hash_password(u["password"], settings)
        users[u["email"]] = User(**{**u, "password": hashes[u["password"]]})
    db.add_all(users.values())
    for item in LISTINGS:
        fields = {k: v for k, v in item.items() if k != "owner"}
        db.add(Listing(owner=users[item["owner"]], **fields))
    db.commit()
    logger.info("Seeded %d users and %d listings", len(USERS), len(LISTINGS))


def main():
    reset_schema()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()

    print("Login credentials:")
    print("   Admin: admin@example.com / admin123")
    print("   User:  user@example.com / password123")
    print("   User:  jane@example.com / password123")


if __name__ == "__main__":
    main()
