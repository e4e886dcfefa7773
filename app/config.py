# app/config.py
"""Runtime configuration.

Environment variables (and an optional .env file) are read exactly once into
a frozen `Settings` object; everything else receives that object explicitly.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _normalize_db_url(url: str) -> str:
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


@dataclass(frozen=True)
class Settings:
    app_name: str = "Listings API"
    database_url: str = "sqlite:///./listings.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    jwt_secret: str = "replace_me"
    jwt_algorithm: str = "HS256"
    token_expire_hours: int = 24
    bcrypt_rounds: int = 10
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    log_level: str = "INFO"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            database_url=_normalize_db_url(os.getenv("DATABASE_URL", cls.database_url)),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", cls.db_pool_size)),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", cls.db_max_overflow)),
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            token_expire_hours=int(os.getenv("TOKEN_EXPIRE_HOURS", cls.token_expire_hours)),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", cls.bcrypt_rounds)),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", cls.openai_model),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            port=int(os.getenv("PORT", cls.port)),
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
