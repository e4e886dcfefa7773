# app/security.py
"""Password hashing, access tokens and the role gate."""
from dataclasses import dataclass
from functools import lru_cache
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from fastapi import Depends, Request
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings, get_settings
from .errors import Forbidden, Unauthorized
from .models import Role

MISSING_TOKEN = "Missing token"
INVALID_TOKEN = "Invalid/Expired token"
EXPIRES_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


@lru_cache
def _hashing_context(rounds: int) -> CryptContext:
    return pwd_ctx.copy(bcrypt__rounds=rounds)


def hash_password(raw: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return _hashing_context(settings.bcrypt_rounds).hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    return pwd_ctx.verify(raw, hashed)


def dummy_verify() -> None:
    """Spend a hash comparison when there is no user, so lookups don't leak through timing."""
    pwd_ctx.dummy_verify()


@dataclass(frozen=True)
class Claim:
    user_id: int
    role: Role


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    expires_at: datetime

    @property
    def expires_at_display(self) -> str:
        return self.expires_at.strftime(EXPIRES_AT_FORMAT)


def create_access_token(
    user_id: int,
    role: Role,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> IssuedToken:
    """Sign a claim token. `exp` and the returned `expires_at` share one clock read."""
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.token_expire_hours)
    issued = (now or datetime.now(tz=timezone.utc)).replace(microsecond=0)
    expire = issued + expires_delta
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "role_type": Role(role).value,
        "iat": issued,
        "exp": expire,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return IssuedToken(access_token=token, expires_at=expire)


def decode_access_token(token: str, settings: Settings) -> Claim:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return Claim(user_id=int(payload["user_id"]), role=Role(payload["role_type"]))
    except (JWTError, KeyError, ValueError, TypeError):
        raise Unauthorized(INVALID_TOKEN)


def extract_token(headers: Mapping[str, str], query: Mapping[str, str]) -> Optional[str]:
    """Bearer header first, then `access_token` query param, then `x-access-token` header."""
    header = headers.get("authorization") or ""
    if header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
        if token:
            return token
    return query.get("access_token") or headers.get("x-access-token") or None


def authorize(
    headers: Mapping[str, str],
    query: Mapping[str, str],
    allowed_roles: Iterable[Role],
    settings: Settings,
) -> Claim:
    token = extract_token(headers, query)
    if not token:
        raise Unauthorized(MISSING_TOKEN)
    claim = decode_access_token(token, settings)
    allowed: Tuple[Role, ...] = tuple(Role(r) for r in allowed_roles)
    if allowed and claim.role not in allowed:
        raise Forbidden("Forbidden")
    return claim


def require_roles(*roles: Role):
    """FastAPI dependency admitting any of `roles`; no roles admits any valid token."""
    def dependency(request: Request, settings: Settings = Depends(get_settings)) -> Claim:
        claim = authorize(request.headers, request.query_params, roles, settings)
        request.state.claim = claim
        return claim
    return dependency
