from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from inventory_pro.core.config import settings
from inventory_pro.core.errors import TokenExpired, TokenMalformed


# Configure bcrypt with explicit backend to avoid compatibility issues
password_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return password_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return password_context.verify(password, hashed_password)


def dummy_verify() -> None:
    """Burn the same time as a real verification when there is no hash to check."""
    password_context.dummy_verify()


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    tenant_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


def create_token(user_id: int, tenant_id: int, role: str, expires_minutes: Optional[int] = None) -> str:
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "tenant_id": tenant_id,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenClaims:
    """
    Check signature, structure and expiry of an access token.

    Whether the principal is still active is a store lookup and is left to
    the caller.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired()
    except jwt.PyJWTError:
        raise TokenMalformed()

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise TokenMalformed()
    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            tenant_id=int(payload["tenant_id"]),
            role=str(payload["role"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise TokenMalformed()
