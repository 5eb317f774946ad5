from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import uuid

from jose import JWTError, jwt
from tuchonga.core.config import (
    JWT_SECRET_KEY,
    JWT_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_TOKEN_EXPIRE_DAYS,
)
from tuchonga.models import UserRole

ACCESS = "access"
REFRESH = "refresh"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(user_id: int, token_type: str, lifetime: timedelta, **claims: Any) -> str:
    now = _now()
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": now + lifetime,
    }
    payload.update(claims)
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


# ACCESS TOKEN, carries the role so guards can be read off the token
def create_access_token(user_id: int, role: UserRole, additional_claims: Optional[dict[str, Any]] = None) -> str:
    return _encode(
        user_id,
        ACCESS,
        timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        role=UserRole(role).value,
        **(additional_claims or {}),
    )


# REFRESH TOKEN
def create_refresh_token(user_id: int) -> str:
    return _encode(user_id, REFRESH, timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str, expected_type: Optional[str] = None) -> dict[str, Any]:
    """Check signature and expiry, and the token type when ``expected_type`` is given.

    Raises ``JWTError`` for any invalid token.
    """
    payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    if expected_type is not None and payload.get("type") != expected_type:
        raise JWTError(f"expected a {expected_type} token")
    if not payload.get("sub") or not payload.get("jti"):
        raise JWTError("token is missing sub or jti")
    return payload


def token_user_id(payload: dict[str, Any]) -> int:
    return int(payload["sub"])


def expires_at(payload: dict[str, Any]) -> datetime:
    # jose hands exp back as an int timestamp after decode
    exp = payload["exp"]
    if isinstance(exp, datetime):
        return exp if exp.tzinfo else exp.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(int(exp), tz=timezone.utc)


def exp_seconds_left(payload: dict[str, Any]) -> int:
    if payload.get("exp") is None:
        return 0
    return max(0, int((expires_at(payload) - _now()).total_seconds()))
