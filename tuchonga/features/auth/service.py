import hashlib
import logging
from datetime import timedelta

from fastapi import HTTPException, status
from jose import JWTError
from sqlalchemy.orm import Session

from tuchonga.common.utils import utc_now, as_utc
from tuchonga.core.config import MAX_LOGIN_ATTEMPTS, LOGIN_LOCKOUT_MINUTES
from tuchonga.core.database import atomic
from tuchonga.core.security.password import hash_password, verify_password
from tuchonga.core.security.jwt import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    expires_at,
    token_user_id,
)
from tuchonga.features.auth import token_store
from tuchonga.models import User, AdminAuth, UserAnalytics, RefreshToken, UserRole

logger = logging.getLogger(__name__)


def _hash(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


# insert or overwrite the single refresh row for this user
def _upsert_refresh_db(db: Session, user_id: int, refresh_token: str, refresh_payload: dict) -> None:
    row = db.get(RefreshToken, user_id)
    if not row:
        row = RefreshToken(user_id=user_id)
        db.add(row)

    row.jti = refresh_payload["jti"]
    row.token_hash = _hash(refresh_token)
    row.expires_at = expires_at(refresh_payload)
    row.revoked_at = None


def _issue_tokens(db: Session, user: User) -> tuple[str, str]:
    access = create_access_token(user.id, user.role)
    refresh = create_refresh_token(user.id)
    refresh_payload = decode_token(refresh, REFRESH)

    token_store.remember_refresh(refresh_payload)
    _upsert_refresh_db(db, user.id, refresh, refresh_payload)
    return access, refresh


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.admin_auth:
        logger.warning("login rejected for unknown email %s", email)
        raise _invalid_credentials()

    auth = user.admin_auth
    now = utc_now()
    locked_until = as_utc(auth.locked_until)
    if locked_until and locked_until > now:
        raise HTTPException(status_code=403, detail="Account is locked. Please try again later.")

    if not verify_password(password, auth.password_hash):
        with atomic(db):
            auth.login_attempts = (auth.login_attempts or 0) + 1
            if auth.login_attempts >= MAX_LOGIN_ATTEMPTS:
                auth.locked_until = now + timedelta(minutes=LOGIN_LOCKOUT_MINUTES)
                auth.login_attempts = 0
                logger.warning("user %s locked after repeated failed logins", user.id)
        raise _invalid_credentials()

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    return user


def login_issue_tokens(db: Session, email: str, password: str) -> tuple[User, str, str]:
    user = authenticate_user(db, email, password)

    with atomic(db):
        user.admin_auth.login_attempts = 0
        user.admin_auth.locked_until = None
        user.admin_auth.last_login_at = utc_now()
        access, refresh = _issue_tokens(db, user)

    logger.info("user %s logged in", user.id)
    return user, access, refresh


def register_user(db: Session, payload) -> User:
    if db.query(User.id).filter(User.email == payload.email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    with atomic(db):
        user = User(
            email=payload.email,
            full_name=payload.full_name,
            display_name=payload.display_name or payload.full_name,
            profile_image=payload.profile_image,
            location=payload.location,
            gender=payload.gender,
            role=UserRole.USER,
            has_completed_profile=False,
            is_active=True,
        )
        user.admin_auth = AdminAuth(password_hash=hash_password(payload.password))
        user.analytics = UserAnalytics()
        db.add(user)

    db.refresh(user)
    logger.info("registered user %s", user.id)
    return user


def refresh_rotate_tokens(db: Session, refresh_token: str) -> tuple[str, str]:
    # 1) the token itself
    try:
        payload = decode_token(refresh_token, REFRESH)
        user_id = token_user_id(payload)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    refresh_jti = payload["jti"]

    # 2) must be the jti currently held in redis
    if not token_store.is_current_refresh(payload):
        token_store.delete_refresh(user_id)
        raise HTTPException(status_code=401, detail="Refresh token revoked")

    # 3) and match the stored hash
    row = db.get(RefreshToken, user_id)
    if (not row) or (row.revoked_at is not None):
        raise HTTPException(status_code=401, detail="Refresh token revoked")
    if row.jti != refresh_jti or row.token_hash != _hash(refresh_token):
        with atomic(db):
            row.revoked_at = utc_now()
        token_store.delete_refresh(user_id)
        logger.warning("refresh token reuse detected for user %s", user_id)
        raise HTTPException(status_code=401, detail="Refresh token reused")

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")

    # 4) rotate; the old refresh token is dead from here on
    with atomic(db):
        new_access, new_refresh = _issue_tokens(db, user)
    return new_access, new_refresh


def logout(db: Session, access_token: str) -> None:
    try:
        payload = decode_token(access_token, ACCESS)
        user_id = token_user_id(payload)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid access token")

    token_store.blacklist_access(payload)
    token_store.delete_refresh(user_id)

    row = db.get(RefreshToken, user_id)
    if row and row.revoked_at is None:
        with atomic(db):
            row.revoked_at = utc_now()
    logger.info("user %s logged out", user_id)
