import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.jwt import ACCESS, decode_token, token_user_id
from tuchonga.features.auth.token_store import is_blacklisted
from tuchonga.models import User, UserRole, ADMIN_ROLES

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _credentials_exception(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    cred_exc = _credentials_exception()
    try:
        payload = decode_token(token, ACCESS)
        user_id = token_user_id(payload)
    except (JWTError, ValueError):
        raise cred_exc
    if is_blacklisted(payload["jti"]):
        raise cred_exc

    user = db.get(User, user_id)
    if not user:
        raise _credentials_exception("User not found")
    return user


# current user from bearer token
def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    user = _user_from_token(token, db)
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")
    return user


# anonymous access allowed; a bad token is treated as no token
def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if not token:
        return None
    try:
        user = _user_from_token(token, db)
    except HTTPException:
        logger.debug("ignoring invalid optional token")
        return None
    return user if user.is_active else None


def require_roles(*allowed: UserRole, detail: str = "Forbidden"):
    def _checker(current: User = Depends(get_current_user)) -> User:
        if current.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return current
    return _checker


require_admin = require_roles(*ADMIN_ROLES, detail="Admin access required")
require_super_admin = require_roles(UserRole.SUPER_ADMIN, detail="Super admin access required")
require_business_or_admin = require_roles(
    UserRole.BUSINESS, *ADMIN_ROLES, detail="Business or admin access required"
)
