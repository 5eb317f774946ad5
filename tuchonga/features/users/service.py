import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from tuchonga.common.counters import bump
from tuchonga.common.pagination import paginate
from tuchonga.common.utils import utc_now, sort_column
from tuchonga.core.database import atomic
from tuchonga.models import User, UserAnalytics, UserRole, ItemType

logger = logging.getLogger(__name__)

_SORTABLE = {"created_at": "created_at", "full_name": "full_name", "email": "email"}


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _check_unique(db: Session, user: User, data: dict) -> None:
    for field in ("email", "phone_number"):
        value = data.get(field)
        if value and value != getattr(user, field):
            clash = db.query(User.id).filter(getattr(User, field) == value, User.id != user.id).first()
            if clash:
                raise HTTPException(status_code=409, detail=f"{field} already in use")


def _apply_profile(user: User, data: dict) -> None:
    if "full_name" in data and not data.get("display_name"):
        user.display_name = data["full_name"]
    for k, v in data.items():
        if k == "has_completed_profile":
            continue
        if k == "display_name" and v is None:
            continue
        setattr(user, k, v)

    if data.get("has_completed_profile") is not None:
        user.has_completed_profile = data["has_completed_profile"]
        if user.has_completed_profile:
            user.profile_completed_at = utc_now()


def update_user(db: Session, user: User, payload) -> User:
    data = payload.model_dump(exclude_unset=True)
    _check_unique(db, user, data)
    with atomic(db):
        _apply_profile(user, data)
    db.refresh(user)
    return user


def complete_profile(db: Session, user: User, payload) -> User:
    """Save the submitted profile fields and mark the profile complete in one commit."""
    data = payload.model_dump(exclude_unset=True)
    _check_unique(db, user, data)
    with atomic(db):
        _apply_profile(user, data)
        user.has_completed_profile = True
        user.profile_completed_at = utc_now()
    db.refresh(user)
    logger.info("user %s completed profile", user.id)
    return user


def ensure_analytics(db: Session, user_id: int) -> UserAnalytics:
    """Return the analytics row for ``user_id``, creating it inside the caller's transaction."""
    row = db.get(UserAnalytics, user_id)
    if row is None:
        row = UserAnalytics(user_id=user_id)
        db.add(row)
        db.flush()
    return row


def get_analytics(db: Session, user_id: int) -> UserAnalytics:
    get_user(db, user_id)
    with atomic(db):
        row = ensure_analytics(db, user_id)
    db.refresh(row)
    return row


def bump_analytics(db: Session, user_id: int, stamp: Optional[str] = None, **deltas: int) -> None:
    """Add ``deltas`` to the user's analytics counters and stamp ``stamp`` with now.

    Must run inside the caller's transaction.
    """
    ensure_analytics(db, user_id)
    bump(
        db, UserAnalytics, UserAnalytics.user_id == user_id,
        set_values={stamp: utc_now()} if stamp else None,
        **deltas,
    )


def item_counter(prefix: str, item_type: ItemType) -> str:
    kind = "product" if item_type == ItemType.PRODUCT else "service"
    return f"{kind}_{prefix}"


def list_users(
    db: Session,
    page: int,
    limit: int,
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    has_completed_profile: Optional[bool] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    q = db.query(User).filter(User.role == (role or UserRole.USER))
    if is_active is not None:
        q = q.filter(User.is_active == is_active)
    if has_completed_profile is not None:
        q = q.filter(User.has_completed_profile == has_completed_profile)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            User.full_name.ilike(like),
            User.display_name.ilike(like),
            User.email.ilike(like),
            User.phone_number.like(like),
        ))
    q = q.order_by(sort_column(User, sort_by, sort_order, _SORTABLE, "created_at"), User.id.desc())
    return paginate(q, page, limit)


def count_users(db: Session, role: Optional[UserRole] = None, is_active: Optional[bool] = None) -> int:
    q = db.query(User)
    if role is not None:
        q = q.filter(User.role == role)
    if is_active is not None:
        q = q.filter(User.is_active == is_active)
    return q.count()


def set_active(db: Session, user_id: int, active: bool) -> User:
    user = get_user(db, user_id)
    with atomic(db):
        user.is_active = active
    db.refresh(user)
    logger.info("user %s %s", user_id, "reactivated" if active else "deactivated")
    return user
