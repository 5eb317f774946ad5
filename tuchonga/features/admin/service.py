import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from tuchonga.core.database import atomic
from tuchonga.core.security.password import hash_password
from tuchonga.models import User, AdminAuth, UserRole, ADMIN_ROLES

logger = logging.getLogger(__name__)


def _full_name(firstname: Optional[str], lastname: Optional[str]) -> str:
    return f"{(firstname or '').strip()} {(lastname or '').strip()}".strip()


def _staff_query(db: Session):
    return db.query(User).filter(User.role.in_(ADMIN_ROLES))


def super_admin_exists(db: Session) -> bool:
    return db.query(User.id).filter(User.role == UserRole.SUPER_ADMIN).first() is not None


def _create_staff(db: Session, payload, role: UserRole) -> User:
    if db.query(User.id).filter(User.email == payload.email).first():
        raise HTTPException(status_code=409, detail="User with this email already exists")

    full_name = _full_name(payload.firstname, payload.lastname)
    with atomic(db):
        user = User(
            email=payload.email,
            full_name=full_name,
            display_name=full_name,
            firstname=payload.firstname.strip(),
            lastname=payload.lastname.strip(),
            phone_number=payload.phone_number,
            profile_image=getattr(payload, "profile_image", None),
            role=role,
            has_completed_profile=True,
            is_active=True,
        )
        user.admin_auth = AdminAuth(password_hash=hash_password(payload.password))
        db.add(user)

    db.refresh(user)
    return user


# first account of the installation; refused once a super admin exists
def create_super_admin(db: Session, payload) -> User:
    if super_admin_exists(db):
        raise HTTPException(status_code=400, detail="Super admin already exists")
    user = _create_staff(db, payload, UserRole.SUPER_ADMIN)
    logger.info("super admin %s created", user.id)
    return user


def create_admin(db: Session, payload) -> User:
    user = _create_staff(db, payload, payload.role)
    logger.info("staff account %s created with role %s", user.id, user.role.value)
    return user


def list_admins(
    db: Session,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> list[User]:
    q = _staff_query(db)
    if role is not None:
        q = q.filter(User.role == role)
    if is_active is not None:
        q = q.filter(User.is_active == is_active)
    q = q.order_by(User.created_at.desc(), User.id.desc())
    if offset:
        q = q.offset(offset)
    if limit:
        q = q.limit(limit)
    return q.all()


def get_admin(db: Session, admin_id: int) -> User:
    admin = _staff_query(db).filter(User.id == admin_id).first()
    if not admin:
        raise HTTPException(status_code=404, detail="Admin not found")
    return admin


def update_admin(db: Session, actor: User, admin_id: int, payload) -> User:
    # super admins edit anyone, everybody else only themselves
    if actor.role != UserRole.SUPER_ADMIN and actor.id != admin_id:
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    admin = get_admin(db, admin_id)
    data = payload.model_dump(exclude_unset=True)

    if "role" in data and actor.role != UserRole.SUPER_ADMIN:
        data.pop("role")
    if "is_active" in data and actor.role != UserRole.SUPER_ADMIN:
        data.pop("is_active")

    if data.get("email") and data["email"] != admin.email:
        clash = db.query(User.id).filter(User.email == data["email"], User.id != admin_id).first()
        if clash:
            raise HTTPException(status_code=409, detail="User with this email already exists")

    with atomic(db):
        password = data.pop("password", None)
        for k, v in data.items():
            if v is not None:
                setattr(admin, k, v)

        if "firstname" in data or "lastname" in data:
            admin.full_name = _full_name(admin.firstname, admin.lastname)
            admin.display_name = admin.full_name

        if password:
            if admin.admin_auth:
                admin.admin_auth.password_hash = hash_password(password)
            else:
                admin.admin_auth = AdminAuth(password_hash=hash_password(password))

    db.refresh(admin)
    logger.info("admin %s updated by %s", admin_id, actor.id)
    return admin


# soft delete
def delete_admin(db: Session, actor: User, admin_id: int) -> None:
    if actor.id == admin_id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    admin = get_admin(db, admin_id)
    with atomic(db):
        admin.is_active = False
    logger.info("admin %s deactivated by %s", admin_id, actor.id)


def count_admins(db: Session, role: Optional[UserRole] = None) -> int:
    q = _staff_query(db)
    if role is not None:
        q = q.filter(User.role == role)
    return q.count()
