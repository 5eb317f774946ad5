from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import get_current_user, require_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import CountResponse, DeleteResponse, Page
from tuchonga.models import User, UserRole
from . import schemas, service

router = APIRouter(prefix="/users", tags=["users"])


# ---- self service ----
@router.get("/me", response_model=schemas.UserRead)
def get_me(current: User = Depends(get_current_user)):
    return current


@router.put("/me", response_model=schemas.UserRead)
def update_me(payload: schemas.UserUpdate, current: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return service.update_user(db, current, payload)


@router.post("/me/complete-profile", response_model=schemas.UserRead)
def complete_profile(payload: schemas.UserUpdate, current: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return service.complete_profile(db, current, payload)


@router.get("/me/analytics", response_model=schemas.UserAnalyticsRead)
def my_analytics(current: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return service.get_analytics(db, current.id)


# ---- admin ----
@router.get("", response_model=Page[schemas.UserRead], dependencies=[Depends(require_admin)])
def list_users(
    paging: PageParams = Depends(),
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    has_completed_profile: Optional[bool] = None,
    sort_by: Literal["created_at", "full_name", "email"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    items, meta = service.list_users(
        db, paging.page, paging.limit,
        search=search, role=role, is_active=is_active,
        has_completed_profile=has_completed_profile,
        sort_by=sort_by, sort_order=sort_order,
    )
    return {"items": items, "meta": meta}


@router.get("/stats/count", response_model=CountResponse, dependencies=[Depends(require_admin)])
def count_users(role: Optional[UserRole] = None, is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return {"count": service.count_users(db, role, is_active)}


@router.get("/{user_id}", response_model=schemas.UserRead, dependencies=[Depends(require_admin)])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return service.get_user(db, user_id)


@router.put("/{user_id}", response_model=schemas.UserRead, dependencies=[Depends(require_admin)])
def update_user(user_id: int, payload: schemas.AdminUserUpdate, db: Session = Depends(get_db)):
    return service.update_user(db, service.get_user(db, user_id), payload)


@router.post("/{user_id}/deactivate", response_model=schemas.UserRead, dependencies=[Depends(require_admin)])
def deactivate_user(user_id: int, db: Session = Depends(get_db)):
    return service.set_active(db, user_id, False)


@router.post("/{user_id}/reactivate", response_model=schemas.UserRead, dependencies=[Depends(require_admin)])
def reactivate_user(user_id: int, db: Session = Depends(get_db)):
    return service.set_active(db, user_id, True)


# soft delete
@router.delete("/{user_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    service.set_active(db, user_id, False)
    return {"message": "User deleted successfully"}


@router.get("/{user_id}/analytics", response_model=schemas.UserAnalyticsRead, dependencies=[Depends(require_admin)])
def user_analytics(user_id: int, db: Session = Depends(get_db)):
    return service.get_analytics(db, user_id)
