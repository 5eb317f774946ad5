from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import require_admin, require_super_admin
from tuchonga.common.schemas.responses import CountResponse, DeleteResponse
from tuchonga.models import User, UserRole
from . import schemas, service

router = APIRouter(prefix="/admin", tags=["admin"])


# public: used by the SPA to decide whether to show the setup screen
@router.get("/setup/check", response_model=schemas.SetupCheckResponse)
def setup_check(db: Session = Depends(get_db)):
    return {"super_admin_exists": service.super_admin_exists(db)}


# public: one-time bootstrap
@router.post("/setup/super-admin", response_model=schemas.AdminRead, status_code=status.HTTP_201_CREATED)
def setup_super_admin(payload: schemas.SuperAdminSetup, db: Session = Depends(get_db)):
    return service.create_super_admin(db, payload)


@router.get("", response_model=list[schemas.AdminRead], dependencies=[Depends(require_admin)])
def list_admins(
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    return service.list_admins(db, role=role, is_active=is_active, limit=limit, offset=offset)


@router.get("/stats/count", response_model=CountResponse, dependencies=[Depends(require_admin)])
def count_admins(role: Optional[UserRole] = None, db: Session = Depends(get_db)):
    return {"count": service.count_admins(db, role)}


@router.get("/{admin_id}", response_model=schemas.AdminRead, dependencies=[Depends(require_admin)])
def get_admin(admin_id: int, db: Session = Depends(get_db)):
    return service.get_admin(db, admin_id)


@router.post("", response_model=schemas.AdminRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_super_admin)])
def create_admin(payload: schemas.AdminCreate, db: Session = Depends(get_db)):
    return service.create_admin(db, payload)


@router.put("/{admin_id}", response_model=schemas.AdminRead)
def update_admin(
    admin_id: int,
    payload: schemas.AdminUpdate,
    current: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return service.update_admin(db, current, admin_id, payload)


@router.delete("/{admin_id}", response_model=DeleteResponse)
def delete_admin(admin_id: int, current: User = Depends(require_super_admin), db: Session = Depends(get_db)):
    service.delete_admin(db, current, admin_id)
    return {"message": "Admin deleted successfully"}
