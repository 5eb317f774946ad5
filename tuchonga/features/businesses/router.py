from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import require_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import Page
from tuchonga.features.catalog.schemas import ProductRead, ServiceRead
from tuchonga.models import Product, Service
from . import schemas, service

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.get("", response_model=Page[schemas.BusinessRead])
def list_businesses(
    paging: PageParams = Depends(),
    search: Optional[str] = None,
    is_verified: Optional[bool] = None,
    status: Optional[bool] = None,
    sort_by: Literal["created_at", "name"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    items, meta = service.list_businesses(
        db, paging.page, paging.limit,
        search=search, is_verified=is_verified, status=status,
        sort_by=sort_by, sort_order=sort_order,
    )
    return {"items": items, "meta": meta}


@router.get("/stats/overview", response_model=schemas.BusinessStats, dependencies=[Depends(require_admin)])
def business_stats(db: Session = Depends(get_db)):
    return service.business_stats(db)


@router.get("/{business_id}", response_model=schemas.BusinessRead)
def get_business(business_id: int, db: Session = Depends(get_db)):
    return service.get_business(db, business_id)


@router.post("", response_model=schemas.BusinessRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def create_business(payload: schemas.BusinessCreate, db: Session = Depends(get_db)):
    return service.create_business(db, payload)


@router.put("/{business_id}", response_model=schemas.BusinessRead, dependencies=[Depends(require_admin)])
def update_business(business_id: int, payload: schemas.BusinessUpdate, db: Session = Depends(get_db)):
    return service.update_business(db, business_id, payload)


@router.delete("/{business_id}", response_model=schemas.BusinessDeleteResponse, dependencies=[Depends(require_admin)])
def delete_business(business_id: int, db: Session = Depends(get_db)):
    hard = service.delete_business(db, business_id)
    return {"message": "Business deleted successfully", "hard_deleted": hard}


@router.post("/{business_id}/verify", response_model=schemas.BusinessRead, dependencies=[Depends(require_admin)])
def verify_business(business_id: int, db: Session = Depends(get_db)):
    return service.set_verified(db, business_id, True)


@router.post("/{business_id}/unverify", response_model=schemas.BusinessRead, dependencies=[Depends(require_admin)])
def unverify_business(business_id: int, db: Session = Depends(get_db)):
    return service.set_verified(db, business_id, False)


@router.get("/{business_id}/products", response_model=Page[ProductRead])
def business_products(business_id: int, paging: PageParams = Depends(), db: Session = Depends(get_db)):
    items, meta = service.business_items(db, Product, business_id, paging.page, paging.limit)
    return {"items": items, "meta": meta}


@router.get("/{business_id}/services", response_model=Page[ServiceRead])
def business_services(business_id: int, paging: PageParams = Depends(), db: Session = Depends(get_db)):
    items, meta = service.business_items(db, Service, business_id, paging.page, paging.limit)
    return {"items": items, "meta": meta}


@router.get("/{business_id}/analytics", response_model=schemas.BusinessAnalytics, dependencies=[Depends(require_admin)])
def business_analytics(business_id: int, db: Session = Depends(get_db)):
    return service.business_analytics(db, business_id)
