from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import require_admin, require_business_or_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import CountResponse, DeleteResponse, Page
from tuchonga.features.catalog import service
from tuchonga.features.catalog.schemas import ServiceCreate, ServiceRead, ServiceUpdate
from tuchonga.models import Service

router = APIRouter(prefix="/services", tags=["services"])

SortBy = Literal["created_at", "name", "quick_rating_avg", "total_views", "total_reviews"]


@router.get("", response_model=Page[ServiceRead])
def list_services(
    paging: PageParams = Depends(),
    search: Optional[str] = None,
    categories: Optional[str] = Query(None, description="comma separated category names"),
    business_id: Optional[int] = None,
    is_active: Optional[bool] = True,
    sort_by: SortBy = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    names = [c.strip() for c in categories.split(",") if c.strip()] if categories else None
    items, meta = service.list_items(
        db, Service, paging.page, paging.limit,
        search=search, categories=names, business_id=business_id,
        is_active=is_active, sort_by=sort_by, sort_order=sort_order,
    )
    return {"items": items, "meta": meta}


@router.get("/stats/count", response_model=CountResponse, dependencies=[Depends(require_admin)])
def count_services(business_id: Optional[int] = None, is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return {"count": service.count_items(db, Service, business_id, is_active)}


@router.get("/search/{query}", response_model=list[ServiceRead])
def search_services(query: str, limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return service.search_items(db, Service, query, limit)


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(service_id: int, db: Session = Depends(get_db)):
    return service.get_item(db, Service, service_id)


@router.post("/{service_id}/view", response_model=ServiceRead)
def view_service(service_id: int, db: Session = Depends(get_db)):
    return service.increment_views(db, Service, service_id)


@router.post("", response_model=ServiceRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_business_or_admin)])
def create_service(payload: ServiceCreate, db: Session = Depends(get_db)):
    return service.create_item(db, Service, payload)


@router.put("/{service_id}", response_model=ServiceRead, dependencies=[Depends(require_business_or_admin)])
def update_service(service_id: int, payload: ServiceUpdate, db: Session = Depends(get_db)):
    return service.update_item(db, Service, service_id, payload)


# soft delete
@router.delete("/{service_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
def delete_service(service_id: int, db: Session = Depends(get_db)):
    service.delete_item(db, Service, service_id)
    return {"message": "Service deleted successfully"}


@router.post("/{service_id}/verify", response_model=ServiceRead, dependencies=[Depends(require_admin)])
def verify_service(service_id: int, db: Session = Depends(get_db)):
    return service.set_verified(db, service_id, True)


@router.post("/{service_id}/unverify", response_model=ServiceRead, dependencies=[Depends(require_admin)])
def unverify_service(service_id: int, db: Session = Depends(get_db)):
    return service.set_verified(db, service_id, False)
