from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import require_admin
from tuchonga.common.schemas.responses import DeleteResponse, Page
from tuchonga.models import CategoryType
from . import schemas, service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=Page[schemas.CategoryRead])
def list_categories(
    type: Optional[CategoryType] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    items, meta = service.list_categories(db, page, limit, type=type, search=search)
    return {"items": items, "meta": meta}


@router.get("/products", response_model=Page[schemas.CategoryRead])
def product_categories(db: Session = Depends(get_db)):
    items, meta = service.list_categories(db, type=CategoryType.PRODUCT)
    return {"items": items, "meta": meta}


@router.get("/services", response_model=Page[schemas.CategoryRead])
def service_categories(db: Session = Depends(get_db)):
    items, meta = service.list_categories(db, type=CategoryType.SERVICE)
    return {"items": items, "meta": meta}


@router.get("/stats/overview", response_model=schemas.CategoryStats, dependencies=[Depends(require_admin)])
def category_stats(db: Session = Depends(get_db)):
    return service.category_stats(db)


@router.get("/{category_id}", response_model=schemas.CategoryRead)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return service.get_category(db, category_id)


@router.post("", response_model=schemas.CategoryRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def create_category(payload: schemas.CategoryCreate, db: Session = Depends(get_db)):
    return service.create_category(db, payload)


@router.post("/bulk", response_model=schemas.CategoriesBulkResult, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def bulk_create_categories(payload: schemas.CategoriesBulkCreate, db: Session = Depends(get_db)):
    return service.bulk_create(db, payload)


@router.put("/{category_id}", response_model=schemas.CategoryRead, dependencies=[Depends(require_admin)])
def update_category(category_id: int, payload: schemas.CategoryUpdate, db: Session = Depends(get_db)):
    return service.update_category(db, category_id, payload)


@router.delete("/{category_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    service.delete_category(db, category_id)
    return {"message": "Category deleted successfully"}
