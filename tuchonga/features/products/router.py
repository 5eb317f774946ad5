from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import require_admin, require_business_or_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import CountResponse, DeleteResponse, Page
from tuchonga.features.catalog import service
from tuchonga.features.catalog.schemas import ProductCreate, ProductRead, ProductUpdate
from tuchonga.models import Product

router = APIRouter(prefix="/products", tags=["products"])

SortBy = Literal["created_at", "name", "quick_rating_avg", "total_views", "total_reviews"]


@router.get("", response_model=Page[ProductRead])
def list_products(
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
        db, Product, paging.page, paging.limit,
        search=search, categories=names, business_id=business_id,
        is_active=is_active, sort_by=sort_by, sort_order=sort_order,
    )
    return {"items": items, "meta": meta}


@router.get("/stats/count", response_model=CountResponse, dependencies=[Depends(require_admin)])
def count_products(business_id: Optional[int] = None, is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return {"count": service.count_items(db, Product, business_id, is_active)}


@router.get("/search/{query}", response_model=list[ProductRead])
def search_products(query: str, limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return service.search_items(db, Product, query, limit)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return service.get_item(db, Product, product_id)


@router.post("/{product_id}/view", response_model=ProductRead)
def view_product(product_id: int, db: Session = Depends(get_db)):
    return service.increment_views(db, Product, product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_business_or_admin)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return service.create_item(db, Product, payload)


@router.put("/{product_id}", response_model=ProductRead, dependencies=[Depends(require_business_or_admin)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return service.update_item(db, Product, product_id, payload)


# soft delete
@router.delete("/{product_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    service.delete_item(db, Product, product_id)
    return {"message": "Product deleted successfully"}
