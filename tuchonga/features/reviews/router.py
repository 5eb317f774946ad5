from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import get_current_user
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import DeleteResponse, Page
from tuchonga.features.catalog.service import get_item
from tuchonga.models import ItemType, Product, Sentiment, Service, User
from . import schemas, service

router = APIRouter(prefix="/reviews", tags=["reviews"])

SortBy = Literal["created_at", "updated_at", "sentiment"]


@router.post("", response_model=schemas.ReviewSubmitResponse)
def submit_review(
    payload: schemas.ReviewCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.submit_review(db, user, payload)


@router.get("", response_model=Page[schemas.ReviewRead])
def list_reviews(
    paging: PageParams = Depends(),
    user_id: Optional[int] = None,
    product_id: Optional[int] = None,
    service_id: Optional[int] = None,
    sentiment: Optional[Sentiment] = None,
    sort_by: SortBy = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    item_type, item_id = None, None
    if product_id is not None:
        item_type, item_id = ItemType.PRODUCT, product_id
    elif service_id is not None:
        item_type, item_id = ItemType.SERVICE, service_id
    items, meta = service.list_reviews(
        db, paging.page, paging.limit,
        user_id=user_id, item_type=item_type, item_id=item_id, sentiment=sentiment,
        sort_by=sort_by, sort_order=sort_order,
    )
    return {"items": items, "meta": meta}


@router.get("/check", response_model=schemas.ReviewCheckResponse)
def check_review(
    item_type: ItemType,
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = service.find_user_review(db, user.id, item_type, item_id)
    return {"has_reviewed": review is not None, "review": review}


@router.get("/stats", response_model=schemas.ReviewDistribution)
def review_stats(item_type: ItemType, item_id: int, db: Session = Depends(get_db)):
    return service.review_distribution(db, item_type, item_id)


@router.get("/user/me", response_model=Page[schemas.ReviewRead])
def my_reviews(
    paging: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items, meta = service.list_reviews(db, paging.page, paging.limit, user_id=user.id)
    return {"items": items, "meta": meta}


@router.get("/product/{product_id}", response_model=Page[schemas.ReviewRead])
def product_reviews(
    product_id: int,
    paging: PageParams = Depends(),
    sentiment: Optional[Sentiment] = None,
    db: Session = Depends(get_db),
):
    get_item(db, Product, product_id)
    items, meta = service.list_reviews(
        db, paging.page, paging.limit,
        item_type=ItemType.PRODUCT, item_id=product_id, sentiment=sentiment,
    )
    return {"items": items, "meta": meta}


@router.get("/service/{service_id}", response_model=Page[schemas.ReviewRead])
def service_reviews(
    service_id: int,
    paging: PageParams = Depends(),
    sentiment: Optional[Sentiment] = None,
    db: Session = Depends(get_db),
):
    get_item(db, Service, service_id)
    items, meta = service.list_reviews(
        db, paging.page, paging.limit,
        item_type=ItemType.SERVICE, item_id=service_id, sentiment=sentiment,
    )
    return {"items": items, "meta": meta}


@router.get("/{review_id}", response_model=schemas.ReviewRead)
def get_review(review_id: int, db: Session = Depends(get_db)):
    return service.get_review(db, review_id)


@router.put("/{review_id}", response_model=schemas.ReviewRead)
def update_review(
    review_id: int,
    payload: schemas.ReviewUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.update_review(db, user, review_id, payload)


@router.delete("/{review_id}", response_model=DeleteResponse)
def delete_review(
    review_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_review(db, user, review_id)
    return {"message": "Review deleted successfully"}
