from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import get_current_user, require_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import DeleteResponse, Page
from tuchonga.features.catalog.service import get_item
from tuchonga.models import ItemType, Product, Service, User
from . import schemas, service

router = APIRouter(prefix="/quick-ratings", tags=["quick-ratings"])


@router.post("", response_model=schemas.QuickRatingSubmitResponse)
def submit_rating(
    payload: schemas.QuickRatingCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.submit_rating(db, user, payload)


@router.get("", response_model=Page[schemas.QuickRatingWithUser], dependencies=[Depends(require_admin)])
def list_ratings(
    paging: PageParams = Depends(),
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    user_id: Optional[int] = None,
    rating: Optional[int] = Query(None, ge=1, le=5),
    db: Session = Depends(get_db),
):
    items, meta = service.list_ratings(
        db, paging.page, paging.limit,
        item_type=item_type, item_id=item_id, user_id=user_id, rating=rating,
    )
    return {"items": items, "meta": meta}


@router.get("/product/{product_id}", response_model=schemas.RatingStats)
def product_rating_stats(product_id: int, db: Session = Depends(get_db)):
    get_item(db, Product, product_id)
    return service.item_rating_stats(db, ItemType.PRODUCT, product_id)


@router.get("/service/{service_id}", response_model=schemas.RatingStats)
def service_rating_stats(service_id: int, db: Session = Depends(get_db)):
    get_item(db, Service, service_id)
    return service.item_rating_stats(db, ItemType.SERVICE, service_id)


@router.get("/product/{product_id}/users", response_model=Page[schemas.QuickRatingWithUser],
            dependencies=[Depends(require_admin)])
def product_raters(product_id: int, paging: PageParams = Depends(), db: Session = Depends(get_db)):
    items, meta = service.list_ratings(db, paging.page, paging.limit, item_type=ItemType.PRODUCT, item_id=product_id)
    return {"items": items, "meta": meta}


@router.get("/service/{service_id}/users", response_model=Page[schemas.QuickRatingWithUser],
            dependencies=[Depends(require_admin)])
def service_raters(service_id: int, paging: PageParams = Depends(), db: Session = Depends(get_db)):
    items, meta = service.list_ratings(db, paging.page, paging.limit, item_type=ItemType.SERVICE, item_id=service_id)
    return {"items": items, "meta": meta}


@router.get("/user/me/all", response_model=Page[schemas.QuickRatingRead])
def my_ratings(
    paging: PageParams = Depends(),
    item_type: Optional[ItemType] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items, meta = service.list_ratings(db, paging.page, paging.limit, item_type=item_type, user_id=user.id)
    return {"items": items, "meta": meta}


@router.get("/user/{item_type}/{item_id}", response_model=schemas.UserItemRating)
def my_item_rating(
    item_type: ItemType,
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.user_item_rating(db, user, item_type, item_id)


@router.get("/{rating_id}", response_model=schemas.QuickRatingWithUser)
def get_rating(rating_id: int, db: Session = Depends(get_db)):
    return service.get_rating(db, rating_id)


@router.delete("/{rating_id}", response_model=DeleteResponse)
def delete_rating(
    rating_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_rating(db, user, rating_id)
    return {"message": "Rating deleted successfully"}
