from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import get_current_user, require_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import CountResponse, DeleteResponse, Page
from tuchonga.models import ItemType, User
from . import schemas, service

router = APIRouter(prefix="/favorites", tags=["favorites"])


# caller's saved items
@router.get("", response_model=Page[schemas.FavoriteRead])
def my_favorites(
    paging: PageParams = Depends(),
    item_type: Optional[ItemType] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items, meta = service.list_user_favorites(db, user.id, paging.page, paging.limit, item_type=item_type)
    return {"items": items, "meta": meta}


@router.post("", response_model=schemas.FavoriteRead, status_code=status.HTTP_201_CREATED)
def add_favorite(
    payload: schemas.FavoriteCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.add_favorite(db, user, payload.item_type, payload.item_id)


@router.post("/toggle", response_model=schemas.FavoriteToggleResponse)
def toggle_favorite(
    payload: schemas.FavoriteCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.toggle_favorite(db, user, payload.item_type, payload.item_id)


@router.get("/count", response_model=CountResponse)
def my_favorite_count(
    item_type: Optional[ItemType] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"count": service.count_user_favorites(db, user.id, item_type)}


@router.get("/check/{item_type}/{item_id}", response_model=schemas.FavoriteCheckResponse)
def check_favorite(
    item_type: ItemType,
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"is_favorited": service.find_favorite(db, user.id, item_type, item_id) is not None}


@router.delete("/{item_type}/{item_id}", response_model=DeleteResponse)
def remove_favorite(
    item_type: ItemType,
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.remove_favorite(db, user, item_type, item_id)
    return {"message": "Removed from favorites"}


# ADMIN
@router.get("/top/products", response_model=list[schemas.TopFavorite], dependencies=[Depends(require_admin)])
def top_products(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return service.most_favorited(db, ItemType.PRODUCT, limit)


@router.get("/top/services", response_model=list[schemas.TopFavorite], dependencies=[Depends(require_admin)])
def top_services(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return service.most_favorited(db, ItemType.SERVICE, limit)


@router.get("/item/{item_type}/{item_id}/count", response_model=CountResponse,
            dependencies=[Depends(require_admin)])
def item_favorite_count(item_type: ItemType, item_id: int, db: Session = Depends(get_db)):
    return {"count": service.count_item_favorites(db, item_type, item_id)}


@router.get("/item/{item_type}/{item_id}/users", response_model=list[schemas.ItemFavoriter],
            dependencies=[Depends(require_admin)])
def item_favoriters(
    item_type: ItemType,
    item_id: int,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return service.item_favoriters(db, item_type, item_id, limit)
