"""Saved items: one favorite per user per product or service."""
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from tuchonga.common.pagination import paginate
from tuchonga.core.database import atomic
from tuchonga.features.catalog.service import get_active_item, item_fk
from tuchonga.models import Favorite, ITEM_MODELS, ItemType, User

logger = logging.getLogger(__name__)


def find_favorite(db: Session, user_id: int, item_type: ItemType, item_id: int) -> Optional[Favorite]:
    return (
        db.query(Favorite)
        .filter(
            Favorite.user_id == user_id,
            Favorite.item_type == item_type,
            Favorite.item_id == item_id,
        )
        .first()
    )


def add_favorite(db: Session, user: User, item_type: ItemType, item_id: int) -> Favorite:
    """Save an item for the caller. Saving it twice returns the existing row."""
    existing = find_favorite(db, user.id, item_type, item_id)
    if existing is not None:
        return existing

    get_active_item(db, item_type, item_id)
    with atomic(db):
        favorite = Favorite(
            user_id=user.id,
            item_type=item_type,
            item_id=item_id,
            **item_fk(item_type, item_id),
        )
        db.add(favorite)
    db.refresh(favorite)
    logger.info("user %s favorited %s %s", user.id, item_type.value, item_id)
    return favorite


def remove_favorite(db: Session, user: User, item_type: ItemType, item_id: int) -> None:
    with atomic(db):
        removed = (
            db.query(Favorite)
            .filter(
                Favorite.user_id == user.id,
                Favorite.item_type == item_type,
                Favorite.item_id == item_id,
            )
            .delete(synchronize_session="fetch")
        )
        if not removed:
            raise HTTPException(status_code=404, detail="Favorite not found")
    logger.info("user %s unfavorited %s %s", user.id, item_type.value, item_id)


def toggle_favorite(db: Session, user: User, item_type: ItemType, item_id: int) -> dict:
    if find_favorite(db, user.id, item_type, item_id) is not None:
        remove_favorite(db, user, item_type, item_id)
        return {"action": "removed", "is_favorited": False, "message": "Removed from favorites"}
    add_favorite(db, user, item_type, item_id)
    return {"action": "added", "is_favorited": True, "message": "Added to favorites"}


def list_user_favorites(db: Session, user_id: int, page: int, limit: int, item_type: Optional[ItemType] = None):
    q = (
        db.query(Favorite)
        .options(selectinload(Favorite.product), selectinload(Favorite.service))
        .filter(Favorite.user_id == user_id)
    )
    if item_type is not None:
        q = q.filter(Favorite.item_type == item_type)
    q = q.order_by(Favorite.created_at.desc(), Favorite.id.desc())
    return paginate(q, page, limit)


def count_user_favorites(db: Session, user_id: int, item_type: Optional[ItemType] = None) -> int:
    q = db.query(func.count(Favorite.id)).filter(Favorite.user_id == user_id)
    if item_type is not None:
        q = q.filter(Favorite.item_type == item_type)
    return q.scalar()


def count_item_favorites(db: Session, item_type: ItemType, item_id: int) -> int:
    return (
        db.query(func.count(Favorite.id))
        .filter(Favorite.item_type == item_type, Favorite.item_id == item_id)
        .scalar()
    )


def item_favoriters(db: Session, item_type: ItemType, item_id: int, limit: int = 10) -> list[Favorite]:
    return (
        db.query(Favorite)
        .options(selectinload(Favorite.user))
        .filter(Favorite.item_type == item_type, Favorite.item_id == item_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .limit(limit)
        .all()
    )


def most_favorited(db: Session, item_type: ItemType, limit: int = 10) -> list[dict]:
    counted = func.count(Favorite.id).label("favorite_count")
    rows = (
        db.query(Favorite.item_id, counted)
        .filter(Favorite.item_type == item_type)
        .group_by(Favorite.item_id)
        .order_by(counted.desc(), Favorite.item_id)
        .limit(limit)
        .all()
    )
    model = ITEM_MODELS[item_type]
    items = {i.id: i for i in db.query(model).filter(model.id.in_([r.item_id for r in rows]))}
    return [
        {"item": items[r.item_id], "favorite_count": r.favorite_count}
        for r in rows
        if r.item_id in items
    ]
