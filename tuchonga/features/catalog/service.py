"""Product and service operations.

Products and services share one table layout (see ``ItemStatsMixin``), so
every function takes the mapped class and works for either kind.
"""
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from tuchonga.common.counters import bump
from tuchonga.common.pagination import paginate
from tuchonga.common.utils import utc_now, sort_column
from tuchonga.core.database import atomic
from tuchonga.models import Business, Category, ItemType, Product, Service

logger = logging.getLogger(__name__)

NAME_FIELD = {Product: "product_name", Service: "service_name"}
OWNER_FIELD = {Product: "product_owner", Service: "service_owner"}


def _label(model) -> str:
    return "Product" if model is Product else "Service"


def _sortable(model) -> dict[str, str]:
    return {
        "created_at": "created_at",
        "name": NAME_FIELD[model],
        "quick_rating_avg": "quick_rating_avg",
        "total_views": "total_views",
        "total_reviews": "total_reviews",
    }


def _resolve_categories(db: Session, model, category_ids: list[int]) -> list[Category]:
    wanted = set(category_ids)
    if not wanted:
        return []
    found = db.query(Category).filter(Category.id.in_(wanted)).all()
    missing = sorted(wanted - {c.id for c in found})
    if missing:
        raise HTTPException(status_code=400, detail={"message": "invalid category_ids", "missing_category_ids": missing})
    wrong_type = sorted(c.id for c in found if c.type != model.item_type)
    if wrong_type:
        raise HTTPException(
            status_code=400,
            detail={"message": f"categories must be of type {model.item_type.value}", "category_ids": wrong_type},
        )
    return found


def _check_business(db: Session, business_id: Optional[int]) -> None:
    if business_id is not None and db.get(Business, business_id) is None:
        raise HTTPException(status_code=400, detail="Invalid business_id")


def get_item(db: Session, model, item_id: int):
    item = db.get(model, item_id)
    if not item:
        raise HTTPException(status_code=404, detail=f"{_label(model)} not found")
    return item


def get_active_item(db: Session, item_type: ItemType, item_id: int):
    """Item a user may review, rate or comment on."""
    model = Product if item_type == ItemType.PRODUCT else Service
    item = db.get(model, item_id)
    if not item or not item.is_active:
        raise HTTPException(status_code=404, detail=f"{_label(model)} not found")
    return item


def item_fk(item_type: ItemType, item_id: int) -> dict:
    """Typed foreign key columns for rows that point at a product or a service."""
    if item_type == ItemType.PRODUCT:
        return {"product_id": item_id, "service_id": None}
    return {"product_id": None, "service_id": item_id}


def create_item(db: Session, model, payload):
    data = payload.model_dump(exclude={"category_ids"})
    data["additional_images"] = data.get("additional_images") or []
    _check_business(db, data.get("business_id"))

    with atomic(db):
        item = model(**data)
        item.categories = _resolve_categories(db, model, payload.category_ids or [])
        db.add(item)

    db.refresh(item)
    logger.info("%s %s created", _label(model).lower(), item.id)
    return item


def list_items(
    db: Session,
    model,
    page: int,
    limit: int,
    search: Optional[str] = None,
    categories: Optional[list[str]] = None,
    business_id: Optional[int] = None,
    is_active: Optional[bool] = True,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    q = db.query(model).options(selectinload(model.categories))
    if is_active is not None:
        q = q.filter(model.is_active == is_active)
    if business_id is not None:
        q = q.filter(model.business_id == business_id)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            getattr(model, NAME_FIELD[model]).ilike(like),
            model.description.ilike(like),
            getattr(model, OWNER_FIELD[model]).ilike(like),
        ))
    if categories:
        q = q.filter(model.categories.any(Category.name.in_(categories)))
    q = q.order_by(sort_column(model, sort_by, sort_order, _sortable(model), "created_at"), model.id.desc())
    return paginate(q, page, limit)


def update_item(db: Session, model, item_id: int, payload):
    item = get_item(db, model, item_id)
    data = payload.model_dump(exclude_unset=True)
    category_ids = data.pop("category_ids", None)
    if "business_id" in data:
        _check_business(db, data["business_id"])

    with atomic(db):
        for k, v in data.items():
            if k == "additional_images" and v is None:
                v = []
            setattr(item, k, v)
        # None keeps the current categories, [] clears them
        if category_ids is not None:
            item.categories = _resolve_categories(db, model, category_ids)
        item.last_update = utc_now()

    db.refresh(item)
    return item


# soft delete
def delete_item(db: Session, model, item_id: int) -> None:
    item = get_item(db, model, item_id)
    with atomic(db):
        item.is_active = False
    logger.info("%s %s deactivated", _label(model).lower(), item_id)


def increment_views(db: Session, model, item_id: int):
    item = get_item(db, model, item_id)
    with atomic(db):
        bump(db, model, model.id == item_id, total_views=1)
    db.refresh(item)
    return item


def search_items(db: Session, model, query: str, limit: int = 20):
    like = f"%{query}%"
    avg = model.quick_rating_avg
    return (
        db.query(model)
        .options(selectinload(model.categories))
        .filter(model.is_active.is_(True))
        .filter(or_(
            getattr(model, NAME_FIELD[model]).ilike(like),
            model.description.ilike(like),
            getattr(model, OWNER_FIELD[model]).ilike(like),
        ))
        # unrated items last on every backend
        .order_by(avg.is_(None), avg.desc(), model.total_views.desc(), model.id.desc())
        .limit(limit)
        .all()
    )


def count_items(db: Session, model, business_id: Optional[int] = None, is_active: Optional[bool] = None) -> int:
    q = db.query(model)
    if business_id is not None:
        q = q.filter(model.business_id == business_id)
    if is_active is not None:
        q = q.filter(model.is_active == is_active)
    return q.count()


def set_verified(db: Session, service_id: int, verified: bool) -> Service:
    item = get_item(db, Service, service_id)
    with atomic(db):
        item.is_verified = verified
    db.refresh(item)
    logger.info("service %s verified=%s", service_id, verified)
    return item
