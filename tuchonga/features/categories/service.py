import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_, func, select
from sqlalchemy.orm import Session

from tuchonga.common.pagination import paginate
from tuchonga.core.database import atomic
from tuchonga.models import Category, CategoryType, product_categories, service_categories

logger = logging.getLogger(__name__)


def _usage(db: Session, category_id: int) -> tuple[int, int]:
    products = db.execute(
        select(func.count()).select_from(product_categories)
        .where(product_categories.c.category_id == category_id)
    ).scalar_one()
    services = db.execute(
        select(func.count()).select_from(service_categories)
        .where(service_categories.c.category_id == category_id)
    ).scalar_one()
    return products, services


def _with_counts(db: Session, category: Category) -> Category:
    category.product_count, category.service_count = _usage(db, category.id)
    return category


def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(Category.id).filter(Category.name == name)
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    return q.first() is not None


def create_category(db: Session, payload) -> Category:
    if _name_taken(db, payload.name):
        raise HTTPException(status_code=409, detail="Category with this name already exists")

    with atomic(db):
        category = Category(**payload.model_dump())
        db.add(category)

    db.refresh(category)
    logger.info("category %s created", category.id)
    return _with_counts(db, category)


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return _with_counts(db, category)


def list_categories(
    db: Session,
    page: int = 1,
    limit: int = 100,
    type: Optional[CategoryType] = None,
    search: Optional[str] = None,
):
    q = db.query(Category)
    if type is not None:
        q = q.filter(Category.type == type)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(Category.name.ilike(like), Category.description.ilike(like)))
    q = q.order_by(Category.name.asc())
    rows, meta = paginate(q, page, limit)
    return [_with_counts(db, c) for c in rows], meta


def update_category(db: Session, category_id: int, payload) -> Category:
    category = get_category(db, category_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("name") and _name_taken(db, data["name"], exclude_id=category_id):
        raise HTTPException(status_code=409, detail="Category with this name already exists")

    with atomic(db):
        for k, v in data.items():
            if v is not None:
                setattr(category, k, v)

    db.refresh(category)
    return _with_counts(db, category)


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)
    if category.product_count or category.service_count:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Cannot delete category. It has {category.product_count} products "
                f"and {category.service_count} services."
            ),
        )
    with atomic(db):
        db.delete(category)
    logger.info("category %s deleted", category_id)


# names that already exist are skipped, not errors
def bulk_create(db: Session, payload) -> dict:
    created, skipped, seen = [], [], set()
    with atomic(db):
        for c in payload.categories:
            if c.name in seen or _name_taken(db, c.name):
                skipped.append(c.name)
                continue
            seen.add(c.name)
            category = Category(**c.model_dump())
            db.add(category)
            created.append(category)

    for category in created:
        db.refresh(category)
        _with_counts(db, category)
    logger.info("bulk category import: %d created, %d skipped", len(created), len(skipped))
    return {"created": created, "skipped": skipped}


def category_stats(db: Session) -> dict:
    categories = db.query(Category).order_by(Category.name.asc()).all()
    usage = []
    for c in categories:
        products, services = _usage(db, c.id)
        usage.append({
            "id": c.id,
            "name": c.name,
            "type": c.type,
            "product_count": products,
            "service_count": services,
        })
    return {
        "total": len(categories),
        "product_categories": sum(1 for c in categories if c.type == CategoryType.PRODUCT),
        "service_categories": sum(1 for c in categories if c.type == CategoryType.SERVICE),
        "categories": usage,
    }
