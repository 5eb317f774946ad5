import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_, func
from sqlalchemy.orm import Session

from tuchonga.common.pagination import paginate
from tuchonga.common.utils import sort_column
from tuchonga.core.database import atomic
from tuchonga.models import Business, Product, Service

logger = logging.getLogger(__name__)

_SORTABLE = {"created_at": "created_at", "name": "name"}


def _with_counts(db: Session, business: Business) -> Business:
    business.product_count = db.query(func.count(Product.id)).filter(Product.business_id == business.id).scalar()
    business.service_count = db.query(func.count(Service.id)).filter(Service.business_id == business.id).scalar()
    return business


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(Business.id).filter(Business.business_email == email)
    if exclude_id is not None:
        q = q.filter(Business.id != exclude_id)
    return q.first() is not None


def get_business(db: Session, business_id: int) -> Business:
    business = db.get(Business, business_id)
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return _with_counts(db, business)


def create_business(db: Session, payload) -> Business:
    if payload.business_email and _email_taken(db, payload.business_email):
        raise HTTPException(status_code=409, detail="Business with this email already exists")

    with atomic(db):
        business = Business(**payload.model_dump())
        db.add(business)

    db.refresh(business)
    logger.info("business %s created", business.id)
    return _with_counts(db, business)


def list_businesses(
    db: Session,
    page: int,
    limit: int,
    search: Optional[str] = None,
    is_verified: Optional[bool] = None,
    status: Optional[bool] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    q = db.query(Business)
    if is_verified is not None:
        q = q.filter(Business.is_verified == is_verified)
    if status is not None:
        q = q.filter(Business.status == status)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            Business.name.ilike(like),
            Business.business_email.ilike(like),
            Business.location.ilike(like),
            Business.poc_firstname.ilike(like),
            Business.poc_lastname.ilike(like),
        ))
    q = q.order_by(sort_column(Business, sort_by, sort_order, _SORTABLE, "created_at"), Business.id.desc())
    rows, meta = paginate(q, page, limit)
    return [_with_counts(db, b) for b in rows], meta


def update_business(db: Session, business_id: int, payload) -> Business:
    business = get_business(db, business_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("business_email") and _email_taken(db, data["business_email"], exclude_id=business_id):
        raise HTTPException(status_code=409, detail="Business with this email already exists")

    with atomic(db):
        for k, v in data.items():
            setattr(business, k, v)

    db.refresh(business)
    return _with_counts(db, business)


def delete_business(db: Session, business_id: int) -> bool:
    """Hard delete an empty business; otherwise only flip ``status`` off.

    Returns True when the row was physically removed.
    """
    business = get_business(db, business_id)
    with atomic(db):
        if business.product_count or business.service_count:
            business.status = False
            hard = False
        else:
            db.delete(business)
            hard = True
    logger.info("business %s deleted (hard=%s)", business_id, hard)
    return hard


def set_verified(db: Session, business_id: int, verified: bool) -> Business:
    business = get_business(db, business_id)
    with atomic(db):
        business.is_verified = verified
    db.refresh(business)
    return _with_counts(db, business)


def business_items(db: Session, model, business_id: int, page: int, limit: int):
    get_business(db, business_id)
    q = (
        db.query(model)
        .filter(model.business_id == business_id, model.is_active.is_(True))
        .order_by(model.created_at.desc(), model.id.desc())
    )
    return paginate(q, page, limit)


def business_stats(db: Session) -> dict:
    total = db.query(func.count(Business.id)).scalar()
    verified = db.query(func.count(Business.id)).filter(Business.is_verified.is_(True)).scalar()
    active = db.query(func.count(Business.id)).filter(Business.status.is_(True)).scalar()
    return {
        "total": total,
        "verified": verified,
        "unverified": total - verified,
        "active": active,
        "inactive": total - active,
    }


def _kind_stats(items) -> dict:
    count = len(items)
    return {
        "count": count,
        "total_views": sum(i.total_views for i in items),
        "total_reviews": sum(i.total_reviews for i in items),
        "avg_rating": (sum(i.quick_rating_avg or 0 for i in items) / count) if count else 0.0,
    }


def business_analytics(db: Session, business_id: int) -> dict:
    business = get_business(db, business_id)
    products = _kind_stats(business.products)
    services = _kind_stats(business.services)
    return {
        "business": business,
        "products": products,
        "services": services,
        "total_items": products["count"] + services["count"],
        "total_views": products["total_views"] + services["total_views"],
        "total_reviews": products["total_reviews"] + services["total_reviews"],
    }
