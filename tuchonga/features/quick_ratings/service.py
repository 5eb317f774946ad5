"""Quick 1..5 ratings, one per user per item, changeable once per cooldown window."""
import logging
import math
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from tuchonga.common.counters import bump
from tuchonga.common.pagination import paginate
from tuchonga.common.utils import as_utc, utc_now
from tuchonga.core.config import QUICK_RATING_COOLDOWN_HOURS
from tuchonga.core.database import atomic
from tuchonga.features.catalog.service import get_active_item, item_fk
from tuchonga.features.catalog.stats import refresh_rating_stats
from tuchonga.models import ADMIN_ROLES, ItemType, QuickRating, User

logger = logging.getLogger(__name__)

COOLDOWN = timedelta(hours=QUICK_RATING_COOLDOWN_HOURS)


def _remaining(rating: QuickRating) -> timedelta:
    return as_utc(rating.last_updated) + COOLDOWN - utc_now()


def cooldown_message(remaining: timedelta) -> str:
    seconds = remaining.total_seconds()
    hours = math.ceil(seconds / 3600)
    minutes = math.ceil(seconds / 60)
    unit = "hour" if hours == 1 else "hours"
    return (
        f"You can only update your rating once every {QUICK_RATING_COOLDOWN_HOURS} hours. "
        f"Time remaining: {hours} {unit} ({minutes} minutes)"
    )


def find_user_rating(db: Session, user_id: int, item_type: ItemType, item_id: int) -> Optional[QuickRating]:
    return (
        db.query(QuickRating)
        .filter(
            QuickRating.user_id == user_id,
            QuickRating.item_type == item_type,
            QuickRating.item_id == item_id,
        )
        .first()
    )


def item_rating_stats(db: Session, item_type: ItemType, item_id: int) -> dict:
    rows = (
        db.query(QuickRating.rating, func.count(QuickRating.id))
        .filter(QuickRating.item_type == item_type, QuickRating.item_id == item_id)
        .group_by(QuickRating.rating)
        .all()
    )
    distribution = {star: 0 for star in range(1, 6)}
    for rating, count in rows:
        distribution[rating] = count
    total = sum(distribution.values())
    average = sum(star * count for star, count in distribution.items()) / total if total else 0.0
    return {"total": total, "average": round(average, 2), "distribution": distribution}


def submit_rating(db: Session, user: User, payload) -> dict:
    """Create the caller's rating, or change it once the cooldown has passed.

    Raises 429 with the remaining time while the cooldown is running.
    """
    get_active_item(db, payload.item_type, payload.item_id)

    existing = find_user_rating(db, user.id, payload.item_type, payload.item_id)
    if existing is not None:
        remaining = _remaining(existing)
        if remaining > timedelta(0):
            raise HTTPException(status_code=429, detail=cooldown_message(remaining))

    now = utc_now()
    with atomic(db):
        if existing is None:
            rating = QuickRating(
                user_id=user.id,
                item_type=payload.item_type,
                item_id=payload.item_id,
                rating=payload.rating,
                last_updated=now,
                **item_fk(payload.item_type, payload.item_id),
            )
            db.add(rating)
        else:
            rating = existing
            changed = bump(
                db, QuickRating,
                QuickRating.id == existing.id,
                QuickRating.last_updated <= now - COOLDOWN,
                set_values={"rating": payload.rating, "last_updated": now},
            )
            if not changed:
                # another request updated the row after the cooldown check
                db.refresh(existing)
                raise HTTPException(status_code=429, detail=cooldown_message(_remaining(existing)))
        refresh_rating_stats(db, payload.item_type, payload.item_id)

    db.refresh(rating)
    is_new = existing is None
    logger.info(
        "quick rating %s %s by user %s: %s",
        rating.id, "created" if is_new else "updated", user.id, payload.rating,
    )
    return {
        "rating": rating,
        "is_new_rating": is_new,
        "next_update_time": now + COOLDOWN,
        "message": (
            "Rating submitted successfully." if is_new
            else "Rating updated successfully. Your new vote has been counted in community tallies."
        ),
        "stats": item_rating_stats(db, payload.item_type, payload.item_id),
    }


def user_item_rating(db: Session, user: User, item_type: ItemType, item_id: int) -> dict:
    rating = find_user_rating(db, user.id, item_type, item_id)
    if rating is None:
        return {"rating": None, "can_update": True, "hours_until_update": 0}

    remaining = _remaining(rating)
    can_update = remaining <= timedelta(0)
    return {
        "rating": rating,
        "can_update": can_update,
        "hours_until_update": 0 if can_update else math.ceil(remaining.total_seconds() / 3600),
    }


def get_rating(db: Session, rating_id: int) -> QuickRating:
    rating = db.get(QuickRating, rating_id)
    if not rating:
        raise HTTPException(status_code=404, detail="Rating not found")
    return rating


def delete_rating(db: Session, user: User, rating_id: int) -> None:
    rating = get_rating(db, rating_id)
    if rating.user_id != user.id and user.role not in ADMIN_ROLES:
        raise HTTPException(status_code=403, detail="Not authorized to delete this rating")

    item_type, item_id = rating.item_type, rating.item_id
    with atomic(db):
        db.delete(rating)
        refresh_rating_stats(db, item_type, item_id)
    logger.info("quick rating %s deleted by user %s", rating_id, user.id)


def list_ratings(
    db: Session,
    page: int,
    limit: int,
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    user_id: Optional[int] = None,
    rating: Optional[int] = None,
):
    q = db.query(QuickRating).options(selectinload(QuickRating.user))
    if item_type is not None:
        q = q.filter(QuickRating.item_type == item_type)
    if item_id is not None:
        q = q.filter(QuickRating.item_id == item_id)
    if user_id is not None:
        q = q.filter(QuickRating.user_id == user_id)
    if rating is not None:
        q = q.filter(QuickRating.rating == rating)
    q = q.order_by(QuickRating.created_at.desc(), QuickRating.id.desc())
    return paginate(q, page, limit)
