"""Reviews: one per user per item, updated in place.

Every write recomputes the item's review columns in the same transaction.
"""
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from tuchonga.common.pagination import paginate
from tuchonga.common.utils import as_utc, sort_column
from tuchonga.core.database import atomic
from tuchonga.features.catalog.service import get_active_item, item_fk
from tuchonga.features.catalog.stats import refresh_review_stats
from tuchonga.features.users.service import bump_analytics, item_counter
from tuchonga.models import ItemType, MODERATION_ROLES, Review, Sentiment, User

logger = logging.getLogger(__name__)

_SORTABLE = {"created_at": "created_at", "updated_at": "updated_at", "sentiment": "sentiment"}


def _push_history(review: Review) -> None:
    # the previous value, stamped with when it was last set
    previous = as_utc(review.updated_at or review.created_at)
    review.sentiment_history = list(review.sentiment_history or []) + [{
        "sentiment": Sentiment(review.sentiment).value,
        "timestamp": previous.isoformat() if previous else None,
    }]


def _apply_sentiment(review: Review, sentiment: Sentiment) -> None:
    if review.sentiment is not None and Sentiment(review.sentiment) != sentiment:
        _push_history(review)
    review.sentiment = sentiment


def get_review(db: Session, review_id: int) -> Review:
    review = (
        db.query(Review)
        .options(selectinload(Review.user))
        .filter(Review.id == review_id, Review.is_deleted.is_(False))
        .first()
    )
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


def find_user_review(db: Session, user_id: int, item_type: ItemType, item_id: int) -> Optional[Review]:
    return (
        db.query(Review)
        .filter(
            Review.user_id == user_id,
            Review.item_type == item_type,
            Review.item_id == item_id,
            Review.is_deleted.is_(False),
        )
        .first()
    )


def submit_review(db: Session, user: User, payload) -> dict:
    """Create the caller's review of an item, or update the one they already have."""
    item = get_active_item(db, payload.item_type, payload.item_id)

    with atomic(db):
        review = (
            db.query(Review)
            .filter(
                Review.user_id == user.id,
                Review.item_type == payload.item_type,
                Review.item_id == payload.item_id,
            )
            .first()
        )
        is_new = review is None
        if is_new:
            review = Review(
                user_id=user.id,
                item_type=payload.item_type,
                item_id=payload.item_id,
                sentiment=payload.sentiment,
                text=payload.text,
                sentiment_history=[],
                **item_fk(payload.item_type, payload.item_id),
            )
            db.add(review)
            db.flush()
            bump_analytics(
                db, user.id, stamp="last_review_at",
                total_reviews=1, **{item_counter("reviews", payload.item_type): 1},
            )
        else:
            # a re-post always records the previous sentiment
            _push_history(review)
            review.sentiment = payload.sentiment
            review.text = payload.text
            review.is_deleted = False
        refresh_review_stats(db, payload.item_type, payload.item_id)

    db.refresh(review)
    db.refresh(item)
    logger.info("review %s %s by user %s", review.id, "created" if is_new else "updated", user.id)
    return {
        "review": review,
        "stats": item,
        "review_category": Sentiment(review.sentiment).bucket,
        "is_new_review": is_new,
    }


def update_review(db: Session, user: User, review_id: int, payload) -> Review:
    review = get_review(db, review_id)
    if review.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to update this review")

    data = payload.model_dump(exclude_unset=True)
    with atomic(db):
        if data.get("sentiment") is not None:
            _apply_sentiment(review, data["sentiment"])
        if "text" in data:
            review.text = data["text"]
        refresh_review_stats(db, review.item_type, review.item_id)

    db.refresh(review)
    return review


# soft delete; the row is revived if the user reviews the item again
def delete_review(db: Session, user: User, review_id: int) -> None:
    review = get_review(db, review_id)
    if review.user_id != user.id and user.role not in MODERATION_ROLES:
        raise HTTPException(status_code=403, detail="Not authorized to delete this review")

    with atomic(db):
        review.is_deleted = True
        refresh_review_stats(db, review.item_type, review.item_id)
    logger.info("review %s deleted by user %s", review_id, user.id)


def list_reviews(
    db: Session,
    page: int,
    limit: int,
    user_id: Optional[int] = None,
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    sentiment: Optional[Sentiment] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    q = db.query(Review).options(selectinload(Review.user)).filter(Review.is_deleted.is_(False))
    if user_id is not None:
        q = q.filter(Review.user_id == user_id)
    if item_type is not None:
        q = q.filter(Review.item_type == item_type)
    if item_id is not None:
        q = q.filter(Review.item_id == item_id)
    if sentiment is not None:
        q = q.filter(Review.sentiment == sentiment)
    q = q.order_by(sort_column(Review, sort_by, sort_order, _SORTABLE, "created_at"), Review.id.desc())
    return paginate(q, page, limit)


def review_distribution(db: Session, item_type: ItemType, item_id: int) -> dict:
    rows = (
        db.query(Review.sentiment, func.count(Review.id))
        .filter(Review.item_type == item_type, Review.item_id == item_id, Review.is_deleted.is_(False))
        .group_by(Review.sentiment)
        .all()
    )
    distribution = {s: 0 for s in Sentiment}
    for sentiment, count in rows:
        distribution[Sentiment(sentiment)] = count

    buckets = {"positive": 0, "neutral": 0, "negative": 0}
    for sentiment, count in distribution.items():
        buckets[sentiment.bucket] += count
    return {"total": sum(distribution.values()), "distribution": distribution, **buckets}
