"""Recompute the denormalized review and quick-rating columns of an item.

Both functions run inside the caller's transaction so the counts can never be
committed apart from the review or rating write that changed them.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from tuchonga.models import ITEM_MODELS, ItemType, QuickRating, Review, Sentiment


def refresh_review_stats(db: Session, item_type: ItemType, item_id: int):
    db.flush()
    rows = (
        db.query(Review.sentiment, func.count(Review.id))
        .filter(Review.item_type == item_type, Review.item_id == item_id, Review.is_deleted.is_(False))
        .group_by(Review.sentiment)
        .all()
    )

    buckets = {"positive": 0, "neutral": 0, "negative": 0}
    for sentiment, count in rows:
        buckets[Sentiment(sentiment).bucket] += count

    item = db.get(ITEM_MODELS[item_type], item_id)
    item.positive_reviews = buckets["positive"]
    item.neutral_reviews = buckets["neutral"]
    item.negative_reviews = buckets["negative"]
    item.total_reviews = sum(buckets.values())
    db.flush()
    return item


def refresh_rating_stats(db: Session, item_type: ItemType, item_id: int):
    db.flush()
    rows = (
        db.query(QuickRating.rating, func.count(QuickRating.id))
        .filter(QuickRating.item_type == item_type, QuickRating.item_id == item_id)
        .group_by(QuickRating.rating)
        .all()
    )

    histogram = {star: 0 for star in range(1, 6)}
    for rating, count in rows:
        histogram[rating] = count
    total = sum(histogram.values())
    weighted = sum(star * count for star, count in histogram.items())

    item = db.get(ITEM_MODELS[item_type], item_id)
    for star, count in histogram.items():
        setattr(item, f"quick_rating_{star}", count)
    item.quick_rating_total = total
    item.quick_rating_avg = weighted / total if total else None
    db.flush()
    return item
