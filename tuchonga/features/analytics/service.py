"""Read-only dashboard figures for the admin console."""
from collections import Counter
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from tuchonga.common.utils import as_utc, utc_now
from tuchonga.models import (
    Business, Comment, Favorite, ITEM_MODELS, ItemType, QuickRating, Review, User, UserRole,
)

TOP_LIMIT = 5
RECENT_REVIEWS = 10
TREND_MONTHS = 6


def _count(db: Session, column, *criteria) -> int:
    return db.query(func.count(column)).filter(*criteria).scalar()


def overview(db: Session) -> dict:
    def total_active(model, *base):
        return {
            "total": _count(db, model.id, *base),
            "active": _count(db, model.id, model.is_active.is_(True), *base),
        }

    return {
        "users": total_active(User, User.role == UserRole.USER),
        "products": total_active(ITEM_MODELS[ItemType.PRODUCT]),
        "services": total_active(ITEM_MODELS[ItemType.SERVICE]),
        "businesses": {
            "total": _count(db, Business.id),
            "verified": _count(db, Business.id, Business.is_verified.is_(True)),
        },
        "engagement": {
            "reviews": _count(db, Review.id, Review.is_deleted.is_(False)),
            "comments": _count(db, Comment.id, Comment.is_deleted.is_(False)),
            "quick_ratings": _count(db, QuickRating.id),
            "favorites": _count(db, Favorite.id),
        },
    }


def user_analytics(db: Session, days: int) -> dict:
    since = utc_now() - timedelta(days=days)
    by_role = (
        db.query(User.role, func.count(User.id))
        .group_by(User.role)
        .order_by(User.role)
        .all()
    )
    return {
        "total": _count(db, User.id, User.role == UserRole.USER),
        "new_users": _count(db, User.id, User.role == UserRole.USER, User.created_at >= since),
        "completed_profiles": _count(
            db, User.id, User.role == UserRole.USER, User.has_completed_profile.is_(True),
        ),
        "by_role": [{"role": role, "count": count} for role, count in by_role],
        "period_days": days,
    }


def _top(db: Session, model, order_by, *criteria):
    return (
        db.query(model)
        .filter(model.is_active.is_(True), *criteria)
        .order_by(order_by.desc(), model.id)
        .limit(TOP_LIMIT)
        .all()
    )


def item_analytics(db: Session, item_type: ItemType) -> dict:
    model = ITEM_MODELS[item_type]
    total = _count(db, model.id)
    active = _count(db, model.id, model.is_active.is_(True))
    return {
        "total": total,
        "active": active,
        "inactive": total - active,
        "top_rated": _top(db, model, model.quick_rating_avg, model.quick_rating_avg.isnot(None)),
        "most_viewed": _top(db, model, model.total_views),
        "most_reviewed": _top(db, model, model.total_reviews),
    }


def _month_labels(now: datetime, count: int) -> list[str]:
    labels = []
    year, month = now.year, now.month
    for _ in range(count):
        labels.append(f"{year:04d}-{month:02d}")
        year, month = (year, month - 1) if month > 1 else (year - 1, 12)
    return labels[::-1]


def item_trends(db: Session, item_type: ItemType) -> dict:
    """Catalog size, view spread and items added per month over the last six months."""
    model = ITEM_MODELS[item_type]
    items = db.query(model).all()

    labels = _month_labels(utc_now(), TREND_MONTHS)
    added = Counter(as_utc(i.created_at).strftime("%Y-%m") for i in items)
    total_views = sum(i.total_views for i in items)
    top_viewed = sorted(items, key=lambda i: (-i.total_views, i.id))[:TOP_LIMIT]
    return {
        "summary": {
            "total": len(items),
            "active": sum(1 for i in items if i.is_active),
            "inactive": sum(1 for i in items if not i.is_active),
            "total_views": total_views,
            "avg_views": round(total_views / len(items)) if items else 0,
            "zero_views": sum(1 for i in items if not i.total_views),
        },
        "monthly_adds": {"labels": labels, "values": [added[label] for label in labels]},
        "top_viewed": top_viewed,
    }


def review_analytics(db: Session) -> dict:
    live = Review.is_deleted.is_(False)
    distribution = (
        db.query(Review.sentiment, func.count(Review.id))
        .filter(live)
        .group_by(Review.sentiment)
        .order_by(Review.sentiment)
        .all()
    )
    recent = (
        db.query(Review)
        .filter(live)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(RECENT_REVIEWS)
        .all()
    )
    return {
        "total": _count(db, Review.id, live),
        "by_type": {
            "products": _count(db, Review.id, live, Review.item_type == ItemType.PRODUCT),
            "services": _count(db, Review.id, live, Review.item_type == ItemType.SERVICE),
        },
        "sentiment_distribution": [{"sentiment": s, "count": c} for s, c in distribution],
        "recent_reviews": recent,
    }


def comment_analytics(db: Session) -> dict:
    live = Comment.is_deleted.is_(False)
    counted = func.count(Comment.id).label("comment_count")
    top = (
        db.query(Comment.user_id, counted)
        .filter(live)
        .group_by(Comment.user_id)
        .order_by(counted.desc(), Comment.user_id)
        .limit(TOP_LIMIT)
        .all()
    )
    users = {u.id: u for u in db.query(User).filter(User.id.in_([row.user_id for row in top]))}
    return {
        "total": _count(db, Comment.id, live),
        "by_type": {
            "products": _count(db, Comment.id, live, Comment.item_type == ItemType.PRODUCT),
            "services": _count(db, Comment.id, live, Comment.item_type == ItemType.SERVICE),
        },
        "reported": _count(db, Comment.id, live, Comment.is_reported.is_(True)),
        "top_commenters": [
            {"user": users[row.user_id], "comment_count": row.comment_count}
            for row in top
            if row.user_id in users
        ],
    }


_TREND_SOURCES = {
    "users": (User.created_at, (User.role == UserRole.USER,)),
    "reviews": (Review.created_at, (Review.is_deleted.is_(False),)),
    "comments": (Comment.created_at, (Comment.is_deleted.is_(False),)),
}


def trend(db: Session, metric: str, days: int) -> dict:
    """Daily creation counts for ``metric`` over the last ``days`` UTC days, oldest first."""
    column, criteria = _TREND_SOURCES[metric]
    today = utc_now().date()
    dates = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    since = datetime.combine(dates[0], datetime.min.time(), tzinfo=timezone.utc)

    stamps = db.query(column).filter(column >= since, *criteria).all()
    per_day = Counter(as_utc(stamp).date() for (stamp,) in stamps)
    return {
        "metric": metric,
        "period_days": days,
        "labels": [d.isoformat() for d in dates],
        "values": [per_day[d] for d in dates],
    }
