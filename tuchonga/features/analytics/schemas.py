from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import ItemType, Sentiment, UserRole

TrendMetric = Literal["users", "reviews", "comments"]


class TotalActive(BaseModel):
    total: int
    active: int


class BusinessTotals(BaseModel):
    total: int
    verified: int


class Engagement(BaseModel):
    reviews: int
    comments: int
    quick_ratings: int
    favorites: int


class Overview(BaseModel):
    users: TotalActive
    products: TotalActive
    services: TotalActive
    businesses: BusinessTotals
    engagement: Engagement


class RoleCount(BaseModel):
    role: UserRole
    count: int


class UserAnalyticsSummary(BaseModel):
    total: int
    new_users: int
    completed_profiles: int
    by_role: list[RoleCount]
    period_days: int


class RankedItem(ORMBase):
    id: int
    name: str
    quick_rating_avg: Optional[float] = None
    quick_rating_total: int
    total_views: int
    total_reviews: int


class ItemAnalytics(BaseModel):
    total: int
    active: int
    inactive: int
    top_rated: list[RankedItem]
    most_viewed: list[RankedItem]
    most_reviewed: list[RankedItem]


class ItemTrendSummary(BaseModel):
    total: int
    active: int
    inactive: int
    total_views: int
    avg_views: int
    zero_views: int


class Series(BaseModel):
    labels: list[str]
    values: list[int]


class ItemTrends(BaseModel):
    summary: ItemTrendSummary
    monthly_adds: Series
    top_viewed: list[RankedItem]


class SentimentCount(BaseModel):
    sentiment: Sentiment
    count: int


class RecentReview(ORMBase):
    id: int
    user_id: int
    item_type: ItemType
    item_id: int
    sentiment: Sentiment
    text: Optional[str] = None
    created_at: datetime


class ReviewAnalytics(BaseModel):
    total: int
    by_type: dict[str, int]
    sentiment_distribution: list[SentimentCount]
    recent_reviews: list[RecentReview]


class Commenter(ORMBase):
    id: int
    full_name: Optional[str] = None
    display_name: Optional[str] = None


class TopCommenter(BaseModel):
    user: Commenter
    comment_count: int


class CommentAnalytics(BaseModel):
    total: int
    by_type: dict[str, int]
    reported: int
    top_commenters: list[TopCommenter]


class Trend(Series):
    metric: TrendMetric
    period_days: int
