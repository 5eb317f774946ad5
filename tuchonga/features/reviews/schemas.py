from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import ItemType, Sentiment


class ReviewCreate(BaseModel):
    item_type: ItemType
    item_id: int
    sentiment: Sentiment
    text: Optional[str] = Field(default=None, max_length=5000)


class ReviewUpdate(BaseModel):
    sentiment: Optional[Sentiment] = None
    text: Optional[str] = Field(default=None, max_length=5000)


class SentimentChange(BaseModel):
    sentiment: Sentiment
    timestamp: datetime


class ReviewAuthor(ORMBase):
    id: int
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None


class ReviewRead(ORMBase):
    id: int
    user_id: int
    item_type: ItemType
    item_id: int
    product_id: Optional[int] = None
    service_id: Optional[int] = None
    sentiment: Sentiment
    text: Optional[str] = None
    sentiment_history: list[SentimentChange] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    user: Optional[ReviewAuthor] = None


class ItemReviewStats(ORMBase):
    total_reviews: int
    positive_reviews: int
    neutral_reviews: int
    negative_reviews: int


class ReviewSubmitResponse(BaseModel):
    review: ReviewRead
    stats: ItemReviewStats
    review_category: Literal["positive", "neutral", "negative"]
    is_new_review: bool


class ReviewCheckResponse(BaseModel):
    has_reviewed: bool
    review: Optional[ReviewRead] = None


class ReviewDistribution(BaseModel):
    total: int
    distribution: dict[Sentiment, int]
    positive: int
    neutral: int
    negative: int
