from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import ItemType


class QuickRatingCreate(BaseModel):
    item_type: ItemType
    item_id: int
    rating: int = Field(ge=1, le=5)


class RatingUser(ORMBase):
    id: int
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None


class QuickRatingRead(ORMBase):
    id: int
    user_id: int
    item_type: ItemType
    item_id: int
    product_id: Optional[int] = None
    service_id: Optional[int] = None
    rating: int
    last_updated: datetime
    created_at: datetime
    updated_at: datetime


class QuickRatingWithUser(QuickRatingRead):
    user: Optional[RatingUser] = None


class RatingStats(BaseModel):
    total: int
    average: float
    distribution: dict[int, int]


class QuickRatingSubmitResponse(BaseModel):
    rating: QuickRatingRead
    is_new_rating: bool
    next_update_time: datetime
    message: str
    stats: RatingStats


class UserItemRating(BaseModel):
    rating: Optional[QuickRatingRead] = None
    can_update: bool
    hours_until_update: int
