from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import CategoryType


class CategoryBrief(ORMBase):
    id: int
    name: str
    type: CategoryType


class _ItemWrite(BaseModel):
    description: Optional[str] = None
    main_image: Optional[str] = None
    additional_images: Optional[list[str]] = None
    business_id: Optional[int] = None
    category_ids: Optional[list[int]] = None


class ProductCreate(_ItemWrite):
    product_name: str = Field(min_length=1, max_length=200)
    product_owner: Optional[str] = None


class ProductUpdate(_ItemWrite):
    product_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    product_owner: Optional[str] = None
    is_active: Optional[bool] = None


class ServiceCreate(_ItemWrite):
    service_name: str = Field(min_length=1, max_length=200)
    service_owner: Optional[str] = None


class ServiceUpdate(_ItemWrite):
    service_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    service_owner: Optional[str] = None
    is_active: Optional[bool] = None


class _ItemRead(ORMBase):
    id: int
    description: Optional[str] = None
    main_image: Optional[str] = None
    additional_images: list[str] = Field(default_factory=list)
    business_id: Optional[int] = None
    is_active: bool
    categories: list[CategoryBrief] = Field(default_factory=list)

    total_views: int
    total_reviews: int
    positive_reviews: int
    neutral_reviews: int
    negative_reviews: int
    quick_rating_avg: Optional[float] = None
    quick_rating_total: int
    quick_rating_1: int
    quick_rating_2: int
    quick_rating_3: int
    quick_rating_4: int
    quick_rating_5: int

    created_at: datetime
    updated_at: datetime
    last_update: Optional[datetime] = None


class ProductRead(_ItemRead):
    product_name: str
    product_owner: Optional[str] = None


class ServiceRead(_ItemRead):
    service_name: str
    service_owner: Optional[str] = None
    is_verified: bool


class ReviewStats(BaseModel):
    total_reviews: int
    positive_reviews: int
    neutral_reviews: int
    negative_reviews: int
