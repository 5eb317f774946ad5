from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import UserRole


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None
    location: Optional[str] = None
    gender: Optional[str] = None


class AdminUserUpdate(UserUpdate):
    has_completed_profile: Optional[bool] = None


class UserRead(ORMBase):
    id: int
    email: Optional[str] = None
    phone_number: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None
    location: Optional[str] = None
    gender: Optional[str] = None
    role: UserRole
    has_completed_profile: bool
    profile_completed_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserAnalyticsRead(ORMBase):
    user_id: int
    total_reviews: int
    product_reviews: int
    service_reviews: int
    total_comments: int
    product_comments: int
    service_comments: int
    total_replies: int
    total_agrees: int
    total_disagrees: int
    last_review_at: Optional[datetime] = None
    last_comment_at: Optional[datetime] = None
