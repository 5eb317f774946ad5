from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from tuchonga.common.schemas.base import ORMBase


class BusinessCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    poc_firstname: Optional[str] = None
    poc_lastname: Optional[str] = None
    poc_phone: Optional[str] = None


class BusinessUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    poc_firstname: Optional[str] = None
    poc_lastname: Optional[str] = None
    poc_phone: Optional[str] = None
    is_verified: Optional[bool] = None
    status: Optional[bool] = None


class BusinessRead(ORMBase):
    id: int
    name: str
    business_email: Optional[str] = None
    business_phone: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    poc_firstname: Optional[str] = None
    poc_lastname: Optional[str] = None
    poc_phone: Optional[str] = None
    is_verified: bool
    status: bool
    created_at: datetime
    updated_at: datetime
    product_count: int = 0
    service_count: int = 0


class BusinessDeleteResponse(BaseModel):
    message: str
    hard_deleted: bool


class BusinessStats(BaseModel):
    total: int
    verified: int
    unverified: int
    active: int
    inactive: int


class ItemKindStats(BaseModel):
    count: int
    total_views: int
    total_reviews: int
    avg_rating: float


class BusinessAnalytics(BaseModel):
    business: BusinessRead
    products: ItemKindStats
    services: ItemKindStats
    total_items: int
    total_views: int
    total_reviews: int
