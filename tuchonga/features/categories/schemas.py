from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import CategoryType


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    type: CategoryType


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    type: Optional[CategoryType] = None


class CategoryRead(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    type: CategoryType
    created_at: datetime
    updated_at: datetime
    product_count: int = 0
    service_count: int = 0


class CategoriesBulkCreate(BaseModel):
    categories: list[CategoryCreate] = Field(min_length=1)


class CategoriesBulkResult(BaseModel):
    created: list[CategoryRead]
    skipped: list[str]


class CategoryUsage(BaseModel):
    id: int
    name: str
    type: CategoryType
    product_count: int
    service_count: int


class CategoryStats(BaseModel):
    total: int
    product_categories: int
    service_categories: int
    categories: list[CategoryUsage]
