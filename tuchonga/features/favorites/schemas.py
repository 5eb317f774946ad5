from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import ItemType


class FavoriteCreate(BaseModel):
    item_type: ItemType
    item_id: int


class FavoriteItem(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    main_image: Optional[str] = None
    quick_rating_avg: Optional[float] = None
    total_reviews: int
    is_active: bool


class FavoriteRead(ORMBase):
    id: int
    user_id: int
    item_type: ItemType
    item_id: int
    created_at: datetime
    item: Optional[FavoriteItem] = None


class FavoriteToggleResponse(BaseModel):
    action: Literal["added", "removed"]
    is_favorited: bool
    message: str


class FavoriteCheckResponse(BaseModel):
    is_favorited: bool


class FavoriteUser(ORMBase):
    id: int
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None


class ItemFavoriter(ORMBase):
    user: FavoriteUser
    created_at: datetime


class TopFavorite(BaseModel):
    item: FavoriteItem
    favorite_count: int
