from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import ItemType, ReactionType


class CommentCreate(BaseModel):
    item_type: ItemType
    item_id: int
    text: str = Field(min_length=1, max_length=2000)
    parent_id: Optional[int] = None


class CommentUpdate(BaseModel):
    text: str = Field(min_length=1, max_length=2000)


class CommentRead(ORMBase):
    id: int
    user_id: int
    user_name: str
    user_avatar: Optional[str] = None
    item_type: ItemType
    item_id: int
    product_id: Optional[int] = None
    service_id: Optional[int] = None
    text: str
    parent_id: Optional[int] = None
    depth: int
    reply_count: int
    agree_count: int
    disagree_count: int
    is_edited: bool
    edited_at: Optional[datetime] = None
    is_deleted: bool
    is_reported: bool
    report_count: int
    created_at: datetime
    updated_at: datetime
    # set only when the request carries a valid token
    user_reaction: Optional[ReactionType] = None


class AdminCommentRead(CommentRead):
    last_report_reason: Optional[str] = None


class ReactionRequest(BaseModel):
    reaction_type: ReactionType


class ReactionResult(BaseModel):
    action: Literal["created", "updated", "removed"]
    reaction_type: Optional[ReactionType] = None
    agree_count: int
    disagree_count: int


class ReactionRead(ORMBase):
    id: int
    comment_id: int
    user_id: int
    reaction_type: ReactionType
    created_at: datetime


class UserReactionResponse(BaseModel):
    reaction: Optional[ReactionRead] = None


class ReportRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)
