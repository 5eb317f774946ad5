from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import get_current_user, get_optional_user, require_admin
from tuchonga.common.pagination import PageParams
from tuchonga.common.schemas.responses import ApiResponse, CountResponse, DeleteResponse, Page
from tuchonga.features.catalog.service import get_item
from tuchonga.models import ItemType, Product, Service, User
from . import schemas, service

router = APIRouter(prefix="/comments", tags=["comments"])

SortBy = Literal["created_at", "agree_count", "disagree_count", "reply_count"]


@router.post("", response_model=schemas.CommentRead, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: schemas.CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.create_comment(db, user, payload)


@router.get("", response_model=Page[schemas.AdminCommentRead], dependencies=[Depends(require_admin)])
def list_comments(
    paging: PageParams = Depends(),
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    user_id: Optional[int] = None,
    parent_id: Optional[int] = None,
    is_deleted: bool = False,
    is_reported: Optional[bool] = None,
    has_replies: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: SortBy = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    items, meta = service.list_comments(
        db, paging.page, paging.limit,
        item_type=item_type, item_id=item_id, user_id=user_id, parent_id=parent_id,
        is_deleted=is_deleted, is_reported=is_reported, has_replies=has_replies,
        search=search, sort_by=sort_by, sort_order=sort_order,
    )
    return {"items": items, "meta": meta}


@router.get("/count", response_model=CountResponse)
def count_comments(
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return {"count": service.count_comments(db, item_type, item_id, user_id)}


def _item_comments(db: Session, user: Optional[User], item_type: ItemType, item_id: int,
                   paging: PageParams, sort_by: str, sort_order: str) -> dict:
    items, meta = service.list_comments(
        db, paging.page, paging.limit,
        item_type=item_type, item_id=item_id, root_only=True,
        sort_by=sort_by, sort_order=sort_order,
    )
    service.attach_user_reactions(db, items, user)
    return {"items": items, "meta": meta}


@router.get("/product/{product_id}", response_model=Page[schemas.CommentRead])
def product_comments(
    product_id: int,
    paging: PageParams = Depends(),
    sort_by: SortBy = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    get_item(db, Product, product_id)
    return _item_comments(db, user, ItemType.PRODUCT, product_id, paging, sort_by, sort_order)


@router.get("/service/{service_id}", response_model=Page[schemas.CommentRead])
def service_comments(
    service_id: int,
    paging: PageParams = Depends(),
    sort_by: SortBy = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    get_item(db, Service, service_id)
    return _item_comments(db, user, ItemType.SERVICE, service_id, paging, sort_by, sort_order)


@router.get("/{comment_id}", response_model=schemas.CommentRead)
def get_comment(
    comment_id: int,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    comment = service.get_comment(db, comment_id)
    service.attach_user_reactions(db, [comment], user)
    return comment


@router.get("/{comment_id}/replies", response_model=Page[schemas.CommentRead])
def comment_replies(
    comment_id: int,
    paging: PageParams = Depends(),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    service.get_comment(db, comment_id)
    items, meta = service.list_comments(
        db, paging.page, paging.limit, parent_id=comment_id, sort_order="asc",
    )
    service.attach_user_reactions(db, items, user)
    return {"items": items, "meta": meta}


@router.put("/{comment_id}", response_model=schemas.CommentRead)
def update_comment(
    comment_id: int,
    payload: schemas.CommentUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.update_comment(db, user, comment_id, payload)


@router.delete("/{comment_id}", response_model=DeleteResponse)
def delete_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_comment(db, user, comment_id)
    return {"message": "Comment deleted successfully"}


@router.post("/{comment_id}/react", response_model=schemas.ReactionResult)
def react_to_comment(
    comment_id: int,
    payload: schemas.ReactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.react(db, user, comment_id, payload.reaction_type)


@router.delete("/{comment_id}/react", response_model=schemas.ReactionResult)
def remove_reaction(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.remove_reaction(db, user, comment_id)


@router.get("/{comment_id}/reaction", response_model=schemas.UserReactionResponse)
def my_reaction(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"reaction": service.get_user_reaction(db, user, comment_id)}


@router.post("/{comment_id}/report", response_model=ApiResponse)
def report_comment(
    comment_id: int,
    payload: schemas.ReportRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.report_comment(db, user, comment_id, payload.reason)
    return {"message": "Comment reported successfully"}
