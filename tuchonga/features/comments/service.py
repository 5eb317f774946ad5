"""Threaded comments and agree/disagree reactions.

Reply and reaction counters on ``Comment`` are changed with SQL increments in
the same transaction as the row they count.
"""
import logging
from typing import Iterable, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from tuchonga.common.counters import bump
from tuchonga.common.pagination import paginate
from tuchonga.common.utils import utc_now, sort_column
from tuchonga.core.database import atomic
from tuchonga.features.catalog.service import get_active_item, item_fk
from tuchonga.features.users.service import bump_analytics, item_counter
from tuchonga.models import (
    Comment, CommentReaction, ItemType, MAX_COMMENT_DEPTH, MODERATION_ROLES, ReactionType, User,
)

logger = logging.getLogger(__name__)

_SORTABLE = {
    "created_at": "created_at",
    "agree_count": "agree_count",
    "disagree_count": "disagree_count",
    "reply_count": "reply_count",
}

_COUNTER = {ReactionType.AGREE: "agree_count", ReactionType.DISAGREE: "disagree_count"}
_ANALYTICS = {ReactionType.AGREE: "total_agrees", ReactionType.DISAGREE: "total_disagrees"}


def _author_name(user: User) -> str:
    return user.full_name or user.display_name or user.email or "Anonymous"


def get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment or comment.is_deleted:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


def attach_user_reactions(db: Session, comments: Iterable[Comment], user: Optional[User]) -> None:
    comments = list(comments)
    if user is None or not comments:
        return
    rows = (
        db.query(CommentReaction.comment_id, CommentReaction.reaction_type)
        .filter(
            CommentReaction.user_id == user.id,
            CommentReaction.comment_id.in_([c.id for c in comments]),
        )
        .all()
    )
    mine = dict(rows)
    for c in comments:
        c.user_reaction = mine.get(c.id)


def create_comment(db: Session, user: User, payload) -> Comment:
    get_active_item(db, payload.item_type, payload.item_id)

    depth = 0
    if payload.parent_id is not None:
        parent = db.get(Comment, payload.parent_id)
        if not parent or parent.is_deleted:
            raise HTTPException(status_code=404, detail="Parent comment not found")
        if parent.item_type != payload.item_type or parent.item_id != payload.item_id:
            raise HTTPException(status_code=400, detail="Parent comment belongs to a different item")
        depth = min(parent.depth + 1, MAX_COMMENT_DEPTH)

    deltas = {"total_comments": 1, item_counter("comments", payload.item_type): 1}
    if payload.parent_id is not None:
        deltas["total_replies"] = 1

    with atomic(db):
        comment = Comment(
            user_id=user.id,
            user_name=_author_name(user),
            user_avatar=user.profile_image,
            item_type=payload.item_type,
            item_id=payload.item_id,
            text=payload.text,
            parent_id=payload.parent_id,
            depth=depth,
            **item_fk(payload.item_type, payload.item_id),
        )
        db.add(comment)
        if payload.parent_id is not None:
            bump(db, Comment, Comment.id == payload.parent_id, reply_count=1)
        bump_analytics(db, user.id, stamp="last_comment_at", **deltas)

    db.refresh(comment)
    logger.info("comment %s created by user %s (depth %s)", comment.id, user.id, depth)
    return comment


def update_comment(db: Session, user: User, comment_id: int, payload) -> Comment:
    comment = get_comment(db, comment_id)
    if comment.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to update this comment")

    with atomic(db):
        comment.text = payload.text
        comment.is_edited = True
        comment.edited_at = utc_now()

    db.refresh(comment)
    return comment


def delete_comment(db: Session, user: User, comment_id: int) -> None:
    """Soft delete; the parent's reply count drops by one, and only once."""
    comment = get_comment(db, comment_id)
    if comment.user_id != user.id and user.role not in MODERATION_ROLES:
        raise HTTPException(status_code=403, detail="Not authorized to delete this comment")

    with atomic(db):
        changed = bump(
            db, Comment, Comment.id == comment_id, Comment.is_deleted.is_(False),
            set_values={"is_deleted": True},
        )
        if changed and comment.parent_id is not None:
            bump(db, Comment, Comment.id == comment.parent_id, Comment.reply_count > 0, reply_count=-1)
    logger.info("comment %s deleted by user %s", comment_id, user.id)


def _find_reaction(db: Session, user_id: int, comment_id: int) -> Optional[CommentReaction]:
    return (
        db.query(CommentReaction)
        .filter(CommentReaction.user_id == user_id, CommentReaction.comment_id == comment_id)
        .first()
    )


def _drop_reaction(db: Session, reaction: CommentReaction) -> None:
    counter = _COUNTER[ReactionType(reaction.reaction_type)]
    comment_id = reaction.comment_id
    db.delete(reaction)
    bump(db, Comment, Comment.id == comment_id, getattr(Comment, counter) > 0, **{counter: -1})


def _reaction_result(comment: Comment, action: str, reaction_type: Optional[ReactionType]) -> dict:
    return {
        "action": action,
        "reaction_type": reaction_type,
        "agree_count": comment.agree_count,
        "disagree_count": comment.disagree_count,
    }


def react(db: Session, user: User, comment_id: int, reaction_type: ReactionType) -> dict:
    """Add, switch or toggle off the caller's reaction to a comment."""
    comment = get_comment(db, comment_id)

    with atomic(db):
        existing = _find_reaction(db, user.id, comment_id)
        if existing is None:
            db.add(CommentReaction(comment_id=comment_id, user_id=user.id, reaction_type=reaction_type))
            bump(db, Comment, Comment.id == comment_id, **{_COUNTER[reaction_type]: 1})
            bump_analytics(db, user.id, **{_ANALYTICS[reaction_type]: 1})
            action, current = "created", reaction_type
        elif ReactionType(existing.reaction_type) == reaction_type:
            _drop_reaction(db, existing)
            action, current = "removed", None
        else:
            old = ReactionType(existing.reaction_type)
            existing.reaction_type = reaction_type
            bump(db, Comment, Comment.id == comment_id, **{_COUNTER[old]: -1, _COUNTER[reaction_type]: 1})
            action, current = "updated", reaction_type

    db.refresh(comment)
    logger.debug("reaction on comment %s by user %s: %s", comment_id, user.id, action)
    return _reaction_result(comment, action, current)


def remove_reaction(db: Session, user: User, comment_id: int) -> dict:
    comment = get_comment(db, comment_id)
    reaction = _find_reaction(db, user.id, comment_id)
    if reaction is None:
        raise HTTPException(status_code=404, detail="Reaction not found")

    with atomic(db):
        _drop_reaction(db, reaction)

    db.refresh(comment)
    return _reaction_result(comment, "removed", None)


def get_user_reaction(db: Session, user: User, comment_id: int) -> Optional[CommentReaction]:
    get_comment(db, comment_id)
    return _find_reaction(db, user.id, comment_id)


def report_comment(db: Session, user: User, comment_id: int, reason: Optional[str]) -> None:
    get_comment(db, comment_id)
    with atomic(db):
        bump(
            db, Comment, Comment.id == comment_id,
            set_values={"is_reported": True, "last_report_reason": reason},
            report_count=1,
        )
    logger.warning("comment %s reported by user %s", comment_id, user.id)


def list_comments(
    db: Session,
    page: int,
    limit: int,
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    user_id: Optional[int] = None,
    parent_id: Optional[int] = None,
    root_only: bool = False,
    is_deleted: bool = False,
    is_reported: Optional[bool] = None,
    has_replies: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    q = db.query(Comment).filter(Comment.is_deleted == is_deleted)
    if item_type is not None:
        q = q.filter(Comment.item_type == item_type)
    if item_id is not None:
        q = q.filter(Comment.item_id == item_id)
    if user_id is not None:
        q = q.filter(Comment.user_id == user_id)
    if root_only:
        q = q.filter(Comment.parent_id.is_(None))
    elif parent_id is not None:
        q = q.filter(Comment.parent_id == parent_id)
    if is_reported is not None:
        q = q.filter(Comment.is_reported == is_reported)
    if has_replies is True:
        q = q.filter(Comment.reply_count > 0)
    elif has_replies is False:
        q = q.filter(Comment.reply_count == 0)
    if search:
        q = q.filter(Comment.text.ilike(f"%{search}%"))
    q = q.order_by(sort_column(Comment, sort_by, sort_order, _SORTABLE, "created_at"), Comment.id.desc())
    return paginate(q, page, limit)


def count_comments(
    db: Session,
    item_type: Optional[ItemType] = None,
    item_id: Optional[int] = None,
    user_id: Optional[int] = None,
) -> int:
    q = db.query(Comment).filter(Comment.is_deleted.is_(False))
    if item_type is not None:
        q = q.filter(Comment.item_type == item_type)
    if item_id is not None:
        q = q.filter(Comment.item_id == item_id)
    if user_id is not None:
        q = q.filter(Comment.user_id == user_id)
    return q.count()
