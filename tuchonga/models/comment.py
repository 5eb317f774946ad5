from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean,
    ForeignKey, UniqueConstraint, Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tuchonga.core.database import Base
from tuchonga.models.enums import ItemType, ReactionType, enum_type

MAX_COMMENT_DEPTH = 2


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user_name = Column(String(120), nullable=False)
    user_avatar = Column(String(500), nullable=True)
    item_type = Column(enum_type(ItemType), nullable=False)
    item_id = Column(Integer, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=True)
    text = Column(Text, nullable=False)
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    depth = Column(Integer, nullable=False, default=0)

    # maintained in the same transaction as the rows they count
    reply_count = Column(Integer, nullable=False, default=0)
    agree_count = Column(Integer, nullable=False, default=0)
    disagree_count = Column(Integer, nullable=False, default=0)

    is_edited = Column(Boolean, nullable=False, default=False)
    edited_at = Column(DateTime(timezone=True), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    is_reported = Column(Boolean, nullable=False, default=False)
    report_count = Column(Integer, nullable=False, default=0)
    last_report_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship("Comment", back_populates="parent")
    reactions = relationship("CommentReaction", back_populates="comment", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_comment_item", "item_type", "item_id"),
        Index("idx_comment_parent", "parent_id"),
    )


class CommentReaction(Base):
    __tablename__ = "comment_reactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reaction_type = Column(enum_type(ReactionType, length=10), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    comment = relationship("Comment", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_reaction_user_comment"),
    )
