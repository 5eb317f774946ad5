from sqlalchemy import Column, Integer, Text, DateTime, Boolean, ForeignKey, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tuchonga.core.database import Base
from tuchonga.models.enums import ItemType, Sentiment, enum_type


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    item_type = Column(enum_type(ItemType), nullable=False)
    item_id = Column(Integer, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=True)
    sentiment = Column(enum_type(Sentiment), nullable=False)
    text = Column(Text, nullable=True)
    # append-only list of {"sentiment", "timestamp"} for earlier sentiments
    sentiment_history = Column(JSON, nullable=False, default=list)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User")
    product = relationship("Product")
    service = relationship("Service")

    __table_args__ = (
        UniqueConstraint("user_id", "item_type", "item_id", name="uq_review_user_item"),
        Index("idx_review_item", "item_type", "item_id"),
    )
