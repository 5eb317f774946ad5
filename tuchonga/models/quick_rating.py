from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tuchonga.core.database import Base
from tuchonga.models.enums import ItemType, enum_type


class QuickRating(Base):
    __tablename__ = "quick_ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    item_type = Column(enum_type(ItemType), nullable=False)
    item_id = Column(Integer, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=True)
    rating = Column(Integer, nullable=False)
    # start of the update cooldown window
    last_updated = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User")
    product = relationship("Product")
    service = relationship("Service")

    __table_args__ = (
        UniqueConstraint("user_id", "item_type", "item_id", name="uq_quick_rating_user_item"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_quick_rating_range"),
        Index("idx_quick_rating_item", "item_type", "item_id"),
    )
