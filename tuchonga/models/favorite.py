from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tuchonga.core.database import Base
from tuchonga.models.enums import ItemType, enum_type


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    item_type = Column(enum_type(ItemType), nullable=False)
    item_id = Column(Integer, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User")
    product = relationship("Product")
    service = relationship("Service")

    __table_args__ = (
        UniqueConstraint("user_id", "item_type", "item_id", name="uq_favorite_user_item"),
        Index("idx_favorite_item", "item_type", "item_id"),
    )

    @property
    def item(self):
        return self.product if self.item_type == ItemType.PRODUCT else self.service
