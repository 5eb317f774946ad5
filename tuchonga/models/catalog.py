from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship, declared_attr
from sqlalchemy.sql import func

from tuchonga.core.database import Base
from tuchonga.models.category import product_categories, service_categories
from tuchonga.models.enums import ItemType


class ItemStatsMixin:
    """Columns shared by products and services.

    The review and quick-rating columns are denormalized and only ever written
    by ``tuchonga.features.catalog.stats``.
    """

    description = Column(Text, nullable=True)
    main_image = Column(String(500), nullable=True)
    additional_images = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)

    total_views = Column(Integer, nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)
    positive_reviews = Column(Integer, nullable=False, default=0)
    neutral_reviews = Column(Integer, nullable=False, default=0)
    negative_reviews = Column(Integer, nullable=False, default=0)

    quick_rating_avg = Column(Float, nullable=True)
    quick_rating_total = Column(Integer, nullable=False, default=0)
    quick_rating_1 = Column(Integer, nullable=False, default=0)
    quick_rating_2 = Column(Integer, nullable=False, default=0)
    quick_rating_3 = Column(Integer, nullable=False, default=0)
    quick_rating_4 = Column(Integer, nullable=False, default=0)
    quick_rating_5 = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    last_update = Column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def business_id(cls):
        return Column(Integer, ForeignKey("businesses.id", ondelete="SET NULL"), nullable=True, index=True)


class Product(ItemStatsMixin, Base):
    __tablename__ = "products"
    item_type = ItemType.PRODUCT

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_name = Column(String(200), nullable=False, index=True)
    product_owner = Column(String(200), nullable=True)

    business = relationship("Business", back_populates="products")
    categories = relationship("Category", secondary=product_categories, back_populates="products")

    @property
    def name(self) -> str:
        return self.product_name


class Service(ItemStatsMixin, Base):
    __tablename__ = "services"
    item_type = ItemType.SERVICE

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_name = Column(String(200), nullable=False, index=True)
    service_owner = Column(String(200), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    business = relationship("Business", back_populates="services")
    categories = relationship("Category", secondary=service_categories, back_populates="services")

    @property
    def name(self) -> str:
        return self.service_name


ITEM_MODELS = {
    ItemType.PRODUCT: Product,
    ItemType.SERVICE: Service,
}
