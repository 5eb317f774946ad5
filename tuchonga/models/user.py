from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tuchonga.core.database import Base
from tuchonga.models.enums import UserRole, enum_type


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=True, unique=True)
    phone_number = Column(String(30), nullable=True, unique=True)
    full_name = Column(String(120), nullable=True)
    display_name = Column(String(120), nullable=True)
    firstname = Column(String(60), nullable=True)
    lastname = Column(String(60), nullable=True)
    profile_image = Column(String(500), nullable=True)
    location = Column(String(120), nullable=True)
    gender = Column(String(20), nullable=True)
    role = Column(enum_type(UserRole), nullable=False, default=UserRole.USER, index=True)
    has_completed_profile = Column(Boolean, nullable=False, default=False)
    profile_completed_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    admin_auth = relationship("AdminAuth", uselist=False, back_populates="user", cascade="all, delete-orphan")
    analytics = relationship("UserAnalytics", uselist=False, back_populates="user", cascade="all, delete-orphan")
    refresh_token = relationship("RefreshToken", uselist=False, back_populates="user", cascade="all, delete-orphan")


# password hash kept apart from the profile row
class AdminAuth(Base):
    __tablename__ = "admin_auth"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    password_hash = Column(String(255), nullable=False)
    login_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="admin_auth")


class UserAnalytics(Base):
    __tablename__ = "user_analytics"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    total_reviews = Column(Integer, nullable=False, default=0)
    product_reviews = Column(Integer, nullable=False, default=0)
    service_reviews = Column(Integer, nullable=False, default=0)
    total_comments = Column(Integer, nullable=False, default=0)
    product_comments = Column(Integer, nullable=False, default=0)
    service_comments = Column(Integer, nullable=False, default=0)
    total_replies = Column(Integer, nullable=False, default=0)
    total_agrees = Column(Integer, nullable=False, default=0)
    total_disagrees = Column(Integer, nullable=False, default=0)
    last_review_at = Column(DateTime(timezone=True), nullable=True)
    last_comment_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="analytics")
