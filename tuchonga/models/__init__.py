from .enums import (
    UserRole,
    ItemType,
    CategoryType,
    Sentiment,
    ReactionType,
    ADMIN_ROLES,
    MODERATION_ROLES,
)
from .user import User, AdminAuth, UserAnalytics
from .refresh_token import RefreshToken
from .business import Business
from .category import Category, product_categories, service_categories
from .catalog import Product, Service, ITEM_MODELS
from .review import Review
from .comment import Comment, CommentReaction, MAX_COMMENT_DEPTH
from .quick_rating import QuickRating
from .favorite import Favorite

__all__ = [
    "UserRole", "ItemType", "CategoryType", "Sentiment", "ReactionType",
    "ADMIN_ROLES", "MODERATION_ROLES",
    "User", "AdminAuth", "UserAnalytics", "RefreshToken",
    "Business", "Category", "product_categories", "service_categories",
    "Product", "Service", "ITEM_MODELS",
    "Review", "Comment", "CommentReaction", "MAX_COMMENT_DEPTH",
    "QuickRating", "Favorite",
]
