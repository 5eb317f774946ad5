import enum

from sqlalchemy import Enum as SAEnum


class UserRole(str, enum.Enum):
    USER = "user"
    BUSINESS = "business"
    STAFF = "staff"
    MODERATOR = "moderator"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMIN_ROLES = (UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MODERATOR, UserRole.STAFF)

# roles allowed to remove other people's content
MODERATION_ROLES = (UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MODERATOR)


class ItemType(str, enum.Enum):
    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"


# categories are typed the same way as the items they group
CategoryType = ItemType


class Sentiment(str, enum.Enum):
    WOULD_RECOMMEND = "WOULD_RECOMMEND"
    ITS_GOOD = "ITS_GOOD"
    DONT_MIND_IT = "DONT_MIND_IT"
    ITS_BAD = "ITS_BAD"

    @property
    def bucket(self) -> str:
        if self in (Sentiment.WOULD_RECOMMEND, Sentiment.ITS_GOOD):
            return "positive"
        if self is Sentiment.DONT_MIND_IT:
            return "neutral"
        return "negative"


class ReactionType(str, enum.Enum):
    AGREE = "AGREE"
    DISAGREE = "DISAGREE"


def enum_type(enum_cls, length: int = 20) -> SAEnum:
    """VARCHAR-backed enum column storing member values."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda e: [m.value for m in e],
        validate_strings=True,
    )
