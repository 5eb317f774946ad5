from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import UserRole


class TokenPairResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None
    location: Optional[str] = None
    gender: Optional[str] = None


class CurrentUser(ORMBase):
    id: int
    email: Optional[str] = None
    full_name: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None
    role: UserRole
    has_completed_profile: bool


class LoginResponse(TokenPairResponse):
    user: CurrentUser
