from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from tuchonga.common.schemas.base import ORMBase
from tuchonga.models import UserRole, ADMIN_ROLES


class SuperAdminSetup(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    phone_number: Optional[str] = None


class AdminCreate(SuperAdminSetup):
    role: UserRole
    profile_image: Optional[str] = None

    @field_validator("role")
    @classmethod
    def _staff_role(cls, v: UserRole) -> UserRole:
        if v not in ADMIN_ROLES:
            raise ValueError("role must be one of " + ", ".join(r.value for r in ADMIN_ROLES))
        return v


class AdminUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=72)
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    @field_validator("role")
    @classmethod
    def _staff_role(cls, v: Optional[UserRole]) -> Optional[UserRole]:
        if v is not None and v not in ADMIN_ROLES:
            raise ValueError("role must be one of " + ", ".join(r.value for r in ADMIN_ROLES))
        return v


class AdminRead(ORMBase):
    id: int
    email: Optional[str] = None
    full_name: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    display_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SetupCheckResponse(BaseModel):
    super_admin_exists: bool
