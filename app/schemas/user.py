"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.auth.password import check_password_length
from app.models.user import UserRole
from app.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Schema for adding a user to a tenant."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_length(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: UserRole) -> UserRole:
        """Tenant users cannot be created as super admin."""
        if v is UserRole.SUPER_ADMIN:
            raise ValueError("Role must be tenant_admin or user")
        return v


class UserUpdate(CamelModel):
    """Schema for updating a user. Only fields present in the body are applied."""

    full_name: str | None = Field(None, min_length=1, max_length=255)
    password: str | None = Field(None, min_length=8, max_length=128)
    email: EmailStr | None = None
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return v if v is None else check_password_length(v)


class UserResponse(CamelModel):
    id: UUID
    tenant_id: UUID | None
    email: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
