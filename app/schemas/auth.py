"""Authentication schemas: registration, login and current-user info."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.auth.password import check_password_length
from app.schemas.common import CamelModel

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


class RegisterTenantRequest(CamelModel):
    """Schema for self-service tenant registration."""

    tenant_name: str = Field(..., min_length=1, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=63)
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=8, max_length=128)
    admin_full_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("subdomain")
    @classmethod
    def normalize_subdomain(cls, v: str) -> str:
        """Lowercase the subdomain and check it is a valid DNS label."""
        v = v.strip().lower()
        if not SUBDOMAIN_PATTERN.match(v):
            raise ValueError(
                "Subdomain may contain only lowercase letters, digits and hyphens"
            )
        return v

    @field_validator("admin_password")
    @classmethod
    def validate_admin_password(cls, v: str) -> str:
        return check_password_length(v)


class AdminUserSummary(CamelModel):
    id: UUID
    email: str
    full_name: str
    role: str


class RegisterTenantResponse(CamelModel):
    tenant_id: UUID
    subdomain: str
    admin_user: AdminUserSummary


class LoginRequest(CamelModel):
    """Schema for login request.

    ``tenantSubdomain`` "system" (any case) selects the super admin account.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")
    tenant_subdomain: str = Field(..., min_length=1, description="Tenant subdomain")


class LoginTenant(CamelModel):
    id: UUID
    name: str


class LoginUser(CamelModel):
    id: UUID
    email: str
    full_name: str
    role: str
    tenant_id: UUID | None
    tenant: LoginTenant | None = None


class LoginResponse(CamelModel):
    """Schema for a successful login."""

    user: LoginUser
    token: str = Field(..., description="Signed bearer token")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class MeTenant(CamelModel):
    id: UUID
    name: str
    subdomain: str
    subscription_plan: str
    max_users: int
    max_projects: int


class MeResponse(CamelModel):
    """Schema for /auth/me: the caller plus its tenant (null for the super admin)."""

    id: UUID
    email: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime
    tenant: MeTenant | None = None
