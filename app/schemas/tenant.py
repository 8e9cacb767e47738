"""Tenant schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.tenant import SubscriptionPlan, TenantStatus
from app.schemas.common import CamelModel


class TenantUpdate(CamelModel):
    """Schema for updating a tenant. Every field is optional.

    When ``subscriptionPlan`` is present the plan's limits replace any
    ``maxUsers``/``maxProjects`` sent alongside it.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    status: TenantStatus | None = None
    subscription_plan: SubscriptionPlan | None = None
    max_users: int | None = Field(None, ge=0)
    max_projects: int | None = Field(None, ge=0)


class TenantStats(CamelModel):
    total_users: int
    total_projects: int
    total_tasks: int


class TenantResponse(CamelModel):
    id: UUID
    name: str
    subdomain: str
    status: str
    subscription_plan: str
    max_users: int
    max_projects: int
    created_at: datetime
    updated_at: datetime


class TenantDetailResponse(TenantResponse):
    stats: TenantStats


class TenantListItem(TenantResponse):
    total_users: int
    total_projects: int
