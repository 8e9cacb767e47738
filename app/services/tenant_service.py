"""Tenant service: details, updates with plan recompute, and listing."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.auth.identity import Caller
from app.core.auth.policy import Operation, authorize, can_update_tenant, enforce
from app.core.db.transaction import atomic
from app.core.exceptions import raise_not_found
from app.core.patch import Patch, apply_patch
from app.core.plans import limits_for
from app.models.audit_log import AuditAction
from app.models.tenant import Tenant
from app.repositories.tenant_repository import TenantRepository
from app.schemas.common import Page
from app.schemas.tenant import (
    TenantDetailResponse,
    TenantListItem,
    TenantResponse,
    TenantStats,
    TenantUpdate,
)
from app.services.audit_service import AuditService


def resolve_plan_limits(patch: Patch) -> Patch:
    """Replace any explicit limits with the plan's limits when the plan changes."""
    if "subscription_plan" not in patch:
        return patch
    limits = limits_for(patch["subscription_plan"])
    return Patch(
        {
            **patch.without("max_users", "max_projects"),
            "max_users": limits.max_users,
            "max_projects": limits.max_projects,
        }
    )


class TenantService:
    """Service for tenant management."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.repository = TenantRepository(db)
        self.audit = AuditService(db)

    def get_tenant(self, caller: Caller, tenant_id: UUID) -> TenantDetailResponse:
        """Get a tenant with user/project/task totals (members and super admin)."""
        enforce(
            authorize(caller, Operation.READ_TENANT, tenant_id),
            caller,
            Operation.READ_TENANT,
        )
        tenant = self.repository.get_by_id(tenant_id)
        if tenant is None:
            raise_not_found("Tenant")
        stats = self.repository.get_stats(tenant_id)
        return TenantDetailResponse(
            **TenantResponse.model_validate(tenant).model_dump(),
            stats=TenantStats(**stats),
        )

    def update_tenant(self, caller: Caller, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        """
        Update a tenant.

        Tenant admins may only rename their own tenant; sending any other
        field is rejected outright. The super admin may also change status and
        plan. A plan change rewrites max_users/max_projects from the plan table
        in the same transaction.

        Raises:
            APIException: 400 if no field is supplied, 403 on a policy denial,
                404 if the tenant does not exist.
        """
        patch = Patch.from_model(data)
        patch.require_any()
        enforce(
            can_update_tenant(caller, tenant_id, patch.fields),
            caller,
            Operation.UPDATE_TENANT,
        )
        patch = resolve_plan_limits(patch)

        with atomic(self.db):
            tenant = self.repository.get_for_update(tenant_id)
            if tenant is None:
                raise_not_found("Tenant")
            if apply_patch(tenant, patch):
                self.audit.record_in_transaction(
                    tenant.id, caller.user_id, AuditAction.UPDATE_TENANT, "tenant", tenant.id
                )
        return tenant

    def list_tenants(
        self,
        caller: Caller,
        status: str | None = None,
        subscription_plan: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[TenantListItem]:
        """List every tenant (super admin only)."""
        enforce(authorize(caller, Operation.LIST_TENANTS), caller, Operation.LIST_TENANTS)
        rows, total = self.repository.list_tenants(
            status=status, subscription_plan=subscription_plan, page=page, limit=limit
        )
        items = [
            TenantListItem(
                **TenantResponse.model_validate(tenant).model_dump(),
                total_users=users,
                total_projects=projects,
            )
            for tenant, users, projects in rows
        ]
        return Page[TenantListItem].build(items, total, page, limit)
