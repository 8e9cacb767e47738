"""Tenant router: details, update, listing, tenant users and audit trail."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.core.auth.dependencies import CurrentCaller
from app.core.db.deps import DbSession
from app.models.tenant import SubscriptionPlan, TenantStatus
from app.models.user import UserRole
from app.schemas.audit import AuditLogResponse
from app.schemas.common import ErrorResponse, Page, StandardResponse
from app.schemas.tenant import (
    TenantDetailResponse,
    TenantListItem,
    TenantResponse,
    TenantUpdate,
)
from app.schemas.user import UserCreate, UserResponse
from app.services.audit_service import AuditService
from app.services.tenant_service import TenantService
from app.services.user_service import UserService

router = APIRouter()

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    403: {"model": ErrorResponse, "description": "Not allowed"},
    404: {"model": ErrorResponse, "description": "Tenant not found"},
}


@router.get(
    "",
    response_model=StandardResponse[Page[TenantListItem]],
    status_code=status.HTTP_200_OK,
    summary="List tenants",
    description="List every tenant with user and project totals. Super admin only.",
    responses=ERROR_RESPONSES,
)
def list_tenants(
    caller: CurrentCaller,
    db: DbSession,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 10,
    tenant_status: Annotated[TenantStatus | None, Query(alias="status")] = None,
    subscription_plan: Annotated[
        SubscriptionPlan | None, Query(alias="subscriptionPlan")
    ] = None,
) -> StandardResponse[Page[TenantListItem]]:
    """List tenants, newest first, optionally filtered by status and plan."""
    result = TenantService(db).list_tenants(
        caller,
        status=tenant_status.value if tenant_status else None,
        subscription_plan=subscription_plan.value if subscription_plan else None,
        page=page,
        limit=limit,
    )
    return StandardResponse(data=result)


@router.get(
    "/{tenant_id}",
    response_model=StandardResponse[TenantDetailResponse],
    status_code=status.HTTP_200_OK,
    summary="Get tenant",
    responses=ERROR_RESPONSES,
)
def get_tenant(
    tenant_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[TenantDetailResponse]:
    """Get a tenant with usage stats. Members of the tenant and the super admin only."""
    return StandardResponse(data=TenantService(db).get_tenant(caller, tenant_id))


@router.put(
    "/{tenant_id}",
    response_model=StandardResponse[TenantResponse],
    status_code=status.HTTP_200_OK,
    summary="Update tenant",
    description=(
        "Tenant admins may change the name of their own tenant. The super admin "
        "may also change status and plan; a plan change resets the limits."
    ),
    responses={400: {"model": ErrorResponse, "description": "No fields"}, **ERROR_RESPONSES},
)
def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[TenantResponse]:
    """Update a tenant."""
    tenant = TenantService(db).update_tenant(caller, tenant_id, data)
    return StandardResponse(
        message="Tenant updated successfully",
        data=TenantResponse.model_validate(tenant),
    )


@router.post(
    "/{tenant_id}/users",
    response_model=StandardResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add user to tenant",
    responses={409: {"model": ErrorResponse, "description": "Email exists"}, **ERROR_RESPONSES},
)
def create_user(
    tenant_id: UUID,
    data: UserCreate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[UserResponse]:
    """
    Add a user to a tenant.

    Requires tenant admin of this tenant or the super admin. Subject to the
    tenant's max_users limit.
    """
    user = UserService(db).create_user(caller, tenant_id, data)
    return StandardResponse(
        message="User created successfully", data=UserResponse.model_validate(user)
    )


@router.get(
    "/{tenant_id}/users",
    response_model=StandardResponse[Page[UserResponse]],
    status_code=status.HTTP_200_OK,
    summary="List tenant users",
    responses=ERROR_RESPONSES,
)
def list_users(
    tenant_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
    search: Annotated[str | None, Query(description="Name or email contains")] = None,
    role: Annotated[UserRole | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> StandardResponse[Page[UserResponse]]:
    """List a tenant's users, newest first."""
    result = UserService(db).list_users(
        caller,
        tenant_id,
        search=search,
        role=role.value if role else None,
        page=page,
        limit=limit,
    )
    return StandardResponse(data=result)


@router.get(
    "/{tenant_id}/audit-logs",
    response_model=StandardResponse[Page[AuditLogResponse]],
    status_code=status.HTTP_200_OK,
    summary="Tenant audit trail",
    responses=ERROR_RESPONSES,
)
def list_audit_logs(
    tenant_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
    action: Annotated[str | None, Query()] = None,
    entity_type: Annotated[str | None, Query(alias="entityType")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> StandardResponse[Page[AuditLogResponse]]:
    """List a tenant's audit entries, newest first. Admins only."""
    result = AuditService(db).list_logs(
        caller, tenant_id, action=action, entity_type=entity_type, page=page, limit=limit
    )
    return StandardResponse(data=result)
