"""Authorization policy.

Every authorization rule in the service lives here as a pure function of the
caller identity and a snapshot of the target resource. Functions return
:data:`ALLOW` or a :class:`Deny` carrying the reason; they never touch the
database or raise. :func:`enforce` turns a denial into the HTTP error.

Tenant isolation is evaluated first on every resource-bound decision: a
tenant member may only ever see or touch rows of its own tenant.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, NoReturn, Union
from uuid import UUID

from app.core.auth.identity import Caller, SuperAdmin
from app.core.exceptions import raise_forbidden, raise_not_found
from app.core.logging import log_access_denied
from app.models.user import UserRole


class DenyReason(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    CROSS_TENANT_ACCESS = "CROSS_TENANT_ACCESS"
    FIELD_NOT_PERMITTED = "FIELD_NOT_PERMITTED"
    SELF_DELETE_FORBIDDEN = "SELF_DELETE_FORBIDDEN"


@dataclass(frozen=True)
class Allow:
    allowed: ClassVar[bool] = True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    fields: frozenset[str] = frozenset()

    allowed: ClassVar[bool] = False


ALLOW = Allow()
Decision = Union[Allow, Deny]


class Operation(str, Enum):
    LIST_TENANTS = "list_tenants"
    READ_TENANT = "read_tenant"
    UPDATE_TENANT = "update_tenant"
    READ_AUDIT_LOG = "read_audit_log"
    CREATE_USER = "create_user"
    LIST_USERS = "list_users"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    CREATE_PROJECT = "create_project"
    READ_PROJECT = "read_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    CREATE_TASK = "create_task"
    READ_TASK = "read_task"
    UPDATE_TASK_STATUS = "update_task_status"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"


SUPER_ADMIN = UserRole.SUPER_ADMIN.value
TENANT_ADMIN = UserRole.TENANT_ADMIN.value
USER = UserRole.USER.value

ADMINS = frozenset({SUPER_ADMIN, TENANT_ADMIN})
EVERYONE = frozenset({SUPER_ADMIN, TENANT_ADMIN, USER})

# Roles allowed to attempt an operation at all. Ownership and field rules
# further narrow some of them below.
OPERATION_ROLES: Mapping[Operation, frozenset[str]] = MappingProxyType(
    {
        Operation.LIST_TENANTS: frozenset({SUPER_ADMIN}),
        Operation.READ_TENANT: EVERYONE,
        Operation.UPDATE_TENANT: ADMINS,
        Operation.READ_AUDIT_LOG: ADMINS,
        Operation.CREATE_USER: ADMINS,
        Operation.LIST_USERS: EVERYONE,
        Operation.UPDATE_USER: EVERYONE,
        Operation.DELETE_USER: ADMINS,
        Operation.CREATE_PROJECT: EVERYONE,
        Operation.READ_PROJECT: EVERYONE,
        Operation.UPDATE_PROJECT: EVERYONE,
        Operation.DELETE_PROJECT: EVERYONE,
        Operation.CREATE_TASK: EVERYONE,
        Operation.READ_TASK: EVERYONE,
        Operation.UPDATE_TASK_STATUS: EVERYONE,
        Operation.UPDATE_TASK: EVERYONE,
        Operation.DELETE_TASK: EVERYONE,
    }
)

# Tenant fields each role may write.
TENANT_FIELDS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        SUPER_ADMIN: frozenset(
            {"name", "status", "subscription_plan", "max_users", "max_projects"}
        ),
        TENANT_ADMIN: frozenset({"name"}),
        USER: frozenset(),
    }
)

# User fields writable on one's own account vs. by an administrator.
USER_SELF_FIELDS = frozenset({"full_name", "password"})
USER_ADMIN_FIELDS = USER_SELF_FIELDS | frozenset({"email", "role", "is_active"})

USER_FIELDS: Mapping[tuple[str, bool], frozenset[str]] = MappingProxyType(
    {
        # (caller role, target is caller)
        (SUPER_ADMIN, True): USER_ADMIN_FIELDS,
        (SUPER_ADMIN, False): USER_ADMIN_FIELDS,
        (TENANT_ADMIN, True): USER_ADMIN_FIELDS,
        (TENANT_ADMIN, False): USER_ADMIN_FIELDS,
        (USER, True): USER_SELF_FIELDS,
        (USER, False): frozenset(),
    }
)


def _fields_outside(requested: Iterable[str], permitted: frozenset[str]) -> frozenset[str]:
    return frozenset(requested) - permitted


def check_tenant_isolation(caller: Caller, resource_tenant_id: UUID | None) -> Decision:
    """Deny a tenant member any resource outside its own tenant."""
    if isinstance(caller, SuperAdmin):
        return ALLOW
    if resource_tenant_id is None or resource_tenant_id != caller.tenant_id:
        return Deny(DenyReason.CROSS_TENANT_ACCESS)
    return ALLOW


def check_role(caller: Caller, operation: Operation) -> Decision:
    if caller.role in OPERATION_ROLES[operation]:
        return ALLOW
    return Deny(DenyReason.UNAUTHORIZED)


def authorize(
    caller: Caller, operation: Operation, resource_tenant_id: UUID | None = None
) -> Decision:
    """Generic gate: tenant isolation (when a resource is given), then role.

    Args:
        caller: Authenticated caller.
        operation: Requested operation.
        resource_tenant_id: Tenant that owns the target, or None for
            operations that are not bound to a tenant (e.g. listing tenants).
    """
    if resource_tenant_id is not None:
        decision = check_tenant_isolation(caller, resource_tenant_id)
        if not decision.allowed:
            return decision
    return check_role(caller, operation)


def can_update_tenant(caller: Caller, tenant_id: UUID, fields: Iterable[str]) -> Decision:
    """Tenant admins may rename their own tenant; only the super admin may do more.

    Any field outside the caller's permitted set is a hard deny, not ignored.
    """
    decision = authorize(caller, Operation.UPDATE_TENANT, tenant_id)
    if not decision.allowed:
        return decision
    rejected = _fields_outside(fields, TENANT_FIELDS[caller.role])
    if rejected:
        return Deny(DenyReason.FIELD_NOT_PERMITTED, rejected)
    return ALLOW


def can_update_user(
    caller: Caller,
    target_id: UUID,
    target_tenant_id: UUID | None,
    target_role: str,
    fields: Iterable[str],
    new_role: str | None = None,
) -> Decision:
    """Self-service covers name and password; email, role and activation need an admin.

    Nobody may promote a user to super admin or change the super admin's
    role through the API.
    """
    decision = check_tenant_isolation(caller, target_tenant_id)
    if not decision.allowed:
        return decision

    requested = frozenset(fields)
    permitted = USER_FIELDS[(caller.role, caller.user_id == target_id)]
    if not permitted:
        return Deny(DenyReason.UNAUTHORIZED)
    rejected = _fields_outside(requested, permitted)
    if rejected:
        return Deny(DenyReason.FIELD_NOT_PERMITTED, rejected)

    if "role" in requested and SUPER_ADMIN in (new_role, target_role):
        return Deny(DenyReason.FIELD_NOT_PERMITTED, frozenset({"role"}))
    return ALLOW


def can_delete_user(caller: Caller, target_id: UUID, target_tenant_id: UUID | None) -> Decision:
    """Admins may delete users of their tenant, but never themselves."""
    decision = check_tenant_isolation(caller, target_tenant_id)
    if not decision.allowed:
        return decision
    if caller.user_id == target_id:
        return Deny(DenyReason.SELF_DELETE_FORBIDDEN)
    return check_role(caller, Operation.DELETE_USER)


def can_modify_project(
    caller: Caller,
    operation: Operation,
    project_tenant_id: UUID,
    project_created_by: UUID | None,
) -> Decision:
    """Projects are changed by their creator or an administrator."""
    decision = authorize(caller, operation, project_tenant_id)
    if not decision.allowed:
        return decision
    if caller.is_admin or caller.user_id == project_created_by:
        return ALLOW
    return Deny(DenyReason.UNAUTHORIZED)


def can_modify_task(caller: Caller, operation: Operation, task_tenant_id: UUID) -> Decision:
    """Any member of the task's tenant may edit it fully.

    Unlike projects there is no creator-or-admin requirement.
    """
    return authorize(caller, operation, task_tenant_id)


DENY_MESSAGES: Mapping[DenyReason, str] = MappingProxyType(
    {
        DenyReason.UNAUTHORIZED: "Unauthorized",
        DenyReason.CROSS_TENANT_ACCESS: "Resource belongs to another tenant",
        DenyReason.FIELD_NOT_PERMITTED: "Not allowed to update these fields",
        DenyReason.SELF_DELETE_FORBIDDEN: "Cannot delete yourself",
    }
)


def enforce(
    decision: Decision,
    caller: Caller,
    operation: Operation,
    *,
    hide_as: str | None = None,
) -> None:
    """Raise the HTTP error for a denial; do nothing on allow.

    Args:
        decision: Result of a policy function.
        caller: Caller the decision was made for (for the security log).
        operation: Operation attempted.
        hide_as: Resource name to report as 404 on cross-tenant access, so
            the caller cannot learn that the row exists.

    Raises:
        APIException: 404 when a cross-tenant hit is hidden, otherwise 403
            with the deny reason as error code.
    """
    if decision.allowed:
        return
    _deny(decision, caller, operation, hide_as)


def _deny(decision: Deny, caller: Caller, operation: Operation, hide_as: str | None) -> NoReturn:
    details = {"fields": sorted(decision.fields)} if decision.fields else None
    log_access_denied(str(caller.user_id), operation.value, decision.reason.value, details)
    if hide_as and decision.reason is DenyReason.CROSS_TENANT_ACCESS:
        raise_not_found(hide_as)
    raise_forbidden(
        code=decision.reason.value,
        message=DENY_MESSAGES[decision.reason],
        details=details,
    )
