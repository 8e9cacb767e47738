"""Caller identity derived from a verified access token.

A caller is either the tenant-less :class:`SuperAdmin` or a
:class:`TenantMember` bound to exactly one tenant. Code that needs to branch
on "is this the super admin" checks the type instead of testing a nullable
tenant id.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Union
from uuid import UUID

from app.models.user import UserRole

TENANT_ROLES = frozenset({UserRole.TENANT_ADMIN.value, UserRole.USER.value})


class InvalidIdentity(ValueError):
    """Token claims do not describe a valid caller."""


@dataclass(frozen=True)
class SuperAdmin:
    user_id: UUID

    role: ClassVar[str] = UserRole.SUPER_ADMIN.value
    tenant_id: ClassVar[None] = None
    is_admin: ClassVar[bool] = True


@dataclass(frozen=True)
class TenantMember:
    user_id: UUID
    tenant_id: UUID
    role: str

    def __post_init__(self) -> None:
        if self.role not in TENANT_ROLES:
            raise InvalidIdentity(f"Role {self.role!r} is not a tenant role")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.TENANT_ADMIN.value


Caller = Union[SuperAdmin, TenantMember]


def _parse_uuid(value: Any, claim: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as e:
        raise InvalidIdentity(f"Claim {claim!r} is not a valid id") from e


def caller_from_claims(claims: Mapping[str, Any]) -> Caller:
    """Build a caller from the ``{userId, tenantId, role}`` token payload.

    Raises:
        InvalidIdentity: If a claim is missing or the combination is inconsistent
            (super admin with a tenant, tenant member without one).
    """
    user_id = _parse_uuid(claims.get("userId"), "userId")
    role = claims.get("role")
    tenant_id = claims.get("tenantId")

    if role == UserRole.SUPER_ADMIN.value:
        if tenant_id is not None:
            raise InvalidIdentity("Super admin tokens carry no tenant")
        return SuperAdmin(user_id=user_id)
    if tenant_id is None:
        raise InvalidIdentity("Tenant member token without tenantId")
    return TenantMember(
        user_id=user_id, tenant_id=_parse_uuid(tenant_id, "tenantId"), role=str(role)
    )


def caller_for_user(user: Any) -> Caller:
    """Snapshot a stored user as a caller (used when issuing tokens)."""
    if user.role == UserRole.SUPER_ADMIN.value:
        if user.tenant_id is not None:
            raise InvalidIdentity("Super admin must not belong to a tenant")
        return SuperAdmin(user_id=user.id)
    if user.tenant_id is None:
        raise InvalidIdentity("Tenant user without tenant")
    return TenantMember(user_id=user.id, tenant_id=user.tenant_id, role=user.role)


def claims_for(caller: Caller) -> dict[str, Any]:
    """Token payload for a caller."""
    return {
        "userId": str(caller.user_id),
        "tenantId": str(caller.tenant_id) if caller.tenant_id is not None else None,
        "role": caller.role,
    }


def tenant_scope(caller: Caller) -> UUID | None:
    """Tenant filter for list queries; None means every tenant."""
    if isinstance(caller, SuperAdmin):
        return None
    return caller.tenant_id
