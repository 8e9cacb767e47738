"""Unit tests for caller identity."""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from app.core.auth.identity import (
    InvalidIdentity,
    SuperAdmin,
    TenantMember,
    caller_for_user,
    caller_from_claims,
    claims_for,
    tenant_scope,
)


def test_super_admin_claims_round_trip():
    caller = SuperAdmin(user_id=uuid4())
    claims = claims_for(caller)
    assert claims["tenantId"] is None
    assert claims["role"] == "super_admin"
    assert caller_from_claims(claims) == caller


def test_tenant_member_claims_round_trip():
    caller = TenantMember(user_id=uuid4(), tenant_id=uuid4(), role="tenant_admin")
    assert caller_from_claims(claims_for(caller)) == caller
    assert caller.is_admin


def test_plain_user_is_not_admin():
    assert not TenantMember(user_id=uuid4(), tenant_id=uuid4(), role="user").is_admin


def test_tenant_member_rejects_super_admin_role():
    with pytest.raises(InvalidIdentity):
        TenantMember(user_id=uuid4(), tenant_id=uuid4(), role="super_admin")


@pytest.mark.parametrize(
    "claims",
    [
        {"role": "user", "tenantId": str(uuid4())},
        {"userId": "not-a-uuid", "role": "user", "tenantId": str(uuid4())},
        {"userId": str(uuid4()), "role": "user", "tenantId": None},
        {"userId": str(uuid4()), "role": "super_admin", "tenantId": str(uuid4())},
        {"userId": str(uuid4()), "role": "owner", "tenantId": str(uuid4())},
    ],
)
def test_inconsistent_claims_rejected(claims):
    with pytest.raises(InvalidIdentity):
        caller_from_claims(claims)


def test_caller_for_user_snapshots_row():
    tenant_id = uuid4()
    user = SimpleNamespace(id=uuid4(), tenant_id=tenant_id, role="user")
    caller = caller_for_user(user)
    assert isinstance(caller, TenantMember)
    assert caller.tenant_id == tenant_id


def test_caller_for_user_rejects_super_admin_with_tenant():
    user = SimpleNamespace(id=uuid4(), tenant_id=uuid4(), role="super_admin")
    with pytest.raises(InvalidIdentity):
        caller_for_user(user)


def test_tenant_scope():
    member = TenantMember(user_id=uuid4(), tenant_id=uuid4(), role="user")
    assert tenant_scope(member) == member.tenant_id
    assert tenant_scope(SuperAdmin(user_id=uuid4())) is None
