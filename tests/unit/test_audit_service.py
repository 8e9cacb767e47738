"""Unit tests for the audit recorder."""

from unittest.mock import patch
from uuid import uuid4

import pytest

from app.core.auth.identity import SuperAdmin, TenantMember
from app.core.exceptions import APIException
from app.models import AuditAction, AuditLog
from app.services import audit_service
from app.services.audit_service import AuditService


def test_record_commits_entry(db_session, tenant):
    actor = uuid4()
    AuditService(db_session).record(tenant.id, actor, AuditAction.UPDATE_PROJECT, "project", uuid4())

    entry = db_session.query(AuditLog).one()
    assert entry.tenant_id == tenant.id
    assert entry.user_id == actor
    assert entry.action == "UPDATE_PROJECT"
    assert entry.entity_type == "project"


def test_record_swallows_failures(db_session, tenant):
    service = AuditService(db_session)
    with patch.object(service.repository, "add", side_effect=RuntimeError("disk full")):
        service.record(tenant.id, uuid4(), AuditAction.DELETE_TASK, "task", uuid4())
    assert db_session.query(AuditLog).count() == 0


def test_record_in_transaction_rolls_back_with_caller(db_session, tenant):
    service = AuditService(db_session)
    tenant.name = "Pending"
    db_session.flush()
    service.record_in_transaction(tenant.id, uuid4(), AuditAction.CREATE_USER, "user", uuid4())
    db_session.rollback()
    assert db_session.query(AuditLog).count() == 0
    db_session.refresh(tenant)
    assert tenant.name == "Acme"


def test_record_in_transaction_failure_keeps_outer_transaction(db_session, tenant):
    service = AuditService(db_session)
    tenant.name = "Renamed"
    with patch.object(service.repository, "add", side_effect=RuntimeError("boom")):
        service.record_in_transaction(tenant.id, uuid4(), AuditAction.UPDATE_TENANT, "tenant", tenant.id)
    db_session.commit()
    db_session.refresh(tenant)
    assert tenant.name == "Renamed"


def test_recording_can_be_switched_off(db_session, tenant):
    with patch.object(audit_service.settings, "LOG_TO_DB", False):
        AuditService(db_session).record(tenant.id, uuid4(), AuditAction.CREATE_TASK, "task", uuid4())
    assert db_session.query(AuditLog).count() == 0


def test_list_logs_filters_and_orders(db_session, tenant, other_tenant):
    service = AuditService(db_session)
    service.record(tenant.id, uuid4(), AuditAction.CREATE_PROJECT, "project", uuid4())
    service.record(tenant.id, uuid4(), AuditAction.CREATE_TASK, "task", uuid4())
    service.record(other_tenant.id, uuid4(), AuditAction.CREATE_TASK, "task", uuid4())

    page = service.list_logs(SuperAdmin(user_id=uuid4()), tenant.id, entity_type="task")
    assert page.total == 1
    assert page.items[0].action == "CREATE_TASK"


def test_list_logs_requires_admin(db_session, tenant):
    member = TenantMember(user_id=uuid4(), tenant_id=tenant.id, role="user")
    with pytest.raises(APIException) as exc_info:
        AuditService(db_session).list_logs(member, tenant.id)
    assert exc_info.value.status_code == 403
