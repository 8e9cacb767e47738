"""Unit tests for partial updates."""

from types import SimpleNamespace

import pytest

from app.core.exceptions import APIException
from app.core.patch import Patch, apply_patch
from app.schemas.task import TaskUpdate
from app.schemas.tenant import TenantUpdate


def test_only_sent_fields_are_kept():
    data = TaskUpdate.model_validate({"title": "New"})
    assert dict(Patch.from_model(data)) == {"title": "New"}


def test_explicit_null_kept_for_nullable_fields():
    data = TaskUpdate.model_validate({"assignedTo": None, "dueDate": None})
    patch = Patch.from_model(data, nullable=frozenset({"assigned_to", "due_date"}))
    assert dict(patch) == {"assigned_to": None, "due_date": None}


def test_null_on_required_field_rejected():
    data = TaskUpdate.model_validate({"title": None})
    with pytest.raises(APIException) as exc_info:
        Patch.from_model(data)
    assert exc_info.value.code == "VALIDATION_ERROR"
    assert "title" in exc_info.value.details


def test_enums_stored_as_values():
    data = TenantUpdate.model_validate({"subscriptionPlan": "pro"})
    assert Patch.from_model(data)["subscription_plan"] == "pro"


def test_empty_patch_rejected():
    with pytest.raises(APIException) as exc_info:
        Patch.from_model(TenantUpdate()).require_any()
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "No fields provided for update"


def test_without_drops_keys():
    patch = Patch({"a": 1, "b": 2})
    assert dict(patch.without("a")) == {"b": 2}
    assert patch.fields == frozenset({"a", "b"})


def test_apply_patch_reports_changes_only():
    row = SimpleNamespace(name="Acme", status="active")
    changed = apply_patch(row, Patch({"name": "Acme", "status": "suspended"}))
    assert changed == ["status"]
    assert row.status == "suspended"


def test_apply_same_patch_twice_is_noop():
    row = SimpleNamespace(name="Old")
    patch = Patch({"name": "New"})
    assert apply_patch(row, patch) == ["name"]
    assert apply_patch(row, patch) == []
