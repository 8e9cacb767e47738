"""Unit tests for subscription plan limits."""

import pytest

from app.core.patch import Patch
from app.core.plans import DEFAULT_PLAN, PLAN_LIMITS, limits_for
from app.models.tenant import SubscriptionPlan
from app.services.quota_guard import has_capacity
from app.services.tenant_service import resolve_plan_limits


@pytest.mark.parametrize(
    ("plan", "users", "projects"),
    [("free", 5, 3), ("pro", 25, 15), ("enterprise", 100, 50)],
)
def test_plan_table(plan, users, projects):
    limits = limits_for(plan)
    assert (limits.max_users, limits.max_projects) == (users, projects)


def test_limits_for_accepts_enum():
    assert limits_for(SubscriptionPlan.PRO) == PLAN_LIMITS["pro"]


def test_unknown_plan_raises():
    with pytest.raises(KeyError):
        limits_for("platinum")


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PLAN_LIMITS["free"] = PLAN_LIMITS["pro"]  # type: ignore[index]


def test_new_tenants_start_on_free():
    assert DEFAULT_PLAN == "free"


def test_plan_change_overrides_explicit_limits():
    patch = resolve_plan_limits(
        Patch({"subscription_plan": "pro", "max_users": 999, "max_projects": 1})
    )
    assert patch["max_users"] == 25
    assert patch["max_projects"] == 15


def test_limits_kept_without_plan_change():
    patch = Patch({"max_users": 7})
    assert resolve_plan_limits(patch) is patch


@pytest.mark.parametrize(
    ("current", "limit", "expected"),
    [(0, 5, True), (4, 5, True), (5, 5, False), (6, 5, False), (0, 0, False)],
)
def test_has_capacity(current, limit, expected):
    assert has_capacity(current, limit) is expected
