"""Subscription plan limits.

The table is built once at import time and exposed read-only. Plan changes
copy values out of it; nothing mutates it at runtime.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple

from app.models.tenant import SubscriptionPlan


class PlanLimits(NamedTuple):
    max_users: int
    max_projects: int


PLAN_LIMITS: Mapping[str, PlanLimits] = MappingProxyType(
    {
        SubscriptionPlan.FREE.value: PlanLimits(max_users=5, max_projects=3),
        SubscriptionPlan.PRO.value: PlanLimits(max_users=25, max_projects=15),
        SubscriptionPlan.ENTERPRISE.value: PlanLimits(max_users=100, max_projects=50),
    }
)

# Plan assigned to every newly registered tenant
DEFAULT_PLAN = SubscriptionPlan.FREE.value


def limits_for(plan: str | SubscriptionPlan) -> PlanLimits:
    """Return the limits for a plan.

    Raises:
        KeyError: If the plan is unknown.
    """
    key = plan.value if isinstance(plan, SubscriptionPlan) else plan
    return PLAN_LIMITS[key]
