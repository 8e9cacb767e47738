"""Subscription quota checks for user and project creation.

The check runs inside the creating transaction. The tenant row is locked
first (``SELECT ... FOR UPDATE``), so two concurrent creations for the same
tenant take turns and the second one sees the first one's row in its count.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import raise_not_found, raise_quota_exceeded
from app.models.tenant import Tenant
from app.repositories.project_repository import ProjectRepository
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository


def has_capacity(current: int, limit: int) -> bool:
    """True while another row fits under the limit."""
    return current < limit


class QuotaGuard:
    """Enforces a tenant's max_users / max_projects before inserts."""

    def __init__(self, db: Session):
        """Initialize guard with database session."""
        self.tenant_repository = TenantRepository(db)
        self.user_repository = UserRepository(db)
        self.project_repository = ProjectRepository(db)

    def _lock_tenant(self, tenant_id: UUID) -> Tenant:
        tenant = self.tenant_repository.get_for_update(tenant_id)
        if tenant is None:
            raise_not_found("Tenant")
        return tenant

    def ensure_user_capacity(self, tenant_id: UUID) -> Tenant:
        """Lock the tenant and deny with QUOTA_EXCEEDED if it is full of users.

        Raises:
            APIException: 404 if the tenant does not exist, 403 QUOTA_EXCEEDED
                if the user limit is reached.
        """
        tenant = self._lock_tenant(tenant_id)
        if not has_capacity(self.user_repository.count_for_tenant(tenant_id), tenant.max_users):
            raise_quota_exceeded("users", tenant.max_users)
        return tenant

    def ensure_project_capacity(self, tenant_id: UUID) -> Tenant:
        """Lock the tenant and deny with QUOTA_EXCEEDED if it is full of projects."""
        tenant = self._lock_tenant(tenant_id)
        if not has_capacity(
            self.project_repository.count_for_tenant(tenant_id), tenant.max_projects
        ):
            raise_quota_exceeded("projects", tenant.max_projects)
        return tenant
