from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.task import Task
from app.models.tenant import Tenant
from app.models.user import User


class TenantRepository:
    """Repository for tenant data access. Tenants are the one unscoped entity."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def create(self, tenant_data: dict[str, Any]) -> Tenant:
        """Add a tenant to the current transaction."""
        tenant = Tenant(**tenant_data)
        self.db.add(tenant)
        self.db.flush()
        return tenant

    def get_by_id(self, tenant_id: UUID) -> Tenant | None:
        """Get tenant by ID."""
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_for_update(self, tenant_id: UUID) -> Tenant | None:
        """Get tenant by ID and lock its row until the transaction ends."""
        return (
            self.db.query(Tenant)
            .filter(Tenant.id == tenant_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by subdomain (subdomains are stored lowercase)."""
        return (
            self.db.query(Tenant).filter(Tenant.subdomain == subdomain.lower()).first()
        )

    def list_tenants(
        self,
        status: str | None = None,
        subscription_plan: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[tuple[Tenant, int, int]], int]:
        """List tenants newest first with their user and project counts.

        Returns:
            Tuple of ([(tenant, total_users, total_projects)], total).
        """
        user_count = (
            select(func.count(User.id))
            .where(User.tenant_id == Tenant.id)
            .correlate(Tenant)
            .scalar_subquery()
        )
        project_count = (
            select(func.count(Project.id))
            .where(Project.tenant_id == Tenant.id)
            .correlate(Tenant)
            .scalar_subquery()
        )

        base = self.db.query(Tenant)
        if status:
            base = base.filter(Tenant.status == status)
        if subscription_plan:
            base = base.filter(Tenant.subscription_plan == subscription_plan)
        total = base.count()

        rows = (
            base.add_columns(user_count, project_count)
            .order_by(Tenant.created_at.desc(), Tenant.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [(tenant, users, projects) for tenant, users, projects in rows], total

    def get_stats(self, tenant_id: UUID) -> dict[str, int]:
        """Count users, projects and tasks owned by a tenant."""
        return {
            "total_users": self.db.query(User).filter(User.tenant_id == tenant_id).count(),
            "total_projects": self.db.query(Project)
            .filter(Project.tenant_id == tenant_id)
            .count(),
            "total_tasks": self.db.query(Task).filter(Task.tenant_id == tenant_id).count(),
        }
