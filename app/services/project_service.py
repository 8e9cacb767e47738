"""Project service."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.auth.identity import Caller, SuperAdmin, tenant_scope
from app.core.auth.policy import Operation, authorize, can_modify_project, enforce
from app.core.db.transaction import atomic
from app.core.exceptions import raise_not_found, raise_validation_error
from app.core.patch import Patch, apply_patch
from app.models.audit_log import AuditAction
from app.models.project import Project
from app.repositories.project_repository import ProjectRepository
from app.schemas.common import Page
from app.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from app.services.audit_service import AuditService
from app.services.quota_guard import QuotaGuard


class ProjectService:
    """Service for project operations."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.repository = ProjectRepository(db)
        self.quota = QuotaGuard(db)
        self.audit = AuditService(db)

    def _get_or_404(self, project_id: UUID) -> Project:
        project = self.repository.get_by_id(project_id)
        if project is None:
            raise_not_found("Project")
        return project

    def _view(self, project_id: UUID) -> ProjectResponse:
        row = self.repository.get_with_counts(project_id)
        if row is None:
            raise_not_found("Project")
        project, task_count, completed_count = row
        return ProjectResponse.from_project(project, task_count, completed_count)

    def create_project(self, caller: Caller, data: ProjectCreate) -> ProjectResponse:
        """
        Create a project in the caller's tenant.

        The super admin has no tenant of its own and must name one with
        ``target_tenant_id``.

        Raises:
            APIException: 400 if the super admin omits the target tenant,
                404 if the target tenant does not exist, 403 QUOTA_EXCEEDED.
        """
        if isinstance(caller, SuperAdmin):
            if data.target_tenant_id is None:
                raise_validation_error(
                    "Super admins must specify targetTenantId to create a project",
                    {"targetTenantId": ["Field required"]},
                )
            tenant_id = data.target_tenant_id
        else:
            tenant_id = caller.tenant_id

        enforce(
            authorize(caller, Operation.CREATE_PROJECT, tenant_id),
            caller,
            Operation.CREATE_PROJECT,
        )
        with atomic(self.db):
            self.quota.ensure_project_capacity(tenant_id)
            project = self.repository.create(
                {
                    "tenant_id": tenant_id,
                    "name": data.name,
                    "description": data.description,
                    "status": data.status.value,
                    "created_by": caller.user_id,
                }
            )
            project_id = project.id

        self.audit.record(
            tenant_id, caller.user_id, AuditAction.CREATE_PROJECT, "project", project_id
        )
        return self._view(project_id)

    def list_projects(
        self,
        caller: Caller,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[ProjectResponse]:
        """List projects of the caller's tenant; the super admin sees all tenants."""
        rows, total = self.repository.list_projects(
            tenant_scope(caller), status=status, search=search, page=page, limit=limit
        )
        items = [
            ProjectResponse.from_project(project, tasks, completed)
            for project, tasks, completed in rows
        ]
        return Page[ProjectResponse].build(items, total, page, limit)

    def get_project(self, caller: Caller, project_id: UUID) -> ProjectResponse:
        project = self._get_or_404(project_id)
        enforce(
            authorize(caller, Operation.READ_PROJECT, project.tenant_id),
            caller,
            Operation.READ_PROJECT,
            hide_as="Project",
        )
        return self._view(project_id)

    def update_project(
        self, caller: Caller, project_id: UUID, data: ProjectUpdate
    ) -> ProjectResponse:
        """
        Update a project (its creator, a tenant admin, or the super admin).

        Repeating an identical update leaves the row as is and records no
        further audit entry.
        """
        patch = Patch.from_model(data, nullable=frozenset({"description"}))
        patch.require_any()
        project = self._get_or_404(project_id)
        enforce(
            can_modify_project(
                caller, Operation.UPDATE_PROJECT, project.tenant_id, project.created_by
            ),
            caller,
            Operation.UPDATE_PROJECT,
            hide_as="Project",
        )
        tenant_id = project.tenant_id
        with atomic(self.db):
            changed = apply_patch(project, patch)
        if changed:
            self.audit.record(
                tenant_id, caller.user_id, AuditAction.UPDATE_PROJECT, "project", project_id
            )
        return self._view(project_id)

    def delete_project(self, caller: Caller, project_id: UUID) -> None:
        """Delete a project and all of its tasks."""
        project = self._get_or_404(project_id)
        enforce(
            can_modify_project(
                caller, Operation.DELETE_PROJECT, project.tenant_id, project.created_by
            ),
            caller,
            Operation.DELETE_PROJECT,
            hide_as="Project",
        )
        tenant_id = project.tenant_id
        with atomic(self.db):
            self.repository.delete(project)
        self.audit.record(
            tenant_id, caller.user_id, AuditAction.DELETE_PROJECT, "project", project_id
        )
