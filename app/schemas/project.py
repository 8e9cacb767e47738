"""Project schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.project import Project, ProjectStatus
from app.schemas.common import CamelModel


class ProjectCreate(CamelModel):
    """Schema for creating a project.

    ``targetTenantId`` is required from the super admin and ignored for
    everyone else.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    target_tenant_id: UUID | None = None


class ProjectUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: ProjectStatus | None = None


class CreatorSummary(CamelModel):
    id: UUID
    full_name: str


class ProjectResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    tenant_name: str | None = None
    name: str
    description: str | None
    status: str
    created_by: CreatorSummary | None = None
    task_count: int = 0
    completed_task_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_project(
        cls, project: Project, task_count: int = 0, completed_task_count: int = 0
    ) -> "ProjectResponse":
        creator = project.creator
        return cls(
            id=project.id,
            tenant_id=project.tenant_id,
            tenant_name=project.tenant.name if project.tenant else None,
            name=project.name,
            description=project.description,
            status=project.status,
            created_by=CreatorSummary(id=creator.id, full_name=creator.full_name)
            if creator
            else None,
            task_count=task_count or 0,
            completed_task_count=completed_task_count or 0,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
