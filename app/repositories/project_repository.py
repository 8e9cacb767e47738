from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from app.models.project import Project
from app.models.task import Task, TaskStatus


class ProjectRepository:
    """Repository for project data access, scoped by tenant."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    @staticmethod
    def _task_counts():
        task_count = (
            select(func.count(Task.id))
            .where(Task.project_id == Project.id)
            .correlate(Project)
            .scalar_subquery()
        )
        completed_count = (
            select(func.count(Task.id))
            .where(Task.project_id == Project.id, Task.status == TaskStatus.COMPLETED.value)
            .correlate(Project)
            .scalar_subquery()
        )
        return task_count, completed_count

    def create(self, project_data: dict[str, Any]) -> Project:
        """Add a project to the current transaction."""
        project = Project(**project_data)
        self.db.add(project)
        self.db.flush()
        return project

    def get_by_id(self, project_id: UUID) -> Project | None:
        """Get project by ID."""
        return self.db.query(Project).filter(Project.id == project_id).first()

    def get_with_counts(self, project_id: UUID) -> tuple[Project, int, int] | None:
        """Get project by ID together with its task and completed task counts."""
        task_count, completed_count = self._task_counts()
        row = (
            self.db.query(Project, task_count, completed_count)
            .options(joinedload(Project.creator), joinedload(Project.tenant))
            .filter(Project.id == project_id)
            .first()
        )
        return tuple(row) if row else None

    def count_for_tenant(self, tenant_id: UUID) -> int:
        return self.db.query(Project).filter(Project.tenant_id == tenant_id).count()

    def list_projects(
        self,
        tenant_id: UUID | None,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[tuple[Project, int, int]], int]:
        """List projects newest first.

        Args:
            tenant_id: Tenant to list, or None for every tenant.
            status: Exact status filter.
            search: Case-insensitive substring of the name.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Tuple of ([(project, task_count, completed_task_count)], total).
        """
        base = self.db.query(Project)
        if tenant_id is not None:
            base = base.filter(Project.tenant_id == tenant_id)
        if status:
            base = base.filter(Project.status == status)
        if search:
            base = base.filter(Project.name.icontains(search, autoescape=True))
        total = base.count()

        task_count, completed_count = self._task_counts()
        rows = (
            base.add_columns(task_count, completed_count)
            .options(joinedload(Project.creator), joinedload(Project.tenant))
            .order_by(Project.created_at.desc(), Project.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [(project, tasks, completed) for project, tasks, completed in rows], total

    def delete(self, project: Project) -> None:
        """Delete a project and its tasks."""
        self.db.delete(project)
        self.db.flush()
