from typing import Any
from uuid import UUID

from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload

from app.models.task import Task, TaskPriority

# high=1, medium=2, low=3, anything else=4
PRIORITY_RANK = case(
    {
        TaskPriority.HIGH.value: 1,
        TaskPriority.MEDIUM.value: 2,
        TaskPriority.LOW.value: 3,
    },
    value=Task.priority,
    else_=4,
)


class TaskRepository:
    """Repository for task data access, scoped by project and tenant."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def create(self, task_data: dict[str, Any]) -> Task:
        """Add a task to the current transaction."""
        task = Task(**task_data)
        self.db.add(task)
        self.db.flush()
        return task

    def get_by_id(self, task_id: UUID) -> Task | None:
        """Get task by ID."""
        return (
            self.db.query(Task)
            .options(joinedload(Task.assignee))
            .filter(Task.id == task_id)
            .first()
        )

    def list_for_project(
        self,
        project_id: UUID,
        tenant_id: UUID,
        status: str | None = None,
        assigned_to: UUID | None = None,
        priority: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[Task], int]:
        """List a project's tasks.

        Filters combine with AND. Ordering is priority rank, then due date
        ascending with undated tasks last, then creation time.

        Returns:
            Tuple of (tasks, total).
        """
        query = self.db.query(Task).filter(
            Task.project_id == project_id, Task.tenant_id == tenant_id
        )
        if status:
            query = query.filter(Task.status == status)
        if assigned_to:
            query = query.filter(Task.assigned_to == assigned_to)
        if priority:
            query = query.filter(Task.priority == priority)
        if search:
            query = query.filter(Task.title.icontains(search, autoescape=True))

        total = query.count()
        tasks = (
            query.options(joinedload(Task.assignee))
            .order_by(
                PRIORITY_RANK.asc(),
                Task.due_date.is_(None).asc(),
                Task.due_date.asc(),
                Task.created_at.asc(),
                Task.id,
            )
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return tasks, total

    def delete(self, task: Task) -> None:
        """Delete a task."""
        self.db.delete(task)
        self.db.flush()
