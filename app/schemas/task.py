"""Task schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from app.models.task import Task, TaskPriority, TaskStatus
from app.schemas.common import CamelModel


class TaskCreate(CamelModel):
    """Schema for creating a task. New tasks always start in ``todo``."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    assigned_to: UUID | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


class TaskUpdate(CamelModel):
    """Schema for a full task update.

    ``assignedTo`` and ``dueDate`` may be sent as null to clear them;
    leaving them out keeps the stored value.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: UUID | None = None
    due_date: date | None = None


class AssigneeSummary(CamelModel):
    id: UUID
    full_name: str
    email: str


class TaskResponse(CamelModel):
    id: UUID
    project_id: UUID
    tenant_id: UUID
    title: str
    description: str | None
    status: str
    priority: str
    assigned_to: AssigneeSummary | None = None
    due_date: date | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        assignee = task.assignee
        return cls(
            id=task.id,
            project_id=task.project_id,
            tenant_id=task.tenant_id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            assigned_to=AssigneeSummary(
                id=assignee.id, full_name=assignee.full_name, email=assignee.email
            )
            if assignee
            else None,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
