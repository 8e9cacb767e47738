"""Task service.

Any member of a task's tenant may edit, reassign or delete it; tasks do not
follow the creator-or-admin rule that applies to projects.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.auth.identity import Caller
from app.core.auth.policy import Operation, authorize, can_modify_task, enforce
from app.core.db.transaction import atomic
from app.core.exceptions import raise_not_found, raise_validation_error
from app.core.patch import Patch, apply_patch
from app.models.audit_log import AuditAction
from app.models.project import Project
from app.models.task import Task, TaskStatus
from app.repositories.project_repository import ProjectRepository
from app.repositories.task_repository import TaskRepository
from app.repositories.user_repository import UserRepository
from app.schemas.common import Page
from app.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from app.services.audit_service import AuditService

TASK_NULLABLE_FIELDS = frozenset({"description", "assigned_to", "due_date"})


class TaskService:
    """Service for task operations."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.repository = TaskRepository(db)
        self.project_repository = ProjectRepository(db)
        self.user_repository = UserRepository(db)
        self.audit = AuditService(db)

    def _load_project(self, caller: Caller, project_id: UUID, operation: Operation) -> Project:
        project = self.project_repository.get_by_id(project_id)
        if project is None:
            raise_not_found("Project")
        enforce(
            authorize(caller, operation, project.tenant_id),
            caller,
            operation,
            hide_as="Project",
        )
        return project

    def _load_task(self, caller: Caller, task_id: UUID, operation: Operation) -> Task:
        task = self.repository.get_by_id(task_id)
        if task is None:
            raise_not_found("Task")
        enforce(
            can_modify_task(caller, operation, task.tenant_id),
            caller,
            operation,
            hide_as="Task",
        )
        return task

    def _validate_assignee(self, assignee_id: UUID, tenant_id: UUID) -> None:
        """Assignees must exist and belong to the task's tenant.

        Raises:
            APIException: 400 VALIDATION_ERROR otherwise.
        """
        assignee = self.user_repository.get_by_id(assignee_id)
        if assignee is None:
            raise_validation_error(
                "Assigned user does not exist", {"assignedTo": ["Unknown user"]}
            )
        if assignee.tenant_id != tenant_id:
            raise_validation_error(
                "Assigned user does not belong to the same tenant",
                {"assignedTo": ["User belongs to another tenant"]},
            )

    def _view(self, task_id: UUID) -> TaskResponse:
        task = self.repository.get_by_id(task_id)
        if task is None:
            raise_not_found("Task")
        return TaskResponse.from_task(task)

    def create_task(self, caller: Caller, project_id: UUID, data: TaskCreate) -> TaskResponse:
        """
        Create a task under a project. The task's tenant is the project's.

        Raises:
            APIException: 404 if the project does not exist or is in another
                tenant, 400 if the assignee is unknown or from another tenant.
        """
        project = self._load_project(caller, project_id, Operation.CREATE_TASK)
        tenant_id = project.tenant_id
        if data.assigned_to is not None:
            self._validate_assignee(data.assigned_to, tenant_id)

        with atomic(self.db):
            task = self.repository.create(
                {
                    "project_id": project.id,
                    "tenant_id": tenant_id,
                    "title": data.title,
                    "description": data.description,
                    "status": TaskStatus.TODO.value,
                    "priority": data.priority.value,
                    "assigned_to": data.assigned_to,
                    "due_date": data.due_date,
                }
            )
            task_id = task.id

        self.audit.record(tenant_id, caller.user_id, AuditAction.CREATE_TASK, "task", task_id)
        return self._view(task_id)

    def list_tasks(
        self,
        caller: Caller,
        project_id: UUID,
        status: str | None = None,
        assigned_to: UUID | None = None,
        priority: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page[TaskResponse]:
        """List a project's tasks, highest priority and earliest due first."""
        project = self._load_project(caller, project_id, Operation.READ_TASK)
        tasks, total = self.repository.list_for_project(
            project.id,
            project.tenant_id,
            status=status,
            assigned_to=assigned_to,
            priority=priority,
            search=search,
            page=page,
            limit=limit,
        )
        items = [TaskResponse.from_task(task) for task in tasks]
        return Page[TaskResponse].build(items, total, page, limit)

    def update_task_status(
        self, caller: Caller, task_id: UUID, status: TaskStatus
    ) -> TaskResponse:
        """Move a task to another status."""
        task = self._load_task(caller, task_id, Operation.UPDATE_TASK_STATUS)
        tenant_id = task.tenant_id
        with atomic(self.db):
            changed = apply_patch(task, Patch({"status": status.value}))
        if changed:
            self.audit.record(tenant_id, caller.user_id, AuditAction.UPDATE_TASK, "task", task_id)
        return self._view(task_id)

    def update_task(self, caller: Caller, task_id: UUID, data: TaskUpdate) -> TaskResponse:
        """
        Update any task field.

        ``assigned_to`` and ``due_date`` are cleared when sent as null and left
        alone when omitted.

        Raises:
            APIException: 400 if no field is supplied or the assignee is
                invalid, 404 if the task does not exist or is in another tenant.
        """
        patch = Patch.from_model(data, nullable=TASK_NULLABLE_FIELDS)
        patch.require_any()
        task = self._load_task(caller, task_id, Operation.UPDATE_TASK)
        tenant_id = task.tenant_id
        if patch.get("assigned_to") is not None:
            self._validate_assignee(patch["assigned_to"], tenant_id)

        with atomic(self.db):
            changed = apply_patch(task, patch)
        if changed:
            self.audit.record(tenant_id, caller.user_id, AuditAction.UPDATE_TASK, "task", task_id)
        return self._view(task_id)

    def delete_task(self, caller: Caller, task_id: UUID) -> None:
        task = self._load_task(caller, task_id, Operation.DELETE_TASK)
        tenant_id = task.tenant_id
        with atomic(self.db):
            self.repository.delete(task)
        self.audit.record(tenant_id, caller.user_id, AuditAction.DELETE_TASK, "task", task_id)
