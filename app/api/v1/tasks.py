"""Task router for operations addressed by task id."""

from uuid import UUID

from fastapi import APIRouter, status

from app.core.auth.dependencies import CurrentCaller
from app.core.db.deps import DbSession
from app.schemas.common import ErrorResponse, StandardResponse
from app.schemas.task import TaskResponse, TaskStatusUpdate, TaskUpdate
from app.services.task_service import TaskService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Task not found"}}


@router.patch(
    "/{task_id}/status",
    response_model=StandardResponse[TaskResponse],
    status_code=status.HTTP_200_OK,
    summary="Change task status",
    responses=NOT_FOUND,
)
def update_task_status(
    task_id: UUID,
    data: TaskStatusUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[TaskResponse]:
    """Move a task to todo, in_progress or completed."""
    task = TaskService(db).update_task_status(caller, task_id, data.status)
    return StandardResponse(message="Task status updated successfully", data=task)


@router.put(
    "/{task_id}",
    response_model=StandardResponse[TaskResponse],
    status_code=status.HTTP_200_OK,
    summary="Update task",
    responses={400: {"model": ErrorResponse, "description": "Invalid input"}, **NOT_FOUND},
)
def update_task(
    task_id: UUID,
    data: TaskUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[TaskResponse]:
    """
    Update a task.

    Any member of the task's tenant may edit it. Send assignedTo or dueDate
    as null to clear them.
    """
    task = TaskService(db).update_task(caller, task_id, data)
    return StandardResponse(message="Task updated successfully", data=task)


@router.delete(
    "/{task_id}",
    response_model=StandardResponse[None],
    status_code=status.HTTP_200_OK,
    summary="Delete task",
    responses=NOT_FOUND,
)
def delete_task(
    task_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[None]:
    TaskService(db).delete_task(caller, task_id)
    return StandardResponse(message="Task deleted successfully")
