"""Project router, including the project-scoped task endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.core.auth.dependencies import CurrentCaller
from app.core.db.deps import DbSession
from app.models.project import ProjectStatus
from app.models.task import TaskPriority, TaskStatus
from app.schemas.common import ErrorResponse, Page, StandardResponse
from app.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from app.schemas.task import TaskCreate, TaskResponse
from app.services.project_service import ProjectService
from app.services.task_service import TaskService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Project not found"}}
FORBIDDEN = {403: {"model": ErrorResponse, "description": "Not the creator or an admin"}}


@router.get(
    "",
    response_model=StandardResponse[Page[ProjectResponse]],
    status_code=status.HTTP_200_OK,
    summary="List projects",
    description=(
        "List projects of the caller's tenant with task counts. "
        "The super admin sees projects of every tenant."
    ),
)
def list_projects(
    caller: CurrentCaller,
    db: DbSession,
    project_status: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(description="Name contains")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 20,
) -> StandardResponse[Page[ProjectResponse]]:
    """List projects, newest first."""
    result = ProjectService(db).list_projects(
        caller,
        status=project_status.value if project_status else None,
        search=search,
        page=page,
        limit=limit,
    )
    return StandardResponse(data=result)


@router.post(
    "",
    response_model=StandardResponse[ProjectResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        403: {"model": ErrorResponse, "description": "Project quota exceeded"},
    },
)
def create_project(
    data: ProjectCreate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[ProjectResponse]:
    """
    Create a project.

    Args:
        data: Project name, description and status. The super admin must
            also pass targetTenantId.
        caller: Authenticated caller.
        db: Database session.

    Returns:
        StandardResponse with the created project.

    Raises:
        APIException: 403 QUOTA_EXCEEDED when the tenant is at max_projects.
    """
    project = ProjectService(db).create_project(caller, data)
    return StandardResponse(message="Project created successfully", data=project)


@router.get(
    "/{project_id}",
    response_model=StandardResponse[ProjectResponse],
    status_code=status.HTTP_200_OK,
    summary="Get project",
    responses=NOT_FOUND,
)
def get_project(
    project_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[ProjectResponse]:
    return StandardResponse(data=ProjectService(db).get_project(caller, project_id))


@router.put(
    "/{project_id}",
    response_model=StandardResponse[ProjectResponse],
    status_code=status.HTTP_200_OK,
    summary="Update project",
    responses={**FORBIDDEN, **NOT_FOUND},
)
def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[ProjectResponse]:
    """Update a project. Only its creator or an admin may do so."""
    project = ProjectService(db).update_project(caller, project_id, data)
    return StandardResponse(message="Project updated successfully", data=project)


@router.delete(
    "/{project_id}",
    response_model=StandardResponse[None],
    status_code=status.HTTP_200_OK,
    summary="Delete project",
    responses={**FORBIDDEN, **NOT_FOUND},
)
def delete_project(
    project_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[None]:
    """Delete a project together with its tasks."""
    ProjectService(db).delete_project(caller, project_id)
    return StandardResponse(message="Project deleted successfully")


@router.post(
    "/{project_id}/tasks",
    response_model=StandardResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid assignee"},
        **NOT_FOUND,
    },
)
def create_task(
    project_id: UUID,
    data: TaskCreate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[TaskResponse]:
    """Create a task in a project. The assignee must belong to the same tenant."""
    task = TaskService(db).create_task(caller, project_id, data)
    return StandardResponse(message="Task created successfully", data=task)


@router.get(
    "/{project_id}/tasks",
    response_model=StandardResponse[Page[TaskResponse]],
    status_code=status.HTTP_200_OK,
    summary="List project tasks",
    description="Ordered by priority (high first), then due date with undated tasks last.",
    responses=NOT_FOUND,
)
def list_tasks(
    project_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
    task_status: Annotated[TaskStatus | None, Query(alias="status")] = None,
    assigned_to: Annotated[UUID | None, Query(alias="assignedTo")] = None,
    priority: Annotated[TaskPriority | None, Query()] = None,
    search: Annotated[str | None, Query(description="Title contains")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> StandardResponse[Page[TaskResponse]]:
    result = TaskService(db).list_tasks(
        caller,
        project_id,
        status=task_status.value if task_status else None,
        assigned_to=assigned_to,
        priority=priority.value if priority else None,
        search=search,
        page=page,
        limit=limit,
    )
    return StandardResponse(data=result)
