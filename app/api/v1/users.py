"""User router: update and delete by id."""

from uuid import UUID

from fastapi import APIRouter, status

from app.core.auth.dependencies import CurrentCaller
from app.core.db.deps import DbSession
from app.schemas.common import ErrorResponse, StandardResponse
from app.schemas.user import UserResponse, UserUpdate
from app.services.user_service import UserService

router = APIRouter()


@router.put(
    "/{user_id}",
    response_model=StandardResponse[UserResponse],
    status_code=status.HTTP_200_OK,
    summary="Update user",
    description=(
        "Users may change their own fullName and password. "
        "email, role and isActive require a tenant admin or the super admin."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "No fields"},
        403: {"model": ErrorResponse, "description": "Field not permitted"},
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Email exists"},
    },
)
def update_user(
    user_id: UUID,
    data: UserUpdate,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[UserResponse]:
    """Update a user."""
    user = UserService(db).update_user(caller, user_id, data)
    return StandardResponse(
        message="User updated successfully", data=UserResponse.model_validate(user)
    )


@router.delete(
    "/{user_id}",
    response_model=StandardResponse[None],
    status_code=status.HTTP_200_OK,
    summary="Delete user",
    responses={
        403: {"model": ErrorResponse, "description": "Not an admin, or deleting yourself"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
def delete_user(
    user_id: UUID,
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[None]:
    """Delete a user. Nobody can delete their own account."""
    UserService(db).delete_user(caller, user_id)
    return StandardResponse(message="User deleted successfully")
