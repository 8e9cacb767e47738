"""API exceptions and helpers that produce the standard error envelope."""

from typing import Any, NoReturn

from fastapi import HTTPException, status


class APIException(HTTPException):
    """API error rendered as ``{"success": false, "message": ..., "error": {...}}``.

    Example:
        raise APIException(
            code="PROJECT_NOT_FOUND",
            message="Project not found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            code: Error code (e.g., 'AUTH_INVALID_TOKEN', 'QUOTA_EXCEEDED').
            message: Human-readable error message.
            status_code: HTTP status code (default: 400).
            details: Optional additional error details.
        """
        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "message": message,
                "error": {"code": code, "details": details},
            },
        )
        self.code = code
        self.message = message
        self.details = details


def raise_not_found(resource: str, resource_id: str | None = None) -> NoReturn:
    """Raise 404 Not Found exception.

    Args:
        resource: Resource type (e.g., 'Project', 'Task').
        resource_id: Optional resource ID.

    Raises:
        APIException: 404 Not Found error.
    """
    message = f"{resource} not found"
    if resource_id:
        message += f" (ID: {resource_id})"
    raise APIException(
        code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
        message=message,
        status_code=status.HTTP_404_NOT_FOUND,
    )


def raise_bad_request(
    code: str, message: str, details: dict[str, Any] | None = None
) -> NoReturn:
    """Raise 400 Bad Request exception.

    Args:
        code: Error code.
        message: Error message.
        details: Optional error details.

    Raises:
        APIException: 400 Bad Request error.
    """
    raise APIException(
        code=code,
        message=message,
        status_code=status.HTTP_400_BAD_REQUEST,
        details=details,
    )


def raise_validation_error(
    message: str, details: dict[str, Any] | None = None
) -> NoReturn:
    """Raise 400 with the VALIDATION_ERROR code."""
    raise_bad_request("VALIDATION_ERROR", message, details)


def raise_unauthorized(
    code: str = "AUTH_UNAUTHORIZED", message: str = "Unauthorized"
) -> NoReturn:
    """Raise 401 Unauthorized exception.

    Args:
        code: Error code (default: 'AUTH_UNAUTHORIZED').
        message: Error message (default: 'Unauthorized').

    Raises:
        APIException: 401 Unauthorized error.
    """
    raise APIException(
        code=code, message=message, status_code=status.HTTP_401_UNAUTHORIZED
    )


def raise_forbidden(
    code: str = "UNAUTHORIZED",
    message: str = "Unauthorized",
    details: dict[str, Any] | None = None,
) -> NoReturn:
    """Raise 403 Forbidden exception.

    Args:
        code: Error code (default: 'UNAUTHORIZED').
        message: Error message (default: 'Unauthorized').
        details: Optional error details.

    Raises:
        APIException: 403 Forbidden error.
    """
    raise APIException(
        code=code,
        message=message,
        status_code=status.HTTP_403_FORBIDDEN,
        details=details,
    )


def raise_quota_exceeded(resource: str, limit: int) -> NoReturn:
    """Raise 403 for a tenant that reached its plan limit.

    Args:
        resource: Plural resource name ('users' or 'projects').
        limit: The tenant's current ceiling for that resource.

    Raises:
        APIException: 403 Forbidden error with code QUOTA_EXCEEDED.
    """
    raise_forbidden(
        code="QUOTA_EXCEEDED",
        message=f"Subscription limit reached: at most {limit} {resource} allowed",
        details={"resource": resource, "limit": limit},
    )


def raise_conflict(
    code: str, message: str, details: dict[str, Any] | None = None
) -> NoReturn:
    """Raise 409 Conflict exception.

    Args:
        code: Error code.
        message: Error message.
        details: Optional error details.

    Raises:
        APIException: 409 Conflict error.
    """
    raise APIException(
        code=code,
        message=message,
        status_code=status.HTTP_409_CONFLICT,
        details=details,
    )
