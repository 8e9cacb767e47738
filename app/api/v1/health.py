"""Health check endpoint for load balancers and monitoring."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.db.deps import DbSession
from app.core.logging import app_logger

router = APIRouter(tags=["health"])


@router.get("/health", summary="Service health")
def health(db: DbSession) -> JSONResponse:
    """
    Report service status and database reachability.

    Returns:
        200 ``{"status": "ok", "database": "connected"}``, or 503
        ``{"status": "error", "database": "disconnected"}`` when the database
        cannot be reached.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        app_logger.exception("Health check: database unreachable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "database": "disconnected"},
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "ok", "database": "connected"},
    )
