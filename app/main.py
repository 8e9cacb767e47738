from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.api.v1 import api_router, health
from app.core.config import get_settings
from app.core.exceptions import APIException
from app.core.logging import app_logger

settings = get_settings()

app = FastAPI(
    title="TaskHub API",
    version="0.1.0",
    description="Multi-tenant project and task management API",
    docs_url="/docs",
    openapi_url="/openapi.json",
)

origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(code: str, message: str, details: dict | None = None) -> dict:
    return {"success": False, "message": message, "error": {"code": code, "details": details}}


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Return the error envelope already carried by the exception."""
    return JSONResponse(status_code=exc.status_code, content=exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation errors into a 400 with messages keyed by field."""
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        # ("body", "email") -> "email"
        location = error["loc"]
        field_name = str(location[-1]) if len(location) > 1 else str(location[0])
        details.setdefault(field_name, []).append(error["msg"])

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("VALIDATION_ERROR", "Validation failed", details),
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique or foreign key violations that slipped past the service checks."""
    app_logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body("CONFLICT", "Resource conflicts with existing data"),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure and answer with a generic 500; internals never reach the client."""
    app_logger.error(
        f"Unhandled error on {request.method} {request.url.path}", exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("INTERNAL_SERVER_ERROR", "Server error"),
    )


app.include_router(health.router)
app.include_router(health.router, prefix="/api", include_in_schema=False)
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
