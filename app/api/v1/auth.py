"""Authentication router: tenant registration, login, logout and user info."""

from fastapi import APIRouter, Request, status

from app.core.auth.dependencies import CurrentCaller
from app.core.db.deps import DbSession
from app.core.logging import get_client_ip, log_logout
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterTenantRequest,
    RegisterTenantResponse,
)
from app.schemas.common import ErrorResponse, StandardResponse
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register-tenant",
    response_model=StandardResponse[RegisterTenantResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a tenant",
    description="Create a tenant on the free plan together with its first tenant admin.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        409: {"model": ErrorResponse, "description": "Subdomain already exists"},
    },
)
def register_tenant(
    data: RegisterTenantRequest,
    db: DbSession,
) -> StandardResponse[RegisterTenantResponse]:
    """
    Register a new tenant and its admin atomically.

    Args:
        data: Tenant name, subdomain and admin credentials.
        db: Database session.

    Returns:
        StandardResponse with the tenant id, subdomain and admin user.
    """
    result = AuthService(db).register_tenant(data)
    return StandardResponse(message="Tenant registered successfully", data=result)


@router.post(
    "/login",
    response_model=StandardResponse[LoginResponse],
    status_code=status.HTTP_200_OK,
    summary="Log in",
    description=(
        "Authenticate against a tenant by subdomain. "
        "Use the subdomain 'system' to log in as the super admin."
    ),
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Tenant or account inactive"},
        404: {"model": ErrorResponse, "description": "Tenant not found"},
    },
)
def login(
    data: LoginRequest,
    request: Request,
    db: DbSession,
) -> StandardResponse[LoginResponse]:
    """
    Authenticate a user and return a bearer token.

    Security:
    - Unknown users and wrong passwords get the same generic error
    - Inactive tenants and suspended accounts are rejected before a token is issued

    Args:
        data: Email, password and tenant subdomain.
        request: FastAPI request object (for IP address).
        db: Database session.

    Returns:
        StandardResponse with user info, token and its lifetime in seconds.
    """
    result = AuthService(db).login(
        data.email, data.password, data.tenant_subdomain, get_client_ip(request)
    )
    return StandardResponse(data=result)


@router.get(
    "/me",
    response_model=StandardResponse[MeResponse],
    status_code=status.HTTP_200_OK,
    summary="Current user",
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
)
def get_current_user_info(
    caller: CurrentCaller,
    db: DbSession,
) -> StandardResponse[MeResponse]:
    """Return the authenticated user and their tenant (null for the super admin)."""
    return StandardResponse(data=AuthService(db).get_me(caller))


@router.post(
    "/logout",
    response_model=StandardResponse[None],
    status_code=status.HTTP_200_OK,
    summary="Log out",
)
def logout(caller: CurrentCaller, request: Request) -> StandardResponse[None]:
    """
    Log out. Tokens are stateless, so the client simply discards its token.
    """
    log_logout(str(caller.user_id), get_client_ip(request))
    return StandardResponse(message="Logged out successfully")
