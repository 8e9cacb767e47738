"""Authentication service: tenant registration, login and token issuing."""

from sqlalchemy.orm import Session

from app.core.auth.identity import Caller, caller_for_user, claims_for
from app.core.auth.jwt import access_token_ttl, create_access_token
from app.core.auth.password import burn_password_check, hash_password, verify_password
from app.core.db.transaction import atomic
from app.core.exceptions import (
    raise_conflict,
    raise_forbidden,
    raise_not_found,
    raise_unauthorized,
)
from app.core.logging import log_auth_failure, log_auth_success, log_tenant_registered
from app.core.plans import DEFAULT_PLAN, limits_for
from app.models.audit_log import AuditAction
from app.models.tenant import Tenant, TenantStatus
from app.models.user import User, UserRole
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth import (
    AdminUserSummary,
    LoginResponse,
    LoginTenant,
    LoginUser,
    MeResponse,
    MeTenant,
    RegisterTenantRequest,
    RegisterTenantResponse,
)
from app.services.audit_service import AuditService

# Login selector reserved for the super admin; never a tenant subdomain
SYSTEM_TENANT_SELECTOR = "system"


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.tenant_repository = TenantRepository(db)
        self.user_repository = UserRepository(db)
        self.audit = AuditService(db)

    def register_tenant(self, data: RegisterTenantRequest) -> RegisterTenantResponse:
        """
        Create a tenant on the default plan together with its first admin.

        Both rows (and the audit entry) commit in one transaction.

        Raises:
            APIException: 409 DUPLICATE_SUBDOMAIN if the subdomain is taken
                or reserved.
        """
        if data.subdomain == SYSTEM_TENANT_SELECTOR:
            raise_conflict("DUPLICATE_SUBDOMAIN", "Subdomain already exists")

        limits = limits_for(DEFAULT_PLAN)
        with atomic(self.db):
            if self.tenant_repository.get_by_subdomain(data.subdomain):
                raise_conflict("DUPLICATE_SUBDOMAIN", "Subdomain already exists")

            tenant = self.tenant_repository.create(
                {
                    "name": data.tenant_name,
                    "subdomain": data.subdomain,
                    "status": TenantStatus.ACTIVE.value,
                    "subscription_plan": DEFAULT_PLAN,
                    "max_users": limits.max_users,
                    "max_projects": limits.max_projects,
                }
            )
            admin = self.user_repository.create(
                {
                    "tenant_id": tenant.id,
                    "email": data.admin_email.lower(),
                    "password_hash": hash_password(data.admin_password),
                    "full_name": data.admin_full_name,
                    "role": UserRole.TENANT_ADMIN.value,
                    "is_active": True,
                }
            )
            self.audit.record_in_transaction(
                tenant.id, admin.id, AuditAction.REGISTER_TENANT, "tenant", tenant.id
            )

        log_tenant_registered(str(tenant.id), tenant.subdomain, admin.email)
        return RegisterTenantResponse(
            tenant_id=tenant.id,
            subdomain=tenant.subdomain,
            admin_user=AdminUserSummary.model_validate(admin),
        )

    def authenticate_user(
        self,
        email: str,
        password: str,
        tenant_subdomain: str,
        ip_address: str | None = None,
    ) -> tuple[User, Tenant | None]:
        """
        Verify credentials against a tenant, or against the super admin.

        A missing user and a wrong password produce the same 401 so accounts
        cannot be enumerated. Tenant lookup failures are distinguishable since
        subdomains are public.

        Args:
            email: User email.
            password: Plain text password.
            tenant_subdomain: Tenant subdomain, or "system" for the super admin.
            ip_address: Client IP for the security log.

        Returns:
            Tuple of (user, tenant); tenant is None for the super admin.

        Raises:
            APIException: 404 TENANT_NOT_FOUND, 403 TENANT_INACTIVE,
                401 AUTH_INVALID_CREDENTIALS or 403 ACCOUNT_SUSPENDED.
        """
        tenant: Tenant | None = None
        if tenant_subdomain.strip().lower() == SYSTEM_TENANT_SELECTOR:
            user = self.user_repository.get_super_admin_by_email(email)
        else:
            tenant = self.tenant_repository.get_by_subdomain(tenant_subdomain.strip())
            if tenant is None:
                log_auth_failure(email, "tenant_not_found", ip_address)
                raise_not_found("Tenant")
            if not tenant.is_active:
                log_auth_failure(email, "tenant_inactive", ip_address)
                raise_forbidden("TENANT_INACTIVE", "Tenant account is not active")
            user = self.user_repository.get_by_email_in_tenant(tenant.id, email)

        if user is None:
            burn_password_check(password)
            log_auth_failure(email, "user_not_found", ip_address)
            raise_unauthorized("AUTH_INVALID_CREDENTIALS", "Invalid credentials")

        if not user.is_active:
            log_auth_failure(email, "user_inactive", ip_address)
            raise_forbidden("ACCOUNT_SUSPENDED", "Account suspended/inactive")

        if not verify_password(password, user.password_hash):
            log_auth_failure(email, "invalid_password", ip_address)
            raise_unauthorized("AUTH_INVALID_CREDENTIALS", "Invalid credentials")

        log_auth_success(str(user.id), email, str(user.tenant_id), ip_address)
        return user, tenant

    def create_access_token_for_user(self, user: User) -> str:
        """Issue a bearer token carrying the ``{userId, tenantId, role}`` snapshot."""
        return create_access_token(claims_for(caller_for_user(user)))

    def login(
        self,
        email: str,
        password: str,
        tenant_subdomain: str,
        ip_address: str | None = None,
    ) -> LoginResponse:
        """Authenticate and build the login payload."""
        user, tenant = self.authenticate_user(email, password, tenant_subdomain, ip_address)
        token = self.create_access_token_for_user(user)
        return LoginResponse(
            user=LoginUser(
                id=user.id,
                email=user.email,
                full_name=user.full_name,
                role=user.role,
                tenant_id=user.tenant_id,
                tenant=LoginTenant(id=tenant.id, name=tenant.name) if tenant else None,
            ),
            token=token,
            expires_in=int(access_token_ttl().total_seconds()),
        )

    def get_me(self, caller: Caller) -> MeResponse:
        """Return the caller's stored profile and tenant projection.

        Raises:
            APIException: 404 if the user has been deleted since the token
                was issued.
        """
        user = self.user_repository.get_by_id(caller.user_id)
        if user is None:
            raise_not_found("User")
        tenant = user.tenant
        return MeResponse(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
            tenant=MeTenant.model_validate(tenant) if tenant else None,
        )
