"""User service: tenant membership management."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.auth.identity import Caller
from app.core.auth.password import hash_password
from app.core.auth.policy import (
    Operation,
    authorize,
    can_delete_user,
    can_update_user,
    enforce,
)
from app.core.db.transaction import atomic
from app.core.exceptions import raise_conflict, raise_not_found
from app.core.patch import Patch, apply_patch
from app.models.audit_log import AuditAction
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.common import Page
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.audit_service import AuditService
from app.services.quota_guard import QuotaGuard


class UserService:
    """Service for user management operations."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.repository = UserRepository(db)
        self.quota = QuotaGuard(db)
        self.audit = AuditService(db)

    def create_user(self, caller: Caller, tenant_id: UUID, data: UserCreate) -> User:
        """
        Add a user to a tenant.

        The quota check, duplicate check, insert and audit entry share one
        transaction.

        Raises:
            APIException: 403 for non-admins or another tenant's admin,
                403 QUOTA_EXCEEDED, 404 if the tenant does not exist,
                409 DUPLICATE_EMAIL.
        """
        enforce(
            authorize(caller, Operation.CREATE_USER, tenant_id),
            caller,
            Operation.CREATE_USER,
        )
        email = data.email.lower()

        with atomic(self.db):
            self.quota.ensure_user_capacity(tenant_id)
            if self.repository.get_by_email_in_tenant(tenant_id, email):
                raise_conflict("DUPLICATE_EMAIL", "Email already exists in this tenant")
            user = self.repository.create(
                {
                    "tenant_id": tenant_id,
                    "email": email,
                    "password_hash": hash_password(data.password),
                    "full_name": data.full_name,
                    "role": data.role.value,
                    "is_active": True,
                }
            )
            self.audit.record_in_transaction(
                tenant_id, caller.user_id, AuditAction.CREATE_USER, "user", user.id
            )
        return user

    def list_users(
        self,
        caller: Caller,
        tenant_id: UUID,
        search: str | None = None,
        role: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page[UserResponse]:
        """List a tenant's users (any member of the tenant, or the super admin)."""
        enforce(
            authorize(caller, Operation.LIST_USERS, tenant_id),
            caller,
            Operation.LIST_USERS,
        )
        users, total = self.repository.list_for_tenant(
            tenant_id, search=search, role=role, page=page, limit=limit
        )
        items = [UserResponse.model_validate(user) for user in users]
        return Page[UserResponse].build(items, total, page, limit)

    def update_user(self, caller: Caller, user_id: UUID, data: UserUpdate) -> User:
        """
        Update a user.

        Anyone may change their own name and password. Email, role and
        activation need an administrator of the user's tenant.

        Raises:
            APIException: 400 if no field is supplied, 403 on a policy denial,
                404 if the user does not exist or is in another tenant,
                409 if the new email is taken in the tenant.
        """
        patch = Patch.from_model(data)
        patch.require_any()

        user = self.repository.get_by_id(user_id)
        if user is None:
            raise_not_found("User")
        enforce(
            can_update_user(
                caller,
                target_id=user.id,
                target_tenant_id=user.tenant_id,
                target_role=user.role,
                fields=patch.fields,
                new_role=patch.get("role"),
            ),
            caller,
            Operation.UPDATE_USER,
            hide_as="User",
        )

        with atomic(self.db):
            if "email" in patch:
                email = patch["email"].lower()
                existing = self.repository.get_by_email_in_tenant(user.tenant_id, email)
                if existing is not None and existing.id != user.id:
                    raise_conflict("DUPLICATE_EMAIL", "Email already exists in this tenant")
                patch = Patch({**patch, "email": email})

            changed = apply_patch(user, patch.without("password"))
            if "password" in patch:
                user.password_hash = hash_password(patch["password"])
                changed.append("password_hash")
            tenant_id = user.tenant_id

        if changed:
            self.audit.record(tenant_id, caller.user_id, AuditAction.UPDATE_USER, "user", user_id)
        return user

    def delete_user(self, caller: Caller, user_id: UUID) -> None:
        """
        Delete a user. Admins only, and never the caller's own account.

        Raises:
            APIException: 403 SELF_DELETE_FORBIDDEN or UNAUTHORIZED,
                404 if the user does not exist or is in another tenant.
        """
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise_not_found("User")
        enforce(
            can_delete_user(caller, user.id, user.tenant_id),
            caller,
            Operation.DELETE_USER,
            hide_as="User",
        )
        tenant_id = user.tenant_id
        with atomic(self.db):
            self.repository.delete(user)
        self.audit.record(tenant_id, caller.user_id, AuditAction.DELETE_USER, "user", user_id)
