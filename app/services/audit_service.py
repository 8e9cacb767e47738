"""Audit recorder and audit log queries.

Writing an audit entry must never fail the operation it documents, so both
recording paths log and swallow their own errors:

* :meth:`AuditService.record_in_transaction` stages the entry inside the
  caller's open transaction behind a SAVEPOINT. It commits together with the
  mutation, and a failed insert only rolls back the savepoint.
* :meth:`AuditService.record` runs after the mutation has committed and
  commits the entry on its own.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.auth.identity import Caller
from app.core.auth.policy import Operation, authorize, enforce
from app.core.config import get_settings
from app.core.logging import security_logger
from app.models.audit_log import AuditAction
from app.repositories.audit_repository import AuditRepository
from app.schemas.audit import AuditLogResponse
from app.schemas.common import Page

settings = get_settings()


class AuditService:
    """Service for recording and querying audit logs."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.repository = AuditRepository(db)

    def record_in_transaction(
        self,
        tenant_id: UUID | None,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: str,
        entity_id: UUID | None,
    ) -> None:
        """Stage an audit entry in the current transaction without committing."""
        if not settings.LOG_TO_DB:
            return
        try:
            with self.db.begin_nested():
                self.repository.add(tenant_id, user_id, action.value, entity_type, entity_id)
        except Exception as e:
            security_logger.error(
                f"Failed to record audit entry {action.value} for {entity_type} {entity_id}: {e}",
                exc_info=True,
            )

    def record(
        self,
        tenant_id: UUID | None,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: str,
        entity_id: UUID | None,
    ) -> None:
        """Append an audit entry in its own commit, after the mutation committed."""
        if not settings.LOG_TO_DB:
            return
        try:
            self.repository.add(tenant_id, user_id, action.value, entity_type, entity_id)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            security_logger.error(
                f"Failed to record audit entry {action.value} for {entity_type} {entity_id}: {e}",
                exc_info=True,
            )

    def list_logs(
        self,
        caller: Caller,
        tenant_id: UUID,
        action: str | None = None,
        entity_type: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page[AuditLogResponse]:
        """List a tenant's audit trail (tenant admins and the super admin)."""
        enforce(
            authorize(caller, Operation.READ_AUDIT_LOG, tenant_id),
            caller,
            Operation.READ_AUDIT_LOG,
        )
        logs, total = self.repository.list_for_tenant(
            tenant_id=tenant_id,
            action=action,
            entity_type=entity_type,
            page=page,
            limit=limit,
        )
        items = [AuditLogResponse.model_validate(log) for log in logs]
        return Page[AuditLogResponse].build(items, total, page, limit)
