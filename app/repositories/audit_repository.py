"""Audit log repository for data access operations."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog


class AuditRepository:
    """Repository for audit log data access. Insert and read only."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def add(
        self,
        tenant_id: UUID | None,
        user_id: UUID | None,
        action: str,
        entity_type: str,
        entity_id: UUID | None,
    ) -> AuditLog:
        """Stage a new audit log entry in the session (no commit)."""
        entry = AuditLog(
            tenant_id=tenant_id,
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
        )
        self.db.add(entry)
        return entry

    def list_for_tenant(
        self,
        tenant_id: UUID,
        action: str | None = None,
        entity_type: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[AuditLog], int]:
        """
        Get a tenant's audit entries, newest first.

        Args:
            tenant_id: Tenant ID (required for multi-tenancy).
            action: Filter by action (optional).
            entity_type: Filter by entity type (optional).
            page: 1-based page number.
            limit: Page size.

        Returns:
            Tuple of (list of audit logs, total count).
        """
        query = self.db.query(AuditLog).filter(AuditLog.tenant_id == tenant_id)
        if action:
            query = query.filter(AuditLog.action == action)
        if entity_type:
            query = query.filter(AuditLog.entity_type == entity_type)

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc(), AuditLog.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return logs, total
