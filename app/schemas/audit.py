"""Audit log schemas."""

from datetime import datetime
from uuid import UUID

from app.schemas.common import CamelModel


class AuditLogResponse(CamelModel):
    id: UUID
    tenant_id: UUID | None
    user_id: UUID | None
    action: str
    entity_type: str
    entity_id: UUID | None
    created_at: datetime
