from app.core.db.session import Base
from app.models.audit_log import AuditAction, AuditLog
from app.models.project import Project, ProjectStatus
from app.models.task import Task, TaskPriority, TaskStatus
from app.models.tenant import SubscriptionPlan, Tenant, TenantStatus
from app.models.user import User, UserRole

__all__ = [
    "Base",
    "AuditAction",
    "AuditLog",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "SubscriptionPlan",
    "Tenant",
    "TenantStatus",
    "User",
    "UserRole",
]
