"""Repositories for data access operations."""

from app.repositories.audit_repository import AuditRepository
from app.repositories.project_repository import ProjectRepository
from app.repositories.task_repository import TaskRepository
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    "AuditRepository",
    "ProjectRepository",
    "TaskRepository",
    "TenantRepository",
    "UserRepository",
]
