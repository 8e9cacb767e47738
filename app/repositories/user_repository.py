from typing import Any
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.task import Task
from app.models.user import User, UserRole


class UserRepository:
    """Repository for user data access, scoped by tenant."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def create(self, user_data: dict[str, Any]) -> User:
        """Add a user to the current transaction."""
        user = User(**user_data)
        self.db.add(user)
        self.db.flush()
        return user

    def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email_in_tenant(self, tenant_id: UUID, email: str) -> User | None:
        """Get a tenant user by email."""
        return (
            self.db.query(User)
            .filter(User.tenant_id == tenant_id, User.email == email.lower())
            .first()
        )

    def get_super_admin_by_email(self, email: str) -> User | None:
        """Get the tenant-less super admin by email."""
        return (
            self.db.query(User)
            .filter(
                User.email == email.lower(),
                User.role == UserRole.SUPER_ADMIN.value,
                User.tenant_id.is_(None),
            )
            .first()
        )

    def count_for_tenant(self, tenant_id: UUID) -> int:
        return self.db.query(User).filter(User.tenant_id == tenant_id).count()

    def list_for_tenant(
        self,
        tenant_id: UUID,
        search: str | None = None,
        role: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[User], int]:
        """List a tenant's users newest first.

        Args:
            tenant_id: Tenant to list.
            search: Case-insensitive substring of full name or email.
            role: Exact role filter.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Tuple of (users, total).
        """
        query = self.db.query(User).filter(User.tenant_id == tenant_id)
        if search:
            query = query.filter(
                or_(
                    User.full_name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )
        if role:
            query = query.filter(User.role == role)

        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return users, total

    def delete(self, user: User) -> None:
        """Delete a user, unassigning their tasks and orphaning their projects."""
        self.db.query(Task).filter(Task.assigned_to == user.id).update(
            {Task.assigned_to: None}, synchronize_session="fetch"
        )
        self.db.query(Project).filter(Project.created_by == user.id).update(
            {Project.created_by: None}, synchronize_session="fetch"
        )
        self.db.delete(user)
        self.db.flush()
