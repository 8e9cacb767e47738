"""Tenant model: the unit of data isolation."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.core.db.session import Base


class TenantStatus(str, Enum):
    """Tenant lifecycle states. Only active tenants may log in."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    TRIAL = "trial"


class SubscriptionPlan(str, Enum):
    """Subscription plans; limits per plan live in app.core.plans."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class Tenant(Base):
    """Tenant (organization) that owns users and projects."""

    __tablename__ = "tenants"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    subdomain = Column(String(63), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=TenantStatus.ACTIVE.value, index=True)
    subscription_plan = Column(
        String(20), nullable=False, default=SubscriptionPlan.FREE.value, index=True
    )
    max_users = Column(Integer, nullable=False)
    max_projects = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    users = relationship("User", back_populates="tenant")
    projects = relationship("Project", back_populates="tenant")

    __table_args__ = (
        CheckConstraint("max_users >= 0", name="ck_tenants_max_users_non_negative"),
        CheckConstraint("max_projects >= 0", name="ck_tenants_max_projects_non_negative"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, subdomain={self.subdomain})>"
