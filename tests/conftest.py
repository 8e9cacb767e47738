import os

# Settings are read at import time, so the test environment must be in place
# before anything under app/ is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_TO_DB"] = "true"

from collections.abc import Callable, Iterator  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.auth import caller_for_user, claims_for, create_access_token, hash_password  # noqa: E402
from app.core.db.deps import get_db  # noqa: E402
from app.core.db.session import Base  # noqa: E402
from app.core.plans import limits_for  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Project, Task, Tenant, User, UserRole  # noqa: E402

TEST_PASSWORD = "Sup3rSecret!"


def create_test_engine():
    """SQLite in memory by default; TEST_DATABASE_URL points the suite at PostgreSQL."""
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        return create_engine(url, pool_pre_ping=True, future=True)
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )


engine = create_test_engine()
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Iterator[Session]:
    """Fresh schema per test. Services commit, so tables are dropped afterwards."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Iterator[TestClient]:
    """Test client whose requests share the test's database session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def tenant_factory(db_session: Session) -> Callable[..., Tenant]:
    sequence = count(1)

    def create(
        name: str | None = None,
        subdomain: str | None = None,
        plan: str = "free",
        status: str = "active",
        **overrides,
    ) -> Tenant:
        n = next(sequence)
        limits = limits_for(plan)
        tenant = Tenant(
            name=name or f"Tenant {n}",
            subdomain=subdomain or f"tenant-{n}",
            status=status,
            subscription_plan=plan,
            max_users=overrides.pop("max_users", limits.max_users),
            max_projects=overrides.pop("max_projects", limits.max_projects),
            **overrides,
        )
        db_session.add(tenant)
        db_session.commit()
        db_session.refresh(tenant)
        return tenant

    return create


@pytest.fixture
def user_factory(db_session: Session) -> Callable[..., User]:
    sequence = count(1)

    def create(
        tenant: Tenant | None,
        role: str = UserRole.USER.value,
        email: str | None = None,
        password: str = TEST_PASSWORD,
        is_active: bool = True,
        full_name: str | None = None,
    ) -> User:
        n = next(sequence)
        user = User(
            tenant_id=tenant.id if tenant is not None else None,
            email=(email or f"user{n}@people.io").lower(),
            password_hash=hash_password(password),
            full_name=full_name or f"User {n}",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return create


@pytest.fixture
def token_for() -> Callable[[User], dict[str, str]]:
    """Authorization headers carrying a freshly issued token for a user."""

    def headers(user: User) -> dict[str, str]:
        token = create_access_token(claims_for(caller_for_user(user)))
        return {"Authorization": f"Bearer {token}"}

    return headers


@pytest.fixture
def tenant(tenant_factory) -> Tenant:
    return tenant_factory(name="Acme", subdomain="acme")


@pytest.fixture
def other_tenant(tenant_factory) -> Tenant:
    return tenant_factory(name="Globex", subdomain="globex")


@pytest.fixture
def super_admin(user_factory) -> User:
    return user_factory(None, role=UserRole.SUPER_ADMIN.value, email="root@taskhub.io")


@pytest.fixture
def tenant_admin(user_factory, tenant) -> User:
    return user_factory(tenant, role=UserRole.TENANT_ADMIN.value, email="admin@acme.io")


@pytest.fixture
def member(user_factory, tenant) -> User:
    return user_factory(tenant, role=UserRole.USER.value, email="member@acme.io")


@pytest.fixture
def project_factory(db_session: Session) -> Callable[..., Project]:
    def create(tenant: Tenant, created_by: User | None = None, name: str = "Project", **fields) -> Project:
        project = Project(
            tenant_id=tenant.id,
            name=name,
            created_by=created_by.id if created_by is not None else None,
            **fields,
        )
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)
        return project

    return create


@pytest.fixture
def task_factory(db_session: Session) -> Callable[..., Task]:
    def create(project: Project, title: str = "Task", **fields) -> Task:
        task = Task(project_id=project.id, tenant_id=project.tenant_id, title=title, **fields)
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return create

