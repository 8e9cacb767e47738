from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str, **overrides: Any) -> Engine:
    """Create an engine with pool and timeout options suited to the backend."""
    if database_url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    else:
        options = {
            "pool_pre_ping": True,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "connect_args": {
                "connect_timeout": 10,
                "options": (
                    f"-c timezone=utc -c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"
                ),
            },
        }
    options.update(overrides)
    return create_engine(database_url, echo=settings.DEBUG, future=True, **options)


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()
