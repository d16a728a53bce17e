"""Database engine and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from tasktracker.config import Settings, get_settings


def normalize_database_url(url: str) -> str:
    """Convert postgresql:// to postgresql+psycopg:// for the psycopg v3 driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def build_engine(settings: Settings) -> Engine:
    """Create the process-wide engine with every store call bounded by a timeout."""
    database_url = normalize_database_url(settings.DATABASE_URL)
    timeout = settings.DB_TIMEOUT_SECONDS

    kwargs: dict[str, Any] = {"echo": False}
    if database_url.startswith("sqlite"):
        # sqlite3's timeout bounds how long a statement waits on a locked database
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
        kwargs["pool_timeout"] = timeout
        kwargs["connect_args"] = {
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={timeout * 1000}",
        }

    return create_engine(database_url, **kwargs)


engine = build_engine(get_settings())


def get_session() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup."""
    with Session(engine) as session:
        yield session
