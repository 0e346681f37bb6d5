"""Database engine, session factory, and the declarative base.

PostgreSQL in production, SQLite for local development and the test suite.
Both dialects support ``INSERT ... ON CONFLICT``, which the repositories use
for every natural-key upsert; no other backend is supported.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .core.config import settings

DATABASE_URL = settings.database_url
SUPPORTED_DIALECTS = ("postgresql", "sqlite")


def dialect_name() -> str:
    """``"postgresql"`` or ``"sqlite"`` for the configured URL."""
    scheme = DATABASE_URL.split(":", 1)[0]
    return scheme.split("+", 1)[0]


if dialect_name() == "sqlite":
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False}
    )

    # SQLite defaults foreign_keys to OFF.
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(
        DATABASE_URL,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session for FastAPI routes.

    Rolls back on unhandled exceptions so a half-applied publish never
    reaches the pool.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Standalone session for startup tasks outside a request."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
