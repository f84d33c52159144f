"""Database session management for courtleague.

Provides engine factory, session management, and database initialization.
Default database: data/league.db (SQLite), overridable via
COURTLEAGUE_DB_PATH.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from courtleague.config import resolve_db_path
from courtleague.db.models import Base

MEMORY_DB = ":memory:"


def get_engine(
    db_path: str | Path | None = None,
    echo: bool = False,
    busy_timeout: float = 5.0,
) -> Engine:
    """Create a SQLAlchemy engine for the SQLite database.

    Args:
        db_path: Path to the SQLite file, or ":memory:". Defaults to
            COURTLEAGUE_DB_PATH, then data/league.db.
        echo: If True, log all SQL statements.
        busy_timeout: Seconds a writer waits on a locked database before
            failing with OperationalError.

    Returns:
        SQLAlchemy Engine instance.
    """
    if str(db_path) == MEMORY_DB:
        # One shared connection so every session sees the same database
        return create_engine(
            "sqlite://",
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
            poolclass=StaticPool,
        )

    path = resolve_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{path}",
        echo=echo,
        connect_args={"timeout": busy_timeout},
    )


def get_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Session factory whose loaded objects stay readable after commit."""
    if engine is None:
        engine = get_engine()
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_session(engine: Engine | None = None) -> Session:
    """Create a new database session.

    Args:
        engine: SQLAlchemy engine. Creates default if None.

    Returns:
        New Session instance.
    """
    return get_session_factory(engine)()


def init_db(engine: Engine | None = None) -> Engine:
    """Initialize the database — create all tables.

    Args:
        engine: SQLAlchemy engine. Creates default if None.

    Returns:
        The engine used.
    """
    if engine is None:
        engine = get_engine()
    Base.metadata.create_all(engine)
    return engine
