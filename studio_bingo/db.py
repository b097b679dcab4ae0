"""SQLAlchemy engine + session management.

Uses a session-per-request pattern.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, g
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studio_bingo.errors import StorageError
from studio_bingo.models.base import Base


def create_app_engine(database_url: str, timeout_sec: int = 10) -> Engine:
    """Create an engine whose connections never wait longer than ``timeout_sec``."""

    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        connect_args: dict[str, Any] = {"timeout": timeout_sec, "check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every session sees an empty database.
            return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool, future=True)
        return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True, future=True)

    if backend == "postgresql":
        connect_args = {
            "connect_timeout": timeout_sec,
            "options": f"-c statement_timeout={int(timeout_sec) * 1000}",
        }
        return create_engine(
            database_url,
            connect_args=connect_args,
            pool_pre_ping=True,
            pool_timeout=timeout_sec,
            future=True,
        )

    return create_engine(database_url, pool_pre_ping=True, future=True)


def init_db(app: Flask) -> None:
    """Initialize database engine and per-request sessions."""

    engine = create_app_engine(str(app.config["DATABASE_URL"]), int(app.config.get("DB_TIMEOUT_SEC", 10)))
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    # Register models, then create tables (production would use migrations).
    from studio_bingo import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    app.extensions["engine"] = engine
    app.extensions["session_factory"] = session_factory

    @app.before_request
    def _open_session() -> None:
        g.db = session_factory()  # type: ignore[attr-defined]
        g.db_discarded = False

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = getattr(g, "db", None)
        if session is None:
            return

        try:
            if exc is None and not getattr(g, "db_discarded", False):
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()
            g.pop("db", None)


def get_session() -> Session:
    """Get the current request's SQLAlchemy session."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        raise RuntimeError("Database session not initialized")
    return session


def discard_session() -> None:
    """Roll back the current request's pending work.

    Called by the error handlers, which turn exceptions into responses before
    teardown sees them.
    """

    session: Session | None = getattr(g, "db", None)
    if session is None:
        return
    g.db_discarded = True
    session.rollback()


def dialect_insert(session: Session, table: Any) -> Any:
    """Return an INSERT construct that supports ``on_conflict_do_update``."""

    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise StorageError(message=f"Upserts are not supported on {dialect}")
    return insert(table)
