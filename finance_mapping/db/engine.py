"""
Module: finance_mapping.db.engine
Responsibility: Owns the process-wide SQLAlchemy engine and session factory
    used when the caller does not bring its own session, plus the
    commit-or-rollback session_scope() helper.
Architecture position: Mapping > DB.  May import from db/base.py.  MUST NOT
    import from services/, selectors/ or domain/ (create_tables/drop_tables
    import models/ lazily so metadata is complete).

Invariants enforced:
    - Server databases get a QueuePool with pre-ping and READ COMMITTED
      isolation.  The mapping tables are only ever read here, so no stronger
      isolation or row locking is requested.
    - sqlite URLs get a single shared connection (StaticPool) so an
      in-memory database survives across sessions.

Failure modes:
    - RuntimeError from get_engine/get_session/get_session_factory before
      init_engine_from_url() has been called.
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from finance_mapping.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None

_NOT_INITIALIZED = "Engine not initialized. Call init_engine_from_url() first."


def _engine_options(
    database_url: str,
    *,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
    pool_timeout: int,
    pool_recycle: int,
) -> dict[str, Any]:
    if database_url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": pool_pre_ping,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the module engine and session factory.

    Calling it again disposes the previous engine and replaces it.

    Args:
        database_url: postgresql:// (production) or sqlite:// (tests) URL.
        echo: Log every SQL statement.
        pool_size, max_overflow, pool_pre_ping, pool_timeout, pool_recycle:
            QueuePool settings; ignored for sqlite.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(
        database_url,
        echo=echo,
        **_engine_options(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
        ),
    )
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info(
        "engine_initialized",
        extra={
            "dialect": _engine.dialect.name,
            "pool_class": type(_engine.pool).__name__,
            "echo": echo,
        },
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Session factory, for callers that open one session per thread."""
    if _SessionFactory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Open a session, commit on normal exit, roll back on exception.

    The session is always closed; exceptions are re-raised.

    Usage:
        with session_scope() as session:
            roles = resolver_for(session).resolve_role_accounts(...)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create the mapping and reference tables on the module engine."""
    from finance_mapping.db.base import Base
    import finance_mapping.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop every mapping table. Tests only."""
    from finance_mapping.db.base import Base
    import finance_mapping.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


@atexit.register
def _dispose_on_exit() -> None:
    if _engine is not None:
        _engine.dispose()
