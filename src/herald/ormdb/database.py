"""Database configuration and session management."""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.logging import get_logger
from ..config.settings import get_settings

logger = get_logger(__name__)

# Base class for all ORM models
Base = declarative_base()

# Global engine and session factory
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url


def _sqlite_pragmas(journal_wal: bool):
    """Connect hook enforcing foreign keys, so acknowledgments follow their alert."""

    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if journal_wal:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return _on_connect


def create_engine_from_settings() -> Engine:
    """
    Create the engine for the alert store.

    In-memory SQLite shares one connection across threads so the API,
    the dispatcher and tests all see the same data.
    """
    settings = get_settings()
    database_url = settings.get_database_url()
    is_sqlite = database_url.startswith("sqlite")
    in_memory = is_sqlite and _is_memory_sqlite(database_url)

    logger.info(
        "Creating database engine",
        backend="sqlite" if is_sqlite else database_url.split(":", 1)[0],
        in_memory=in_memory,
        echo_sql=settings.database_echo_sql,
    )

    engine_kwargs = {
        "echo": settings.database_echo_sql,
        "pool_pre_ping": settings.database_pool_pre_ping,
    }
    if in_memory:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool
    elif is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    else:
        engine_kwargs.update(
            pool_size=5, max_overflow=10, pool_recycle=settings.database_pool_recycle
        )

    engine = create_engine(database_url, **engine_kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _sqlite_pragmas(journal_wal=not in_memory))
    return engine


def get_engine() -> Engine:
    """Get the database engine, creating it if necessary."""
    global _engine

    if _engine is None:
        _engine = create_engine_from_settings()
        logger.info("Database engine initialized")

    return _engine


def get_session_factory() -> sessionmaker:
    """Get the session factory, creating it if necessary."""
    global _SessionLocal

    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
            expire_on_commit=False,  # Keep objects accessible after commit
        )
        logger.debug("Session factory created")

    return _SessionLocal


def get_session() -> Generator[Session, None, None]:
    """
    Get a database session with automatic cleanup.

    Yields:
        Session: SQLAlchemy database session with automatic transaction management
    """
    session = get_session_factory()()

    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error("Database session rolled back", error=str(e), exc_info=True)
        raise
    finally:
        session.close()


def get_session_sync() -> Session:
    """
    Get a synchronous database session.

    Returns:
        Session: SQLAlchemy database session (caller responsible for closing)
    """
    return get_session_factory()()


def create_tables():
    """Create all database tables."""
    # Import models so they register with the metadata
    from . import models  # noqa: F401

    logger.info("Creating database tables")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables created successfully")


def reset_engine():
    """Dispose the engine so the next access rebuilds it from settings."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def check_database_health() -> dict:
    """
    Check database connectivity and return health information.

    Returns:
        dict: Database health status
    """
    try:
        with get_session_factory()() as session:
            health_check = session.execute(text("SELECT 1")).scalar()

        return {"status": "healthy", "connectivity": health_check == 1}

    except Exception as e:
        logger.error("Database health check failed", error=str(e), exc_info=True)
        return {"status": "unhealthy", "error": str(e), "connectivity": False}
