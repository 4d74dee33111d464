import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from config import settings

logger = logging.getLogger(__name__)


class StoreUnavailable(RuntimeError):
    """Raised when a write cannot reach the relational store."""


class Base(DeclarativeBase):
    pass


# Process-wide store handle. Only init_engine/dispose_engine mutate these.
_engine: Engine | None = None
_session_factory: sessionmaker | None = None
_initialized = False


def _set_sqlite_pragma(dbapi_connection, connection_record):
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(database_url: str | None = None, **engine_kwargs) -> Engine | None:
    """Create the store handle once.

    Returns None (and leaves the store marked unavailable) when the URL is
    empty or cannot be turned into an engine. No connection is opened here.
    """
    global _engine, _session_factory, _initialized
    dispose_engine()
    _initialized = True

    url = settings.DATABASE_URL if database_url is None else database_url
    if not (url or "").strip():
        logger.warning("DATABASE_URL is empty; store is unavailable")
        return None

    connect_args = dict(engine_kwargs.pop("connect_args", {}) or {})
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    try:
        engine = create_engine(url, connect_args=connect_args, echo=False, **engine_kwargs)
    except (ArgumentError, ImportError) as e:
        logger.warning(f"Could not create database engine: {e}")
        return None

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_pragma)

    _engine = engine
    _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return engine


def get_engine() -> Engine | None:
    if not _initialized:
        init_engine()
    return _engine


def get_session_factory() -> sessionmaker | None:
    if not _initialized:
        init_engine()
    return _session_factory


def dispose_engine() -> None:
    global _engine, _session_factory, _initialized
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
    _initialized = False


def create_tables() -> None:
    engine = get_engine()
    if engine is None:
        return
    Base.metadata.create_all(bind=engine)


def get_db():
    """Yield a session, or None when the store is unavailable."""
    factory = get_session_factory()
    if factory is None:
        yield None
        return
    db = factory()
    try:
        yield db
    finally:
        db.close()
