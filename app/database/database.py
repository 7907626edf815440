from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.config import get_settings
from app.store.sql import SQLDocumentStore


def build_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL.

    In-memory SQLite gets a single shared connection usable from worker threads,
    since the document store runs its sessions off the event loop.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(get_settings().DATABASE_URL)
store = SQLDocumentStore(engine)


def create_db_and_tables():
    """
    Create database tables defined in SQLModel metadata.

    Creates all tables in the configured database according to `SQLModel.metadata` using the module-level engine.
    """
    SQLModel.metadata.create_all(engine)


def get_store() -> SQLDocumentStore:
    """
    Provide the document store bound to the module-level engine.

    Returns:
        SQLDocumentStore: The process-wide store; it opens a session per call, so sharing it is safe.
    """
    return store
