from typing import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from recipebook.config import settings


_IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _enable_sqlite_transactions(engine: Engine) -> None:
    """Turn on foreign keys and Unicode lower(); let SQLAlchemy own BEGIN so SAVEPOINTs work."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None
        # SQLite's built-in lower() only folds ASCII
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")


def make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url in _IN_MEMORY_URLS:
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    _enable_sqlite_transactions(engine)
    return engine


engine = make_engine(settings.database_url)


def create_db_and_tables(bind: Engine | None = None) -> None:
    # models must be imported so their tables are registered on the metadata
    from recipebook.storage import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Session:
    return Session(engine)


def session_dependency() -> Iterator[Session]:
    """FastAPI dependency: one session per request, always closed."""
    with get_session() as session:
        yield session
