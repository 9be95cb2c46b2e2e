import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, func, select

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from recipebook import main
from recipebook.services.blob_store import LocalBlobStore
from recipebook.storage.models import User
from recipebook.storage.db import create_db_and_tables, make_engine, session_dependency


def count_rows(session: Session, model) -> int:
    return session.exec(select(func.count()).select_from(model)).one()


def add_user(session: Session, username: str) -> User:
    """Insert a user directly, the way the auth layer would."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash="$2b$12$hash",
        first_name="Test",
        last_name="Cook",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="engine")
def engine_fixture():
    engine = make_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="blob_store")
def blob_store_fixture(tmp_path, monkeypatch):
    store = LocalBlobStore(tmp_path / "uploads", "/uploads")
    monkeypatch.setattr("recipebook.services.catalog.writer.default_blob_store", store)
    return store


@pytest.fixture(name="make_user")
def make_user_fixture(session):
    return lambda username: add_user(session, username)


@pytest.fixture(name="chef")
def chef_fixture(session):
    return add_user(session, "chef1")


@pytest.fixture(name="other_chef")
def other_chef_fixture(session):
    return add_user(session, "chef2")


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine, blob_store):
    def _session_override():
        with Session(engine) as session:
            yield session

    monkeypatch.setattr(main, "create_db_and_tables", lambda *args, **kwargs: None)
    main.app.dependency_overrides[session_dependency] = _session_override
    client = TestClient(main.app)
    yield client
    main.app.dependency_overrides.clear()
