import os

os.environ.setdefault("ECOTRACK_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ecotrack import crud
from ecotrack.database import Base
from ecotrack.main import app, get_db


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Create an account through the API and return its token payload."""
    def _signup(username="asha", email=None, password="secret123"):
        resp = client.post("/signup", json={
            "username": username,
            "email": email or f"{username}@mail.com",
            "password": password,
        })
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _signup


@pytest.fixture
def user(db):
    return crud.create_user(db, "ravi", "ravi@mail.com", "secret123")
