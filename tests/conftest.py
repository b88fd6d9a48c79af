"""
Test configuration and fixtures for the Cloud Dashboard API.

DATABASE_URL is pointed at a throwaway SQLite file before the app is imported,
so the API and the sync worker sessions share one isolated database.
"""

import os
import tempfile
import uuid
from typing import Generator

import httpx
import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv()

test_db_url = os.getenv("TEST_DATABASE_URL")
if test_db_url:
    if "postgresql://" in test_db_url and "asyncpg" not in test_db_url:
        test_db_url = test_db_url.replace("postgresql://", "postgresql+asyncpg://")
    os.environ["DATABASE_URL"] = test_db_url
else:
    test_db_path = tempfile.mktemp(suffix=".db")
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    from app.platform.db.session import create_tables

    create_tables()
    yield


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def test_user():
    """A persisted user with a unique username."""
    from app.features.auth.models.user import User
    from app.platform.db.session import get_sync_db

    db = get_sync_db()
    try:
        username = f"user_{uuid.uuid4().hex[:8]}"
        user = User(username=username, email=f"{username}@example.com", display_name=username)
        db.add(user)
        db.commit()
        db.refresh(user)
        db.expunge(user)
        return user
    finally:
        db.close()


@pytest.fixture
def auth_headers(test_user):
    from app.features.auth.utils.security import create_access_token

    token = create_access_token({"sub": test_user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sync_db():
    """Sync session on a private in-memory database, as Celery tasks use."""
    from app.platform.db.base import Base, import_models

    import_models()
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def mock_http_client():
    """Factory for httpx clients whose requests are answered by `handler(request)`."""
    clients = []

    def _build(handler) -> httpx.Client:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return http_client

    yield _build

    for http_client in clients:
        http_client.close()
