import os
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["STATS_USERNAME"] = "stats"
os.environ["STATS_PASSWORD"] = "stats-password"
os.environ["DB_DISABLED"] = "true"
os.environ["REQUEST_TIMEOUT_SECONDS"] = "10"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient

from app.api.deps import get_store, get_token_service
from app.core.context import OperationContext
from app.core.security import TokenService
from app.db.base import create_db_engine
from app.main import app
from app.repositories.memory import MemoryStore
from app.repositories.sql import SQLStore

PROJECT_ROOT = Path(__file__).resolve().parent.parent

VOLUNTEER_EMAIL = "me@example.com"
VOLUNTEER_PASSWORD = "secret"


@pytest.fixture(scope="function")
def sql_engine():
    """Create a fresh SQLite database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    engine = create_db_engine(test_db_url)
    try:
        yield engine
    finally:
        # Dispose the engine to close all connections
        engine.dispose()

        # Clean up - remove test database file and directory
        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture(scope="function")
def sql_store(sql_engine) -> SQLStore:
    return SQLStore(sql_engine)


@pytest.fixture(scope="function", params=["memory", "sql"])
def store(request):
    """Every store implementation, so contract tests run against both."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture(scope="function")
def ctx() -> OperationContext:
    return OperationContext.background()


@pytest.fixture(scope="function")
def tokens() -> TokenService:
    return get_token_service()


@pytest.fixture(scope="function")
def client(store):
    """Create a test client serving the given store."""
    app.dependency_overrides[get_store] = lambda: store

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def volunteer(store, ctx) -> dict:
    """Create a volunteer account for testing."""
    store.authenticate_or_create(ctx, VOLUNTEER_EMAIL, VOLUNTEER_PASSWORD)
    return {"email": VOLUNTEER_EMAIL, "password": VOLUNTEER_PASSWORD}


@pytest.fixture(scope="function")
def volunteer_token(tokens: TokenService, volunteer: dict) -> str:
    """Get JWT token for the test volunteer."""
    return tokens.create_access_token(volunteer["email"])


@pytest.fixture(scope="function")
def auth_headers(volunteer_token: str) -> dict:
    return {"Authorization": f"Bearer {volunteer_token}"}
