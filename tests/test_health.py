from unittest.mock import create_autospec

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_store
from app.errors import InternalStoreError, OperationCancelledError
from app.main import app
from app.repositories.base import Store
from app.server import build_healthcheck_app


@pytest.fixture
def failing_store():
    store = create_autospec(Store, instance=True)
    store.healthcheck.side_effect = InternalStoreError("failed to execute database query")
    app.dependency_overrides[get_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_store_unavailable(failing_store):
    response = TestClient(app).get("/health")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}
    failing_store.healthcheck.assert_called_once()


def test_healthcheck_listener_app(store):
    healthcheck_app = build_healthcheck_app()
    healthcheck_app.dependency_overrides[get_store] = lambda: store

    response = TestClient(healthcheck_app).get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ============================================================================
# ERROR MAPPING TESTS
# ============================================================================


@pytest.fixture
def broken_store():
    store = create_autospec(Store, instance=True)
    app.dependency_overrides[get_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


def test_internal_store_error_is_opaque(broken_store, tokens):
    broken_store.get_team_by_id.side_effect = InternalStoreError(
        "failed to execute database query: connection refused on db-internal:5432"
    )
    headers = {"Authorization": f"Bearer {tokens.create_access_token('me@example.com')}"}

    response = TestClient(app).get("/v1/teams/gophers", headers=headers)
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error", "code": "INTERNAL_ERROR"}


def test_cancelled_operation_maps_to_503(broken_store, tokens):
    broken_store.list_team_members.side_effect = OperationCancelledError(
        "Operation deadline exceeded"
    )
    headers = {"Authorization": f"Bearer {tokens.create_access_token('me@example.com')}"}

    response = TestClient(app).get("/v1/teams/gophers/members", headers=headers)
    assert response.status_code == 503
    assert response.json()["code"] == "CANCELLED"
