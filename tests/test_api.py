"""
HTTP surface tests for visit logs.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from visitlog.api import main
from visitlog.core.db import init_db
from visitlog.log.errors import StoreUnavailableError
from visitlog.log.repository import InMemoryVisitLogStore
from visitlog.log.service import build_visit_log_service
from visitlog.visits.dao import create_visit


@pytest.fixture
def store():
    return InMemoryVisitLogStore()


@pytest.fixture
def client(tmp_path, monkeypatch, store):
    """Client with an in-memory document store and a temporary visit database."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "petclinic.db"))
    monkeypatch.setenv("DOCUMENT_STORE_PROVIDER", "memory")
    init_db()

    service = build_visit_log_service(store)
    main.app.dependency_overrides[main.get_visit_log_service] = lambda: service
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def visit():
    return create_visit(pet_name="Pikachu", visit_type="RECHARGE")


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["db_health"] is True
    assert data["document_store_health"] is True


def test_create_for_visit_and_list(client, visit):
    for i in range(2):
        response = client.post(f"/visits/{visit.id}/logs", json={"title": f"t{i}", "description": f"d{i}"})
        assert response.status_code == 201
        assert response.json()["visit_id"] == str(visit.id)
        assert response.json()["managed"] is True

    response = client.get(f"/visits/{visit.id}/logs")

    assert response.status_code == 200
    items = response.json()["items"]
    assert sorted(i["title"] for i in items) == ["t0", "t1"]
    assert all(i["visit_id"] == str(visit.id) for i in items)


def test_create_for_unknown_visit(client, store):
    response = client.post("/visits/11111111-1111-1111-1111-111111111111/logs", json={"title": "t"})

    assert response.status_code == 404
    assert store.count() == 0


def test_list_for_visit_without_logs(client, visit):
    response = client.get(f"/visits/{visit.id}/logs")

    assert response.status_code == 200
    assert response.json()["items"] == []


def test_create_with_body_visit_and_load(client, visit):
    response = client.post("/visit-logs", json={"visit_id": str(visit.id), "title": "t1", "description": "d1"})
    assert response.status_code == 201
    visit_log_id = response.json()["id"]

    response = client.get(f"/visit-logs/{visit_log_id}")

    assert response.status_code == 200
    assert response.json() == {
        "id": visit_log_id,
        "visit_id": str(visit.id),
        "title": "t1",
        "description": "d1",
        "managed": True
    }


def test_create_without_parent(client, store):
    response = client.post("/visit-logs", json={"title": "t", "description": "d"})

    assert response.status_code == 422
    assert response.json()["error_type"] == "MISSING_PARENT"
    assert store.count() == 0


def test_load_missing(client):
    response = client.get("/visit-logs/deadbeef")

    assert response.status_code == 404
    assert response.json() == {"error_type": "NOT_FOUND", "message": "Visit Log with ID deadbeef not found"}


def test_update_keeps_single_document(client, store, visit):
    visit_log_id = client.post(f"/visits/{visit.id}/logs", json={"title": "old", "description": "d"}).json()["id"]

    response = client.put(f"/visit-logs/{visit_log_id}", json={"title": "new"})

    assert response.status_code == 200
    assert response.json()["id"] == visit_log_id
    assert response.json()["title"] == "new"
    assert response.json()["description"] == "d"
    assert store.count() == 1


def test_update_missing(client):
    response = client.put("/visit-logs/deadbeef", json={"title": "new"})

    assert response.status_code == 404


def test_bulk_delete(client, visit):
    visit_log_id = client.post(f"/visits/{visit.id}/logs", json={"title": "t"}).json()["id"]

    response = client.post("/visit-logs/bulk-delete", json={"ids": [visit_log_id, "does-not-exist", None]})

    assert response.status_code == 200
    assert response.json() == {"success": True, "requested": 2}
    assert client.get(f"/visit-logs/{visit_log_id}").status_code == 404


def test_bulk_delete_empty(client):
    response = client.post("/visit-logs/bulk-delete", json={"ids": []})

    assert response.status_code == 200
    assert response.json()["requested"] == 0


def test_title_validation(client, visit):
    response = client.post("/visit-logs", json={"visit_id": str(visit.id), "title": "x" * 300})

    assert response.status_code == 422


def test_store_unavailable(client, store):
    store.find_by_id = MagicMock(side_effect=StoreUnavailableError("find_by_id"))

    response = client.get("/visit-logs/abc")

    assert response.status_code == 503
    assert response.json()["error_type"] == "STORE_UNAVAILABLE"


def test_corrupt_document(client, store):
    from visitlog.log.records import VisitLogDocument
    broken = store.save(VisitLogDocument(visit_id="not-a-uuid"))

    response = client.get(f"/visit-logs/{broken.id}")

    assert response.status_code == 500
    assert response.json()["error_type"] == "DATA_CORRUPTION"
