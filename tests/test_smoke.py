"""
Relational store smoke tests: visit table and visit DAO.
"""
import pytest
from datetime import datetime
from uuid import UUID

from visitlog.core.db import init_db, health_check, get_db
from visitlog.visits.dao import (
    create_visit,
    get_visit,
    visit_exists,
    list_visits,
    delete_visit
)


@pytest.fixture(autouse=True)
def setup_database(tmp_path, monkeypatch):
    """Initialize a fresh database for each test."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "petclinic.db"))
    init_db()


def test_database_health():
    """Test that database initializes correctly."""
    assert health_check() == True, "Database should be healthy"


def test_visit_create_and_get():
    """Test creating and reading back a visit."""
    start = datetime(2024, 5, 1, 9, 30)
    visit = create_visit(pet_name="Pikachu", visit_type="RECHARGE", visit_start=start, description="battery low")

    result = get_visit(visit.id)
    assert result is not None, "Visit should exist after creation"
    assert isinstance(result.id, UUID)
    assert result.id == visit.id
    assert result.pet_name == "Pikachu"
    assert result.type == "RECHARGE"
    assert result.visit_start == start
    assert result.treatment_status == "UPCOMING"


def test_visit_get_accepts_text_id():
    """Test that the canonical text form finds the same row."""
    visit = create_visit(pet_name="Bulbasaur")

    assert get_visit(str(visit.id)) == visit


def test_visit_missing():
    """Test that unknown ids return None."""
    assert get_visit(UUID("11111111-1111-1111-1111-111111111111")) is None
    assert visit_exists(UUID("11111111-1111-1111-1111-111111111111")) is False


def test_visit_explicit_id():
    """Test creating a visit with a caller-chosen id."""
    visit_id = UUID("22222222-2222-2222-2222-222222222222")
    create_visit(pet_name="Squirtle", visit_id=visit_id)

    assert visit_exists(visit_id) is True


def test_visit_list_and_delete():
    """Test listing and deleting visits."""
    first = create_visit(pet_name="Charmander", visit_start=datetime(2024, 1, 1))
    second = create_visit(pet_name="Eevee", visit_start=datetime(2024, 2, 1))

    visits = list_visits()
    assert [v.id for v in visits] == [second.id, first.id]

    assert delete_visit(first.id) is True
    assert delete_visit(first.id) is False
    assert [v.id for v in list_visits()] == [second.id]


def test_list_visits_non_positive_limit():
    """Test that a non-positive limit returns nothing."""
    create_visit(pet_name="Snorlax")
    assert list_visits(limit=0) == []


def test_database_schema():
    """Test database schema integrity."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM visit")
        assert cursor.fetchone()[0] == 0
