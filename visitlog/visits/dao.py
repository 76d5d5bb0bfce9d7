"""
Visit data access over the relational store.
"""

import uuid
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from ..core.db import get_db
from ..core.schema import Visit
from util.logging import logger

_COLUMNS = "id, pet_name, type, visit_start, visit_end, description, treatment_status"


def _row_to_visit(row) -> Visit:
    visit_id, pet_name, visit_type, visit_start, visit_end, description, treatment_status = row
    return Visit(
        id=UUID(visit_id),
        pet_name=pet_name,
        type=visit_type,
        visit_start=datetime.fromisoformat(visit_start) if visit_start else None,
        visit_end=datetime.fromisoformat(visit_end) if visit_end else None,
        description=description,
        treatment_status=treatment_status
    )


def create_visit(pet_name: str, visit_type: str = "REGULAR_CHECKUP", visit_start: datetime = None,
                 visit_end: datetime = None, description: str = None,
                 treatment_status: str = "UPCOMING", visit_id: UUID = None) -> Visit:
    """Insert a visit row and return it."""
    visit = Visit(
        id=visit_id or uuid.uuid4(),
        pet_name=pet_name,
        type=visit_type,
        visit_start=visit_start,
        visit_end=visit_end,
        description=description,
        treatment_status=treatment_status
    )

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"INSERT INTO visit ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                str(visit.id),
                visit.pet_name,
                visit.type,
                visit.visit_start.isoformat() if visit.visit_start else None,
                visit.visit_end.isoformat() if visit.visit_end else None,
                visit.description,
                visit.treatment_status
            )
        )
        conn.commit()

    logger.log_operation("visit.created", "success", {"visit_id": str(visit.id)})
    return visit


def get_visit(visit_id: Union[UUID, str]) -> Optional[Visit]:
    """Get a visit by id, or None if the row does not exist."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_COLUMNS} FROM visit WHERE id = ?", (str(visit_id),))
        row = cursor.fetchone()

    return _row_to_visit(row) if row else None


def visit_exists(visit_id: Union[UUID, str]) -> bool:
    """Check whether a visit row exists without loading it."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM visit WHERE id = ?", (str(visit_id),))
        return cursor.fetchone() is not None


def list_visits(limit: int = 100) -> List[Visit]:
    """List visits, most recent first."""
    if limit <= 0:
        return []

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {_COLUMNS} FROM visit ORDER BY visit_start DESC LIMIT ?",
            (limit,)
        )
        rows = cursor.fetchall()

    return [_row_to_visit(row) for row in rows]


def delete_visit(visit_id: Union[UUID, str]) -> bool:
    """Delete a visit row. Visit logs pointing at it are left in place."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM visit WHERE id = ?", (str(visit_id),))
        conn.commit()
        deleted = cursor.rowcount > 0

    logger.log_operation("visit.deleted", "success" if deleted else "missing", {"visit_id": str(visit_id)})
    return deleted
