"""
Translation between the UI record (VisitLog) and the stored document (VisitLogDocument).

This is the only place where the relational visit and the document store meet.
"""

from typing import Any
from uuid import UUID

from ..core.entities import DataManager, EntityStates
from ..core.schema import Visit
from .errors import DataCorruptionError, MissingParentError
from .records import VisitLog, VisitLogDocument
from util.logging import logger


def serialize_visit_id(identifier: Any) -> str:
    """Canonical 8-4-4-4-12 text of a visit identifier."""
    if isinstance(identifier, UUID):
        return str(identifier)
    return str(UUID(str(identifier)))


def to_visit_log(document: VisitLogDocument, data_manager: DataManager,
                 entity_states: EntityStates, lazy: bool = True) -> VisitLog:
    """
    Convert a stored document into a managed VisitLog.

    The visit is a lazy reference by default; with lazy=False the parent is
    loaded immediately and the lazy reference is kept only if it is missing.
    """
    if document.visit_id is None:
        logger.log_translation_issue(document.id, None, "missing visitId")
        raise DataCorruptionError(document.id, None)

    try:
        visit_id = UUID(document.visit_id)
    except (ValueError, TypeError, AttributeError):
        logger.log_translation_issue(document.id, document.visit_id, "visitId is not a UUID")
        raise DataCorruptionError(document.id, document.visit_id) from None

    # Only the canonical form is ever written or queried
    if str(visit_id) != document.visit_id:
        logger.log_translation_issue(document.id, document.visit_id, "visitId is not in canonical UUID form")
        raise DataCorruptionError(document.id, document.visit_id)

    visit_log = data_manager.create(VisitLog)
    entity_states.set_new(visit_log, False)

    visit_log.id = document.id
    visit_log.visit = _resolve_visit(visit_id, data_manager, lazy)
    visit_log.title = document.title
    visit_log.description = document.description

    return visit_log


def _resolve_visit(visit_id: UUID, data_manager: DataManager, lazy: bool):
    if lazy:
        return data_manager.get_reference(Visit, visit_id)

    visit = data_manager.load(Visit, visit_id)
    if visit is None:
        logger.warning(f"Visit {visit_id} not found during eager resolution, keeping a lazy reference")
        return data_manager.get_reference(Visit, visit_id)
    return visit


def to_visit_log_document(visit_log: VisitLog) -> VisitLogDocument:
    """Convert a VisitLog into its stored form. State tags are left untouched."""
    if visit_log.visit is None or visit_log.visit_id is None:
        raise MissingParentError()

    try:
        visit_id = serialize_visit_id(visit_log.visit_id)
    except ValueError:
        raise MissingParentError(f"Visit identifier {visit_log.visit_id!r} is not a UUID") from None

    return VisitLogDocument(
        id=visit_log.id,
        visit_id=visit_id,
        title=visit_log.title,
        description=visit_log.description
    )
