"""
Visit log service.

Saves, loads, lists and removes VisitLog records by translating them to and
from VisitLogDocument. Records coming back from the document store are
tagged managed so that a later save through the UI updates instead of
inserting a duplicate.
"""

import threading
from typing import Any, Collection, Iterable, List, Optional

from ..core import config
from ..core.entities import DataManager, EntityStates, default_data_manager
from .errors import MissingParentError, OperationCancelledError, VisitLogNotFoundError
from .records import VisitLog
from .repository import IVisitLogStore
from .translation import serialize_visit_id, to_visit_log, to_visit_log_document
from util.logging import logger, sanitize_payload


class VisitLogService:
    """Stateless facade over the visit log store."""

    def __init__(self, store: IVisitLogStore, data_manager: DataManager,
                 entity_states: EntityStates = None, lazy_visit_resolution: bool = True):
        self.store = store
        self.data_manager = data_manager
        self.entity_states = entity_states or data_manager.entity_states
        self.lazy_visit_resolution = lazy_visit_resolution

    def find_by_visit(self, visit: Any, cancel: threading.Event = None) -> List[VisitLog]:
        """
        List the visit logs of a visit.

        A missing visit (or one without id) yields an empty list: the UI may ask
        before the parent exists.
        """
        visit_id = getattr(visit, "id", None) if visit is not None else None
        if visit_id is None:
            return []

        try:
            serialized = serialize_visit_id(visit_id)
        except ValueError:
            raise MissingParentError(f"Visit identifier {visit_id!r} is not a UUID") from None

        self._check_cancelled("find_by_visit", cancel)
        documents = self.store.find_by_visit_id(serialized)

        visit_logs = [self._to_visit_log(document) for document in documents]
        logger.log_visit_log_operation("find_by_visit", visit_id=serialized, details={"count": len(visit_logs)})
        return visit_logs

    def load_visit_log(self, visit_log_id: str, cancel: threading.Event = None) -> VisitLog:
        """Load a visit log by id, raising VisitLogNotFoundError when absent."""
        self._check_cancelled("load_visit_log", cancel)
        document = self.store.find_by_id(visit_log_id)
        if document is None:
            logger.log_visit_log_operation("load", visit_log_id=visit_log_id, status="not_found")
            raise VisitLogNotFoundError(visit_log_id)

        return self._to_visit_log(document)

    def save_visit_log(self, visit_log: VisitLog, default_visit: Any = None,
                       cancel: threading.Event = None) -> VisitLog:
        """
        Save a visit log and return the stored version, tagged managed.

        When the record has no visit yet, ``default_visit`` (the visit the
        editor was opened for) is assigned first.
        """
        if visit_log.visit is None and default_visit is not None:
            visit_log.visit = default_visit

        try:
            document = to_visit_log_document(visit_log)
        except MissingParentError:
            logger.log_visit_log_operation("save", visit_log_id=visit_log.id, status="missing_parent")
            raise

        self._check_cancelled("save_visit_log", cancel)
        saved = self.store.save(document)
        # The write may or may not have landed; never report success once cancelled
        self._check_cancelled("save_visit_log", cancel)

        logger.log_visit_log_operation(
            "save",
            visit_log_id=saved.id,
            visit_id=saved.visit_id,
            details=sanitize_payload({
                "operation": "update" if document.id else "insert",
                "title": saved.title or ""
            })
        )
        return self._to_visit_log(saved)

    def remove_visit_logs(self, visit_logs: Collection[VisitLog], cancel: threading.Event = None) -> None:
        """Remove visit logs; records without id and unknown ids are ignored."""
        self.remove_visit_logs_by_id([visit_log.id for visit_log in visit_logs], cancel=cancel)

    def remove_visit_logs_by_id(self, visit_log_ids: Iterable[Optional[str]], cancel: threading.Event = None) -> None:
        ids = [i for i in visit_log_ids if i is not None]
        if not ids:
            return

        self._check_cancelled("remove_visit_logs", cancel)
        self.store.delete_all_by_id(ids)
        logger.log_visit_log_operation("remove", details={"requested": len(ids)})

    def _to_visit_log(self, document) -> VisitLog:
        return to_visit_log(document, self.data_manager, self.entity_states, lazy=self.lazy_visit_resolution)

    @staticmethod
    def _check_cancelled(operation: str, cancel: Optional[threading.Event]) -> None:
        if cancel is not None and cancel.is_set():
            logger.log_visit_log_operation(operation, status="cancelled")
            raise OperationCancelledError(operation)


def build_visit_log_service(store: IVisitLogStore = None) -> VisitLogService:
    """Service wired from configuration."""
    entity_states = EntityStates()
    return VisitLogService(
        store=store if store is not None else config.get_document_store(),
        data_manager=default_data_manager(entity_states),
        entity_states=entity_states,
        lazy_visit_resolution=config.is_lazy_visit_resolution_enabled()
    )
