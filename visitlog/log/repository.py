"""
Document store adapters for visit logs.

The adapters only know VisitLogDocument; the relational store is invisible here.
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import StoreUnavailableError
from .records import VisitLogDocument
from util.logging import logger


class IVisitLogStore(ABC):
    """Abstract interface for visit log document storage."""

    @abstractmethod
    def save(self, document: VisitLogDocument) -> VisitLogDocument:
        """Insert (id is None) or replace a document; returns it with id populated."""
        pass

    @abstractmethod
    def find_by_id(self, visit_log_id: str) -> Optional[VisitLogDocument]:
        """Find a document by primary key."""
        pass

    @abstractmethod
    def find_by_visit_id(self, visit_id: str) -> List[VisitLogDocument]:
        """Find all documents of a visit, ordered by id."""
        pass

    @abstractmethod
    def delete_all_by_id(self, visit_log_ids: Iterable[str]) -> None:
        """Delete documents by id; unknown ids are ignored."""
        pass


@contextmanager
def _store_operation(operation: str):
    """Translate driver errors into StoreUnavailableError."""
    try:
        yield
    except PyMongoError as e:
        logger.log_store_error(operation, e)
        raise StoreUnavailableError(operation, e) from e


def _to_key(visit_log_id: str) -> Any:
    # Store-assigned ids are ObjectIds; client-assigned ids stay plain strings
    if isinstance(visit_log_id, str) and len(visit_log_id) == 24 and ObjectId.is_valid(visit_log_id):
        return ObjectId(visit_log_id)
    return visit_log_id


class MongoVisitLogStore(IVisitLogStore):
    """Visit log store backed by a MongoDB collection."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        """Create the secondary index used by find_by_visit_id."""
        with _store_operation("ensure_indexes"):
            self.collection.create_index([("visitId", ASCENDING)], name="visitId_idx")

    def save(self, document: VisitLogDocument) -> VisitLogDocument:
        body = document.to_mongo()
        with _store_operation("save"):
            if document.id is None:
                result = self.collection.insert_one(body)
                return replace(document, id=str(result.inserted_id))

            self.collection.replace_one({"_id": _to_key(document.id)}, body, upsert=True)
            return replace(document)

    def find_by_id(self, visit_log_id: str) -> Optional[VisitLogDocument]:
        if visit_log_id is None:
            return None
        with _store_operation("find_by_id"):
            raw = self.collection.find_one({"_id": _to_key(visit_log_id)})
        return VisitLogDocument.from_mongo(raw) if raw else None

    def find_by_visit_id(self, visit_id: str) -> List[VisitLogDocument]:
        with _store_operation("find_by_visit_id"):
            cursor = self.collection.find({"visitId": visit_id}).sort("_id", ASCENDING)
            return [VisitLogDocument.from_mongo(raw) for raw in cursor]

    def delete_all_by_id(self, visit_log_ids: Iterable[str]) -> None:
        keys = [_to_key(i) for i in visit_log_ids if i is not None]
        if not keys:
            return
        with _store_operation("delete_all_by_id"):
            self.collection.delete_many({"_id": {"$in": keys}})

    def distinct_visit_ids(self) -> List[str]:
        """All visitId values currently referenced by stored documents."""
        with _store_operation("distinct_visit_ids"):
            return [v for v in self.collection.distinct("visitId") if v is not None]


class InMemoryVisitLogStore(IVisitLogStore):
    """In-memory visit log store with the same semantics as the Mongo store."""

    def __init__(self):
        self._documents = {}  # id -> VisitLogDocument
        self._lock = threading.Lock()

    def save(self, document: VisitLogDocument) -> VisitLogDocument:
        stored = replace(document, id=document.id if document.id is not None else str(ObjectId()))
        with self._lock:
            self._documents[stored.id] = stored
        return replace(stored)

    def find_by_id(self, visit_log_id: str) -> Optional[VisitLogDocument]:
        with self._lock:
            document = self._documents.get(visit_log_id)
        return replace(document) if document else None

    def find_by_visit_id(self, visit_id: str) -> List[VisitLogDocument]:
        with self._lock:
            matches = [d for d in self._documents.values() if d.visit_id == visit_id]
        return [replace(d) for d in sorted(matches, key=lambda d: d.id)]

    def delete_all_by_id(self, visit_log_ids: Iterable[str]) -> None:
        with self._lock:
            for visit_log_id in visit_log_ids:
                self._documents.pop(visit_log_id, None)

    def distinct_visit_ids(self) -> List[str]:
        with self._lock:
            return sorted({d.visit_id for d in self._documents.values() if d.visit_id is not None})

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
