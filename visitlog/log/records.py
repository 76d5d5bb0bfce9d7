"""
Visit log record shapes.

VisitLog is the UI-facing record with a navigable ``visit`` association.
VisitLogDocument is the self-contained document stored in the document
store, holding only the parent visit id as a scalar.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.entities import EntityState


@dataclass
class VisitLog:
    id: Optional[str] = None
    """Assigned by the document store on first save; None means new"""

    visit: Any = None
    """Visit entity or lazy reference to it; mandatory on save"""

    title: Optional[str] = None

    description: Optional[str] = None
    """Also the record's display label"""

    entity_state: EntityState = field(default=EntityState.NEW, compare=False, repr=False)

    @property
    def visit_id(self):
        """Parent identifier, read without loading a lazy visit."""
        return getattr(self.visit, "id", None) if self.visit is not None else None

    @property
    def instance_name(self) -> str:
        return self.description or ""

    def __eq__(self, other):
        if not isinstance(other, VisitLog):
            return NotImplemented
        return (self.id, self.visit_id, self.title, self.description) == \
            (other.id, other.visit_id, other.title, other.description)

    __hash__ = None


@dataclass
class VisitLogDocument:
    id: Optional[str] = None
    visit_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    def to_mongo(self) -> Dict[str, Any]:
        """Document body without the primary key."""
        return {
            "visitId": self.visit_id,
            "title": self.title,
            "description": self.description
        }

    @classmethod
    def from_mongo(cls, raw: Dict[str, Any]) -> "VisitLogDocument":
        return cls(
            id=str(raw["_id"]),
            visit_id=raw.get("visitId"),
            title=raw.get("title"),
            description=raw.get("description")
        )
