"""
Relational entities of the clinic domain consumed by the visit log bridge.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class Visit:
    id: Optional[UUID] = None
    pet_name: Optional[str] = None
    type: Optional[str] = None  # REGULAR_CHECKUP, RECHARGE, STATUS_CONDITION_HEALING, DISEASE_TREATMENT
    visit_start: Optional[datetime] = None
    visit_end: Optional[datetime] = None
    description: Optional[str] = None
    treatment_status: str = "UPCOMING"  # UPCOMING, IN_PROGRESS, DONE

    def __eq__(self, other):
        # Identity is the id; a lazy reference to the same row is equal
        if not (isinstance(other, Visit) or getattr(other, "kind", None) is Visit):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        return hash(self.id) if self.id is not None else id(self)
