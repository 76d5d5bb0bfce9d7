"""
Host platform capabilities used by the visit log bridge.

- DataManager: record factory, reference resolver and loader per entity kind
- LazyReference: handle carrying an identifier, loading the entity on first attribute access
- EntityStates: "new" vs "managed" tagging that decides insert vs update downstream
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

from .schema import Visit


class EntityState(str, Enum):
    NEW = "new"
    MANAGED = "managed"


class EntityNotFoundError(Exception):
    """Raised when a lazy reference points at a row that no longer exists."""

    def __init__(self, kind: type, identifier: Any):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.__name__} with ID {identifier} not found")


class LazyReference:
    """Reference to an entity in another store.

    Reading ``id`` (or ``kind``) never loads. Any other attribute loads the
    entity once through the loader and delegates to it.
    """

    def __init__(self, kind: type, id: Any, loader: Callable[[Any], Optional[Any]]):
        self.kind = kind
        self.id = id
        self._loader = loader
        self._entity = None

    @property
    def is_loaded(self) -> bool:
        return self._entity is not None

    def load(self):
        """Load the referenced entity, raising EntityNotFoundError if it is gone."""
        if self._entity is None:
            entity = self._loader(self.id)
            if entity is None:
                raise EntityNotFoundError(self.kind, self.id)
            self._entity = entity
        return self._entity

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.load(), name)

    def __eq__(self, other):
        if isinstance(other, LazyReference):
            return self.kind is other.kind and self.id == other.id
        if isinstance(other, self.kind):
            return self.id is not None and self.id == getattr(other, "id", None)
        return NotImplemented

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        state = "loaded" if self.is_loaded else "unloaded"
        return f"LazyReference({self.kind.__name__}, {self.id!r}, {state})"


class EntityStates:
    """Marks in-memory records as new or managed."""

    def set_new(self, record: Any, is_new: bool) -> None:
        record.entity_state = EntityState.NEW if is_new else EntityState.MANAGED

    def is_new(self, record: Any) -> bool:
        return getattr(record, "entity_state", EntityState.NEW) == EntityState.NEW

    def is_managed(self, record: Any) -> bool:
        return not self.is_new(record)


class DataManager:
    """Creates records and resolves references for registered entity kinds."""

    def __init__(self, loaders: Dict[type, Callable[[Any], Optional[Any]]] = None,
                 entity_states: EntityStates = None):
        self._loaders = dict(loaders or {})
        self.entity_states = entity_states or EntityStates()

    def register_loader(self, kind: type, loader: Callable[[Any], Optional[Any]]) -> None:
        self._loaders[kind] = loader

    def _loader_for(self, kind: type):
        try:
            return self._loaders[kind]
        except KeyError:
            raise ValueError(f"No loader registered for {kind.__name__}") from None

    def create(self, kind: Type) -> Any:
        """Create a blank record tagged as new."""
        record = kind()
        self.entity_states.set_new(record, True)
        return record

    def get_reference(self, kind: type, identifier: Any) -> LazyReference:
        """Get a lazy handle; nothing is loaded until an attribute is read."""
        return LazyReference(kind, identifier, self._loader_for(kind))

    def load(self, kind: type, identifier: Any) -> Optional[Any]:
        """Load the entity now, or None when it does not exist."""
        return self._loader_for(kind)(identifier)


def default_data_manager(entity_states: EntityStates = None) -> DataManager:
    """DataManager wired to the relational visit store."""
    from ..visits.dao import get_visit
    return DataManager({Visit: get_visit}, entity_states)
