"""Error taxonomy shared by the repository, service and route layers."""
from __future__ import annotations


class MemoplanError(Exception):
    """Base class for every failure raised by the stores."""


class NotFound(MemoplanError, LookupError):
    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity}_not_found: {entity_id}")


class PersistenceError(MemoplanError):
    """SQLite rejected a statement, or the connection could not be acquired."""


class StorageUnavailable(MemoplanError):
    """The database file cannot be opened or initialized. Fatal at startup."""
