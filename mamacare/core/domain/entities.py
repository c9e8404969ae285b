"""
Base Entity Classes

Entities are records owned by the MamaCare platform, identified by the
platform's string ids. The reminder engine reads them and writes back
single fields.
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import Generic, TypeVar

# Type variable for entity ID
TId = TypeVar("TId")


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for domain entities.

    Two entities are the same record when their ids match, whatever the
    state of their other fields.

    Example:
        ```python
        @dataclass
        class Medication(Entity[str]):
            name: str = ""
            frequency: str = ""
        ```
    """

    id: TId | None = field(default=None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or type(self) is not type(other):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id)) if self.id is not None else id(self)


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Base class for aggregate roots.

    Records which fields were changed in memory since the record was
    loaded; only those fields are written back.
    """

    changed_fields: set[str] = field(default_factory=set, compare=False, repr=False)

    def mark_changed(self, field_name: str) -> None:
        self.changed_fields.add(field_name)

    @property
    def is_dirty(self) -> bool:
        return bool(self.changed_fields)
