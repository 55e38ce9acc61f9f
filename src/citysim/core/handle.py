"""Entity handle definition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class EntityClass(Enum):
    """Closed set of entity record layouts."""

    JOB = auto()
    RESOURCES = auto()
    STATS = auto()
    AGGREGATES = auto()
    BUILDINGS = auto()
    AIMS = auto()

    @property
    def is_singleton(self) -> bool:
        return self is not EntityClass.JOB


@dataclass(slots=True, frozen=True)
class Handle:
    """
    Opaque, stable identifier for an entity record.

    Handles are just identifiers - all state lives in the store's records.
    Being frozen ensures they're immutable and hashable, so they can be used
    as dictionary keys in link declarations.

    Parameters
    ----------
    id : int
        Process-unique identifier, never reused.
    entity_class : EntityClass
        Layout of the record the handle points to.
    row : int
        Row of the record inside its class storage (always 0 for singletons).

    Examples
    --------
    >>> h = Handle(id=0, entity_class=EntityClass.JOB, row=0)
    >>> h.entity_class.is_singleton
    False
    """

    id: int
    entity_class: EntityClass
    row: int = 0

    def __post_init__(self) -> None:
        """Validate handle indices are non-negative."""
        if self.id < 0 or self.row < 0:
            raise ValueError(
                f"Handle id and row must be non-negative, got id={self.id}, "
                f"row={self.row}"
            )
