"""Role (entity record) base class definition."""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar

import numpy as np

from citysim.core.handle import EntityClass


@dataclass(slots=True)
class Role(ABC):
    """
    Base class for all entity records in the city model.

    A Role is a dataclass with a closed set of numeric fields. Job records
    hold one NumPy array per field, indexed by job row; singleton records
    (resources, stats, aggregates, buildings, aims) hold plain floats.

    Design Guidelines
    -----------------
    - Every field is numeric (``Float1D`` for jobs, ``float`` for singletons)
    - Avoid methods that mutate state; use event functions instead
    - Use the @role decorator to define and register new roles

    Notes
    -----
    The __init_subclass__ hook automatically:
    - Registers roles in the global registry
    - Sets name to the Role class name
    """

    name: ClassVar[str | None] = None
    entity_class: ClassVar[EntityClass | None] = None

    def __init_subclass__(
        cls,
        name: str | None = None,
        entity_class: EntityClass | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Auto-register Role subclasses in the global registry.

        Parameters
        ----------
        name : str, optional
            Custom name for the role. If not provided, uses the class name.
        entity_class : EntityClass, optional
            Record layout the role implements.
        **kwargs
            Additional keyword arguments passed to parent __init_subclass__.
        """
        super(Role, cls).__init_subclass__(**kwargs)

        # @dataclass(slots=True) creates a new class and triggers this hook a
        # second time without the keyword arguments
        if name is not None:
            cls.name = name
        elif cls.name is None:
            cls.name = cls.__name__
        if entity_class is not None:
            cls.entity_class = entity_class

        from citysim.core.registry import _ROLE_REGISTRY

        _ROLE_REGISTRY[cls.name] = cls

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return the record's fields in declaration order."""
        return tuple(f.name for f in fields(cls))  # type: ignore[arg-type]

    @classmethod
    def zeros(cls, n_rows: int = 1) -> Role:
        """Build a zero-initialised record (``n_rows`` rows for jobs)."""
        if cls.entity_class is EntityClass.JOB:
            values: dict[str, Any] = {
                f: np.zeros(n_rows, dtype=np.float64) for f in cls.field_names()
            }
        else:
            values = {f: 0.0 for f in cls.field_names()}
        return cls(**values)

    def copy(self) -> Role:
        """Return a deep copy (arrays are copied, scalars are immutable)."""
        changes: dict[str, Any] = {}
        for f in self.field_names():
            value = getattr(self, f)
            changes[f] = np.copy(value) if isinstance(value, np.ndarray) else value
        return replace(self, **changes)

    def __repr__(self) -> str:
        """Provide informative repr showing role name and field count."""
        role_name = self.name or self.__class__.__name__
        return f"{role_name}(fields={len(self.field_names())})"
