"""
Entity store: handle-addressed records for jobs and city singletons.

The store owns one record per :class:`EntityClass`. Jobs share a single
column-wise :class:`~citysim.roles.Job` record (one row per job); every other
class is a singleton record of floats. Entities are addressed by a stable
:class:`Handle` or by name, and individual fields are read and written
through :meth:`EntityStore.get` / :meth:`EntityStore.set`.

Examples
--------
>>> store = EntityStore.empty()
>>> collector = store.create(EntityClass.JOB, "collector")
>>> store.set(collector, "population", 3.0)
>>> store.get(store.resolve("collector"), "population")
3.0
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

import numpy as np

from citysim.core.handle import EntityClass, Handle
from citysim.core.role import Role
from citysim.errors import UnknownEntity, UnknownField
from citysim.roles import ROLE_BY_CLASS
from citysim.typing import Float1D

__all__ = ["EntityStore"]

# handle ids are unique across every store in the process
_HANDLE_IDS = itertools.count()


@dataclass(slots=True)
class EntityStore:
    """
    Handle-addressed store of typed entity records.

    Attributes
    ----------
    records : dict[EntityClass, Role]
        One record per entity class.
    """

    records: dict[EntityClass, Role]
    _handles: list[Handle] = field(default_factory=list)
    _by_name: dict[str, Handle] = field(default_factory=dict)
    _names: list[str] = field(default_factory=list)
    _index: dict[int, int] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> EntityStore:
        """Build a store with zero jobs and zeroed singleton records."""
        records = {
            ec: role_cls.zeros(0 if ec is EntityClass.JOB else 1)
            for ec, role_cls in ROLE_BY_CLASS.items()
        }
        return cls(records=records)

    # Setup
    # ---------------------------------------------------------------------
    def create(self, entity_class: EntityClass, name: str) -> Handle:
        """
        Allocate a zero-initialised record and register it under *name*.

        Raises
        ------
        ValueError
            If *name* is already registered, or a singleton class is
            created twice.
        """
        if name in self._by_name:
            raise ValueError(f"Entity name '{name}' is already registered")

        role_cls = ROLE_BY_CLASS[entity_class]
        if entity_class is EntityClass.JOB:
            jobs = self.records[entity_class]
            row = len(self.handles(EntityClass.JOB))
            for f in role_cls.field_names():
                setattr(jobs, f, np.append(getattr(jobs, f), 0.0))
        else:
            if self.handles(entity_class):
                raise ValueError(
                    f"{role_cls.name} is a singleton and already exists as "
                    f"'{self.name_of(self.handles(entity_class)[0])}'"
                )
            self.records[entity_class] = role_cls.zeros()
            row = 0

        handle = Handle(id=next(_HANDLE_IDS), entity_class=entity_class, row=row)
        self._index[handle.id] = len(self._handles)
        self._handles.append(handle)
        self._names.append(name)
        self._by_name[name] = handle
        return handle

    # Lookup
    # ---------------------------------------------------------------------
    def resolve(self, name: str) -> Handle:
        """Return the handle registered under *name*."""
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownEntity(name, list(self._by_name)) from None

    def name_of(self, handle: Handle) -> str:
        """Return the name *handle* was registered under."""
        self.check_handle(handle)
        return self._names[self._index[handle.id]]

    def handles(self, entity_class: EntityClass | None = None) -> list[Handle]:
        """Return handles in creation order, optionally for one class."""
        if entity_class is None:
            return list(self._handles)
        return [h for h in self._handles if h.entity_class is entity_class]

    def record(self, entity_class: EntityClass) -> Any:
        """Return the (mutable) record backing *entity_class*."""
        return self.records[entity_class]

    @staticmethod
    def fields(entity_class: EntityClass) -> tuple[str, ...]:
        """Return the closed field set of *entity_class*."""
        return ROLE_BY_CLASS[entity_class].field_names()

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Handle]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    # Field access
    # ---------------------------------------------------------------------
    def get(self, handle: Handle, field_name: str) -> float:
        """Read one field of one entity."""
        self.check_handle(handle)
        self.check_field(handle.entity_class, field_name)
        value = getattr(self.records[handle.entity_class], field_name)
        if handle.entity_class is EntityClass.JOB:
            return float(value[handle.row])
        return float(value)

    def set(self, handle: Handle, field_name: str, value: float) -> None:
        """Write one field of one entity."""
        self.check_handle(handle)
        self.check_field(handle.entity_class, field_name)
        rec = self.records[handle.entity_class]
        if handle.entity_class is EntityClass.JOB:
            getattr(rec, field_name)[handle.row] = value
        else:
            setattr(rec, field_name, float(value))

    def view(self, handle: Handle) -> dict[str, float]:
        """Return a ``{field: value}`` snapshot of one entity."""
        return {f: self.get(handle, f) for f in self.fields(handle.entity_class)}

    # Flattened layout (used by batched link resolution)
    # ---------------------------------------------------------------------
    def offsets(self) -> tuple[dict[Handle, int], int]:
        """
        Return the column offset of every entity in the flat state vector.

        The vector concatenates each entity's fields, in handle order, using
        the class field order inside each entity.
        """
        offsets: dict[Handle, int] = {}
        size = 0
        for h in self._handles:
            offsets[h] = size
            size += len(self.fields(h.entity_class))
        return offsets, size

    def state_vector(self) -> Float1D:
        """Flatten every field of every entity into one vector."""
        values = [
            self.get(h, f) for h in self._handles for f in self.fields(h.entity_class)
        ]
        return np.asarray(values, dtype=np.float64)

    # Persistence support
    # ---------------------------------------------------------------------
    def snapshot(self) -> dict[str, dict[str, float]]:
        """Return ``{entity_name: {field: value}}`` for every entity."""
        return {name: self.view(h) for name, h in zip(self._names, self._handles)}

    def load(self, snapshot: Mapping[str, Mapping[str, float]]) -> None:
        """
        Write a :meth:`snapshot` back into the store.

        Entities must already exist; fields missing from the snapshot keep
        their current value.
        """
        for name, values in snapshot.items():
            handle = self.resolve(name)
            for field_name, value in values.items():
                self.set(handle, field_name, value)

    def copy(self) -> EntityStore:
        """Deep copy of the records; handles and names are immutable."""
        return EntityStore(
            records={ec: rec.copy() for ec, rec in self.records.items()},
            _handles=list(self._handles),
            _by_name=dict(self._by_name),
            _names=list(self._names),
            _index=dict(self._index),
        )

    # Validation helpers
    # ---------------------------------------------------------------------
    def check_handle(self, handle: Handle) -> None:
        pos = self._index.get(handle.id)
        if pos is None or self._handles[pos] != handle:
            raise UnknownEntity(handle)

    def check_field(self, entity_class: EntityClass, field_name: str) -> None:
        names = self.fields(entity_class)
        if field_name not in names:
            raise UnknownField(field_name, ROLE_BY_CLASS[entity_class].name or "", names)
