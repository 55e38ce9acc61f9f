"""
Link registry: declarative propagation between entity fields.

Two link kinds feed additive contributions into a destination field:

* **Simple links** are linear. Each carries one weight per source field and
  contributes ``sum(source.field_i * weight_i)`` to ``dst.dst_field``. Links
  are stored as a sparse COO edge list (destination slot, source column,
  weight); for resolution they are densified into one matrix whose rows are
  the distinct destination fields, so all contributions come out of a single
  matrix-vector product with the flattened store state.
* **Advanced links** wrap an arbitrary ``transform(source_fields)`` returning
  ``{dst_field: contribution}`` and are evaluated one by one.

All sources are read from the same snapshot before any contribution is
written back, so declaration order never changes the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np

from citysim.core.handle import Handle
from citysim.core.store import EntityStore
from citysim.errors import UnknownField
from citysim.roles import ROLE_BY_CLASS
from citysim.typing import Float1D, Float2D, Idx1D

log = logging.getLogger(__name__)

Transform = Callable[[Mapping[str, float]], Mapping[str, float]]
Target = tuple[Handle, str]

__all__ = ["AdvancedLink", "LinkRegistry", "SimpleLink", "Transform"]


@dataclass(slots=True, frozen=True)
class SimpleLink:
    """Linear link: ``dst.dst_field += dot(src_fields, weights)``."""

    src: Handle
    dst: Handle
    dst_field: str
    weights: tuple[float, ...]

    def contribution(self, store: EntityStore) -> float:
        values = [store.get(self.src, f) for f in store.fields(self.src.entity_class)]
        return float(np.dot(values, self.weights))


@dataclass(slots=True, frozen=True)
class AdvancedLink:
    """Procedural link: ``dst += transform(src snapshot)``."""

    src: Handle
    dst: Handle
    transform: Transform

    def contributions(self, store: EntityStore) -> dict[str, float]:
        out = self.transform(MappingProxyType(store.view(self.src)))
        names = store.fields(self.dst.entity_class)
        result: dict[str, float] = {}
        for field_name, value in out.items():
            if field_name not in names:
                raise UnknownField(
                    field_name, ROLE_BY_CLASS[self.dst.entity_class].name or "", names
                )
            result[field_name] = float(value)
        return result


@dataclass(slots=True)
class LinkRegistry:
    """
    Setup-time registry of simple and advanced links.

    Attributes
    ----------
    simple : list[SimpleLink]
        Simple links in declaration order.
    advanced : list[AdvancedLink]
        Advanced links in declaration order.

    Notes
    -----
    The COO arrays (``slot_ids``, ``col_ids``, ``weights``) mirror the simple
    links and are rebuilt together with the dense matrix whenever a link is
    declared or the store layout changes. Late declarations therefore take
    effect at the next resolution.
    """

    simple: list[SimpleLink] = field(default_factory=list)
    advanced: list[AdvancedLink] = field(default_factory=list)

    # Cached batch (rebuilt lazily)
    _targets: list[Target] = field(default_factory=list, repr=False)
    _matrix: Float2D | None = field(default=None, repr=False)
    _n_cols: int = field(default=-1, repr=False)
    slot_ids: Idx1D = field(default_factory=lambda: np.empty(0, np.intp), repr=False)
    col_ids: Idx1D = field(default_factory=lambda: np.empty(0, np.intp), repr=False)
    weights: Float1D = field(
        default_factory=lambda: np.empty(0, np.float64), repr=False
    )

    # Declaration
    # ---------------------------------------------------------------------
    def add_simple_link(
        self,
        store: EntityStore,
        src: Handle | str,
        dst: Handle | str,
        dst_field: str,
        delta: Sequence[float] | Mapping[str, float],
    ) -> SimpleLink:
        """
        Declare a linear link from *src* into ``dst.dst_field``.

        Parameters
        ----------
        store : EntityStore
            Store the handles belong to.
        src, dst : Handle | str
            Source and destination entities (handles or names).
        dst_field : str
            Destination field receiving the contribution.
        delta : sequence of float or mapping
            One weight per source field (class field order), or a mapping
            ``{source_field: weight}``; unnamed fields weigh zero.

        Raises
        ------
        UnknownEntity
            If a handle or name is not registered.
        UnknownField
            If *dst_field* or a *delta* key is not a field of its class.
        ValueError
            If a weight sequence has the wrong length.
        """
        src_h, dst_h = self._handle(store, src), self._handle(store, dst)
        store.check_field(dst_h.entity_class, dst_field)

        src_fields = store.fields(src_h.entity_class)
        if isinstance(delta, Mapping):
            for name in delta:
                store.check_field(src_h.entity_class, name)
            weights = tuple(float(delta.get(f, 0.0)) for f in src_fields)
        else:
            weights = tuple(float(w) for w in delta)
            if len(weights) != len(src_fields):
                raise ValueError(
                    f"delta must have {len(src_fields)} weights "
                    f"({', '.join(src_fields)}), got {len(weights)}"
                )

        link = SimpleLink(src=src_h, dst=dst_h, dst_field=dst_field, weights=weights)
        self.simple.append(link)
        self._matrix = None
        log.debug(
            "Simple link %s -> %s.%s declared",
            store.name_of(src_h),
            store.name_of(dst_h),
            dst_field,
        )
        return link

    def add_advanced_link(
        self,
        store: EntityStore,
        src: Handle | str,
        dst: Handle | str,
        transform: Transform,
    ) -> AdvancedLink:
        """
        Declare a procedural link from *src* to *dst*.

        *transform* receives a read-only ``{field: value}`` view of the source
        and returns ``{dst_field: contribution}``. Returned field names are
        checked at resolution time.
        """
        if not callable(transform):
            raise TypeError(f"transform must be callable, got {type(transform).__name__}")
        link = AdvancedLink(
            src=self._handle(store, src), dst=self._handle(store, dst), transform=transform
        )
        self.advanced.append(link)
        return link

    @staticmethod
    def _handle(store: EntityStore, ref: Handle | str) -> Handle:
        if isinstance(ref, str):
            return store.resolve(ref)
        store.check_handle(ref)
        return ref

    # Resolution
    # ---------------------------------------------------------------------
    def _build_batch(self, store: EntityStore) -> None:
        offsets, n_cols = store.offsets()

        targets: dict[Target, int] = {}
        slots, cols, weights = [], [], []
        for link in self.simple:
            slot = targets.setdefault((link.dst, link.dst_field), len(targets))
            start = offsets[link.src]
            for k, w in enumerate(link.weights):
                if w != 0.0:
                    slots.append(slot)
                    cols.append(start + k)
                    weights.append(w)

        self.slot_ids = np.asarray(slots, dtype=np.intp)
        self.col_ids = np.asarray(cols, dtype=np.intp)
        self.weights = np.asarray(weights, dtype=np.float64)

        matrix = np.zeros((len(targets), n_cols), dtype=np.float64)
        np.add.at(matrix, (self.slot_ids, self.col_ids), self.weights)

        self._targets = list(targets)
        self._matrix = matrix
        self._n_cols = n_cols
        log.debug(
            "Link batch built: %d rows x %d cols from %d simple links",
            len(targets),
            n_cols,
            len(self.simple),
        )

    def simple_contributions(
        self, store: EntityStore, *, batched: bool = True
    ) -> dict[Target, float]:
        """
        Summed simple-link contribution per destination field.

        ``batched=True`` evaluates one matrix-vector product; ``batched=False``
        evaluates each link on its own. Both agree up to rounding.
        """
        if not self.simple:
            return {}

        if not batched:
            out: dict[Target, float] = {}
            for link in self.simple:
                key = (link.dst, link.dst_field)
                out[key] = out.get(key, 0.0) + link.contribution(store)
            return out

        if self._matrix is None or self._n_cols != store.offsets()[1]:
            self._build_batch(store)
        assert self._matrix is not None

        totals = self._matrix @ store.state_vector()
        return {target: float(v) for target, v in zip(self._targets, totals)}

    def advanced_contributions(self, store: EntityStore) -> dict[Target, float]:
        """Summed advanced-link contribution per destination field."""
        out: dict[Target, float] = {}
        for link in self.advanced:
            for field_name, value in link.contributions(store).items():
                key = (link.dst, field_name)
                out[key] = out.get(key, 0.0) + value
        return out

    def resolve(self, store: EntityStore, *, batched: bool = True) -> int:
        """
        Evaluate every link on the current state and add the contributions.

        Returns
        -------
        int
            Number of destination fields updated.
        """
        pending = self.simple_contributions(store, batched=batched)
        for key, value in self.advanced_contributions(store).items():
            pending[key] = pending.get(key, 0.0) + value

        for (dst, field_name), value in pending.items():
            store.set(dst, field_name, store.get(dst, field_name) + value)
        return len(pending)

    def __len__(self) -> int:
        return len(self.simple) + len(self.advanced)
