"""
Simulation results container for citysim.

This module provides the SimulationResults class that holds the per-tick
history of every entity field and offers convenient access and export to
pandas DataFrames.

Note: pandas is an optional dependency. It is only required when using
DataFrame export methods (to_dataframe, summary).
Install with: pip install citysim[pandas] or pip install pandas
"""

from __future__ import annotations

import json
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:  # pragma: no cover
    from pandas import DataFrame

    from citysim.simulation import Simulation


def _import_pandas() -> Any:
    """
    Lazily import pandas with helpful error message if not installed.

    Raises
    ------
    ImportError
        If pandas is not installed.
    """
    try:
        import pandas as pd

        return pd
    except ImportError:  # pragma: no cover
        raise ImportError(
            "pandas is required for DataFrame export methods. "
            "Install it with: pip install pandas"
        ) from None


class _DataCollector:
    """
    Internal helper capturing one snapshot of the committed state per tick.

    Used by Simulation.run() when ``collect=True``.
    """

    def __init__(self) -> None:
        self.data: dict[str, dict[str, list[float]]] = defaultdict(
            lambda: defaultdict(list)
        )

    def capture(self, sim: Simulation) -> None:
        """Append the current value of every field of every entity."""
        for name, values in sim.snapshot().items():
            entity = self.data[name]
            for field_name, value in values.items():
                entity[field_name].append(value)

    def finalize(
        self, config: dict[str, Any], metadata: dict[str, Any]
    ) -> SimulationResults:
        """Convert collected lists to a SimulationResults of 1-D arrays."""
        data = {
            name: {f: np.asarray(v, dtype=np.float64) for f, v in fields.items()}
            for name, fields in self.data.items()
        }
        return SimulationResults(data=data, config=config, metadata=metadata)


@dataclass
class SimulationResults:
    """
    Per-tick history of every entity field.

    Attributes
    ----------
    data : dict
        ``{entity_name: {field: array of shape (n_ticks,)}}``; entry ``k`` is
        the value after tick ``k + 1``.
    config : dict
        Model constants used for the run.
    metadata : dict
        Run metadata (n_ticks, t_end, jobs).

    Examples
    --------
    >>> sim = cs.Simulation.init()
    >>> results = sim.run(n_ticks=50, collect=True)
    >>> food = results.get_series("resources", "food")
    >>> df = results.to_dataframe()
    """

    data: dict[str, dict[str, NDArray[np.float64]]] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_ticks(self) -> int:
        for fields in self.data.values():
            for values in fields.values():
                return int(values.size)
        return 0

    @property
    def entities(self) -> list[str]:
        """Entity names in creation order."""
        return list(self.data)

    def get_series(self, entity: str, field_name: str) -> NDArray[np.float64]:
        """
        Return the history of one field.

        Raises
        ------
        KeyError
            If the entity or field was not captured.
        """
        if entity not in self.data:
            raise KeyError(
                f"Entity '{entity}' not in results. Available: {self.entities}"
            )
        fields = self.data[entity]
        if field_name not in fields:
            raise KeyError(
                f"Field '{field_name}' not captured for '{entity}'. "
                f"Available: {list(fields)}"
            )
        return fields[field_name]

    def to_dataframe(self, entities: list[str] | None = None) -> DataFrame:
        """
        Export results to a pandas DataFrame.

        Columns are named ``"<entity>.<field>"``; the index is the tick
        number (starting at 1).

        Parameters
        ----------
        entities : list of str, optional
            Entities to include. If None, includes all.

        Raises
        ------
        ImportError
            If pandas is not installed.
        """
        pd = _import_pandas()

        names = entities if entities is not None else self.entities
        columns: dict[str, NDArray[np.float64]] = {}
        for name in names:
            for field_name in self.data[name]:
                columns[f"{name}.{field_name}"] = self.get_series(name, field_name)

        index = pd.RangeIndex(1, self.n_ticks + 1, name="tick")
        return pd.DataFrame(columns, index=index)

    def summary(self) -> DataFrame:
        """
        Summary statistics (mean, std, min, max, ...) of every column.

        Raises
        ------
        ImportError
            If pandas is not installed.
        """
        return self.to_dataframe().describe().T

    def save(self, filepath: str | Path) -> None:
        """
        Save results to a NumPy ``.npz`` archive.

        Examples
        --------
        >>> results.save("city.npz")
        """
        arrays: dict[str, Any] = {
            f"{name}.{field_name}": values
            for name, fields in self.data.items()
            for field_name, values in fields.items()
        }
        arrays["__config__"] = np.asarray(json.dumps(self.config))
        arrays["__metadata__"] = np.asarray(json.dumps(self.metadata))
        arrays["__order__"] = np.asarray(json.dumps(self.entities))
        np.savez(filepath, **arrays)

    @classmethod
    def load(cls, filepath: str | Path) -> SimulationResults:
        """
        Load results written by :meth:`save`.

        Examples
        --------
        >>> results = SimulationResults.load("city.npz")
        """
        with np.load(filepath, allow_pickle=False) as archive:
            config = json.loads(str(archive["__config__"]))
            metadata = json.loads(str(archive["__metadata__"]))
            order = json.loads(str(archive["__order__"]))

            data: dict[str, dict[str, NDArray[np.float64]]] = {name: {} for name in order}
            for key in archive.files:
                if key.startswith("__"):
                    continue
                name, _, field_name = key.partition(".")
                data.setdefault(name, {})[field_name] = archive[key]

        return cls(data=data, config=config, metadata=metadata)

    def __repr__(self) -> str:
        """String representation showing summary information."""
        return (
            f"SimulationResults(ticks={self.n_ticks}, "
            f"entities=[{', '.join(self.entities)}])"
        )
