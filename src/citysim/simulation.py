# src/citysim/simulation.py
from __future__ import annotations

import warnings
from dataclasses import asdict, dataclass, field
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Sequence

import numpy as np
import yaml

import citysim.events  # noqa: F401 - needed to register events
from citysim import logging
from citysim.config import Config, ConfigValidator
from citysim.core.default_pipeline import create_default_pipeline
from citysim.core.handle import EntityClass, Handle
from citysim.core.link import AdvancedLink, LinkRegistry, SimpleLink, Transform
from citysim.core.pipeline import Pipeline
from citysim.core.store import EntityStore
from citysim.errors import DivisionHazard, InvariantViolation, UnknownEntity
from citysim.roles import Aggregates, Aims, Buildings, Job, Resources, Stats

if TYPE_CHECKING:  # pragma: no cover
    from citysim.core.event import Event
    from citysim.results import SimulationResults

__all__ = ["Simulation", "init_scenario", "tick"]

log = logging.getLogger(__name__)

# Singleton records, created after the jobs under these names
SINGLETONS: dict[str, EntityClass] = {
    "resources": EntityClass.RESOURCES,
    "stats": EntityClass.STATS,
    "aggregates": EntityClass.AGGREGATES,
    "buildings": EntityClass.BUILDINGS,
    "aims": EntityClass.AIMS,
}

# Config sections merged one level deep instead of replaced
MAPPING_SECTIONS = (*SINGLETONS, "job_init", "logging")


# helpers
# ---------------------------------------------------------------------------
def _read_yaml(obj: str | Path | Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a plain dict – {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def _package_defaults() -> Dict[str, Any]:
    """Load citysim/defaults.yml"""
    txt = resources.files("citysim").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


def _merge(base: Dict[str, Any], update: Mapping[str, Any]) -> None:
    """Update *base* in place; mapping sections merge one level deep."""
    for key, value in update.items():
        current = base.get(key)
        if (
            key in MAPPING_SECTIONS
            and isinstance(current, Mapping)
            and isinstance(value, Mapping)
        ):
            base[key] = {**current, **value}
        else:
            base[key] = value


# Simulation
# ---------------------------------------------------------------------
@dataclass(slots=True)
class Simulation:
    """
    Facade that drives one city through consecutive ticks.

    One call to `run` → *n* calls to `step`.

    Attributes
    ----------
    store : EntityStore
        Committed state (the state after the last successful tick).
    links : LinkRegistry
        Declared simple and advanced links.
    config : Config
        Model constants.
    pipeline : Pipeline
        Events executed by every tick, in order.
    job_names : tuple[str, ...]
        Occupations in creation order.
    n_ticks : int
        Default run length.
    t : int
        Number of committed ticks.
    state : EntityStore
        Store the events operate on. During a tick this is a scratch copy
        of `store`; otherwise it is `store` itself.
    """

    store: EntityStore
    links: LinkRegistry
    config: Config
    pipeline: Pipeline
    job_names: tuple[str, ...]
    n_ticks: int
    t: int = 0
    state: EntityStore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.state = self.store

    # Record accessors (read the state being ticked)
    # ---------------------------------------------------------------------
    @property
    def jobs(self) -> Job:
        """Column-wise job records."""
        return self.state.record(EntityClass.JOB)  # type: ignore[no-any-return]

    @property
    def res(self) -> Resources:
        return self.state.record(EntityClass.RESOURCES)  # type: ignore[no-any-return]

    @property
    def stats(self) -> Stats:
        return self.state.record(EntityClass.STATS)  # type: ignore[no-any-return]

    @property
    def agg(self) -> Aggregates:
        return self.state.record(EntityClass.AGGREGATES)  # type: ignore[no-any-return]

    @property
    def bld(self) -> Buildings:
        return self.state.record(EntityClass.BUILDINGS)  # type: ignore[no-any-return]

    @property
    def aims(self) -> Aims:
        return self.state.record(EntityClass.AIMS)  # type: ignore[no-any-return]

    def job_row(self, name: str) -> int:
        """
        Return the row of job *name* in the job records.

        Raises
        ------
        UnknownEntity
            If no job is registered under *name*.
        """
        handle = self.state.resolve(name)
        if handle.entity_class is not EntityClass.JOB:
            raise UnknownEntity(name, list(self.job_names))
        return handle.row

    # Constructor
    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        **overrides: Any,  # anything here wins last
    ) -> "Simulation":
        """
        Build a Simulation.

        Order of precedence (later overrides earlier):

            1. package defaults  (citysim/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)

        Mapping sections (``resources``, ``stats``, ``aggregates``,
        ``buildings``, ``aims``, ``job_init``, ``logging``) are merged one
        level deep, so ``buildings={"farm_area": 2.0}`` keeps the default
        habitations.

        Raises
        ------
        ValueError
            If the merged configuration is invalid.
        UnknownEntity
            If the default pipeline is used and a model occupation is
            missing from ``jobs``.
        """
        user: Dict[str, Any] = {}
        _merge(user, _read_yaml(config))
        _merge(user, overrides)

        cfg_dict = _package_defaults()
        # default initial values only apply to jobs that still exist
        jobs = user.get("jobs", cfg_dict.get("jobs", []))
        if isinstance(jobs, (list, tuple)):
            cfg_dict["job_init"] = {
                k: v for k, v in (cfg_dict.get("job_init") or {}).items() if k in jobs
            }
        _merge(cfg_dict, user)

        ConfigValidator.validate_config(cfg_dict)

        pipeline_path = cfg_dict.get("pipeline_path")
        if pipeline_path is not None:
            ConfigValidator.validate_pipeline_path(pipeline_path)
            ConfigValidator.validate_pipeline_yaml(pipeline_path)
        else:
            ConfigValidator.validate_model_jobs(cfg_dict["jobs"])

        return cls._from_params(**cfg_dict)

    @staticmethod
    def _configure_logging(log_config: Dict[str, Any]) -> None:
        """
        Configure logging levels for citysim loggers.

        Parameters
        ----------
        log_config : dict
            Logging configuration with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG', 'DEEP_DEBUG')
            - events: dict[str, str] (per-event overrides)
        """
        default_level = log_config.get("default_level", "INFO")
        logging.getLogger("citysim").setLevel(logging.level_from_name(default_level))

        event_levels = log_config.get("events") or {}
        for event_name, level in event_levels.items():
            logger_name = f"citysim.events.{event_name}"
            logging.getLogger(logger_name).setLevel(logging.level_from_name(level))

    @classmethod
    def _from_params(cls, **p: Any) -> "Simulation":
        job_names = tuple(p["jobs"])

        store = EntityStore.empty()
        for name in job_names:
            store.create(EntityClass.JOB, name)
        for name, entity_class in SINGLETONS.items():
            store.create(entity_class, name)

        for name in SINGLETONS:
            store.load({name: p.get(name) or {}})
        store.load(p.get("job_init") or {})

        links = LinkRegistry()
        for spec in p.get("links") or []:
            links.add_simple_link(
                store, spec["src"], spec["dst"], spec["field"], spec["delta"]
            )

        cfg = Config(**{k: p[k] for k in Config.field_names() if k in p})

        pipeline_path = p.get("pipeline_path")
        if pipeline_path is not None:
            pipeline = Pipeline.from_yaml(pipeline_path)
        else:
            pipeline = create_default_pipeline()

        if "logging" in p:
            cls._configure_logging(p["logging"])

        log.debug(
            f"City initialised: {len(job_names)} jobs, {len(links)} links, "
            f"{len(pipeline)} events"
        )
        return cls(
            store=store,
            links=links,
            config=cfg,
            pipeline=pipeline,
            job_names=job_names,
            n_ticks=int(p.get("n_ticks", 100)),
        )

    # Links
    # ---------------------------------------------------------------------
    def add_simple_link(
        self,
        src: Handle | str,
        dst: Handle | str,
        dst_field: str,
        delta: Sequence[float] | Mapping[str, float],
    ) -> SimpleLink:
        """
        Declare a linear link; see :meth:`LinkRegistry.add_simple_link`.

        Links declared after ticks have run take effect from the next tick.
        """
        return self.links.add_simple_link(self.store, src, dst, dst_field, delta)

    def add_advanced_link(
        self,
        src: Handle | str,
        dst: Handle | str,
        transform: Transform,
    ) -> AdvancedLink:
        """Declare a procedural link; see :meth:`LinkRegistry.add_advanced_link`."""
        return self.links.add_advanced_link(self.store, src, dst, transform)

    # public API
    # ---------------------------------------------------------------------
    def run(
        self, n_ticks: int | None = None, collect: bool = False
    ) -> SimulationResults | None:
        """
        Advance the simulation *n_ticks* ticks
        (defaults to the ``n_ticks`` passed at construction).

        Parameters
        ----------
        n_ticks : int, optional
            Number of ticks to run.
        collect : bool, default False
            Capture a snapshot of every entity after each tick.

        Returns
        -------
        SimulationResults or None
            Collected history when ``collect=True``, otherwise None (state
            is mutated in-place).
        """
        n = n_ticks if n_ticks is not None else self.n_ticks

        collector = None
        if collect:
            from citysim.results import _DataCollector

            collector = _DataCollector()

        for _ in range(int(n)):
            self.step()
            if collector is not None:
                collector.capture(self)

        if collector is None:
            return None
        return collector.finalize(
            config=asdict(self.config),
            metadata={
                "n_ticks": int(n),
                "t_end": self.t,
                "jobs": list(self.job_names),
            },
        )

    def step(self) -> None:
        """
        Advance the city by exactly one tick using the event pipeline.

        The pipeline runs on a scratch copy of the store. The copy is
        committed only if every event succeeds and every field is finite;
        otherwise the exception propagates and the committed state and
        tick counter are unchanged.

        Raises
        ------
        DivisionHazard
            If a denominator is zero or a field ends the tick non-finite.

        Warns
        -----
        InvariantViolation
            If a population, the idle pool, food or material is negative.
        """
        log.debug(f"=== TICK {self.t + 1} ===")

        scratch = self.store.copy()
        self.state = scratch
        try:
            self.pipeline.execute(self)
            self._check_finite(scratch)
        finally:
            self.state = self.store

        self._report_negatives(scratch)

        self.store = scratch
        self.state = scratch
        self.t += 1

    # alias used by hosts that think in ticks
    tick = step

    @staticmethod
    def _check_finite(store: EntityStore) -> None:
        for name, values in store.snapshot().items():
            for field_name, value in values.items():
                if not np.isfinite(value):
                    raise DivisionHazard(f"{name}.{field_name}", value)

    def _report_negatives(self, store: EntityStore) -> None:
        jobs = store.record(EntityClass.JOB)
        checked = {
            f"{name}.population": float(jobs.population[i])
            for i, name in enumerate(self.job_names)
        }
        checked["stats.idleness"] = store.record(EntityClass.STATS).idleness
        checked["resources.food"] = store.record(EntityClass.RESOURCES).food
        checked["resources.material"] = store.record(EntityClass.RESOURCES).material

        for field_name, value in checked.items():
            if value < 0.0:
                log.warning(f"Tick {self.t + 1}: '{field_name}' is negative ({value!r})")
                warnings.warn(InvariantViolation(field_name, value), stacklevel=3)

    def get_role(self, name: str) -> Any:
        """
        Get a record by entity class name.

        Parameters
        ----------
        name : str
            Record name (case-insensitive): 'Job', 'Resources', 'Stats',
            'Aggregates', 'Buildings', 'Aims'.

        Returns
        -------
        Role
            Record of the committed state.

        Raises
        ------
        ValueError
            If role name not found.

        Examples
        --------
        >>> sim = Simulation.init()
        >>> res = sim.get_role("Resources")
        >>> assert res is sim.res
        """
        role_map = {ec.name.lower(): ec for ec in EntityClass}
        role_map["job"] = EntityClass.JOB
        name_lower = name.lower()
        if name_lower not in role_map:
            available = sorted(role_map)
            raise ValueError(f"Role '{name}' not found. Available roles: {available}")
        return self.store.record(role_map[name_lower])

    def get_event(self, name: str) -> Event:
        """
        Get event instance from pipeline by name.

        Raises
        ------
        KeyError
            If event not found in pipeline.

        Examples
        --------
        >>> sim = Simulation.init()
        >>> sim.get_event("update_jobs")
        UpdateJobs(name='update_jobs')
        """
        for event in self.pipeline.events:
            if event.name == name:
                return event
        raise KeyError(
            f"Event '{name}' not found in pipeline. "
            f"Available: {self.pipeline.event_names}"
        )

    # Entity access
    # ---------------------------------------------------------------------
    def resolve(self, name: str) -> Handle:
        """Return the handle of entity *name*."""
        return self.store.resolve(name)

    def get(self, entity: Handle | str, field_name: str) -> float:
        """
        Read one field of the committed state.

        Examples
        --------
        >>> sim = Simulation.init()
        >>> sim.get("collector", "population")
        1.0
        """
        handle = self.resolve(entity) if isinstance(entity, str) else entity
        return self.store.get(handle, field_name)

    def set(self, entity: Handle | str, field_name: str, value: float) -> None:
        """Write one field of the committed state (host input between ticks)."""
        handle = self.resolve(entity) if isinstance(entity, str) else entity
        self.store.set(handle, field_name, value)

    def snapshot(self) -> dict[str, dict[str, float]]:
        """Return every field of every entity, keyed by entity name."""
        return self.store.snapshot()

    def __repr__(self) -> str:
        return (
            f"Simulation(t={self.t}, jobs={len(self.job_names)}, "
            f"links={len(self.links)}, events={len(self.pipeline)})"
        )


def init_scenario(
    job_names: Sequence[str],
    config: str | Path | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Simulation:
    """
    Build a city with the given occupations.

    Equivalent to ``Simulation.init(config, jobs=list(job_names), **overrides)``.
    """
    return Simulation.init(config, jobs=list(job_names), **overrides)


def tick(sim: Simulation) -> Simulation:
    """Advance *sim* by one tick in place and return it."""
    sim.step()
    return sim
