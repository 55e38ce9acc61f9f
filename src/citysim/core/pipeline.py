"""Event Pipeline with explicit execution order."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, cast

import yaml

from citysim.core.event import Event
from citysim.core.registry import get_event

if TYPE_CHECKING:
    from citysim.simulation import Simulation


@dataclass(slots=True)
class RepeatedEvent:
    """
    Wrapper for events that execute multiple times per tick.

    Attributes
    ----------
    event : Event
        The event to repeat.
    n_repeats : int
        Number of times to execute the event.
    """

    event: Event
    n_repeats: int

    def execute(self, sim: Simulation) -> None:
        """Execute the event n_repeats times."""
        for _ in range(self.n_repeats):
            self.event.execute(sim)

    @property
    def name(self) -> str:
        """Return the name of the underlying event."""
        return self.event.name


@dataclass(slots=True)
class Pipeline:
    """
    Ordered event execution pipeline.

    Events run in the exact order given; no phase is skipped or reordered
    implicitly. Users are responsible for keeping a custom order coherent.

    Attributes
    ----------
    events : list[Event]
        Ordered list of event instances to execute.
    _event_map : dict[str, Event]
        Internal mapping from event names to instances for quick lookup.

    See Also
    --------
    Pipeline.from_event_list : Build pipeline from event name list
    """

    events: list[Event] = field(default_factory=list)
    _event_map: dict[str, Event] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        """Build internal event mapping."""
        self._event_map = {event.name: event for event in self.events}

    @classmethod
    def from_event_list(
        cls,
        event_names: list[str],
        *,
        repeats: dict[str, int] | None = None,
    ) -> Pipeline:
        """
        Build pipeline from ordered list of event names.

        Parameters
        ----------
        event_names : list[str]
            Event names in desired execution order.
        repeats : dict[str, int], optional
            Events that should repeat multiple times.
            Format: {event_name: n_repeats}

        Returns
        -------
        Pipeline
            Pipeline with events in the order specified.

        Raises
        ------
        KeyError
            If event name not found in registry.
        """
        repeats = repeats or {}

        event_instances = []
        for name in event_names:
            event = get_event(name)()
            if name in repeats:
                event = cast(
                    Event, cast(object, RepeatedEvent(event, n_repeats=repeats[name]))
                )
            event_instances.append(event)

        return cls(events=event_instances)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path, **params: int) -> Pipeline:
        """
        Build pipeline from YAML configuration file.

        The YAML file should have an 'events' key with a list of event
        specifications. Supports special syntax:
        - 'event_name' - single event
        - 'event_name x N' - repeat event N times
        - 'event1 <-> event2 x N' - interleave two events N times

        Parameters can be substituted using {param_name} syntax.

        Parameters
        ----------
        yaml_path : str | Path
            Path to YAML configuration file.
        **params : int
            Parameters to substitute in the YAML.

        Raises
        ------
        ValueError
            If YAML format is invalid.
        KeyError
            If an event is not found in the registry.
        """
        yaml_path = Path(yaml_path)
        with open(yaml_path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict) or "events" not in config:
            raise ValueError(f"YAML file must have 'events' key: {yaml_path}")

        event_names: list[str] = []
        for spec in config["events"]:
            for param_name, param_value in params.items():
                spec = spec.replace(f"{{{param_name}}}", str(param_value))
            event_names.extend(cls.parse_event_spec(spec))

        return cls.from_event_list(event_names)

    @staticmethod
    def parse_event_spec(spec: str) -> list[str]:
        """
        Parse event specification string into list of event names.

        Supports:
        - 'event_name' -> ['event_name']
        - 'event_name x 3' -> ['event_name', 'event_name', 'event_name']
        - 'event1 <-> event2 x 2' -> ['event1', 'event2', 'event1', 'event2']
        """
        spec = spec.strip()

        match = re.match(r"^(.+?)\s*<->\s*(.+?)\s+x\s+(\d+)$", spec)
        if match:
            event1 = match.group(1).strip()
            event2 = match.group(2).strip()
            return [event1, event2] * int(match.group(3))

        match = re.match(r"^(.+?)\s+x\s+(\d+)$", spec)
        if match:
            return [match.group(1).strip()] * int(match.group(2))

        return [spec]

    def execute(self, sim: Simulation) -> None:
        """Execute all events in pipeline order (mutations are in-place)."""
        for event in self.events:
            event.execute(sim)

    def insert_after(self, after: str, event: Event | str) -> None:
        """
        Insert event after specified event.

        Raises
        ------
        ValueError
            If 'after' event not found in pipeline.
        """
        if after not in self._event_map:
            raise ValueError(f"Event '{after}' not found in pipeline")

        if isinstance(event, str):
            event = get_event(event)()

        idx = self.events.index(self._event_map[after])
        self.events.insert(idx + 1, event)
        self._event_map[event.name] = event

    def remove(self, event_name: str) -> None:
        """
        Remove event from pipeline.

        Raises
        ------
        ValueError
            If event not found in pipeline.
        """
        if event_name not in self._event_map:
            raise ValueError(f"Event '{event_name}' not found in pipeline")

        event = self._event_map.pop(event_name)
        self.events.remove(event)

    def replace(self, old_name: str, new_event: Event | str) -> None:
        """
        Replace event with another event.

        Raises
        ------
        ValueError
            If old event not found in pipeline.
        """
        if old_name not in self._event_map:
            raise ValueError(f"Event '{old_name}' not found in pipeline")

        if isinstance(new_event, str):
            new_event = get_event(new_event)()

        idx = self.events.index(self._event_map[old_name])
        self.events[idx] = new_event

        del self._event_map[old_name]
        self._event_map[new_event.name] = new_event

    @property
    def event_names(self) -> list[str]:
        """Names of the events in execution order."""
        return [event.name for event in self.events]

    def __len__(self) -> int:
        """Return number of events in pipeline."""
        return len(self.events)

    def __repr__(self) -> str:
        """Provide informative repr."""
        return f"Pipeline(n_events={len(self.events)})"
