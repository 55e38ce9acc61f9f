"""
citysim - Deterministic Tick-Based City Economy Simulator
=========================================================

citysim models a closed city whose inhabitants are spread over a set of
occupations (jobs). Jobs produce and consume shared resources, compete for
growth through their demand and adjust happiness and productivity in
feedback loops. Every tick runs a fixed, ordered pipeline of events over a
handle-addressed store of entity records.

Quick Start
-----------
The default configuration is the reference one-collector city:

>>> import citysim as cs
>>> sim = cs.Simulation.init()
>>> sim.step()
>>> round(sim.get("resources", "food"), 2)
1.78

Custom configuration via kwargs (mapping sections merge with the defaults):

>>> sim = cs.Simulation.init(buildings={"farm_area": 1.0}, n_ticks=200)
>>> results = sim.run(collect=True)

Custom configuration via YAML file:

>>> sim = cs.Simulation.init(config="my_city.yml")

Key Concepts
------------
**Entities and Handles**
  Every job and every singleton record (resources, stats, aggregates,
  buildings, aims) is addressed by a stable Handle or by name.

**Links**
  Simple links add a weighted sum of a source's fields to a destination
  field and are resolved as one batched matrix product. Advanced links run
  an arbitrary function of the source's fields.

**Event Pipeline**
  Each tick executes twelve events in fixed order: link resolution,
  resource flow, shortage, emergency reallocation, housing, macro stats,
  generic factors, job update, idleness decay, demand and aggregates.

**Atomic Ticks**
  A tick works on a scratch copy of the store; a failing tick leaves the
  committed state untouched.

Public API
----------
Simulation
    Main simulation facade.
init_scenario, tick
    Functional entry points.
EntityStore, Handle, EntityClass
    Entity storage and addressing.
LinkRegistry, SimpleLink, AdvancedLink
    Declarative propagation between entity fields.
Role, Event, role, event
    Base classes and decorators for custom records and events.
SimulationResults
    Per-tick history with pandas export.
UnknownEntity, UnknownField, DivisionHazard, InvariantViolation
    Error kinds.

Notes
-----
- Simulations are fully deterministic; there is no random component
- Configuration precedence: defaults.yml → user config → kwargs
- Pipeline events execute in explicit order (no automatic dependency resolution)
"""

from __future__ import annotations

__version__: str = "0.1.0"

# ============================================================================
# User-facing utilities (must be before Simulation import)
# ============================================================================
from . import logging  # noqa: E402 (circular‑safe)
from .errors import (  # noqa: E402
    DivisionHazard,
    InvariantViolation,
    UnknownEntity,
    UnknownField,
)

# ============================================================================
# ECS components
# ============================================================================
from .core import (  # noqa: E402 (circular‑safe)
    AdvancedLink,
    EntityClass,
    EntityStore,
    Event,
    Handle,
    LinkRegistry,
    Pipeline,
    Role,
    SimpleLink,
    event,
    get_event,
    get_role,
    list_events,
    list_roles,
    role,
)
from .config import Config  # noqa: E402
from .results import SimulationResults  # noqa: E402
from .simulation import Simulation, init_scenario, tick  # noqa: E402

__all__ = [
    "Simulation",
    "SimulationResults",
    "__version__",
    "init_scenario",
    "tick",
    # Core components
    "AdvancedLink",
    "Config",
    "EntityClass",
    "EntityStore",
    "Event",
    "Handle",
    "LinkRegistry",
    "Pipeline",
    "Role",
    "SimpleLink",
    "event",
    "role",
    "get_event",
    "get_role",
    "list_events",
    "list_roles",
    # Errors
    "DivisionHazard",
    "InvariantViolation",
    "UnknownEntity",
    "UnknownField",
    # Utilities
    "logging",
]
