"""
Configuration dataclass for the economic model constants.

Config instances are created by Simulation.init() after merging defaults,
user config and kwargs. Scenario *state* (initial resources, buildings,
aims, death rate, ...) is not part of Config: it lives in the entity store
and may be changed by the host between ticks.

Design Notes
------------
- Immutable (frozen=True) to prevent accidental modification
- Memory-efficient (slots=True)
- Simple dataclass, no methods - validation happens in ConfigValidator

See Also
--------
ConfigValidator : Centralized validation for configuration parameters
citysim.simulation.Simulation.init : Creates Config from merged parameters
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(slots=True, frozen=True)
class Config:
    """
    Immutable constants of the reference economic model.

    Parameters
    ----------
    food_per_capita : float
        Food consumed per inhabitant per tick.
    fame_gain : float
        Fame gained per tick per unit of average happiness.
    shortage_sensitivity : float
        Scale of the food-stock / food-deficit ratio giving ``food_shortage``.
    emergency_cap : float
        Largest fraction of the idle pool moved to collectors in one tick.
    migration_rate : float
        Immigration per unit of fame.
    natality_rate : float
        Births per inhabitant per tick.
    productivity_base : float
        Generic productivity per unit of average happiness.
    artist_happiness : float
        Generic happiness per unit of artist population share.
    commute_tolerance : float
        Commute that leaves job happiness equal to generic happiness.
    teacher_ratio : float
        Inhabitants one teacher can serve.
    researcher_idle_weight : float
        Researcher demand per unit of idle-population share.
    crafter_happiness_weight : float
        Weight of the happiness aim in crafter demand.

    Examples
    --------
    >>> import citysim as cs
    >>> sim = cs.Simulation.init()
    >>> sim.config.food_per_capita
    0.2
    """

    # Resource flow
    food_per_capita: float = 0.2
    fame_gain: float = 1.0
    shortage_sensitivity: float = 0.1
    emergency_cap: float = 0.5

    # Demography
    migration_rate: float = 0.02
    natality_rate: float = 0.1

    # Generic factors
    productivity_base: float = 0.2
    artist_happiness: float = 2.0
    commute_tolerance: float = 0.5

    # Demand
    teacher_ratio: float = 10.0
    researcher_idle_weight: float = 2.0
    crafter_happiness_weight: float = 0.5

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))
