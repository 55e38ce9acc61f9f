"""
System functions for the population phases.

Covers emergency reallocation of idle inhabitants, the habitation ratio,
macro statistics (migration, natality, science) and idleness decay.

See Also
--------
citysim.events.demography : Event classes (primary documentation source)
"""

from __future__ import annotations

from citysim import logging
from citysim.roles import Aggregates, Buildings, Job, Stats
from citysim.utils import EPS, clamp

log = logging.getLogger(__name__)


def reallocate_idle_to_collectors(
    stats: Stats,
    jobs: Job,
    *,
    collector: int,
    emergency_cap: float = 0.5,
) -> float:
    """
    Move idle inhabitants into the collector job during a food shortage.

    Returns
    -------
    float
        Number of inhabitants moved.

    See Also
    --------
    citysim.events.demography.ReallocateIdleToCollectors : Full documentation
    """
    moved = stats.idleness * min(1.0 - stats.food_shortage, emergency_cap)
    if moved == 0.0:
        return 0.0

    stats.idleness -= moved
    jobs.population[collector] += moved

    log.info(
        f"  Emergency: {moved:.4f} idle inhabitants moved to collectors "
        f"(idleness now {stats.idleness:.4f})"
    )
    return moved


def compute_habitation_ratio(stats: Stats, agg: Aggregates, bld: Buildings) -> None:
    """
    Compute the share of growth the housing stock can still absorb.

    With no inhabitants the ratio is 1 when any habitation exists and 0
    otherwise (the limit of the formula as population goes to zero).

    See Also
    --------
    citysim.events.demography.ComputeHabitationRatio : Full documentation
    """
    population = agg.population
    if population <= EPS:
        stats.hab_ratio = 1.0 if bld.habitations > 0.0 else 0.0
    else:
        stats.hab_ratio = clamp((2.0 * bld.habitations - population) / population)

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  hab_ratio={stats.hab_ratio:.4f} "
            f"(habitations={bld.habitations:.1f}, population={population:.4f})"
        )


def compute_macro_stats(
    stats: Stats,
    agg: Aggregates,
    jobs: Job,
    *,
    researcher: int,
    migration_rate: float = 0.02,
    natality_rate: float = 0.1,
) -> None:
    """
    Compute migration, natality and science for this tick.

    See Also
    --------
    citysim.events.demography.ComputeMacroStats : Full documentation
    """
    growth_factor = stats.food_shortage * stats.hab_ratio
    stats.migration = migration_rate * stats.fame * growth_factor
    stats.natality = natality_rate * agg.population * growth_factor
    stats.science = float(
        jobs.population[researcher] * jobs.productivity[researcher] * agg.avg_happiness
    )

    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  migration={stats.migration:.4f}, natality={stats.natality:.4f}, "
            f"science={stats.science:.4f}"
        )


def decay_idleness(stats: Stats) -> None:
    """
    Apply the survival fraction to the idle pool.

    See Also
    --------
    citysim.events.demography.DecayIdleness : Full documentation
    """
    stats.idleness *= stats.death_rate
