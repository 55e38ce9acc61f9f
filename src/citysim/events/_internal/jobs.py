"""
System functions for the job phases.

These functions implement the shared generic factors, the per-job growth
update and the demand update. Aggregates read here are the values
committed at the end of the previous tick.

See Also
--------
citysim.events.jobs : Event classes (primary documentation source)
"""

from __future__ import annotations

import numpy as np

from citysim import logging
from citysim.roles import Aggregates, Aims, Job, Resources, Stats
from citysim.utils import EPS, require_nonzero

log = logging.getLogger(__name__)


def compute_generic_factors(
    stats: Stats,
    agg: Aggregates,
    jobs: Job,
    *,
    crafter: int,
    teacher: int,
    artist: int,
    productivity_base: float = 0.2,
    artist_happiness: float = 2.0,
) -> None:
    """
    Compute the productivity and happiness shared by every job this tick.

    Population shares are taken as 0 when the city is empty.

    See Also
    --------
    citysim.events.jobs.ComputeGenericFactors : Full documentation
    """
    pop = jobs.population
    prod = jobs.productivity
    population = agg.population

    if population <= EPS:
        skilled_share = 0.0
        artist_share = 0.0
    else:
        skilled = pop[crafter] * prod[crafter] + pop[teacher] * prod[teacher]
        skilled_share = float(skilled / population)
        artist_share = float(pop[artist] / population)

    stats.generic_productivity = productivity_base * agg.avg_happiness + skilled_share
    stats.generic_happiness = artist_happiness * artist_share

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  generic_productivity={stats.generic_productivity:.4f} "
            f"(skilled share {skilled_share:.4f}), "
            f"generic_happiness={stats.generic_happiness:.4f}"
        )


def update_jobs(
    stats: Stats,
    agg: Aggregates,
    aims: Aims,
    jobs: Job,
    *,
    commute_tolerance: float = 0.5,
) -> None:
    """
    Grow, age and re-rate every job in creation order.

    Growth is split between jobs by their share of demand. A job below its
    happiness aim draws the shortfall from the idle pool when the pool can
    cover it; jobs are visited in row order, so earlier jobs see the larger
    pool.

    Raises
    ------
    DivisionHazard
        If ``n * avg_demand`` or ``aims.happiness`` is zero.

    See Also
    --------
    citysim.events.jobs.UpdateJobs : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info(f"--- Updating {jobs.n} Jobs ---")

    demand_total = require_nonzero(jobs.n * agg.avg_demand, "aggregates.avg_demand")
    aim = require_nonzero(aims.happiness, "aims.happiness")

    growth = stats.migration + stats.natality
    ideal_growth = growth * (jobs.demand / demand_total)
    happiness_factor = jobs.happiness / aim

    # idle pool shrinks job by job
    shortfall = (happiness_factor - 1.0) * ideal_growth
    for i in range(jobs.n):
        if stats.idleness > shortfall[i]:
            stats.idleness -= float(shortfall[i])
        if log.isEnabledFor(logging.DEEP_DEBUG):
            log.deep(
                f"    job {i}: ideal={ideal_growth[i]:.5f}, "
                f"happiness_factor={happiness_factor[i]:.5f}, "
                f"idleness={stats.idleness:.5f}"
            )

    jobs.dpopulation[:] = happiness_factor * ideal_growth
    jobs.productivity[:] = jobs.specific_prod + stats.generic_productivity
    jobs.happiness[:] = stats.generic_happiness - (jobs.commute - commute_tolerance)
    jobs.population[:] = jobs.population * stats.death_rate + jobs.dpopulation

    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  dpopulation: {np.array2string(jobs.dpopulation, precision=4)}")
        log.debug(f"  population:  {np.array2string(jobs.population, precision=4)}")
    if info_enabled:
        log.info(
            f"  Total growth {growth:.4f}, job population now "
            f"{jobs.population.sum():.4f}, idleness {stats.idleness:.4f}"
        )
        log.info("--- Job Update complete ---")


def update_demand(
    res: Resources,
    stats: Stats,
    agg: Aggregates,
    aims: Aims,
    jobs: Job,
    *,
    collector: int,
    researcher: int,
    crafter: int,
    teacher: int,
    artist: int,
    teacher_ratio: float = 10.0,
    researcher_idle_weight: float = 2.0,
    crafter_happiness_weight: float = 0.5,
) -> None:
    """
    Recompute the demand of every occupation that has a demand formula.

    Jobs without a formula (``builder`` and any custom job) keep their
    demand.

    Raises
    ------
    DivisionHazard
        If ``avg_productivity`` or ``avg_happiness`` is zero.

    See Also
    --------
    citysim.events.jobs.UpdateDemand : Full documentation
    """
    population = agg.population
    idle_ratio = stats.idleness / population if population > EPS else 0.0

    demand = jobs.demand
    demand[teacher] = population / max(teacher_ratio * jobs.population[teacher], 1.0)
    demand[researcher] = researcher_idle_weight * idle_ratio
    demand[artist] = max(1.0 - idle_ratio, 0.0)
    demand[collector] = population / max(res.food, 1.0)
    demand[crafter] = aims.productivity / require_nonzero(
        agg.avg_productivity, "aggregates.avg_productivity"
    ) + crafter_happiness_weight * aims.happiness / require_nonzero(
        agg.avg_happiness, "aggregates.avg_happiness"
    )

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  Demand: collector={demand[collector]:.4f}, "
            f"researcher={demand[researcher]:.4f}, crafter={demand[crafter]:.4f}, "
            f"teacher={demand[teacher]:.4f}, artist={demand[artist]:.4f}"
        )
