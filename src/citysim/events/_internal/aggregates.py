"""
System function for the aggregate recomputation phase.

See Also
--------
citysim.events.aggregates.RecomputeAggregates : Full documentation
"""

from __future__ import annotations

from citysim import logging
from citysim.errors import DivisionHazard
from citysim.roles import Aggregates, Job, Stats
from citysim.utils import EPS

log = logging.getLogger(__name__)


def recompute_aggregates(agg: Aggregates, stats: Stats, jobs: Job) -> None:
    """
    Derive every aggregate from the current job records.

    ``population`` counts the idle pool on top of the job populations; with
    no job population it equals the idle pool.

    Raises
    ------
    DivisionHazard
        If there are no jobs to average over.
    """
    if jobs.n == 0:
        raise DivisionHazard("aggregates.avg_demand", 0.0)

    summed = float(jobs.population.sum())
    if summed > EPS:
        agg.population = summed * (1.0 + stats.idleness / summed)
    else:
        agg.population = stats.idleness

    agg.avg_productivity = float(jobs.productivity.mean())
    agg.avg_demand = float(jobs.demand.mean())
    agg.avg_happiness = float(jobs.happiness.mean())
    agg.avg_commute = float(jobs.commute.mean())

    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  Aggregates: population={agg.population:.4f}, "
            f"avg_productivity={agg.avg_productivity:.4f}, "
            f"avg_happiness={agg.avg_happiness:.4f}, "
            f"avg_demand={agg.avg_demand:.4f}"
        )
