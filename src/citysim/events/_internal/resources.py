"""
System functions for the resource phases (flow, actualization, shortage).

Event classes in :mod:`citysim.events.resources` wrap these functions and
carry the primary documentation.
"""

from __future__ import annotations

from citysim import logging
from citysim.roles import Aggregates, Buildings, Job, Resources, Stats
from citysim.utils import clamp

log = logging.getLogger(__name__)


def compute_resource_flow(
    res: Resources,
    stats: Stats,
    agg: Aggregates,
    bld: Buildings,
    jobs: Job,
    *,
    collector: int,
    food_per_capita: float = 0.2,
    fame_gain: float = 1.0,
) -> None:
    """
    Compute this tick's food, material and fame deltas.

    See Also
    --------
    citysim.events.resources.ComputeResourceFlow : Full documentation
    """
    output = jobs.population[collector] * jobs.productivity[collector]

    res.dfood = float(output * (1.0 + bld.farm_area) - agg.population * food_per_capita)
    res.dmaterial = float(output * (1.0 + bld.mine_area))
    stats.dfame = fame_gain * agg.avg_happiness

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  Collector output={output:.4f}, consumption="
            f"{agg.population * food_per_capita:.4f}"
        )
    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  dfood={res.dfood:.4f}, dmaterial={res.dmaterial:.4f}, "
            f"dfame={stats.dfame:.4f}"
        )


def actualize_resources(res: Resources, stats: Stats) -> None:
    """
    Apply spoilage and this tick's deltas to the stocks.

    See Also
    --------
    citysim.events.resources.ActualizeResources : Full documentation
    """
    res.food = res.food * res.food_spoilage + res.dfood
    res.material += res.dmaterial
    stats.fame += stats.dfame

    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  Stocks: food={res.food:.4f}, material={res.material:.4f}, "
            f"fame={stats.fame:.4f}"
        )


def evaluate_food_shortage(
    res: Resources,
    stats: Stats,
    *,
    shortage_sensitivity: float = 0.1,
) -> None:
    """
    Rate food security in ``[0, 1]`` (1 means no shortage).

    Only a strictly negative ``dfood`` is used as a divisor.

    See Also
    --------
    citysim.events.resources.EvaluateFoodShortage : Full documentation
    """
    if res.dfood < 0.0:
        stats.food_shortage = clamp(-res.food / res.dfood * shortage_sensitivity)
    else:
        stats.food_shortage = 1.0

    if stats.food_shortage < 1.0:
        log.info(
            f"  Food shortage: stock covers {stats.food_shortage:.3f} "
            f"(food={res.food:.4f}, dfood={res.dfood:.4f})"
        )
    elif log.isEnabledFor(logging.DEBUG):
        log.debug("  No food shortage")
