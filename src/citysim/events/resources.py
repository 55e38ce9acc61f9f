"""
Resource events: production, stock actualization and food shortage.

Aggregates read here are those committed at the end of the previous tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from citysim.core.decorators import event

if TYPE_CHECKING:
    from citysim.simulation import Simulation


@event
class ComputeResourceFlow:
    """
    Compute food, material and fame deltas from collector output.

    Rule
    ----
        O       =  P_c · a_c
        dfood   =  O · (1 + farm_area)  -  N · κ
        dmat    =  O · (1 + mine_area)
        dfame   =  φ · H̄

    P_c: Collector Population, a_c: Collector Productivity, N: Aggregate
    Population, κ: Food per Capita, φ: Fame Gain, H̄: Average Happiness
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.resources import compute_resource_flow

        compute_resource_flow(
            sim.res,
            sim.stats,
            sim.agg,
            sim.bld,
            sim.jobs,
            collector=sim.job_row("collector"),
            food_per_capita=sim.config.food_per_capita,
            fame_gain=sim.config.fame_gain,
        )


@event
class ActualizeResources:
    """
    Spoil the food stock, then add this tick's deltas.

    Rule
    ----
        food  ←  food · s + dfood
        mat   ←  mat + dmat
        fame  ←  fame + dfame

    s: Food Spoilage
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.resources import actualize_resources

        actualize_resources(sim.res, sim.stats)


@event
class EvaluateFoodShortage:
    """
    Rate how long the food stock lasts against a negative food balance.

    ``food_shortage`` is 1 when food is not decreasing and falls towards 0
    as the stock runs out.

    Rule
    ----
        σ  =  clamp(-food / dfood · ρ, 0, 1)    if dfood < 0
        σ  =  1                                  otherwise

    ρ: Shortage Sensitivity
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.resources import evaluate_food_shortage

        evaluate_food_shortage(
            sim.res,
            sim.stats,
            shortage_sensitivity=sim.config.shortage_sensitivity,
        )
