"""Aggregate recomputation event."""

from __future__ import annotations

from typing import TYPE_CHECKING

from citysim.core.decorators import event

if TYPE_CHECKING:
    from citysim.simulation import Simulation


@event
class RecomputeAggregates:
    """
    Derive the aggregates from the job records; the last phase of a tick.

    Rule
    ----
        S   =  Σ P_j
        N   =  S · (1 + I / S)
        x̄   =  mean(x_j)      for x in productivity, demand, happiness, commute
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.aggregates import recompute_aggregates

        recompute_aggregates(sim.agg, sim.stats, sim.jobs)
