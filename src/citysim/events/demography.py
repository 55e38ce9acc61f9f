"""Population events: emergency reallocation, housing, macro stats, decay."""

from __future__ import annotations

from typing import TYPE_CHECKING

from citysim.core.decorators import event

if TYPE_CHECKING:
    from citysim.simulation import Simulation


@event
class ReallocateIdleToCollectors:
    """
    Move idle inhabitants into the collector job during a food shortage.

    Rule
    ----
        m      =  I · min(1 - σ, c)
        I     ←  I - m
        P_c   ←  P_c + m

    I: Idleness, σ: Food Shortage, c: Emergency Cap
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.demography import reallocate_idle_to_collectors

        reallocate_idle_to_collectors(
            sim.stats,
            sim.jobs,
            collector=sim.job_row("collector"),
            emergency_cap=sim.config.emergency_cap,
        )


@event
class ComputeHabitationRatio:
    """
    Compute the habitation ratio: 1 with ample housing, 0 once the
    population exceeds twice the habitations.

    Rule
    ----
        h  =  clamp((2 · B - N) / N, 0, 1)

    B: Habitations, N: Aggregate Population
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.demography import compute_habitation_ratio

        compute_habitation_ratio(sim.stats, sim.agg, sim.bld)


@event
class ComputeMacroStats:
    """
    Compute migration, natality and science.

    Rule
    ----
        M  =  μ · F · σ · h
        B  =  ν · N · σ · h
        S  =  P_r · a_r · H̄

    μ: Migration Rate, F: Fame, ν: Natality Rate, P_r: Researcher Population,
    a_r: Researcher Productivity
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.demography import compute_macro_stats

        compute_macro_stats(
            sim.stats,
            sim.agg,
            sim.jobs,
            researcher=sim.job_row("researcher"),
            migration_rate=sim.config.migration_rate,
            natality_rate=sim.config.natality_rate,
        )


@event
class DecayIdleness:
    """
    Apply the survival fraction to the idle pool.

    Rule
    ----
        I  ←  I · d

    d: Death Rate (survival fraction)
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.demography import decay_idleness

        decay_idleness(sim.stats)
