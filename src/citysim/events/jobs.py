"""
Job events: generic factors, per-job update and demand.

Each event encapsulates one phase of the job cycle. The per-job update
visits jobs in creation order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from citysim.core.decorators import event

if TYPE_CHECKING:
    from citysim.simulation import Simulation


@event
class ComputeGenericFactors:
    """
    Compute the productivity and happiness every job shares this tick.

    Rule
    ----
        g_a  =  β · H̄  +  (P_cr · a_cr + P_t · a_t) / N
        g_h  =  α · P_ar / N

    β: Productivity Base, α: Artist Happiness, cr: crafter, t: teacher,
    ar: artist
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.jobs import compute_generic_factors

        compute_generic_factors(
            sim.stats,
            sim.agg,
            sim.jobs,
            crafter=sim.job_row("crafter"),
            teacher=sim.job_row("teacher"),
            artist=sim.job_row("artist"),
            productivity_base=sim.config.productivity_base,
            artist_happiness=sim.config.artist_happiness,
        )


@event
class UpdateJobs:
    """
    Grow every job by its share of demand and refresh its productivity and
    happiness.

    Rule
    ----
        r_j  =  D_j / (n · D̄)
        G_j  =  (M + B) · r_j
        f_j  =  H_j / H*
        I   ←  I - (f_j - 1) · G_j        if I > (f_j - 1) · G_j
        ΔP_j =  f_j · G_j
        a_j  =  a0_j + g_a
        H_j  =  g_h - (c_j - τ)
        P_j ←  P_j · d + ΔP_j

    D: Demand, H*: Happiness Aim, c: Commute, τ: Commute Tolerance,
    a0: Specific Productivity

    Notes
    -----
    The idleness deduction happens job by job in creation order; every other
    quantity of a job depends only on that job and the shared factors.
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.jobs import update_jobs

        update_jobs(
            sim.stats,
            sim.agg,
            sim.aims,
            sim.jobs,
            commute_tolerance=sim.config.commute_tolerance,
        )


@event
class UpdateDemand:
    """
    Recompute occupation demand.

    Rule
    ----
        D_t   =  N / max(T · P_t, 1)
        D_r   =  ω · I / N
        D_ar  =  max(1 - I / N, 0)
        D_c   =  N / max(food, 1)
        D_cr  =  A* / ā  +  λ · H* / H̄

    T: Teacher Ratio, ω: Researcher Idle Weight, A*: Productivity Aim,
    ā: Average Productivity, λ: Crafter Happiness Weight.
    Builder demand has no formula and is left as set by the host.
    """

    def execute(self, sim: Simulation) -> None:
        from citysim.events._internal.jobs import update_demand

        cfg = sim.config
        update_demand(
            sim.res,
            sim.stats,
            sim.agg,
            sim.aims,
            sim.jobs,
            collector=sim.job_row("collector"),
            researcher=sim.job_row("researcher"),
            crafter=sim.job_row("crafter"),
            teacher=sim.job_row("teacher"),
            artist=sim.job_row("artist"),
            teacher_ratio=cfg.teacher_ratio,
            researcher_idle_weight=cfg.researcher_idle_weight,
            crafter_happiness_weight=cfg.crafter_happiness_weight,
        )
