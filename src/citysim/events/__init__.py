"""Event classes of the city tick.

Events are auto-registered via the __init_subclass__ hook and composed
into a Pipeline. Each event module wraps the functions of the matching
module in ``_internal``:

- links.py → LinkRegistry.resolve
- resources.py → _internal/resources.py
- demography.py → _internal/demography.py
- jobs.py → _internal/jobs.py
- aggregates.py → _internal/aggregates.py
"""

# Import all events to trigger auto-registration
from citysim.events.aggregates import RecomputeAggregates
from citysim.events.demography import (
    ComputeHabitationRatio,
    ComputeMacroStats,
    DecayIdleness,
    ReallocateIdleToCollectors,
)
from citysim.events.jobs import ComputeGenericFactors, UpdateDemand, UpdateJobs
from citysim.events.links import ResolveLinks
from citysim.events.resources import (
    ActualizeResources,
    ComputeResourceFlow,
    EvaluateFoodShortage,
)

__all__ = [
    # Links
    "ResolveLinks",
    # Resources (3)
    "ComputeResourceFlow",
    "ActualizeResources",
    "EvaluateFoodShortage",
    # Demography (4)
    "ReallocateIdleToCollectors",
    "ComputeHabitationRatio",
    "ComputeMacroStats",
    "DecayIdleness",
    # Jobs (3)
    "ComputeGenericFactors",
    "UpdateJobs",
    "UpdateDemand",
    # Aggregates
    "RecomputeAggregates",
]
