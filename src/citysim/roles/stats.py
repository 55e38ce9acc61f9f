from citysim.core.decorators import role
from citysim.core.handle import EntityClass


@role(entity_class=EntityClass.STATS)
class Stats:
    """
    City-wide statistics.

    ``death_rate`` is the per-tick survival fraction applied to every job and
    to the idle pool.
    """

    fame: float
    dfame: float
    migration: float
    natality: float
    science: float
    idleness: float
    death_rate: float

    # Per-tick scratch, rewritten every tick
    food_shortage: float = 1.0
    hab_ratio: float = 0.0
    generic_productivity: float = 0.0
    generic_happiness: float = 0.0
