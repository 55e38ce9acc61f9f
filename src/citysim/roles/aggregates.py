from citysim.core.decorators import role
from citysim.core.handle import EntityClass


@role(entity_class=EntityClass.AGGREGATES)
class Aggregates:
    """
    Values derived from the job records at the end of every tick.

    Only the initial values are ever set directly.
    """

    population: float  # job population plus idle inhabitants
    avg_productivity: float
    avg_demand: float
    avg_happiness: float
    avg_commute: float
