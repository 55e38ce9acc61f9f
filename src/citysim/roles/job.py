from citysim.core.decorators import role
from citysim.core.handle import EntityClass
from citysim.typing import Float1D


@role(entity_class=EntityClass.JOB)
class Job:
    """
    Occupation records, stored column-wise.

    Row ``i`` of every array belongs to the ``i``-th job created, so the
    creation order doubles as the fixed iteration order of the tick.
    """

    population: Float1D
    dpopulation: Float1D  # last growth delta (diagnostic)
    productivity: Float1D
    specific_prod: Float1D  # occupation baseline added to generic productivity
    happiness: Float1D
    commute: Float1D  # external friction input
    demand: Float1D

    @property
    def n(self) -> int:
        """Number of jobs."""
        return int(self.population.size)
