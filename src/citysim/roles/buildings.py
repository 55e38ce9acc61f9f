from citysim.core.decorators import role
from citysim.core.handle import EntityClass


@role(entity_class=EntityClass.BUILDINGS)
class Buildings:
    """Non-negative capacity multipliers and the habitation cap."""

    farm_area: float
    mine_area: float
    work_area: float
    habitations: float
