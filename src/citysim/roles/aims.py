from citysim.core.decorators import role
from citysim.core.handle import EntityClass


@role(entity_class=EntityClass.AIMS)
class Aims:
    """Externally adjustable set-points; read-only to the tick."""

    happiness: float
    productivity: float
