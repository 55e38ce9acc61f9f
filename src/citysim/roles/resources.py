from citysim.core.decorators import role
from citysim.core.handle import EntityClass


@role(entity_class=EntityClass.RESOURCES)
class Resources:
    """Global resource pool; each stock is paired with its last delta."""

    money: float
    dmoney: float
    food: float
    dfood: float
    material: float
    dmaterial: float
    food_spoilage: float  # multiplicative decay in (0, 1]
