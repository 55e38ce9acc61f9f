"""
Type aliases for citysim.

Job records are stored column-wise, one NumPy array per field, so most
signatures in the engine speak in terms of these aliases.

Examples
--------
>>> from citysim.typing import Float1D
>>> def total(population: Float1D) -> float:
...     return float(population.sum())
"""

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

Float1D: TypeAlias = NDArray[np.float64]
Idx1D: TypeAlias = NDArray[np.intp]
Float2D: TypeAlias = NDArray[np.float64]

__all__ = [
    "Float1D",
    "Idx1D",
    "Float2D",
]
