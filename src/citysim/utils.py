"""Numeric helpers shared by the tick equations."""

from __future__ import annotations

from citysim.errors import DivisionHazard

# Populations at or below this are treated as zero
EPS = 1.0e-12


def require_nonzero(value: float, field: str) -> float:
    """
    Return *value* unchanged, or raise if it cannot be used as a divisor.

    Raises
    ------
    DivisionHazard
        If ``abs(value) <= EPS``.
    """
    if abs(value) <= EPS:
        raise DivisionHazard(field, value)
    return value


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clip *value* into ``[lo, hi]``."""
    return min(max(value, lo), hi)
