"""
Error kinds raised by the entity store, the link registry and the tick.

Setup-time lookups fail with :class:`UnknownEntity` / :class:`UnknownField`.
Numeric problems found while ticking are raised as :class:`DivisionHazard`
before any state is committed. :class:`InvariantViolation` is a warning:
the reference equations do not guarantee non-negative populations, so such
states are reported and the tick still commits.
"""

from __future__ import annotations


class UnknownEntity(KeyError):
    """No entity is registered under the given name or handle."""

    def __init__(self, name: object, available: list[str] | None = None) -> None:
        self.name = name
        msg = f"Entity '{name}' not found in store."
        if available:
            msg += f" Available entities: {', '.join(available)}"
        super().__init__(msg)

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownField(KeyError):
    """The entity class has no field with the given name."""

    def __init__(self, field: str, entity_class: str, available: tuple[str, ...]) -> None:
        self.field = field
        self.entity_class = entity_class
        super().__init__(
            f"{entity_class} has no field '{field}'. "
            f"Available fields: {', '.join(available)}"
        )

    def __str__(self) -> str:
        return str(self.args[0])


class DivisionHazard(ArithmeticError):
    """A denominator is zero (or a result non-finite) at tick time."""

    def __init__(self, field: str, value: float | None = None) -> None:
        self.field = field
        self.value = value
        detail = "" if value is None else f" (value={value!r})"
        super().__init__(f"Division hazard on '{field}'{detail}")


class InvariantViolation(UserWarning):
    """A population or resource went negative."""

    def __init__(self, field: str, value: float) -> None:
        self.field = field
        self.value = value
        super().__init__(f"'{field}' is negative after tick: {value!r}")


__all__ = ["UnknownEntity", "UnknownField", "DivisionHazard", "InvariantViolation"]
