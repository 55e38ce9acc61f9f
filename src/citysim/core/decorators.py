# src/citysim/core/decorators.py
"""
Decorators for simplified Role and Event definition.

Instead of:
    from dataclasses import dataclass
    from citysim.core import Role, EntityClass

    @dataclass(slots=True)
    class Harbor(Role, entity_class=EntityClass.BUILDINGS):
        docks: float

You can write:
    @role(entity_class=EntityClass.BUILDINGS)
    class Harbor:
        docks: float

The decorator handles:
- Making the class a dataclass with slots
- Making it inherit from Role/Event (if not already)
- Auto-registration via __init_subclass__
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, TypeVar

if TYPE_CHECKING:
    from citysim.core.handle import EntityClass

T = TypeVar("T")


def _rebase(cls: type, base: type) -> type:
    """Create a copy of *cls* that inherits only from *base*."""
    namespace = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__annotations__": getattr(cls, "__annotations__", {}),
    }
    # Copy methods and class attributes (but not __dict__, __weakref__, etc.)
    for attr_name in dir(cls):
        if not attr_name.startswith("__"):
            namespace[attr_name] = getattr(cls, attr_name)
    return type(cls.__name__, (base,), namespace)


def role(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    entity_class: EntityClass | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """Decorator to define a Role with automatic inheritance and dataclass.

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically when used without parens)
    name : str | None
        Optional custom name for the role. If None, uses the class name.
    entity_class : EntityClass | None
        Record layout implemented by the role.
    **dataclass_kwargs : Any
        Additional keyword arguments to pass to @dataclass.
        By default, slots=True and repr=False are set, so the base class
        repr is kept.

    Returns
    -------
    type | Callable
        The decorated class or a decorator function
    """
    from citysim.core.role import Role

    dataclass_kwargs.setdefault("slots", True)
    dataclass_kwargs.setdefault("repr", False)

    def decorator(cls: type[T]) -> type[T]:
        if not issubclass(cls, Role):
            cls = _rebase(cls, Role)  # type: ignore[assignment]

        # Set metadata BEFORE applying dataclass so __init_subclass__ sees it
        if name is not None:
            cls.name = name  # type: ignore[attr-defined]
        if entity_class is not None:
            cls.entity_class = entity_class  # type: ignore[attr-defined]

        return dataclass(**dataclass_kwargs)(cls)

    if cls is None:
        return decorator
    return decorator(cls)


def event(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """Decorator to define an Event with automatic inheritance and dataclass.

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically when used without parens)
    name : str | None
        Optional custom name for the event. If None, uses class name (snake_case).
    **dataclass_kwargs : Any
        Additional keyword arguments to pass to @dataclass.
        By default, slots=True and repr=False are set, so the base class
        repr is kept.

    Returns
    -------
    type | Callable
        The decorated class or a decorator function

    Examples
    --------
        @event
        class DecayFame:
            def execute(self, sim: Simulation) -> None:
                sim.stats.fame *= 0.99
    """
    from citysim.core.event import Event

    dataclass_kwargs.setdefault("slots", True)
    dataclass_kwargs.setdefault("repr", False)

    def decorator(cls: type[T]) -> type[T]:
        if not issubclass(cls, Event):
            cls = _rebase(cls, Event)  # type: ignore[assignment]

        if name is not None:
            cls.name = name  # type: ignore[attr-defined]

        return dataclass(**dataclass_kwargs)(cls)

    if cls is None:
        return decorator
    return decorator(cls)
