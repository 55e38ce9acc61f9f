"""Core engine infrastructure: records, handles, events, pipeline, store, links."""

from typing import Any, Callable

from citysim.core.decorators import event as event_decorator
from citysim.core.decorators import role as role_decorator
from citysim.core.event import Event
from citysim.core.handle import EntityClass, Handle
from citysim.core.pipeline import Pipeline
from citysim.core.registry import get_event, get_role, list_events, list_roles
from citysim.core.role import Role

# Export decorator functions with their intended names
event: Callable[..., Any] = event_decorator
role: Callable[..., Any] = role_decorator

# Imported last: the store pulls in the built-in roles, which need the above
from citysim.core.store import EntityStore  # noqa: E402
from citysim.core.link import AdvancedLink, LinkRegistry, SimpleLink  # noqa: E402

__all__ = [
    "AdvancedLink",
    "EntityClass",
    "EntityStore",
    "Event",
    "Handle",
    "LinkRegistry",
    "Pipeline",
    "Role",
    "SimpleLink",
    "event",
    "get_event",
    "get_role",
    "list_events",
    "list_roles",
    "role",
]
