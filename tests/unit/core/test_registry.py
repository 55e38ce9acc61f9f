"""Unit tests for role / event registration and the decorators."""

import pytest

from citysim.core import Event, Role, event, get_event, get_role, list_events, role
from citysim.core.handle import EntityClass
from citysim.core.registry import list_roles


def test_builtin_roles_registered():
    for name in ("Job", "Resources", "Stats", "Aggregates", "Buildings", "Aims"):
        assert name in list_roles()
    assert get_role("Job").entity_class is EntityClass.JOB


def test_builtin_events_registered():
    assert "update_jobs" in list_events()
    assert get_event("resolve_links").name == "resolve_links"


def test_get_unknown_role_raises():
    with pytest.raises(KeyError, match="Available roles"):
        get_role("Harbor")


def test_role_decorator_registers_dataclass(clean_registry):
    @role(entity_class=EntityClass.BUILDINGS)
    class Harbor:
        docks: float

    assert issubclass(Harbor, Role)
    assert get_role("Harbor") is Harbor
    assert Harbor.field_names() == ("docks",)
    assert Harbor(docks=2.0).docks == 2.0


def test_role_decorator_custom_name(clean_registry):
    @role(name="Port")
    class Harbor:
        docks: float

    assert get_role("Port") is Harbor


def test_event_decorator_snake_case_name(clean_registry):
    @event
    class DoubleFame:
        def execute(self, sim):
            sim.stats.fame *= 2.0

    assert issubclass(DoubleFame, Event)
    assert get_event("double_fame") is DoubleFame
    assert DoubleFame().get_logger().name == "citysim.events.double_fame"


def test_clean_registry_isolates(clean_registry):
    assert list_roles() == []
    assert list_events() == []


def test_custom_event_in_pipeline(city, clean_registry):
    from citysim.core.pipeline import Pipeline

    @event
    class DoubleFame:
        def execute(self, sim):
            sim.stats.fame *= 2.0

    city.set("stats", "fame", 1.5)
    city.pipeline = Pipeline.from_event_list(["double_fame"])
    city.step()

    assert city.get("stats", "fame") == 3.0


def test_role_copy_and_repr():
    from citysim.roles import Aims

    aims = Aims(happiness=1.0, productivity=2.0)
    clone = aims.copy()
    clone.happiness = 5.0
    assert aims.happiness == 1.0
    assert repr(aims) == "Aims(fields=2)"


def test_event_repr_uses_event_name(clean_registry):
    @event
    class DecayFame:
        def execute(self, sim):
            sim.stats.fame *= 0.99

    assert repr(DecayFame()) == "DecayFame(name='decay_fame')"
