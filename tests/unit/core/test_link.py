"""Unit tests for the link registry."""

import numpy as np
import pytest

from citysim.core.handle import EntityClass
from citysim.core.link import LinkRegistry
from citysim.core.store import EntityStore
from citysim.errors import UnknownEntity, UnknownField


@pytest.fixture
def store() -> EntityStore:
    s = EntityStore.empty()
    for name in ("collector", "crafter", "teacher"):
        s.create(EntityClass.JOB, name)
    s.create(EntityClass.RESOURCES, "resources")
    s.create(EntityClass.STATS, "stats")
    s.set(s.resolve("collector"), "population", 2.0)
    s.set(s.resolve("collector"), "productivity", 3.0)
    s.set(s.resolve("teacher"), "population", 5.0)
    return s


def test_simple_link_mapping_delta(store):
    links = LinkRegistry()
    links.add_simple_link(store, "collector", "resources", "food", {"population": 0.5})

    links.resolve(store)

    assert store.get(store.resolve("resources"), "food") == pytest.approx(1.0)


def test_simple_link_sequence_delta(store):
    links = LinkRegistry()
    n_fields = len(EntityStore.fields(EntityClass.JOB))
    delta = [0.0] * n_fields
    delta[0] = 1.0  # population
    delta[2] = 2.0  # productivity
    links.add_simple_link(store, "collector", "stats", "science", delta)

    links.resolve(store)

    assert store.get(store.resolve("stats"), "science") == pytest.approx(2.0 + 6.0)


def test_simple_link_sequence_wrong_length_raises(store):
    links = LinkRegistry()
    with pytest.raises(ValueError, match="weights"):
        links.add_simple_link(store, "collector", "stats", "science", [1.0, 2.0])


def test_unknown_entity_raises(store):
    links = LinkRegistry()
    with pytest.raises(UnknownEntity):
        links.add_simple_link(store, "ghost", "stats", "science", {"population": 1})
    with pytest.raises(UnknownEntity):
        links.add_advanced_link(store, "collector", "ghost", lambda f: {})


def test_unknown_destination_field_raises(store):
    links = LinkRegistry()
    with pytest.raises(UnknownField):
        links.add_simple_link(store, "collector", "stats", "food", {"population": 1})


def test_unknown_delta_field_raises(store):
    links = LinkRegistry()
    with pytest.raises(UnknownField):
        links.add_simple_link(store, "collector", "stats", "science", {"fame": 1.0})


def test_links_read_one_snapshot(store):
    """A link feeding another link's source does not change that link's input."""
    links = LinkRegistry()
    links.add_simple_link(store, "collector", "teacher", "population", {"population": 1.0})
    links.add_simple_link(store, "teacher", "crafter", "population", {"population": 1.0})

    links.resolve(store)

    assert store.get(store.resolve("teacher"), "population") == pytest.approx(7.0)
    assert store.get(store.resolve("crafter"), "population") == pytest.approx(5.0)


def test_declaration_order_does_not_matter(store):
    a, b = store.copy(), store.copy()
    specs = [
        ("collector", "teacher", "population", {"population": 1.0}),
        ("teacher", "crafter", "population", {"population": 0.3}),
        ("crafter", "collector", "demand", {"population": 2.0, "productivity": 1.0}),
    ]
    forward, backward = LinkRegistry(), LinkRegistry()
    for spec in specs:
        forward.add_simple_link(a, *spec)
    for spec in reversed(specs):
        backward.add_simple_link(b, *spec)

    forward.resolve(a)
    backward.resolve(b)

    np.testing.assert_allclose(a.state_vector(), b.state_vector())


def test_batched_equals_naive(store):
    links = LinkRegistry()
    links.add_simple_link(store, "collector", "stats", "science", {"population": 0.1})
    links.add_simple_link(store, "teacher", "stats", "science", {"population": 0.2})
    links.add_simple_link(store, "collector", "stats", "science", {"productivity": 1.5})
    links.add_simple_link(store, "teacher", "resources", "food", {"population": -1.0})

    batched = links.simple_contributions(store, batched=True)
    naive = links.simple_contributions(store, batched=False)

    assert batched.keys() == naive.keys()
    for key in naive:
        assert batched[key] == pytest.approx(naive[key])


def test_shared_destination_is_one_matrix_row(store):
    links = LinkRegistry()
    links.add_simple_link(store, "collector", "stats", "science", {"population": 1.0})
    links.add_simple_link(store, "teacher", "stats", "science", {"population": 1.0})
    links.simple_contributions(store)

    assert links._matrix is not None
    assert links._matrix.shape[0] == 1
    assert links.slot_ids.tolist() == [0, 0]


def test_advanced_link_contribution(store):
    links = LinkRegistry()
    links.add_advanced_link(
        store,
        "collector",
        "resources",
        lambda src: {"food": src["population"] ** 2, "material": 1.0},
    )

    links.resolve(store)

    res = store.resolve("resources")
    assert store.get(res, "food") == pytest.approx(4.0)
    assert store.get(res, "material") == pytest.approx(1.0)


def test_advanced_link_source_view_is_read_only(store):
    def transform(src):
        src["population"] = 0.0
        return {}

    links = LinkRegistry()
    links.add_advanced_link(store, "collector", "stats", transform)
    with pytest.raises(TypeError):
        links.resolve(store)


def test_advanced_link_unknown_output_field_raises(store):
    links = LinkRegistry()
    links.add_advanced_link(store, "collector", "stats", lambda src: {"food": 1.0})
    with pytest.raises(UnknownField):
        links.resolve(store)


def test_advanced_link_requires_callable(store):
    links = LinkRegistry()
    with pytest.raises(TypeError, match="callable"):
        links.add_advanced_link(store, "collector", "stats", 3.0)


def test_simple_and_advanced_add_up(store):
    links = LinkRegistry()
    links.add_simple_link(store, "collector", "stats", "science", {"population": 1.0})
    links.add_advanced_link(store, "teacher", "stats", lambda s: {"science": 0.5})

    assert links.resolve(store) == 1
    assert store.get(store.resolve("stats"), "science") == pytest.approx(2.5)
    assert len(links) == 2


def test_late_declaration_rebuilds_matrix(store):
    links = LinkRegistry()
    links.add_simple_link(store, "collector", "stats", "science", {"population": 1.0})
    links.resolve(store)
    links.add_simple_link(store, "teacher", "stats", "fame", {"population": 1.0})
    links.resolve(store)

    stats = store.resolve("stats")
    assert store.get(stats, "science") == pytest.approx(4.0)
    assert store.get(stats, "fame") == pytest.approx(5.0)


def test_handles_accepted_instead_of_names(store):
    links = LinkRegistry()
    link = links.add_simple_link(
        store,
        store.resolve("collector"),
        store.resolve("stats"),
        "science",
        {"population": 1.0},
    )
    assert link.src == store.resolve("collector")
