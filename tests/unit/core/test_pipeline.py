"""Unit tests for Pipeline class."""

import pytest

from citysim.core.default_pipeline import create_default_pipeline
from citysim.core.pipeline import Pipeline, RepeatedEvent
from citysim.events.demography import DecayIdleness

DEFAULT_ORDER = [
    "resolve_links",
    "compute_resource_flow",
    "actualize_resources",
    "evaluate_food_shortage",
    "reallocate_idle_to_collectors",
    "compute_habitation_ratio",
    "compute_macro_stats",
    "compute_generic_factors",
    "update_jobs",
    "decay_idleness",
    "update_demand",
    "recompute_aggregates",
]


def test_default_pipeline_order():
    """Default pipeline runs link resolution then the eleven model phases."""
    assert create_default_pipeline().event_names == DEFAULT_ORDER


def test_pipeline_preserves_order():
    pipeline = Pipeline.from_event_list(
        ["recompute_aggregates", "compute_resource_flow", "decay_idleness"]
    )
    assert pipeline.event_names == [
        "recompute_aggregates",
        "compute_resource_flow",
        "decay_idleness",
    ]


def test_pipeline_unknown_event_raises():
    with pytest.raises(KeyError, match="not_an_event"):
        Pipeline.from_event_list(["not_an_event"])


def test_pipeline_repeats_wrap_event():
    pipeline = Pipeline.from_event_list(["decay_idleness"], repeats={"decay_idleness": 3})
    assert isinstance(pipeline.events[0], RepeatedEvent)
    assert pipeline.events[0].n_repeats == 3


def test_repeated_event_executes_n_times(city):
    city.set("stats", "idleness", 1.0)
    city.pipeline = Pipeline.from_event_list(
        ["decay_idleness"], repeats={"decay_idleness": 2}
    )
    city.step()
    assert city.get("stats", "idleness") == pytest.approx(0.99**2)


def test_insert_after_by_name():
    pipeline = Pipeline.from_event_list(["compute_resource_flow", "update_jobs"])
    pipeline.insert_after("compute_resource_flow", "actualize_resources")
    assert pipeline.event_names[1] == "actualize_resources"


def test_insert_after_missing_raises():
    pipeline = Pipeline.from_event_list(["update_jobs"])
    with pytest.raises(ValueError, match="not found"):
        pipeline.insert_after("compute_resource_flow", "actualize_resources")


def test_remove():
    pipeline = create_default_pipeline()
    pipeline.remove("resolve_links")
    assert len(pipeline) == 11
    assert "resolve_links" not in pipeline.event_names
    with pytest.raises(ValueError):
        pipeline.remove("resolve_links")


def test_replace_with_instance():
    pipeline = Pipeline.from_event_list(["update_jobs"])
    pipeline.replace("update_jobs", DecayIdleness())
    assert pipeline.event_names == ["decay_idleness"]


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("update_jobs", ["update_jobs"]),
        ("update_jobs x 2", ["update_jobs", "update_jobs"]),
        (
            "decay_idleness <-> update_jobs x 2",
            ["decay_idleness", "update_jobs", "decay_idleness", "update_jobs"],
        ),
    ],
)
def test_parse_event_spec(spec, expected):
    assert Pipeline.parse_event_spec(spec) == expected


def test_from_yaml_with_params(tmp_path):
    path = tmp_path / "pipeline.yml"
    path.write_text("events:\n  - compute_resource_flow\n  - decay_idleness x {n}\n")

    pipeline = Pipeline.from_yaml(path, n=3)

    assert pipeline.event_names == ["compute_resource_flow"] + ["decay_idleness"] * 3


def test_from_yaml_missing_events_key(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("steps: []\n")
    with pytest.raises(ValueError, match="events"):
        Pipeline.from_yaml(path)
