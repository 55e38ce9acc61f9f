"""Tests for SimulationResults."""

import numpy as np
import pytest

from citysim import SimulationResults


@pytest.fixture
def results(city) -> SimulationResults:
    return city.run(n_ticks=5, collect=True)


def test_run_without_collect_returns_none(city):
    assert city.run(n_ticks=2) is None
    assert city.t == 2


def test_one_sample_per_tick(results):
    assert results.n_ticks == 5
    assert results.get_series("resources", "food").shape == (5,)
    assert results.metadata["jobs"][0] == "collector"
    assert results.config["food_per_capita"] == 0.2


def test_first_sample_is_after_first_tick(results):
    assert results.get_series("resources", "food")[0] == pytest.approx(1.78)
    assert results.get_series("collector", "population")[0] == pytest.approx(0.99)


def test_entities_in_creation_order(results):
    assert results.entities[:2] == ["collector", "researcher"]
    assert results.entities[-1] == "aims"


def test_unknown_series_raises(results):
    with pytest.raises(KeyError, match="ghost"):
        results.get_series("ghost", "population")
    with pytest.raises(KeyError, match="food"):
        results.get_series("collector", "food")


def test_to_dataframe(results):
    pytest.importorskip("pandas")

    df = results.to_dataframe(entities=["resources", "aggregates"])

    assert list(df.index) == [1, 2, 3, 4, 5]
    assert "resources.food" in df.columns
    assert "collector.population" not in df.columns
    np.testing.assert_array_equal(
        df["aggregates.population"].to_numpy(),
        results.get_series("aggregates", "population"),
    )


def test_summary(results):
    pytest.importorskip("pandas")

    summary = results.summary()

    assert "mean" in summary.columns
    assert "resources.food" in summary.index


def test_save_load_roundtrip(results, tmp_path):
    path = tmp_path / "city.npz"
    results.save(path)

    loaded = SimulationResults.load(path)

    assert loaded.entities == results.entities
    assert loaded.metadata == results.metadata
    assert loaded.config == results.config
    np.testing.assert_array_equal(
        loaded.get_series("stats", "fame"), results.get_series("stats", "fame")
    )


def test_repr(results):
    assert repr(results).startswith("SimulationResults(ticks=5")
