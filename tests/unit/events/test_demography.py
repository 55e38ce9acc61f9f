"""Unit tests for the population phases."""

import pytest

from citysim.events._internal.demography import (
    compute_habitation_ratio,
    compute_macro_stats,
    decay_idleness,
    reallocate_idle_to_collectors,
)
from tests.helpers.factories import (
    ROWS,
    mock_aggregates,
    mock_buildings,
    mock_jobs,
    mock_stats,
)


class TestReallocation:
    def test_no_shortage_moves_nobody(self):
        stats = mock_stats(idleness=10.0, food_shortage=1.0)
        jobs = mock_jobs()
        assert reallocate_idle_to_collectors(stats, jobs, collector=0) == 0.0
        assert stats.idleness == 10.0

    def test_partial_shortage(self):
        stats = mock_stats(idleness=10.0, food_shortage=0.8)
        jobs = mock_jobs(population=[1.0, 0, 0, 0, 0, 0])

        moved = reallocate_idle_to_collectors(stats, jobs, collector=ROWS["collector"])

        assert moved == pytest.approx(2.0)
        assert stats.idleness == pytest.approx(8.0)
        assert jobs.population[0] == pytest.approx(3.0)

    def test_capped_at_half_the_pool(self):
        stats = mock_stats(idleness=10.0, food_shortage=0.0)
        jobs = mock_jobs()

        moved = reallocate_idle_to_collectors(stats, jobs, collector=0)

        assert moved == pytest.approx(5.0)
        assert stats.idleness == pytest.approx(5.0)

    def test_total_population_conserved(self):
        stats = mock_stats(idleness=7.0, food_shortage=0.3)
        jobs = mock_jobs(population=[1.0, 2.0, 0, 0, 0, 0])
        before = stats.idleness + jobs.population.sum()

        reallocate_idle_to_collectors(stats, jobs, collector=0)

        assert stats.idleness + jobs.population.sum() == pytest.approx(before)


class TestHabitationRatio:
    @pytest.mark.parametrize(
        "habitations, population, expected",
        [
            (1000.0, 1.0, 1.0),  # saturates at 1
            (10.0, 15.0, 5.0 / 15.0),
            (10.0, 20.0, 0.0),
            (10.0, 50.0, 0.0),  # clamped at 0
            (0.0, 5.0, 0.0),
        ],
    )
    def test_formula(self, habitations, population, expected):
        stats = mock_stats()
        compute_habitation_ratio(
            stats,
            mock_aggregates(population=population),
            mock_buildings(habitations=habitations),
        )
        assert stats.hab_ratio == pytest.approx(expected)

    def test_empty_city_with_housing(self):
        stats = mock_stats()
        compute_habitation_ratio(
            stats, mock_aggregates(population=0.0), mock_buildings(habitations=3.0)
        )
        assert stats.hab_ratio == 1.0

    def test_empty_city_without_housing(self):
        stats = mock_stats()
        compute_habitation_ratio(
            stats, mock_aggregates(population=0.0), mock_buildings(habitations=0.0)
        )
        assert stats.hab_ratio == 0.0


class TestMacroStats:
    def test_reference_values(self):
        stats = mock_stats(fame=1.0, food_shortage=1.0, hab_ratio=1.0)
        compute_macro_stats(
            stats, mock_aggregates(), mock_jobs(), researcher=ROWS["researcher"]
        )
        assert stats.migration == pytest.approx(0.02)
        assert stats.natality == pytest.approx(0.1)
        assert stats.science == 0.0

    def test_growth_scaled_by_shortage_and_housing(self):
        stats = mock_stats(fame=10.0, food_shortage=0.5, hab_ratio=0.5)
        compute_macro_stats(
            stats, mock_aggregates(population=8.0), mock_jobs(), researcher=1
        )
        assert stats.migration == pytest.approx(0.02 * 10.0 * 0.25)
        assert stats.natality == pytest.approx(0.1 * 8.0 * 0.25)

    def test_science(self):
        stats = mock_stats(food_shortage=1.0, hab_ratio=1.0)
        jobs = mock_jobs(
            population=[0, 3.0, 0, 0, 0, 0], productivity=[0, 0.5, 0, 0, 0, 0]
        )
        compute_macro_stats(
            stats, mock_aggregates(avg_happiness=2.0), jobs, researcher=1
        )
        assert stats.science == pytest.approx(3.0)


def test_decay_idleness():
    stats = mock_stats(idleness=100.0, death_rate=0.9)
    decay_idleness(stats)
    assert stats.idleness == pytest.approx(90.0)
