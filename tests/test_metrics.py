"""
Unit tests for befw.metrics module.

Statistics are checked on hand-built trajectories so that the expected
values are exact.
"""

from __future__ import annotations

import numpy as np
import pytest

from befw.foodweb import FoodWeb
from befw.metrics import (
    ProducerGrowth,
    population_stability,
    producer_growth,
    species_persistence,
    total_biomass,
)
from befw.model import Environment, ModelParameters
from befw.simulate import Solution


def _solution(B, A=None, K=10.0):
    B = np.asarray(B, dtype=float)
    if A is None:
        A = np.zeros((B.shape[1], B.shape[1]), dtype=int)
    web = FoodWeb(A)
    params = ModelParameters(web, environment=Environment(web, K=K))
    return Solution(t=np.arange(float(B.shape[0])), B=B, params=params)


class TestTotalBiomass:
    """Tests for total_biomass function."""

    def test_constant(self):
        """Total biomass of a constant trajectory is the sum of the species."""
        solution = _solution(np.tile([2.0, 3.0], (10, 1)))
        assert total_biomass(solution, last=5) == pytest.approx(5.0)

    def test_only_window_counts(self):
        """Transient output times are left out."""
        B = np.vstack([np.full((5, 2), 100.0), np.full((5, 2), 1.0)])
        assert total_biomass(_solution(B), last=5) == pytest.approx(2.0)

    def test_window_too_long(self):
        """A window longer than the trajectory raises ValueError."""
        with pytest.raises(ValueError, match="last must be between"):
            total_biomass(_solution(np.ones((3, 2))), last=4)


class TestSpeciesPersistence:
    """Tests for species_persistence function."""

    def test_all_alive(self):
        """Persistence is 1 when every species is above the threshold."""
        assert species_persistence(_solution(np.ones((4, 2))), last=4) == 1.0

    def test_half_alive(self):
        """An extinct species counts as absent."""
        B = np.tile([1.0, 0.0], (4, 1))
        assert species_persistence(_solution(B), last=4) == pytest.approx(0.5)

    def test_averaged_over_window(self):
        """Persistence is averaged over the window."""
        B = np.array([[1.0, 1.0], [1.0, 1.0], [1.0, 0.0], [1.0, 0.0]])
        assert species_persistence(_solution(B), last=4) == pytest.approx(0.75)

    def test_custom_threshold(self):
        """A custom threshold can be used to count survivors."""
        B = np.tile([1.0, 0.01], (4, 1))
        assert species_persistence(_solution(B), last=4, threshold=0.1) == 0.5


class TestProducerGrowth:
    """Tests for producer_growth function."""

    def test_at_carrying_capacity(self):
        """Producers at K have zero net growth."""
        result = producer_growth(_solution(np.tile([5.0, 5.0], (6, 1))), last=3)
        assert isinstance(result, ProducerGrowth)
        assert result.species == ("s1", "s2")
        np.testing.assert_allclose(result.G, [0.0, 0.0], atol=1e-12)

    def test_below_carrying_capacity(self):
        """Net growth is r (1 - sum B / K)."""
        result = producer_growth(_solution(np.tile([2.0, 3.0], (6, 1))), last=3)
        np.testing.assert_allclose(result.G, [0.5, 0.5])

    def test_consumers_left_out(self):
        """Only producers are reported."""
        B = np.tile([1.0, 1.0, 1.0], (4, 1))
        A = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
        result = producer_growth(_solution(B, A=A, K=2.0), last=4)
        assert result.species == ("s1",)
        np.testing.assert_allclose(result.G, [0.5])

    def test_all_output_times(self):
        """out_type='all' keeps one row per output time."""
        B = np.array([[1.0, 1.0], [2.0, 2.0], [4.0, 4.0]])
        result = producer_growth(_solution(B), last=3, out_type="all")
        assert result.out_type == "all"
        assert result.G.shape == (3, 2)
        np.testing.assert_allclose(result.G[:, 0], [0.8, 0.6, 0.2])

    def test_invalid_out_type(self):
        """Unknown out_type values raise ValueError."""
        with pytest.raises(ValueError, match="out_type"):
            producer_growth(_solution(np.ones((3, 2))), last=3, out_type="median")


class TestPopulationStability:
    """Tests for population_stability function."""

    def test_constant_populations(self):
        """Constant populations have stability 0."""
        assert population_stability(_solution(np.ones((5, 2))), last=5) == 0.0

    def test_oscillations_are_negative(self):
        """Oscillating populations have negative stability."""
        B = np.array([[1.0, 2.0], [3.0, 2.0], [1.0, 2.0], [3.0, 2.0]])
        # CV of the first species is 0.5, the second is constant
        assert population_stability(_solution(B), last=4) == pytest.approx(-0.25)

    def test_extinct_species_ignored(self):
        """Species extinct at the end of the window are left out."""
        B = np.array([[1.0, 3.0], [1.0, 1.0], [1.0, 0.0]])
        assert population_stability(_solution(B), last=3) == 0.0

    def test_no_survivors(self):
        """Without survivors stability is NaN."""
        assert np.isnan(population_stability(_solution(np.zeros((3, 2))), last=3))
