"""
Unit tests for befw.allometry module.

Tests the mass- and temperature-dependent carrying capacity and the
quarter-power allometric rates.
"""

from __future__ import annotations

import numpy as np
import pytest

from befw.allometry import BETA_K, T0, allometric_rate, carrying


class TestCarrying:
    """Tests for carrying function."""

    def test_reference_temperature_unit_mass(self):
        """At the reference temperature a unit mass gives K = k0."""
        assert carrying(1.0, 7.5, T0) == pytest.approx(7.5)

    def test_returns_float_for_scalars(self):
        """Scalar inputs give a plain float."""
        assert isinstance(carrying(2.0, 1.0, T0), float)

    def test_mass_scaling(self):
        """K scales with mass to the power BETA_K."""
        ratio = carrying(10.0, 1.0, T0) / carrying(1.0, 1.0, T0)
        assert ratio == pytest.approx(10.0**BETA_K)

    def test_linear_in_k0(self):
        """Doubling the intercept doubles K."""
        assert carrying(3.0, 2.0, T0 + 5) == pytest.approx(
            2 * carrying(3.0, 1.0, T0 + 5)
        )

    def test_decreases_with_warming(self):
        """K decreases with temperature and is larger below T0."""
        temperatures = np.linspace(T0 - 10, T0 + 10, 21)
        K = carrying(1.0, 1.0, temperatures)
        assert np.all(np.diff(K) < 0)
        assert K[0] > 1.0 > K[-1]

    def test_broadcasting(self):
        """Mass and temperature arrays broadcast against each other."""
        mass = np.array([1.0, 10.0, 100.0])
        temperatures = np.array([T0 - 5, T0, T0 + 5, T0 + 10])
        K = carrying(mass[:, None], 1.0, temperatures[None, :])
        assert K.shape == (3, 4)
        np.testing.assert_allclose(K[:, 1], mass**BETA_K)

    def test_keyword_arguments(self):
        """The arguments can be passed by name."""
        assert carrying(mass=1.0, k0=4.0, temperature=T0) == pytest.approx(4.0)

    def test_no_input_guards(self):
        """Inputs are not validated; zero mass gives zero capacity."""
        assert carrying(0.0, 1.0, T0) == 0.0


class TestAllometricRate:
    """Tests for allometric_rate function."""

    def test_quarter_power(self):
        """Rates follow a * M ** -0.25 by default."""
        np.testing.assert_allclose(
            allometric_rate([1.0, 16.0, 81.0], 2.0), [2.0, 1.0, 2.0 / 3.0]
        )

    def test_custom_exponent(self):
        """The exponent can be changed."""
        assert allometric_rate(4.0, 1.0, b=0.5) == pytest.approx(2.0)
