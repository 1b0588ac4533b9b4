"""
Allometric scaling of biological rates and carrying capacity.

Carrying capacity follows a Boltzmann-Arrhenius allometric relationship
with parameter values from Binzer et al. (2016), Global Change Biology,
22(1), 220-227:

.. math::

    K_i(M, T) = k_0 M_i^{\\beta} \\exp\\left(E_k \\frac{T_0 - T}{k_B T T_0}\\right)

Temperatures are in Kelvin. Inputs are not validated.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

__all__ = [
    "BETA_K",
    "BOLTZMANN",
    "E_K",
    "T0",
    "allometric_rate",
    "carrying",
]

BETA_K = 0.28
"""Allometric exponent of carrying capacity."""

E_K = 0.71
"""Activation energy of carrying capacity (eV)."""

T0 = 293.15
"""Reference temperature, 20 degrees Celsius (K)."""

BOLTZMANN = 8.617e-5
"""Boltzmann constant (eV/K)."""


def carrying(
    mass: ArrayLike, k0: ArrayLike, temperature: ArrayLike
) -> float | np.ndarray:
    """
    Mass- and temperature-dependent carrying capacity.

    Parameters
    ----------
    mass
        Body mass (g), scalar or array
    k0
        Intercept. Enrichment is simulated by increasing it.
    temperature
        Temperature (K), scalar or array

    Returns
    -------
    float | numpy.ndarray
        Carrying capacity (g m^-2), broadcast over the inputs

    Examples
    --------
    >>> carrying(1.0, 10.0, T0)
    10.0
    >>> carrying([1.0, 2.0], 1.0, T0).shape
    (2,)
    """
    mass = np.asarray(mass, dtype=float)
    k0 = np.asarray(k0, dtype=float)
    T = np.asarray(temperature, dtype=float)
    K = k0 * mass**BETA_K * np.exp(E_K * (T0 - T) / (BOLTZMANN * T * T0))
    if K.ndim == 0:
        return float(K)
    return K


def allometric_rate(mass: ArrayLike, a: float, b: float = -0.25) -> np.ndarray:
    """
    Quarter-power allometric rate ``a * M ** b``.

    Parameters
    ----------
    mass
        Body masses relative to the producers
    a
        Allometric constant
    b
        Allometric exponent

    Returns
    -------
    numpy.ndarray
        One rate per mass
    """
    return a * np.asarray(mass, dtype=float) ** b
