"""
Summary statistics of simulated trajectories.

Every statistic is computed over the last ``last`` output times of a
:class:`~befw.simulate.Solution`, leaving out the transient dynamics.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from befw.simulate import Solution

__all__ = [
    "ProducerGrowth",
    "population_stability",
    "producer_growth",
    "species_persistence",
    "total_biomass",
]

OUT_TYPES = ("mean", "all")


@dataclass(frozen=True)
class ProducerGrowth:
    """
    Per-capita net growth ``r_i G_i`` of the producers.

    Attributes
    ----------
    species : tuple[str, ...]
        Producer names
    G : numpy.ndarray
        One value per producer (``out_type="mean"``) or a
        (time, producer) matrix (``out_type="all"``)
    out_type : str
        How the window was reduced
    """

    species: tuple[str, ...]
    G: np.ndarray
    out_type: str


def total_biomass(solution: Solution, last: int = 100) -> float:
    """Mean total biomass of the community over the window."""
    return float(solution.window(last).sum(axis=1).mean())


def species_persistence(
    solution: Solution, last: int = 100, threshold: float | None = None
) -> float:
    """
    Mean fraction of species alive over the window.

    Parameters
    ----------
    solution
        Simulated trajectory
    last
        Number of output times in the window
    threshold
        Biomass above which a species is alive (default: the extinction
        threshold of the simulation)

    Returns
    -------
    float
        Persistence between 0 and 1
    """
    if threshold is None:
        threshold = solution.extinction_threshold
    alive = solution.window(last) > threshold
    return float(alive.mean(axis=1).mean())


def producer_growth(
    solution: Solution, last: int = 100, out_type: str = "mean"
) -> ProducerGrowth:
    """
    Producer net growth over the window.

    Parameters
    ----------
    solution
        Simulated trajectory
    last
        Number of output times in the window
    out_type
        "mean" to average each producer over the window, "all" to keep
        every output time

    Raises
    ------
    ValueError
        If ``out_type`` is unknown
    """
    if out_type not in OUT_TYPES:
        msg = f"out_type must be one of {OUT_TYPES}, got {out_type!r}"
        raise ValueError(msg)

    producers = solution.params.foodweb.producers
    G = solution.params.net_growth(solution.window(last))[:, producers]
    if out_type == "mean":
        G = G.mean(axis=0)
    species = tuple(s for s, p in zip(solution.species, producers) if p)
    return ProducerGrowth(species=species, G=G, out_type=out_type)


def population_stability(
    solution: Solution, last: int = 100, threshold: float | None = None
) -> float:
    """
    Negative mean coefficient of variation of the surviving species.

    0 means every surviving population is constant over the window; more
    negative values mean larger oscillations. Returns NaN when no species
    survives.
    """
    if threshold is None:
        threshold = solution.extinction_threshold
    window = solution.window(last)
    surviving = window[-1] > threshold
    if not surviving.any():
        return float("nan")
    B = window[:, surviving]
    cv = B.std(axis=0) / B.mean(axis=0)
    return float(-cv.mean())
