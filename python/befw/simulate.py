"""
Time-series simulation of the bio-energetic food-web model.

Integration uses :func:`scipy.integrate.solve_ivp`. When a species' biomass
drops below the extinction threshold the integrator stops, the species is
set to exactly zero and integration resumes from that point, so extinct
species can neither recover nor keep feeding their consumers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike
from scipy.integrate import solve_ivp

from befw.config.exceptions import SimulationError, ValidationError
from befw.model import ModelParameters

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_EXTINCTION_THRESHOLD", "Solution", "simulate"]

DEFAULT_EXTINCTION_THRESHOLD = 1e-5


@dataclass(frozen=True, eq=False)
class Solution:
    """
    Biomass trajectory returned by :func:`simulate`.

    Attributes
    ----------
    t : numpy.ndarray
        Output times, shape (n_steps,)
    B : numpy.ndarray
        Biomass, shape (n_steps, S)
    params : ModelParameters
        Parameters the trajectory was produced with
    extinction_threshold : float
        Biomass below which a species was considered extinct
    extinctions : dict[str, float]
        Species name to extinction time, in order of extinction
    """

    t: np.ndarray
    B: np.ndarray
    params: ModelParameters
    extinction_threshold: float = DEFAULT_EXTINCTION_THRESHOLD
    extinctions: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.t.setflags(write=False)
        self.B.setflags(write=False)

    @property
    def species(self) -> tuple[str, ...]:
        """Species names, in column order."""
        return self.params.foodweb.species

    @property
    def n_steps(self) -> int:
        """Number of output times."""
        return len(self.t)

    def window(self, last: int) -> np.ndarray:
        """
        Biomass over the last ``last`` output times.

        Raises
        ------
        ValueError
            If ``last`` is not in ``[1, n_steps]``
        """
        if not 1 <= last <= self.n_steps:
            msg = f"last must be between 1 and {self.n_steps}, got {last}"
            raise ValueError(msg)
        return self.B[-last:]

    def final(self) -> pd.Series:
        """Biomass at the last output time, indexed by species."""
        return pd.Series(self.B[-1], index=list(self.species), name="biomass")

    def to_dataframe(self) -> pd.DataFrame:
        """Trajectory as a DataFrame indexed by time with one column per species."""
        return pd.DataFrame(
            self.B, index=pd.Index(self.t, name="time"), columns=list(self.species)
        )


def _extinction_event(i: int, threshold: float):
    def event(t: float, B: np.ndarray) -> float:  # noqa: ARG001
        return B[i] - threshold

    event.terminal = True
    event.direction = -1
    return event


def simulate(  # noqa: PLR0913
    params: ModelParameters,
    B0: ArrayLike,
    tmax: float | None = None,
    dt: float = 1.0,
    extinction_threshold: float = DEFAULT_EXTINCTION_THRESHOLD,
    verbose: bool = False,
    method: str = "LSODA",
    rtol: float = 1e-6,
    atol: float = 1e-10,
    stop: float | None = None,
) -> Solution:
    """
    Simulate biomass dynamics from ``t = 0`` to ``tmax``.

    Parameters
    ----------
    params
        Model parameters
    B0
        Initial biomass, one non-negative value per species
    tmax
        Time horizon (default 500)
    dt
        Spacing of the output times
    extinction_threshold
        Biomass below which a species goes extinct
    verbose
        Log extinctions and completion at info level instead of debug
    method
        Integration method passed to :func:`scipy.integrate.solve_ivp`
    rtol, atol
        Integration tolerances
    stop
        Alias of ``tmax``

    Returns
    -------
    Solution
        Trajectory sampled at ``0, dt, ..., tmax``

    Raises
    ------
    ValidationError
        If the initial biomass or the time settings are invalid
    SimulationError
        If the integrator fails before reaching ``tmax``
    """
    if tmax is not None and stop is not None and tmax != stop:
        msg = f"Got both tmax={tmax} and stop={stop}"
        raise ValidationError(msg)
    tmax = tmax if tmax is not None else stop if stop is not None else 500.0

    web = params.foodweb
    B = np.array(B0, dtype=float)
    if B.shape != (web.richness,):
        msg = f"Expected {web.richness} initial biomasses, got shape {B.shape}"
        raise ValidationError(msg)
    if np.any(B < 0) or not np.all(np.isfinite(B)):
        msg = "Initial biomasses must be finite and non-negative"
        raise ValidationError(msg)
    if tmax <= 0 or dt <= 0:
        msg = f"tmax and dt must be positive, got tmax={tmax}, dt={dt}"
        raise ValidationError(msg)

    log = logger.info if verbose else logger.debug
    n_points = int(np.floor(tmax / dt + 1e-9))
    grid = np.minimum(np.arange(n_points + 1) * dt, tmax)
    B[B <= extinction_threshold] = 0.0

    times = [grid[:1]]
    states = [B[None, :]]
    extinctions: dict[str, float] = {}
    n_done = 1
    t = 0.0

    while t < tmax and n_done < grid.size:
        alive = np.flatnonzero(B > 0)
        events = [_extinction_event(i, extinction_threshold) for i in alive]
        sol = solve_ivp(
            params.dBdt,
            (t, tmax),
            B,
            method=method,
            t_eval=grid[n_done:],
            events=events or None,
            rtol=rtol,
            atol=atol,
        )
        # t and y are empty lists when no output time was reached
        seg_t = np.asarray(sol.t, dtype=float)
        seg_B = np.asarray(sol.y, dtype=float).reshape(B.size, seg_t.size).T
        if sol.status == -1:
            raise SimulationError(sol.message, float(seg_t[-1]) if seg_t.size else t)

        times.append(seg_t)
        states.append(np.clip(seg_B, 0.0, None))
        n_done += seg_t.size

        if sol.status == 0:
            break

        # An extinction stopped the integration: restart from the event
        fired = [k for k in range(len(alive)) if sol.t_events[k].size]
        t = float(sol.t_events[fired[0]][0])
        B = np.clip(sol.y_events[fired[0]][0], 0.0, None)
        B[alive[fired]] = 0.0
        B[B <= extinction_threshold] = 0.0
        for i in alive:
            if B[i] == 0.0:
                extinctions[web.species[i]] = t
                log(f"{web.species[i]} went extinct at t={t:.4g}")

    solution = Solution(
        t=np.concatenate(times),
        B=np.vstack(states),
        params=params,
        extinction_threshold=extinction_threshold,
        extinctions=extinctions,
    )
    log(
        f"Simulated {web.richness} species up to t={tmax:g}; "
        f"{len(extinctions)} extinction(s)"
    )
    return solution
