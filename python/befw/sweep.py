"""
Enrichment experiments: sweeping the carrying capacity.

For every carrying capacity in a range the same food web is simulated from
the same initial biomass and the last output times are summarised into a
:class:`SummaryRecord`.

Example
-------
    >>> import numpy as np
    >>> from befw.foodweb import FoodWeb
    >>> from befw.sweep import records_to_dataframe, sweep_carrying_capacity
    >>> rng = np.random.default_rng(123)
    >>> web = FoodWeb.from_model("niche", S=10, C=0.15, rng=rng)
    >>> B0 = rng.uniform(size=web.richness)
    >>> records = sweep_carrying_capacity(web, np.arange(1.0, 41.0), B0)
    >>> df = records_to_dataframe(records)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from befw.config.exceptions import BEFWError, ValidationError
from befw.foodweb import FoodWeb
from befw.metrics import (
    population_stability,
    producer_growth,
    species_persistence,
    total_biomass,
)
from befw.model import BioenergeticResponse, Environment, ModelParameters
from befw.simulate import Solution, simulate

logger = logging.getLogger(__name__)

__all__ = [
    "ON_ERROR_CHOICES",
    "SummaryRecord",
    "records_to_dataframe",
    "summarise",
    "sweep_carrying_capacity",
]

ON_ERROR_CHOICES = ("raise", "skip")


@dataclass(frozen=True)
class SummaryRecord:
    """
    Summary of one simulation of the sweep.

    Attributes
    ----------
    B : float
        Mean total biomass
    P : float
        Species persistence
    G : float
        Summed mean producer net growth
    K : float
        Carrying capacity of the run
    S : float
        Population stability (negative mean coefficient of variation)
    """

    B: float
    P: float
    G: float
    K: float
    S: float

    @classmethod
    def failed(cls, K: float) -> SummaryRecord:
        """Record for a run that raised, with NaN statistics."""
        nan = float("nan")
        return cls(B=nan, P=nan, G=nan, K=K, S=nan)


def summarise(solution: Solution, K: float, last: int = 100) -> SummaryRecord:
    """Summarise a solution over its last ``last`` output times."""
    return SummaryRecord(
        B=total_biomass(solution, last=last),
        P=species_persistence(solution, last=last),
        G=float(np.sum(producer_growth(solution, last=last, out_type="mean").G)),
        K=float(K),
        S=population_stability(solution, last=last),
    )


def _check_range(K_range: ArrayLike) -> np.ndarray:
    K = np.asarray(K_range, dtype=float)
    if K.ndim != 1 or K.size == 0:
        msg = "The carrying-capacity range must be a non-empty 1D sequence"
        raise ValidationError(msg)
    if not np.all(np.isfinite(K)) or np.any(K <= 0):
        msg = "Carrying capacities must be finite and positive"
        raise ValidationError(msg)
    if np.any(np.diff(K) < 0):
        msg = "The carrying-capacity range must be in ascending order"
        raise ValidationError(msg)
    return K


def _check_window(tmax: float, dt: float, last: int) -> None:
    if tmax <= 0 or dt <= 0:
        msg = f"tmax and dt must be positive, got tmax={tmax}, dt={dt}"
        raise ValidationError(msg)
    n_steps = int(np.floor(tmax / dt + 1e-9)) + 1
    if not 1 <= last <= n_steps:
        msg = (
            f"last ({last}) must be between 1 and the number of output "
            f"times ({n_steps})"
        )
        raise ValidationError(msg)


def sweep_carrying_capacity(  # noqa: PLR0913
    foodweb: FoodWeb,
    K_range: Sequence[float] | ArrayLike,
    B0: ArrayLike,
    tmax: float = 500,
    last: int = 100,
    h: float = 2.0,
    alpha: float = 1.0,
    productivity: str | None = None,
    functional_response: BioenergeticResponse | None = None,
    on_error: str = "raise",
    progress: Callable[[int, float], None] | None = None,
    **simulate_kwargs: Any,
) -> list[SummaryRecord]:
    """
    Simulate a food web along a range of system-wide carrying capacities.

    Parameters
    ----------
    foodweb
        Food web, shared by every run
    K_range
        Finite, ascending, positive carrying capacities
    B0
        Initial biomass, shared by every run
    tmax
        Time horizon of each run
    last
        Number of final output times summarised
    h
        Hill exponent of the functional response
    alpha
        Intra- relative to inter-specific producer competition
    productivity
        "system" (default) to share K between producers, "species" to give
        every producer its own K
    functional_response
        Response shared by every run; overrides ``h`` when given
    on_error
        "raise" to stop at the first failing run, "skip" to log the error
        and record NaN statistics for that carrying capacity
    progress
        Called with ``(index, K)`` before each run
    **simulate_kwargs
        Passed on to :func:`befw.simulate.simulate`

    Returns
    -------
    list[SummaryRecord]
        One record per carrying capacity, in the order of ``K_range``
    """
    if on_error not in ON_ERROR_CHOICES:
        msg = f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}"
        raise ValueError(msg)
    K_values = _check_range(K_range)
    _check_window(tmax, simulate_kwargs.get("dt", 1.0), last)
    response = functional_response
    if response is None:
        response = BioenergeticResponse(foodweb, h=h)

    records = []
    for index, K in enumerate(K_values):
        if progress is not None:
            progress(index, float(K))
        logger.info(f"Enrichment run {index + 1}/{K_values.size}: K={K:g}")

        try:
            params = ModelParameters(
                foodweb,
                environment=Environment(
                    foodweb, K=float(K), alpha=alpha, productivity=productivity
                ),
                functional_response=response,
            )
            solution = simulate(params, B0, tmax=tmax, **simulate_kwargs)
            record = summarise(solution, K, last=last)
        except BEFWError as err:
            if on_error == "raise":
                raise
            logger.error(f"Run with K={K:g} failed, recording NaN: {err}")
            record = SummaryRecord.failed(float(K))
        records.append(record)

    return records


def records_to_dataframe(records: Sequence[SummaryRecord]) -> pd.DataFrame:
    """Tabulate summary records, one row per run in sweep order."""
    columns = ["B", "P", "G", "K", "S"]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)
