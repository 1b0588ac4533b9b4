"""
Food-web topology.

A :class:`FoodWeb` is an immutable predator/prey structure over a fixed set
of species, stored as an adjacency matrix where ``A[i, j] == 1`` means that
species *i* eats species *j*. Species without prey are producers.

Topologies can be given explicitly or sampled from a registered structural
model:

    >>> from befw.foodweb import FoodWeb
    >>> web = FoodWeb([[0, 0], [0, 0]])  # two producers, no consumer
    >>> web.producers
    array([ True,  True])
    >>> web = FoodWeb.from_model("niche", S=10, C=0.15, rng=123)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from scipy.sparse.csgraph import connected_components

from befw.config.exceptions import FoodWebError
from befw.config.registry import model_registry, register_model

logger = logging.getLogger(__name__)

__all__ = ["FoodWeb", "cascade_model", "niche_model"]

DEFAULT_MAX_ATTEMPTS = 10_000


@dataclass(frozen=True, eq=False)
class FoodWeb:
    """
    Predator/prey structure of a community.

    Parameters
    ----------
    A
        Square binary adjacency matrix, ``A[i, j] == 1`` if i eats j
    species
        Species names (defaults to ``s1 ... sS``)
    Z
        Predator-prey body-mass ratio used to derive body masses from
        trophic levels

    Raises
    ------
    FoodWebError
        If the matrix is not square and binary or the names do not match
    """

    A: np.ndarray
    species: tuple[str, ...] | None = None
    Z: float = 1.0
    _trophic_levels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        A = np.array(self.A)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:  # noqa: PLR2004
            msg = f"Adjacency matrix must be square, got shape {A.shape}"
            raise FoodWebError(msg)
        if A.shape[0] == 0:
            msg = "A food web needs at least one species"
            raise FoodWebError(msg)
        if not np.isin(A, (0, 1)).all():
            msg = "Adjacency matrix must only contain 0 and 1"
            raise FoodWebError(msg)
        A = A.astype(int)
        A.setflags(write=False)

        if self.species is None:
            species = tuple(f"s{i + 1}" for i in range(A.shape[0]))
        else:
            species = tuple(str(s) for s in self.species)
        if len(species) != A.shape[0]:
            msg = (
                f"Got {len(species)} species names for a web of "
                f"{A.shape[0]} species"
            )
            raise FoodWebError(msg)
        if len(set(species)) != len(species):
            msg = "Species names must be unique"
            raise FoodWebError(msg)
        if self.Z <= 0:
            msg = f"Body-mass ratio Z must be positive, got {self.Z}"
            raise FoodWebError(msg)

        object.__setattr__(self, "A", A)
        object.__setattr__(self, "species", species)
        object.__setattr__(self, "_trophic_levels", _trophic_levels(A))

    @classmethod
    def from_model(  # noqa: PLR0913
        cls,
        name: str,
        S: int,
        C: float,
        rng: np.random.Generator | int | None = None,
        tol: float | None = None,
        Z: float = 1.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> FoodWeb:
        """
        Sample a food web from a registered structural model.

        Samples are redrawn until the connectance is within ``tol`` of ``C``,
        every species is linked to at least one other species, the web is a
        single connected component and every consumer feeds, directly or
        not, on a producer.

        Parameters
        ----------
        name
            Registered model name (e.g. "niche", "cascade")
        S
            Species richness
        C
            Target connectance (links / S^2)
        rng
            Random generator or seed
        tol
            Accepted absolute deviation from ``C`` (default ``0.1 * C``)
        Z
            Predator-prey body-mass ratio
        max_attempts
            Number of samples drawn before giving up

        Raises
        ------
        ModelNotFoundError
            If ``name`` is not registered
        FoodWebError
            If no acceptable web was sampled within ``max_attempts``
        """
        sampler = model_registry.get(name)
        rng = np.random.default_rng(rng)
        if tol is None:
            tol = 0.1 * C

        for attempt in range(1, max_attempts + 1):
            A = sampler(S, C, rng)
            if abs(A.sum() / S**2 - C) > tol:
                continue
            if not _is_valid_topology(A):
                continue
            logger.debug(f"Sampled {name} food web after {attempt} attempt(s)")
            return cls(A, Z=Z)

        msg = (
            f"Could not sample a valid {name} food web with S={S}, C={C} "
            f"(tol={tol}) in {max_attempts} attempts"
        )
        raise FoodWebError(msg)

    @property
    def richness(self) -> int:
        """Number of species."""
        return self.A.shape[0]

    @property
    def producers(self) -> np.ndarray:
        """Boolean mask of species without prey."""
        return self.A.sum(axis=1) == 0

    @property
    def consumers(self) -> np.ndarray:
        """Boolean mask of species with at least one prey."""
        return ~self.producers

    @property
    def connectance(self) -> float:
        """Number of links divided by the squared richness."""
        return float(self.A.sum() / self.richness**2)

    @property
    def trophic_levels(self) -> np.ndarray:
        """Prey-averaged trophic levels (producers are at level 1)."""
        return self._trophic_levels.copy()

    @property
    def body_mass(self) -> np.ndarray:
        """Body masses ``Z ** (TL - 1)``, relative to producers."""
        return self.Z ** (self._trophic_levels - 1)

    def prey(self, species: int | str) -> list[str]:
        """Names of the prey of a species."""
        i = self.index(species)
        return [self.species[j] for j in np.flatnonzero(self.A[i])]

    def index(self, species: int | str) -> int:
        """Position of a species, given by name or index."""
        if isinstance(species, str):
            try:
                return self.species.index(species)
            except ValueError as err:
                msg = f"Unknown species {species!r}"
                raise KeyError(msg) from err
        return int(species)

    def __repr__(self) -> str:
        n_producers = int(self.producers.sum())
        return (
            f"FoodWeb(S={self.richness}, L={int(self.A.sum())}, "
            f"producers={n_producers}, consumers={self.richness - n_producers})"
        )


def _trophic_levels(A: np.ndarray) -> np.ndarray:
    n_prey = A.sum(axis=1)
    D = np.divide(A, n_prey[:, None], out=np.zeros(A.shape), where=n_prey[:, None] > 0)
    try:
        return np.linalg.solve(np.eye(A.shape[0]) - D, np.ones(A.shape[0]))
    except np.linalg.LinAlgError as err:
        msg = "Trophic levels are undefined: some consumers cannot reach a producer"
        raise FoodWebError(msg) from err


def _is_valid_topology(A: np.ndarray) -> bool:
    S = A.shape[0]
    off_diagonal = A * (1 - np.eye(S, dtype=int))
    linked = (off_diagonal.sum(axis=0) + off_diagonal.sum(axis=1)) > 0
    if S > 1 and not linked.all():
        return False

    n_components, _ = connected_components(A, directed=True, connection="weak")
    if n_components != 1:
        return False

    reaches_producer = A.sum(axis=1) == 0
    if not reaches_producer.any():
        return False
    while True:
        updated = reaches_producer | (A[:, reaches_producer].sum(axis=1) > 0)
        if (updated == reaches_producer).all():
            break
        reaches_producer = updated
    return bool(reaches_producer.all())


def _check_connectance(C: float, upper: float) -> None:
    if not 0 < C < upper:
        msg = f"Connectance must be in (0, {upper}), got {C}"
        raise FoodWebError(msg)


@register_model("niche")
def niche_model(S: int, C: float, rng: np.random.Generator) -> np.ndarray:
    """
    Sample an adjacency matrix from the niche model.

    Williams, R. J., & Martinez, N. D. (2000). Simple rules yield complex
    food webs. Nature, 404(6774), 180-183.

    Species are ordered by niche value. The species with the lowest niche
    value has a null feeding range and is always a producer.
    """
    _check_connectance(C, 0.5)
    n = np.sort(rng.uniform(size=S))
    beta = 1 / (2 * C) - 1
    r = n * rng.beta(1, beta, size=S)
    r[0] = 0.0
    c = rng.uniform(r / 2, np.minimum(n, 1 - r / 2))

    lower = (c - r / 2)[:, None]
    upper = (c + r / 2)[:, None]
    A = (n[None, :] >= lower) & (n[None, :] <= upper)
    A[0] = False
    return A.astype(int)


@register_model("cascade")
def cascade_model(S: int, C: float, rng: np.random.Generator) -> np.ndarray:
    """
    Sample an adjacency matrix from the cascade model.

    Cohen, J. E., & Newman, C. M. (1985). A stochastic theory of community
    food webs I. Proc. R. Soc. Lond. B, 224(1237), 421-448.

    Species only feed on lower-ranked species, each such link being drawn
    with probability ``2 C S / (S - 1)``.
    """
    _check_connectance(C, 1.0)
    p = min(1.0, 2 * C * S / max(S - 1, 1))
    draws = rng.uniform(size=(S, S)) < p
    return np.tril(draws, k=-1).astype(int)
