"""
Bio-energetic food-web model parameters.

The model follows Yodzis & Innes (1992) as parameterised by Brose et al.
(2006). The biomass of each species changes as

.. math::

    \\frac{dB_i}{dt} = r_i G_i B_i
        + x_i y B_i \\sum_j e_{ij} F_{ij}
        - x_i B_i
        - \\sum_k x_k y B_k F_{ki}

where :math:`G_i` is the logistic net growth of producers (set by the
:class:`Environment`), :math:`F_{ij}` the bio-energetic functional response
and :math:`r_i`, :math:`x_i` the producer growth and consumer metabolic
rates (:class:`BioRates`).

Example
-------
    >>> from befw.foodweb import FoodWeb
    >>> from befw.model import BioenergeticResponse, Environment, ModelParameters
    >>> web = FoodWeb([[0, 0], [0, 0]])
    >>> params = ModelParameters(
    ...     web,
    ...     environment=Environment(web, K=10.0),
    ...     functional_response=BioenergeticResponse(web, h=2.0),
    ... )
    >>> params.environment.productivity
    'system'
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike

from befw.allometry import allometric_rate
from befw.config.exceptions import ValidationError
from befw.config.parameters import parameter, validate_parameters
from befw.foodweb import FoodWeb

__all__ = [
    "BioRates",
    "BioenergeticResponse",
    "Environment",
    "ModelParameters",
]

PRODUCTIVITY_CHOICES = ["system", "species"]


def _validate(instance: object) -> None:
    errors = validate_parameters(instance)
    if errors:
        msg = f"Invalid parameters: {errors}"
        raise ValidationError(msg)


@dataclass(frozen=True, eq=False)
class Environment:
    """Carrying capacity and competition between producers.

    With a system-wide carrying capacity all producers share a single K and
    the logistic term uses the competition-weighted sum of producer biomass,
    so that the producers together settle at K in the absence of consumers.
    With species-specific capacities each producer only competes with itself
    and settles at its own K_i.

    Attributes
    ----------
    foodweb : FoodWeb
        Food web the environment applies to
    K : float | array-like
        Carrying capacity. An array gives one value per species (consumer
        entries are ignored) or one value per producer.
    alpha : float
        Intra-specific relative to inter-specific competition between
        producers (system-wide K only). Below 1 intra-specific competition
        is weaker.
    productivity : str | None
        "system" or "species". Inferred from the shape of K when omitted.
    """

    foodweb: FoodWeb
    K: float | ArrayLike = parameter(
        default=1.0,
        unit="g m^-2",
        description="Carrying capacity of producers",
        range=(0.0, np.inf),
    )
    alpha: float = parameter(
        default=1.0,
        unit="dimensionless",
        description="Intra-specific relative to inter-specific competition",
        range=(0.0, 10.0),
        typical_range=(0.5, 1.5),
    )
    productivity: str | None = parameter(
        default=None,
        description="Whether K is shared by all producers or species-specific",
        choices=PRODUCTIVITY_CHOICES,
    )
    _K: np.ndarray = field(init=False, repr=False)
    _competition: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        _validate(self)
        producers = self.foodweb.producers
        n_producers = int(producers.sum())
        scalar = np.ndim(self.K) == 0

        productivity = self.productivity
        if productivity is None:
            productivity = "system" if scalar else "species"
        elif productivity == "system" and not scalar:
            msg = "A system-wide carrying capacity must be a scalar"
            raise ValidationError(msg)

        if productivity == "system":
            K = np.asarray(float(self.K))
            competition = np.ones((n_producers, n_producers))
            np.fill_diagonal(competition, self.alpha)
        else:
            K = self._species_capacity(producers)
            competition = np.eye(n_producers)

        if np.any(K <= 0):
            msg = f"Producer carrying capacities must be positive, got {self.K}"
            raise ValidationError(msg)

        object.__setattr__(self, "productivity", productivity)
        object.__setattr__(self, "_K", K)
        object.__setattr__(self, "_competition", competition)

    def _species_capacity(self, producers: np.ndarray) -> np.ndarray:
        if np.ndim(self.K) == 0:
            return np.full(int(producers.sum()), float(self.K))
        K = np.asarray(self.K, dtype=float)
        if K.ndim == 1 and K.size == self.foodweb.richness:
            return K[producers]
        if K.ndim == 1 and K.size == producers.sum():
            return K
        msg = (
            f"Expected {self.foodweb.richness} or {int(producers.sum())} "
            f"carrying capacities, got shape {K.shape}"
        )
        raise ValidationError(msg)

    @property
    def carrying_capacity(self) -> float | np.ndarray:
        """System K, or one K per producer."""
        if self.productivity == "system":
            return float(self._K)
        return self._K.copy()

    def growth(self, B: np.ndarray) -> np.ndarray:
        """
        Logistic net growth G of every species.

        Parameters
        ----------
        B
            Biomass, either one vector or a (time, species) matrix

        Returns
        -------
        numpy.ndarray
            Same shape as ``B``; consumer entries are 0
        """
        B = np.asarray(B, dtype=float)
        producers = self.foodweb.producers
        G = np.zeros_like(B)
        competitors = B[..., producers] @ self._competition.T
        G[..., producers] = 1 - competitors / self._K
        return G


@dataclass(frozen=True, eq=False)
class BioenergeticResponse:
    """Bio-energetic functional response.

    .. math::

        F_{ij} = \\frac{\\omega_{ij} B_j^h}
            {B_0^h + c B_i B_0^h + \\sum_k \\omega_{ik} B_k^h}

    Preferences :math:`\\omega_{ij}` are uniform over the prey of i.

    Attributes
    ----------
    foodweb : FoodWeb
        Food web the response applies to
    h : float
        Hill exponent. 1 gives a type II response, 2 a type III response.
    B0 : float
        Half-saturation density
    c : float
        Intensity of predator interference
    y : float
        Maximum consumption rate relative to metabolism
    e_herbivore : float
        Assimilation efficiency when eating producers
    e_carnivore : float
        Assimilation efficiency when eating consumers
    """

    foodweb: FoodWeb
    h: float = parameter(
        default=2.0,
        unit="dimensionless",
        description="Hill exponent (1 = type II, 2 = type III)",
        range=(1.0, 3.0),
        source="Williams & Martinez (2004)",
    )
    B0: float = parameter(
        default=0.5,
        unit="g m^-2",
        description="Half-saturation density",
        range=(0.0, 100.0),
        source="Brose et al. (2006)",
    )
    c: float = parameter(
        default=0.0,
        unit="m^2 g^-1",
        description="Predator interference",
        range=(0.0, 10.0),
    )
    y: float = parameter(
        default=8.0,
        unit="dimensionless",
        description="Maximum consumption rate relative to metabolic rate",
        range=(0.0, 100.0),
        source="Brose et al. (2006), invertebrates",
    )
    e_herbivore: float = parameter(
        default=0.45,
        unit="dimensionless",
        description="Assimilation efficiency of herbivory",
        range=(0.0, 1.0),
        source="Yodzis & Innes (1992)",
    )
    e_carnivore: float = parameter(
        default=0.85,
        unit="dimensionless",
        description="Assimilation efficiency of carnivory",
        range=(0.0, 1.0),
        source="Yodzis & Innes (1992)",
    )
    omega: np.ndarray = field(init=False, repr=False)
    efficiency: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        _validate(self)
        A = self.foodweb.A.astype(float)
        n_prey = A.sum(axis=1, keepdims=True)
        omega = np.divide(A, n_prey, out=np.zeros_like(A), where=n_prey > 0)
        efficiency = np.where(
            self.foodweb.producers[None, :], self.e_herbivore, self.e_carnivore
        ) * A
        object.__setattr__(self, "omega", omega)
        object.__setattr__(self, "efficiency", efficiency)

    def consumption(self, B: np.ndarray) -> np.ndarray:
        """
        Matrix of functional responses F[i, j] for a biomass vector.

        Parameters
        ----------
        B
            Non-negative biomass vector

        Returns
        -------
        numpy.ndarray
            S x S matrix, zero outside the links of the food web
        """
        Bh = B**self.h
        B0h = self.B0**self.h
        denominator = B0h * (1 + self.c * B) + self.omega @ Bh
        return self.omega * Bh[None, :] / denominator[:, None]


@dataclass(frozen=True, eq=False)
class BioRates:
    """Producer growth and consumer metabolic rates.

    Rates that are not given are derived from body mass with quarter-power
    allometry, ``a * M ** -0.25``. Producers have no metabolic loss and
    consumers do not grow on their own.

    Attributes
    ----------
    foodweb : FoodWeb
        Food web the rates apply to
    r : float | array-like | None
        Producer intrinsic growth rate (scalar or one per species)
    x : float | array-like | None
        Consumer metabolic rate (scalar or one per species)
    a_r : float
        Allometric constant of producer growth
    a_x : float
        Allometric constant of consumer metabolism
    """

    foodweb: FoodWeb
    r: float | ArrayLike | None = parameter(
        default=None,
        unit="yr^-1",
        description="Producer intrinsic growth rate",
        range=(0.0, 100.0),
    )
    x: float | ArrayLike | None = parameter(
        default=None,
        unit="yr^-1",
        description="Consumer mass-specific metabolic rate",
        range=(0.0, 100.0),
    )
    a_r: float = parameter(
        default=1.0,
        unit="dimensionless",
        description="Allometric constant of producer growth",
        range=(0.0, 100.0),
    )
    a_x: float = parameter(
        default=0.314,
        unit="dimensionless",
        description="Allometric constant of consumer metabolism",
        range=(0.0, 100.0),
        source="Brose et al. (2006), invertebrates",
    )
    growth_rate: np.ndarray = field(init=False, repr=False)
    metabolic_rate: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        _validate(self)
        web = self.foodweb
        mass = web.body_mass
        r = allometric_rate(mass, self.a_r) if self.r is None else self._expand(self.r)
        x = allometric_rate(mass, self.a_x) if self.x is None else self._expand(self.x)
        object.__setattr__(self, "growth_rate", np.where(web.producers, r, 0.0))
        object.__setattr__(self, "metabolic_rate", np.where(web.consumers, x, 0.0))

    def _expand(self, value: float | ArrayLike) -> np.ndarray:
        S = self.foodweb.richness
        return np.broadcast_to(np.asarray(value, dtype=float), (S,)).copy()


@dataclass(frozen=True, eq=False)
class ModelParameters:
    """Complete parameter bundle for one simulation.

    Components that are not given are built with their defaults from the
    food web. All components must refer to the same food web.

    Attributes
    ----------
    foodweb : FoodWeb
        Community topology
    environment : Environment
        Carrying capacity and producer competition
    functional_response : BioenergeticResponse
        Consumption model
    biorates : BioRates
        Growth and metabolic rates
    """

    foodweb: FoodWeb
    environment: Environment | None = None
    functional_response: BioenergeticResponse | None = None
    biorates: BioRates | None = None

    def __post_init__(self) -> None:
        defaults = {
            "environment": Environment,
            "functional_response": BioenergeticResponse,
            "biorates": BioRates,
        }
        for name, factory in defaults.items():
            component = getattr(self, name)
            if component is None:
                object.__setattr__(self, name, factory(self.foodweb))
            elif component.foodweb is not self.foodweb:
                msg = f"The {name} was built for a different food web"
                raise ValidationError(msg)

    def dBdt(self, t: float, B: np.ndarray) -> np.ndarray:  # noqa: ARG002
        """Right-hand side of the biomass dynamics."""
        B = np.clip(B, 0.0, None)
        F = self.functional_response.consumption(B)
        r = self.biorates.growth_rate
        x = self.biorates.metabolic_rate
        intake = x * self.functional_response.y * B

        growth = r * self.environment.growth(B) * B
        eating = intake * (self.functional_response.efficiency * F).sum(axis=1)
        metabolism = x * B
        being_eaten = (intake[:, None] * F).sum(axis=0)
        return growth + eating - metabolism - being_eaten

    def net_growth(self, B: np.ndarray) -> np.ndarray:
        """Per-capita producer net growth ``r_i G_i`` (0 for consumers)."""
        return self.biorates.growth_rate * self.environment.growth(B)
