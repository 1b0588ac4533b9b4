"""
Configuration dataclasses for enrichment experiments.

One dataclass per TOML section:
- FoodWebConfig: structural model used to sample the food web
- ResponseConfig: functional response
- EnvironmentConfig: producer competition
- SimulationConfig: time horizon and summary window
- SweepConfig: range of carrying capacities
- EnrichmentConfig: the complete experiment
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np

from .exceptions import ValidationError
from .parameters import parameter, validate_parameters
from .validation import SCHEMA_VERSION, check_schema_version, check_section_keys

__all__ = [
    "EnrichmentConfig",
    "EnvironmentConfig",
    "FoodWebConfig",
    "ResponseConfig",
    "SimulationConfig",
    "SweepConfig",
]


def _validate(instance: Any) -> None:
    errors = validate_parameters(instance)
    if errors:
        msg = f"Invalid {type(instance).__name__}: {errors}"
        raise ValidationError(msg)


@dataclass
class FoodWebConfig:
    """Structural model and size of the sampled food web."""

    model: str = "niche"
    S: int = parameter(
        default=10,
        unit="species",
        description="Species richness",
        range=(1, 1000),
    )
    C: float = parameter(
        default=0.15,
        unit="dimensionless",
        description="Target connectance (links / S^2)",
        range=(0.0, 1.0),
        typical_range=(0.05, 0.3),
    )
    seed: int | None = None
    """Seed of the generator used for the food web and the initial biomass."""

    Z: float = parameter(
        default=1.0,
        unit="dimensionless",
        description="Predator-prey body-mass ratio",
        range=(0.0, 1e6),
    )

    def __post_init__(self) -> None:
        _validate(self)


@dataclass
class ResponseConfig:
    """Bio-energetic functional response settings."""

    h: float = parameter(
        default=2.0,
        unit="dimensionless",
        description="Hill exponent (1 = type II, 2 = type III)",
        range=(1.0, 3.0),
    )
    B0: float = parameter(
        default=0.5,
        unit="g m^-2",
        description="Half-saturation density",
        range=(0.0, 100.0),
    )
    c: float = parameter(
        default=0.0,
        unit="m^2 g^-1",
        description="Predator interference",
        range=(0.0, 10.0),
    )

    def __post_init__(self) -> None:
        _validate(self)


@dataclass
class EnvironmentConfig:
    """Competition between producers."""

    alpha: float = parameter(
        default=1.0,
        unit="dimensionless",
        description="Intra-specific relative to inter-specific competition",
        range=(0.0, 10.0),
    )
    productivity: str = parameter(
        default="system",
        description="Whether K is shared by all producers or species-specific",
        choices=["system", "species"],
    )

    def __post_init__(self) -> None:
        _validate(self)


@dataclass
class SimulationConfig:
    """
    Time horizon of each run.

    Raises
    ------
    ValidationError
        If the summary window is longer than the simulated trajectory
    """

    tmax: float = parameter(default=500.0, unit="time", range=(0.0, 1e7))
    dt: float = parameter(default=1.0, unit="time", range=(0.0, 1e7))
    last: int = parameter(
        default=100,
        unit="output steps",
        description="Number of final output times summarised",
        range=(1, 1e7),
    )
    extinction_threshold: float = parameter(
        default=1e-5, unit="g m^-2", range=(0.0, 1.0)
    )

    def __post_init__(self) -> None:
        _validate(self)
        if self.dt <= 0 or self.tmax <= 0:
            msg = f"tmax ({self.tmax}) and dt ({self.dt}) must be positive"
            raise ValidationError(msg)
        n_steps = int(np.floor(self.tmax / self.dt + 1e-9)) + 1
        if self.last > n_steps:
            msg = (
                f"last ({self.last}) must not exceed the number of output "
                f"times ({n_steps})"
            )
            raise ValidationError(msg)


@dataclass
class SweepConfig:
    """
    Range of carrying capacities, from ``K_start`` to ``K_stop`` inclusive.

    Raises
    ------
    ValidationError
        If the bounds are not positive and ascending
    """

    K_start: float = 1.0
    K_stop: float = 40.0
    K_step: float = 1.0
    on_error: str = parameter(default="raise", choices=["raise", "skip"])

    def __post_init__(self) -> None:
        _validate(self)
        if self.K_start <= 0 or self.K_step <= 0:
            msg = "K_start and K_step must be positive"
            raise ValidationError(msg)
        if self.K_stop < self.K_start:
            msg = f"K_stop ({self.K_stop}) must not be below K_start ({self.K_start})"
            raise ValidationError(msg)

    def K_range(self) -> np.ndarray:
        """
        Carrying capacities of the sweep.

        Returns
        -------
        numpy.ndarray
            ``K_start, K_start + K_step, ...`` up to ``K_stop``
        """
        n = int(np.floor((self.K_stop - self.K_start) / self.K_step + 1e-9))
        return self.K_start + self.K_step * np.arange(n + 1)


_SECTIONS = {
    "foodweb": FoodWebConfig,
    "functional_response": ResponseConfig,
    "environment": EnvironmentConfig,
    "simulation": SimulationConfig,
    "sweep": SweepConfig,
}


@dataclass
class EnrichmentConfig:
    """
    Complete configuration of an enrichment experiment.

    Parameters
    ----------
    name
        Experiment name
    config_schema
        Configuration schema version
    description
        Free text description
    foodweb
        Food-web sampling settings
    functional_response
        Functional response settings
    environment
        Producer competition settings
    simulation
        Time horizon and summary window
    sweep
        Carrying-capacity range

    Example
    -------
        >>> from befw.config import EnrichmentConfig, load_config
        >>> config = EnrichmentConfig.from_dict(load_config("configs/enrichment.toml"))
        >>> config.sweep.K_range()[:3]
        array([1., 2., 3.])
    """

    name: str = "enrichment"
    config_schema: str = SCHEMA_VERSION
    description: str = ""
    foodweb: FoodWebConfig = field(default_factory=FoodWebConfig)
    functional_response: ResponseConfig = field(default_factory=ResponseConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    sweep: SweepConfig = field(default_factory=SweepConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrichmentConfig:
        """
        Build a configuration from a TOML dictionary.

        Missing sections use their defaults. Unknown top-level sections are
        ignored (the loader already warned about them).

        Raises
        ------
        IncompatibleSchemaError
            If the schema major version is not supported
        ValidationError
            If a section contains unknown keys or invalid values
        """
        schema = data.get("schema", {})
        version = schema.get("version", SCHEMA_VERSION)
        check_schema_version(version)

        sections = {}
        for name, section_cls in _SECTIONS.items():
            values = data.get(name, {})
            check_section_keys(name, values, {f.name for f in fields(section_cls)})
            sections[name] = section_cls(**values)

        return cls(
            name=schema.get("name", "enrichment"),
            config_schema=version,
            description=schema.get("description", ""),
            **sections,
        )
