"""
befw configuration layer.

This module provides file-based configuration for enrichment experiments:
- TOML config files describing the food web, the model and the sweep
- Layered configuration (defaults -> experiment overrides)
- Structured parameter metadata with validation

Example:
    >>> from befw.config import load_experiment, run_sweep
    >>> config = load_experiment("configs/enrichment.toml")
    >>> df = run_sweep(config)
"""

from __future__ import annotations

from .base import (
    EnrichmentConfig,
    EnvironmentConfig,
    FoodWebConfig,
    ResponseConfig,
    SimulationConfig,
    SweepConfig,
)
from .builder import build_foodweb, build_initial_biomass, run_sweep
from .exceptions import (
    BEFWError,
    ConfigError,
    FoodWebError,
    IncompatibleSchemaError,
    ModelNotFoundError,
    SimulationError,
    ValidationError,
)
from .loader import deep_merge, load_config, load_config_layers, load_experiment
from .parameters import (
    ParameterMetadata,
    get_parameter_metadata,
    parameter,
    validate_parameters,
)
from .registry import ModelRegistry, model_registry, register_model
from .validation import SCHEMA_VERSION, check_schema_version

__all__ = [
    "SCHEMA_VERSION",
    "BEFWError",
    "ConfigError",
    "EnrichmentConfig",
    "EnvironmentConfig",
    "FoodWebConfig",
    "FoodWebError",
    "IncompatibleSchemaError",
    "ModelNotFoundError",
    "ModelRegistry",
    "ParameterMetadata",
    "ResponseConfig",
    "SimulationConfig",
    "SimulationError",
    "SweepConfig",
    "ValidationError",
    "build_foodweb",
    "build_initial_biomass",
    "check_schema_version",
    "deep_merge",
    "get_parameter_metadata",
    "load_config",
    "load_config_layers",
    "load_experiment",
    "model_registry",
    "parameter",
    "register_model",
    "run_sweep",
    "validate_parameters",
]
