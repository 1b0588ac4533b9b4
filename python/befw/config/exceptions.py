"""
Custom exceptions for befw.

This module defines the exception hierarchy used across the package:
- BEFWError: Base exception for everything raised by befw
- ConfigError: Base exception for configuration errors
- ValidationError: Type mismatches, missing fields, out-of-range values
- IncompatibleSchemaError: Schema version mismatch
- ModelNotFoundError: Structural food-web model not in registry
- FoodWebError: Invalid or unobtainable food-web topology
- SimulationError: The ODE integration failed
"""

from __future__ import annotations

__all__ = [
    "BEFWError",
    "ConfigError",
    "FoodWebError",
    "IncompatibleSchemaError",
    "ModelNotFoundError",
    "SimulationError",
    "ValidationError",
]


class BEFWError(Exception):
    """Base exception for all befw errors."""

    pass


class ConfigError(BEFWError):
    """Base exception for all configuration errors."""

    pass


class ValidationError(ConfigError, ValueError):
    """
    Raised for validation failures.

    This includes shape mismatches, missing required fields, and out-of-range
    values in model parameters or configuration files.
    """

    pass


class IncompatibleSchemaError(ConfigError):
    """
    Raised when configuration schema version is incompatible with the loader.

    Parameters
    ----------
    config_version
        The version string from the configuration file.
    loader_version
        The version string supported by this loader.
    """

    def __init__(self, config_version: str, loader_version: str) -> None:
        message = (
            f"Incompatible schema version: config has version {config_version}, "
            f"but loader supports version {loader_version}."
        )
        super().__init__(message)
        self.config_version = config_version
        self.loader_version = loader_version


class ModelNotFoundError(ConfigError):
    """
    Raised when a structural food-web model is not found in the registry.

    Parameters
    ----------
    name
        The model name that was not found.
    available
        List of available model names in the registry.
    """

    def __init__(self, name: str, available: list[str]) -> None:
        if not available:
            message = f"Food-web model '{name}' not found. No models are registered."
        else:
            available_str = ", ".join(f"'{m}'" for m in sorted(available))
            message = (
                f"Food-web model '{name}' not found. Available models: {available_str}"
            )
        super().__init__(message)
        self.name = name
        self.available = available


class FoodWebError(BEFWError):
    """Raised when a food-web topology is invalid or cannot be generated."""

    pass


class SimulationError(BEFWError):
    """
    Raised when the integrator fails before reaching the time horizon.

    Parameters
    ----------
    message
        Solver message.
    t
        Time reached before the failure.
    """

    def __init__(self, message: str, t: float) -> None:
        super().__init__(f"Simulation failed at t={t:g}: {message}")
        self.t = t
