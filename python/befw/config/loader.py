"""
Reading enrichment experiments from TOML files.

An experiment can be split over several files, typically a shared defaults
file and a small per-experiment override; later files win:

    >>> from befw.config.loader import load_experiment
    >>> config = load_experiment("configs/enrichment.toml", "short.toml")
    >>> config.sweep.K_range()
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from .base import EnrichmentConfig
from .validation import find_unknown_keys

logger = logging.getLogger(__name__)

__all__ = [
    "KNOWN_SECTIONS",
    "deep_merge",
    "load_config",
    "load_config_layers",
    "load_experiment",
]

KNOWN_SECTIONS = frozenset(
    {
        "schema",
        "foodweb",
        "functional_response",
        "environment",
        "simulation",
        "sweep",
    }
)
"""Top-level tables of an experiment file."""


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge ``override`` into a copy of ``base``.

    Tables are merged key by key; any other value in ``override``, lists
    included, replaces the one in ``base``. Neither input is modified.

    >>> base = {"sweep": {"K_start": 1.0, "K_stop": 40.0}}
    >>> deep_merge(base, {"sweep": {"K_stop": 10.0}})
    {'sweep': {'K_start': 1.0, 'K_stop': 10.0}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Read one experiment file.

    Tables other than :data:`KNOWN_SECTIONS` are kept but logged as a
    warning, as they are ignored when the experiment is built.

    Parameters
    ----------
    path
        TOML file

    Returns
    -------
    dict[str, Any]
        Raw tables of the file
    """
    path = Path(path)
    with path.open("rb") as f:
        data = tomllib.load(f)

    unknown = find_unknown_keys(data, KNOWN_SECTIONS)
    if unknown:
        logger.warning(
            f"Unknown configuration keys in {path}: {', '.join(unknown)}. "
            "These will be ignored."
        )
    return data


def load_config_layers(*paths: str | Path) -> dict[str, Any]:
    """
    Read and merge several experiment files, later files taking precedence.

    Returns an empty dictionary when no path is given.
    """
    merged: dict[str, Any] = {}
    for path in paths:
        merged = deep_merge(merged, load_config(path))
    return merged


def load_experiment(*paths: str | Path) -> EnrichmentConfig:
    """
    Read, merge and validate an experiment.

    Parameters
    ----------
    *paths
        TOML files in increasing order of precedence

    Returns
    -------
    EnrichmentConfig
        Validated experiment configuration

    Raises
    ------
    IncompatibleSchemaError
        If the schema major version is not supported
    ValidationError
        If a section has unknown keys or invalid values
    """
    config = EnrichmentConfig.from_dict(load_config_layers(*paths))
    logger.debug(f"Loaded experiment {config.name!r} from {len(paths)} file(s)")
    return config
