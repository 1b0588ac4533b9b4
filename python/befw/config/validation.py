"""
Checks applied to experiment files before they are turned into configs.

Experiment files declare the schema they were written for in
``[schema] version``. Files from another major version are rejected; a
newer minor version is read with a warning. Keys that the loader does not
know about are reported rather than silently dropped.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from .exceptions import IncompatibleSchemaError, ValidationError

logger = logging.getLogger(__name__)

__all__ = [
    "SCHEMA_VERSION",
    "SchemaVersion",
    "check_schema_version",
    "check_section_keys",
    "find_unknown_keys",
    "parse_semver",
]

SCHEMA_VERSION = "1.0.0"
"""Experiment file schema understood by this release."""


class SchemaVersion(NamedTuple):
    """``MAJOR.MINOR.PATCH`` version of an experiment file schema."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, version: str) -> SchemaVersion:
        """
        Parse a ``MAJOR.MINOR.PATCH`` string.

        Raises
        ------
        ValueError
            If the string does not have three integer components
        """
        parts = version.split(".")
        if len(parts) != len(cls._fields):
            msg = f"Invalid semver format: '{version}' (expected 'MAJOR.MINOR.PATCH')"
            raise ValueError(msg)
        try:
            return cls(*(int(part) for part in parts))
        except ValueError as err:
            msg = f"Invalid semver format: '{version}' (non-integer component)"
            raise ValueError(msg) from err


def parse_semver(version: str) -> SchemaVersion:
    """
    Parse a semantic version string.

    >>> parse_semver("1.2.3")
    SchemaVersion(major=1, minor=2, patch=3)
    """
    return SchemaVersion.parse(version)


def check_schema_version(
    config_version: str, loader_version: str = SCHEMA_VERSION
) -> None:
    """
    Check that an experiment file can be read by this release.

    Parameters
    ----------
    config_version
        ``[schema] version`` of the experiment file
    loader_version
        Schema version understood by the loader

    Raises
    ------
    IncompatibleSchemaError
        If the major versions differ
    ValueError
        If either version is not valid semver
    """
    config = SchemaVersion.parse(config_version)
    loader = SchemaVersion.parse(loader_version)

    if config.major != loader.major:
        raise IncompatibleSchemaError(config_version, loader_version)

    if config.minor > loader.minor:
        logger.warning(
            f"Configuration schema version {config_version} is newer than "
            f"loader version {loader_version}. Some features may not be supported."
        )


def find_unknown_keys(data: dict[str, Any], known_keys: set[str]) -> list[str]:
    """
    Sorted keys of ``data`` that are not in ``known_keys``.

    >>> find_unknown_keys({"foodweb": {}, "plotting": {}}, {"foodweb"})
    ['plotting']
    """
    return sorted(set(data) - set(known_keys))


def check_section_keys(section: str, values: dict[str, Any], known: set[str]) -> None:
    """
    Reject misspelt keys inside an experiment file section.

    Raises
    ------
    ValidationError
        If ``values`` has keys outside ``known``
    """
    unknown = find_unknown_keys(values, known)
    if unknown:
        msg = f"Unknown keys in [{section}]: {', '.join(unknown)}"
        raise ValidationError(msg)
