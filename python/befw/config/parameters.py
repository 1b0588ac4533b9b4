"""
Parameter metadata for model and configuration dataclasses.

Fields declared with :func:`parameter` carry a unit, a hard validation
range, optional enum-like choices and a literature source. Components such
as :class:`befw.model.BioenergeticResponse` validate themselves against this
metadata when they are built:

    >>> from dataclasses import dataclass
    >>> from befw.config.parameters import parameter, validate_parameters
    >>> @dataclass
    ... class Response:
    ...     h: float = parameter(default=2.0, range=(1.0, 3.0))
    >>> validate_parameters(Response(h=5.0))
    ["Parameter 'h' value 5.0 is outside valid range [1.0, 3.0]"]
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields, replace
from typing import Any

import numpy as np

__all__ = [
    "ParameterMetadata",
    "get_parameter_metadata",
    "parameter",
    "validate_parameters",
]

_METADATA_KEY = "param"


@dataclass(frozen=True)
class ParameterMetadata:
    """
    Description of one model parameter.

    ``range`` is enforced by :func:`validate_parameters`; ``typical_range``
    is only guidance for users.
    """

    name: str
    unit: str | None = None
    description: str | None = None
    range: tuple[float, float] | None = None
    typical_range: tuple[float, float] | None = None
    choices: list[Any] | None = None
    source: str | None = None


def parameter(  # noqa: PLR0913
    default: Any = MISSING,
    unit: str | None = None,
    description: str | None = None,
    range: tuple[float, float] | None = None,
    typical_range: tuple[float, float] | None = None,
    choices: list[Any] | None = None,
    source: str | None = None,
) -> Any:
    """
    Dataclass field carrying :class:`ParameterMetadata`.

    Without ``default`` the field is required. The metadata name is filled
    in from the field name by :func:`get_parameter_metadata`.
    """
    meta = ParameterMetadata(
        name="",
        unit=unit,
        description=description,
        range=range,
        typical_range=typical_range,
        choices=choices,
        source=source,
    )
    kwargs: dict[str, Any] = {"metadata": {_METADATA_KEY: meta}}
    if default is not MISSING:
        kwargs["default"] = default
    return field(**kwargs)


def get_parameter_metadata(cls: type) -> dict[str, ParameterMetadata]:
    """
    Metadata of every field of ``cls`` declared with :func:`parameter`.

    Parameters
    ----------
    cls
        Dataclass type (or instance)

    Returns
    -------
    dict[str, ParameterMetadata]
        Field name to metadata, in field order
    """
    return {
        f.name: replace(f.metadata[_METADATA_KEY], name=f.name)
        for f in fields(cls)
        if _METADATA_KEY in f.metadata
    }


def _range_error(name: str, value: Any, bounds: tuple[float, float]) -> str | None:
    low, high = bounds
    values = np.asarray(value, dtype=float)
    if np.any(values < low) or np.any(values > high):
        return (
            f"Parameter '{name}' value {value} is outside valid range [{low}, {high}]"
        )
    return None


def validate_parameters(instance: Any) -> list[str]:
    """
    Check the values of a dataclass instance against its metadata.

    Array-valued parameters (one carrying capacity per species, say) are
    checked element by element. ``None`` stands for a derived default and
    is skipped.

    Parameters
    ----------
    instance
        Instance of a dataclass with parameter metadata

    Returns
    -------
    list[str]
        Error messages, empty if every value is valid
    """
    errors = []
    for name, meta in get_parameter_metadata(type(instance)).items():
        value = getattr(instance, name)
        if value is None:
            continue

        if meta.range is not None:
            error = _range_error(name, value, meta.range)
            if error:
                errors.append(error)

        if meta.choices is not None and value not in meta.choices:
            errors.append(
                f"Parameter '{name}' value {value!r} is not in valid choices: "
                f"{meta.choices}"
            )

    return errors
