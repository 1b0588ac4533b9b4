"""
Unit tests for befw.config.parameters module.

Tests parameter metadata system including parameter field creation,
metadata extraction, and validation of scalar and array-valued parameters.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pytest

from befw.config.parameters import (
    ParameterMetadata,
    get_parameter_metadata,
    parameter,
    validate_parameters,
)
from befw.model import BioenergeticResponse, Environment


class TestParameterMetadata:
    """Tests for ParameterMetadata dataclass."""

    def test_parameter_metadata_minimal(self):
        """ParameterMetadata can be created with just name."""
        meta = ParameterMetadata(name="h")
        assert meta.name == "h"
        assert meta.unit is None
        assert meta.range is None
        assert meta.choices is None

    def test_parameter_metadata_with_all_fields(self):
        """ParameterMetadata accepts all fields."""
        meta = ParameterMetadata(
            name="B0",
            unit="g m^-2",
            description="Half-saturation density",
            range=(0.0, 100.0),
            typical_range=(0.1, 1.0),
            source="Brose et al. (2006)",
        )

        assert meta.unit == "g m^-2"
        assert meta.range == (0.0, 100.0)
        assert meta.typical_range == (0.1, 1.0)
        assert meta.source == "Brose et al. (2006)"


class TestParameterFunction:
    """Tests for parameter() field factory function."""

    def test_parameter_with_default(self):
        """parameter() creates field with default value."""

        @dataclass
        class Params:
            K: float = parameter(default=5.0)

        assert Params().K == 5.0

    def test_parameter_without_default_required(self):
        """parameter() without default creates required field."""

        @dataclass
        class Params:
            K: float = parameter()

        with pytest.raises(TypeError):
            Params()

        assert Params(K=10.0).K == 10.0

    def test_parameter_stores_metadata(self):
        """parameter() stores unit, range, choices and source in metadata."""

        @dataclass
        class Params:
            K: float = parameter(
                default=1.0, unit="g m^-2", range=(0.0, 100.0), source="Binzer 2016"
            )
            productivity: str = parameter(
                default="system", choices=["system", "species"]
            )

        metadata = get_parameter_metadata(Params)
        assert metadata["K"].unit == "g m^-2"
        assert metadata["K"].range == (0.0, 100.0)
        assert metadata["K"].source == "Binzer 2016"
        assert metadata["productivity"].choices == ["system", "species"]


class TestGetParameterMetadata:
    """Tests for get_parameter_metadata function."""

    def test_get_metadata_fills_name(self):
        """get_parameter_metadata fills in parameter names from field names."""

        @dataclass
        class Params:
            half_saturation: float = parameter(default=0.5)

        metadata = get_parameter_metadata(Params)
        assert metadata["half_saturation"].name == "half_saturation"

    def test_get_metadata_mixed_fields(self):
        """get_parameter_metadata only extracts fields created with parameter()."""

        @dataclass
        class Params:
            h: float = parameter(default=2.0)
            label: str = "not a parameter"

        metadata = get_parameter_metadata(Params)
        assert "h" in metadata
        assert "label" not in metadata

    def test_model_components_carry_metadata(self):
        """Model components declare their parameters with metadata."""
        metadata = get_parameter_metadata(BioenergeticResponse)
        assert metadata["h"].range == (1.0, 3.0)
        assert metadata["B0"].unit == "g m^-2"

        metadata = get_parameter_metadata(Environment)
        assert metadata["productivity"].choices == ["system", "species"]


class TestValidateParameters:
    """Tests for validate_parameters function."""

    def test_validate_at_range_boundaries(self):
        """validate_parameters accepts values at range boundaries."""

        @dataclass
        class Params:
            h: float = parameter(default=2.0, range=(1.0, 3.0))

        assert validate_parameters(Params(h=1.0)) == []
        assert validate_parameters(Params(h=3.0)) == []

    def test_validate_outside_range(self):
        """validate_parameters returns an error for values outside the range."""

        @dataclass
        class Params:
            h: float = parameter(default=2.0, range=(1.0, 3.0))

        errors = validate_parameters(Params(h=5.0))
        assert len(errors) == 1
        assert "'h'" in errors[0]
        assert "outside valid range" in errors[0]
        assert "[1.0, 3.0]" in errors[0]

    def test_validate_array_elementwise(self):
        """Array-valued parameters are checked element by element."""

        @dataclass
        class Params:
            K: object = parameter(default=1.0, range=(0.0, 100.0))

        assert validate_parameters(Params(K=np.array([1.0, 50.0]))) == []
        errors = validate_parameters(Params(K=[1.0, -2.0, 3.0]))
        assert len(errors) == 1
        assert "'K'" in errors[0]

    def test_validate_skips_none(self):
        """None values stand for derived defaults and are not checked."""

        @dataclass
        class Params:
            r: float | None = parameter(default=None, range=(0.0, 10.0))
            mode: str | None = parameter(default=None, choices=["a", "b"])

        assert validate_parameters(Params()) == []

    def test_validate_invalid_choice(self):
        """validate_parameters returns error for invalid choice."""

        @dataclass
        class Params:
            productivity: str = parameter(
                default="system", choices=["system", "species"]
            )

        errors = validate_parameters(Params(productivity="global"))
        assert len(errors) == 1
        assert "not in valid choices" in errors[0]
        assert "system" in errors[0]

    def test_validate_multiple_errors(self):
        """validate_parameters returns multiple errors when present."""

        @dataclass
        class Params:
            e_herbivore: float = parameter(default=0.45, range=(0.0, 1.0))
            e_carnivore: float = parameter(default=0.85, range=(0.0, 1.0))

        errors = validate_parameters(Params(e_herbivore=-1.0, e_carnivore=1.5))
        assert len(errors) == 2
        assert any("e_herbivore" in err for err in errors)
        assert any("e_carnivore" in err for err in errors)

    def test_validate_typical_range_not_enforced(self):
        """validate_parameters does not enforce typical_range (only guidance)."""

        @dataclass
        class Params:
            alpha: float = parameter(default=1.0, typical_range=(0.5, 1.5))

        assert validate_parameters(Params(alpha=5.0)) == []
