#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for parser and renderer option validation."""

from dataclasses import FrozenInstanceError, fields

import pytest

from mdattrs.exceptions import InvalidOptionsError, ValidationError
from mdattrs.options import MarkdownParserOptions, MarkdownRendererOptions


@pytest.mark.unit
class TestMarkdownParserOptions:
    """Test reader options."""

    def test_defaults(self) -> None:
        """Test every attribute pass is on by default."""
        options = MarkdownParserOptions()

        assert options.parse_inline_attributes is True
        assert options.extract_block_attributes is True
        assert options.extract_code_fence_attributes is True
        assert options.resolve_attributes is True
        assert options.track_positions is True

    def test_frozen(self) -> None:
        """Test options cannot be changed in place."""
        options = MarkdownParserOptions()
        with pytest.raises(FrozenInstanceError):
            options.resolve_attributes = False  # type: ignore[misc]

    def test_create_updated(self) -> None:
        """Test updated copies leave the original alone."""
        options = MarkdownParserOptions()
        updated = options.create_updated(resolve_attributes=False)

        assert updated.resolve_attributes is False
        assert options.resolve_attributes is True
        assert updated.parse_tables is True

    def test_fields_have_help(self) -> None:
        """Test every field documents itself for the command line."""
        assert all(f.metadata.get("help") for f in fields(MarkdownParserOptions))


@pytest.mark.unit
class TestMarkdownRendererOptions:
    """Test writer options."""

    @pytest.mark.parametrize(
        "kwargs, parameter",
        [
            ({"emphasis_symbol": "+"}, "emphasis_symbol"),
            ({"code_fence_char": "'"}, "code_fence_char"),
            ({"code_fence_min": 2}, "code_fence_min"),
            ({"bullet_symbols": ""}, "bullet_symbols"),
            ({"bullet_symbols": "*x"}, "bullet_symbols"),
        ],
    )
    def test_invalid_values(self, kwargs: dict, parameter: str) -> None:
        """Test values the renderer cannot use are refused."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            MarkdownRendererOptions(**kwargs)
        assert exc_info.value.parameter_name == parameter

    def test_invalid_options_are_validation_errors(self) -> None:
        """Test the error hierarchy."""
        with pytest.raises(ValidationError):
            MarkdownRendererOptions(code_fence_min=1)

    def test_create_updated_revalidates(self) -> None:
        """Test updated copies are validated too."""
        with pytest.raises(InvalidOptionsError):
            MarkdownRendererOptions().create_updated(emphasis_symbol="-")

    def test_valid_alternatives(self) -> None:
        """Test the accepted non-default values."""
        options = MarkdownRendererOptions(emphasis_symbol="_", code_fence_char="~", code_fence_min=4, bullet_symbols="-")

        assert (options.emphasis_symbol, options.code_fence_char, options.code_fence_min) == ("_", "~", 4)
