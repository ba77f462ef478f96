#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for character reference decoding and encoding."""

import pytest

from mdattrs.attributes.entities import decode_entities, encode_attribute_value


@pytest.mark.unit
class TestDecodeEntities:
    """Test decoding of character references in attribute values."""

    def test_named_reference(self) -> None:
        """Test named references are decoded."""
        assert decode_entities("a &amp; b") == "a & b"
        assert decode_entities("&lt;tag&gt;") == "<tag>"

    def test_decimal_reference(self) -> None:
        """Test decimal numeric references are decoded."""
        assert decode_entities("&#38;") == "&"
        assert decode_entities("&#34;quoted&#34;") == '"quoted"'

    def test_hex_reference(self) -> None:
        """Test hexadecimal numeric references in either case are decoded."""
        assert decode_entities("&#x26;") == "&"
        assert decode_entities("&#X22;") == '"'

    def test_numeric_reference_without_semicolon(self) -> None:
        """Test numeric references without a trailing semicolon are decoded."""
        assert decode_entities("&#38 then") == "& then"

    def test_unknown_reference_passes_through(self) -> None:
        """Test unknown named references stay as written."""
        assert decode_entities("&bogus; stays") == "&bogus; stays"

    def test_bare_ampersand_passes_through(self) -> None:
        """Test a lone ampersand is not a reference."""
        assert decode_entities("fish & chips") == "fish & chips"

    def test_legacy_reference_without_semicolon(self) -> None:
        """Test legacy references are decoded when they end the word."""
        assert decode_entities("&copy 2025") == "© 2025"

    def test_legacy_reference_before_equals_is_kept(self) -> None:
        """Test a legacy name used as a query parameter is left alone."""
        assert decode_entities("?a=1&copy=2") == "?a=1&copy=2"

    def test_legacy_reference_inside_longer_word_is_kept(self) -> None:
        """Test a legacy name followed by more letters is left alone."""
        assert decode_entities("&copyright") == "&copyright"

    def test_text_without_ampersand_is_unchanged(self) -> None:
        """Test values with no references come back as they are."""
        assert decode_entities("plain value") == "plain value"


@pytest.mark.unit
class TestEncodeAttributeValue:
    """Test escaping of values for double-quoted attribute syntax."""

    def test_ampersand_and_quote_are_escaped(self) -> None:
        """Test the two characters that matter in a quoted value."""
        assert encode_attribute_value('a&b"c') == "a&#x26;b&#x22;c"

    def test_other_characters_are_untouched(self) -> None:
        """Test that no other character is escaped."""
        assert encode_attribute_value("<tag> 'single' {brace}") == "<tag> 'single' {brace}"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "plain",
            'say "hi"',
            "a & b",
            "&amp; already encoded",
            "&#x22;",
        ],
    )
    def test_decode_reverses_encode(self, value: str) -> None:
        """Test decoding an encoded value gives the original back."""
        assert decode_entities(encode_attribute_value(value)) == value
