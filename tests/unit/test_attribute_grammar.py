#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the attribute grammar and its shared merge policy."""

import pytest

from mdattrs.attributes import (
    AttributeToken,
    build_record,
    merge_attribute,
    merge_records,
    parse_attribute_string,
    parse_attribute_tokens,
    scan_attribute_block,
)
from mdattrs.exceptions import ValidationError


@pytest.mark.unit
class TestParseAttributeString:
    """Test parsing attribute text found in ordinary text."""

    def test_id_class_and_key_value(self) -> None:
        """Test the three attribute forms together."""
        assert parse_attribute_string("#a .b .c key=val") == {"id": "a", "class": "b c", "key": "val"}

    def test_last_id_wins(self) -> None:
        """Test that a later id replaces an earlier one."""
        assert parse_attribute_string("#x #y") == {"id": "y"}

    def test_id_forms_are_interchangeable(self) -> None:
        """Test that #x and id=x feed the same slot."""
        assert parse_attribute_string("#x id=y") == {"id": "y"}
        assert parse_attribute_string("id=y #x") == {"id": "x"}

    def test_classes_accumulate_in_order(self) -> None:
        """Test class values are appended with single spaces."""
        assert parse_attribute_string('.a class="b c" .d') == {"class": "a b c d"}

    def test_duplicate_classes_are_kept(self) -> None:
        """Test duplicates are not collapsed."""
        assert parse_attribute_string(".a .a") == {"class": "a a"}

    def test_other_keys_last_wins(self) -> None:
        """Test ordinary keys keep their last value."""
        assert parse_attribute_string("k=1 k=2") == {"k": "2"}

    def test_quoted_values(self) -> None:
        """Test double and single quoted values keep their spaces."""
        record = parse_attribute_string("title=\"hello world\" alt='it is'")
        assert record == {"title": "hello world", "alt": "it is"}

    def test_boolean_attribute(self) -> None:
        """Test a bare name gives an empty value."""
        assert parse_attribute_string("hidden") == {"hidden": ""}

    def test_values_are_entity_decoded(self) -> None:
        """Test references inside values are decoded before storing."""
        assert parse_attribute_string('title="a &amp; b &#x22;c&#x22;"') == {"title": 'a & b "c"'}

    def test_namespaced_name(self) -> None:
        """Test names may contain colons."""
        assert parse_attribute_string("xml:lang=en") == {"xml:lang": "en"}

    def test_braces_are_ignored(self) -> None:
        """Test the surrounding braces contribute nothing."""
        assert parse_attribute_string("{#a .b}") == {"id": "a", "class": "b"}

    @pytest.mark.parametrize("source", ["", "   ", "!!! ???", "{}"])
    def test_nothing_to_parse(self, source: str) -> None:
        """Test text without attributes gives an empty record."""
        assert parse_attribute_string(source) == {}


@pytest.mark.unit
class TestParseAttributeTokens:
    """Test folding token events into a record."""

    def test_simple_tuples(self) -> None:
        """Test (kind, text) pairs are accepted."""
        tokens = [("open", "{"), ("id", "a"), ("class", "b"), ("close", "}")]
        assert parse_attribute_tokens(tokens) == {"id": "a", "class": "b"}

    def test_attribute_token_objects(self) -> None:
        """Test AttributeToken instances are accepted."""
        tokens = [AttributeToken("open", "{"), AttributeToken("class", "x"), AttributeToken("close", "}")]
        assert parse_attribute_tokens(tokens) == {"class": "x"}

    def test_name_without_value_is_boolean(self) -> None:
        """Test a name closed by the block end is committed with an empty value."""
        assert parse_attribute_tokens([("name", "hidden"), ("close", "}")]) == {"hidden": ""}

    def test_name_followed_by_name(self) -> None:
        """Test a name followed directly by another name is committed."""
        assert parse_attribute_tokens([("name", "a"), ("name", "b")]) == {"a": "", "b": ""}

    def test_value_chunks_are_joined(self) -> None:
        """Test value chunks are concatenated until the attribute ends."""
        tokens = [("name", "title"), ("value", "line\n"), ("value", "two"), ("end", "")]
        assert parse_attribute_tokens(tokens) == {"title": "line\ntwo"}

    def test_value_is_decoded_after_joining(self) -> None:
        """Test a reference split across chunks is still decoded."""
        tokens = [("name", "t"), ("value", "&am"), ("value", "p;"), ("end", "")]
        assert parse_attribute_tokens(tokens) == {"t": "&"}

    def test_value_without_name_is_ignored(self) -> None:
        """Test a stray value event contributes nothing."""
        assert parse_attribute_tokens([("value", "x"), ("class", "c")]) == {"class": "c"}

    def test_unterminated_stream_commits_pending(self) -> None:
        """Test a pending attribute is committed at the end of the stream."""
        assert parse_attribute_tokens([("name", "k"), ("value", "v")]) == {"k": "v"}

    def test_empty_stream(self) -> None:
        """Test an empty stream gives an empty record."""
        assert parse_attribute_tokens([]) == {}

    def test_unknown_kind_raises(self) -> None:
        """Test an unknown token kind is a caller error."""
        with pytest.raises(ValidationError):
            parse_attribute_tokens([("bogus", "x")])

    def test_malformed_token_raises(self) -> None:
        """Test something that is not a token is a caller error."""
        with pytest.raises(ValidationError):
            parse_attribute_tokens(["not-a-token"])  # type: ignore[list-item]

    @pytest.mark.parametrize(
        "inner",
        [
            "#a .b .c",
            '#x #y .k title="a &amp; b"',
            "id=one .a class=b hidden",
            "k=1 k=2 .z",
        ],
    )
    def test_matches_string_form(self, inner: str) -> None:
        """Test the token path and the string path agree on the same text."""
        scan = scan_attribute_block("{" + inner + "}")
        assert scan is not None
        assert parse_attribute_tokens(scan.tokens) == parse_attribute_string(inner)


@pytest.mark.unit
class TestMergePolicy:
    """Test the merge helpers used by both parsing paths."""

    def test_merge_attribute_class(self) -> None:
        """Test class merging appends."""
        record = {"class": "a"}
        merge_attribute(record, "class", "b c")
        assert record == {"class": "a b c"}

    def test_merge_attribute_replaces_others(self) -> None:
        """Test other names are replaced."""
        record = {"id": "x", "k": "1"}
        merge_attribute(record, "id", "y")
        merge_attribute(record, "k", "2")
        assert record == {"id": "y", "k": "2"}

    def test_merge_records(self) -> None:
        """Test merging a record into existing properties."""
        target = {"class": "a", "id": "x"}
        result = merge_records(target, {"class": "b", "id": "y", "title": "t"})
        assert result is target
        assert target == {"class": "a b", "id": "y", "title": "t"}

    def test_build_record(self) -> None:
        """Test building from pairs in source order."""
        assert build_record([("class", "a"), ("id", "x"), ("class", "b")]) == {"class": "a b", "id": "x"}
