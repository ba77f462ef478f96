#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/attributes/__init__.py
"""Attribute block grammar, scanning, entity handling and serialization."""

from mdattrs.attributes.entities import decode_entities, encode_attribute_value
from mdattrs.attributes.grammar import (
    AttributeRecord,
    AttributeToken,
    build_record,
    merge_attribute,
    merge_records,
    parse_attribute_string,
    parse_attribute_tokens,
)
from mdattrs.attributes.serializer import format_inline_code, serialize_attributes
from mdattrs.attributes.tokenizer import AttributeScan, scan_attribute_block

__all__ = [
    "AttributeRecord",
    "AttributeScan",
    "AttributeToken",
    "build_record",
    "decode_entities",
    "encode_attribute_value",
    "format_inline_code",
    "merge_attribute",
    "merge_records",
    "parse_attribute_string",
    "parse_attribute_tokens",
    "scan_attribute_block",
    "serialize_attributes",
]
