#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/transforms/__init__.py
"""Tree passes that move attribute blocks onto their owners.

- extract: detach trailing ``{...}`` text from blocks
- code_fence: move fence info-string attributes into code block properties
- resolve: attach or discard detached attribute blocks
- pipeline: run the passes in order

"""

from mdattrs.transforms.code_fence import extract_code_fence_attributes
from mdattrs.transforms.extract import BlockAttributeExtractor, extract_trailing_attributes
from mdattrs.transforms.pipeline import apply_attributes
from mdattrs.transforms.resolve import (
    BLOCK_ATTACHABLE,
    INLINE_ATTACHABLE,
    STANDALONE_TARGETS,
    AttributeResolver,
)

__all__ = [
    "AttributeResolver",
    "BlockAttributeExtractor",
    "BLOCK_ATTACHABLE",
    "INLINE_ATTACHABLE",
    "STANDALONE_TARGETS",
    "apply_attributes",
    "extract_code_fence_attributes",
    "extract_trailing_attributes",
]
