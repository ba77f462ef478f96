#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/options/base.py
"""Base classes for parser and renderer options.

Options are frozen dataclasses. Each field carries ``metadata={"help": ...}``
which the command line interface turns into argument help text.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Notes
    -----
    Subclasses define format-specific fields and validate them in
    ``__post_init__``, calling ``super().__post_init__()`` first.
    """

    def __post_init__(self) -> None:
        """Validate field values."""
        pass


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options."""

    def __post_init__(self) -> None:
        """Validate field values."""
        pass
