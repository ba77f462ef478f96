#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/parsers/base.py
"""Base class for markdown readers.

Readers turn some input into an :class:`~mdattrs.ast.nodes.Document`.
This module holds the shared plumbing: options type checking and loading
text from the supported input kinds.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from mdattrs.ast import Document
from mdattrs.exceptions import InvalidOptionsError, ParsingError
from mdattrs.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for readers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Reader configuration

    Examples
    --------
        >>> class WordCountParser(BaseParser):
        ...     def parse(self, input_data):
        ...         text = self._load_text_content(input_data)
        ...         return Document(metadata={"words": len(text.split())})

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Store the options."""
        self.options = options or BaseParserOptions()

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                f"The {parser_name} parser expects {expected_type.__name__}, got {type(options).__name__}",
                parameter_name="options",
                parameter_value=options,
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse input into a Document.

        Parameters
        ----------
        input_data : str, Path, file-like, or bytes
            Input to parse. A ``str`` is always treated as content, never
            as a path.

        Returns
        -------
        Document
            The parsed tree

        """
        pass

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load text from the supported input kinds.

        Parameters
        ----------
        input_data : str, Path, file-like, or bytes
            Input data to load

        Returns
        -------
        str
            Decoded text

        Raises
        ------
        ParsingError
            If a path cannot be read or bytes are not valid UTF-8

        """
        if isinstance(input_data, str):
            return input_data

        try:
            if isinstance(input_data, Path):
                raw: Union[str, bytes] = input_data.read_bytes()
            elif isinstance(input_data, bytes):
                raw = input_data
            else:
                raw = input_data.read()
        except OSError as e:
            raise ParsingError(f"Could not read input: {e}", parsing_stage="input", original_error=e) from e

        if isinstance(raw, str):
            return raw
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParsingError("Input is not valid UTF-8", parsing_stage="input", original_error=e) from e
