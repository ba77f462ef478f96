#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/renderers/base.py
"""Base classes for AST renderers.

This module defines the abstract base class renderers inherit from and the
mixin text renderers use to capture nested inline output.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from mdattrs.ast import Document
from mdattrs.ast.nodes import Node
from mdattrs.exceptions import InvalidOptionsError, RenderingError
from mdattrs.options.base import BaseRendererOptions

RendererOutput = Union[str, Path, IO[bytes], IO[str]]


class BaseRenderer(ABC):
    """Abstract base class for all AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render(self, doc: Document, output: RendererOutput) -> None:
        """Render the AST and write it to ``output``.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, or file-like
            File path or stream to write to

        Raises
        ------
        RenderingError
            If rendering or writing fails

        """
        pass

    def render_to_string(self, doc: Document) -> str:
        """Render the AST to a string, for text-based renderers."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support rendering to a string.")

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                f"The {renderer_name} renderer expects {expected_type.__name__}, got {type(options).__name__}",
                parameter_name="options",
                parameter_value=options,
            )

    @staticmethod
    def write_text_output(text: str, output: RendererOutput) -> None:
        """Write text to a path or to a text or binary stream.

        Examples
        --------
            >>> from io import BytesIO
            >>> buffer = BytesIO()
            >>> BaseRenderer.write_text_output("# Hello", buffer)
            >>> buffer.getvalue()
            b'# Hello'

        """
        try:
            if isinstance(output, (str, Path)):
                Path(output).write_text(text, encoding="utf-8")
                return
            try:
                output.write(text)  # type: ignore[arg-type]
            except TypeError:
                output.write(text.encode("utf-8"))  # type: ignore[arg-type]
        except OSError as e:
            raise RenderingError(f"Could not write output: {e}", rendering_stage="output", original_error=e) from e


class InlineContentMixin:
    """Mixin providing inline content rendering for text-based renderers.

    The implementing class must have an ``_output`` list that its visitor
    methods append to.
    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to text.

        Parameters
        ----------
        content : list of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content as a string

        """
        saved_output = self._output
        self._output = []

        for node in content:
            node.accept(self)

        result = "".join(self._output)
        self._output = saved_output
        return result
