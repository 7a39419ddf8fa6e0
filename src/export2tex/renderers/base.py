#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/renderers/base.py
"""Base classes for AST renderers.

This module defines the abstract base class renderers inherit from, and the
advisory diagnostics a renderer reports while it works. Diagnostics never
stop a render; they describe input the renderer could only pass through or
had to treat specially.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterator, Optional, Union

from export2tex.ast.nodes import Document, Node
from export2tex.exceptions import InvalidOptionsError
from export2tex.options.base import BaseRendererOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """An advisory message produced during a render.

    Parameters
    ----------
    message : str
        Human-readable description
    node : Node or None
        The node the message is about, if any

    """

    message: str
    node: Optional[Node] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class DiagnosticSink:
    """Ordered collection of diagnostics for one render.

    Reported diagnostics are logged at WARNING unless the sink is quiet.

    Examples
    --------
        >>> sink = DiagnosticSink()
        >>> sink.report("Large table detected (60 rows).")
        >>> [d.message for d in sink]
        ['Large table detected (60 rows).']

    """

    diagnostics: list[Diagnostic] = field(default_factory=list)
    quiet: bool = False

    def report(self, message: str, node: Optional[Node] = None, log: Optional[logging.Logger] = None) -> None:
        """Append a diagnostic and log it unless the sink is quiet."""
        self.diagnostics.append(Diagnostic(message, node))
        if not self.quiet:
            (log or logger).warning(message)

    @property
    def messages(self) -> list[str]:
        """Diagnostic messages in report order."""
        return [diagnostic.message for diagnostic in self.diagnostics]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __bool__(self) -> bool:
        return bool(self.diagnostics)


class BaseRenderer(ABC):
    """Abstract base class for AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the AST to a string.

        Parameters
        ----------
        doc : Document
            AST Document node to render

        Returns
        -------
        str
            Rendered output

        """

    def render(self, doc: Document, output: Union[str, Path, IO[str]]) -> None:
        """Render the AST and write the result to a path or text stream."""
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Parameters
        ----------
        options : BaseRendererOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                renderer_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[str]]) -> None:
        """Write text output to a file path or a text stream.

        Examples
        --------
            >>> from io import StringIO
            >>> buffer = StringIO()
            >>> BaseRenderer.write_text_output("\\section{Hello}", buffer)
            >>> buffer.getvalue()
            '\\section{Hello}'

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
        else:
            output.write(text)


__all__ = ["BaseRenderer", "Diagnostic", "DiagnosticSink"]
