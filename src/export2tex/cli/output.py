"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/export2tex/cli/output.py
import argparse
import sys
from typing import IO, Optional, Sequence

from export2tex.renderers.base import Diagnostic
from export2tex.renderers.latex import OrderedItem, TableRecord


def should_use_rich_output(args: argparse.Namespace, stream: Optional[IO[str]] = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when the --rich flag is set and either --force-rich
    is set or the target stream is a TTY.

    """
    if not getattr(args, "rich", False):
        return False

    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stderr
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def _describe(item: OrderedItem) -> str:
    if isinstance(item.data, TableRecord):
        return f"{item.data.rows} rows x {item.data.cols} columns"
    parts = [part for part in (item.data.alt, item.data.title) if part]
    return " / ".join(parts) or "(no alt text)"


def report_diagnostics(diagnostics: Sequence[Diagnostic], use_rich: bool = False) -> None:
    """Print compile diagnostics to stderr."""
    if not diagnostics:
        return

    if use_rich:
        from rich.console import Console

        console = Console(stderr=True)
        for diagnostic in diagnostics:
            console.print(f"[yellow]warning:[/yellow] {diagnostic.message}", markup=True, highlight=False)
        return

    for diagnostic in diagnostics:
        print(f"warning: {diagnostic.message}", file=sys.stderr)


def print_items(items: Sequence[OrderedItem], use_rich: bool = False, stream: Optional[IO[str]] = None) -> None:
    """Print the tables and figures of a document in order.

    Caption indices match the positions accepted by ``--caption N=TEXT``.

    """
    target = stream or sys.stdout

    if use_rich:
        from rich.console import Console
        from rich.table import Table

        table = Table(title="Tables and Figures")
        table.add_column("Caption #", style="cyan", justify="right")
        table.add_column("Kind", style="yellow")
        table.add_column("Index", justify="right")
        table.add_column("Details", style="green", no_wrap=False)
        for position, item in enumerate(items):
            table.add_row(str(position), item.kind, str(item.display_index + 1), _describe(item))
        Console(file=target).print(table)
        return

    for position, item in enumerate(items):
        print(f"{position}\t{item.kind} {item.display_index + 1}\t{_describe(item)}", file=target)


__all__ = ["should_use_rich_output", "report_diagnostics", "print_items"]
