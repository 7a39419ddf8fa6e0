"""Command-line interface for the export2tex compiler.

The CLI reads a document tree serialized as export2tex AST JSON or as
remark mdast JSON, compiles it to LaTeX and writes the result to a file or
to stdout. Export settings come from a settings file (see
:mod:`export2tex.cli.config`); placeholder values come from the Markdown
source's frontmatter, a metadata file and ``--meta`` options.

Examples
--------
Compile an mdast tree into a complete document::

    $ export2tex notes.mdast.json --source notes.md -o notes.tex

Emit only the body::

    $ export2tex tree.json --input-format ast --body-only

Override captions by position::

    $ export2tex notes.mdast.json --list-items
    $ export2tex notes.mdast.json --caption 0="Quarterly sales" -o notes.tex

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from export2tex import __version__
from export2tex.api import compile_document, export_document
from export2tex.ast.mdast import mdast_json_to_ast
from export2tex.ast.nodes import Document
from export2tex.ast.serialization import json_to_ast
from export2tex.cli.config import load_config_with_priority
from export2tex.cli.output import print_items, report_diagnostics, should_use_rich_output
from export2tex.constants import EXIT_ERROR, EXIT_FILE_ERROR, EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from export2tex.exceptions import ConfigurationError, Export2TexError, OutputWriteError, ValidationError
from export2tex.logging_utils import configure_logging
from export2tex.options.settings import TexExportSettings, ensure_settings
from export2tex.template import compress_newlines
from export2tex.utils.metadata import load_metadata_file, merge_metadata, parse_frontmatter, split_frontmatter

logger = logging.getLogger(__name__)

_INPUT_SUFFIXES = (".json", ".mdast", ".ast")


def _caption_arg(value: str) -> tuple[int, str]:
    index, sep, text = value.partition("=")
    if not sep or not index.strip().isdigit():
        raise argparse.ArgumentTypeError(f"Caption must look like N=TEXT, got {value!r}")
    return int(index), text


def _meta_arg(value: str) -> tuple[str, str]:
    key, sep, text = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"Metadata must look like KEY=VALUE, got {value!r}")
    return key.strip(), text


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the export2tex CLI."""
    parser = argparse.ArgumentParser(
        prog="export2tex",
        description="Compile a Markdown document tree (AST or mdast JSON) into LaTeX.",
    )
    parser.add_argument("input", help="Tree JSON file, or '-' to read from stdin")
    parser.add_argument("-o", "--out", dest="out", help="Output .tex file (default: stdout)")
    parser.add_argument(
        "--input-format",
        choices=["mdast", "ast"],
        default="mdast",
        help="Serialization of the input tree (default: mdast)",
    )
    parser.add_argument("--source", help="Original Markdown file, for frontmatter and table/figure sources")
    parser.add_argument("--metadata", help="YAML file with placeholder values")
    parser.add_argument(
        "--meta",
        action="append",
        type=_meta_arg,
        default=[],
        metavar="KEY=VALUE",
        help="Placeholder value; overrides frontmatter and --metadata (repeatable)",
    )
    parser.add_argument("--config", help="Settings file (TOML, YAML, JSON or pyproject.toml)")
    parser.add_argument(
        "--caption",
        action="append",
        type=_caption_arg,
        default=[],
        metavar="N=TEXT",
        help="Replace the text of the N-th caption (repeatable)",
    )
    parser.add_argument("--root-dir", help="Directory image paths are relative to (default: the source's directory)")
    parser.add_argument("--body-only", action="store_true", help="Emit the body without preamble and postamble")
    parser.add_argument("--list-items", action="store_true", help="List tables and figures with caption numbers")
    parser.add_argument("--rich", action="store_true", help="Use rich formatting for diagnostics and listings")
    parser.add_argument("--force-rich", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging(args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if args.trace else args.log_level
    configure_logging(log_level, log_file=args.log_file, trace_mode=args.trace, use_rich=args.rich)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _load_document(text: str, input_format: str) -> Document:
    if input_format == "ast":
        node = json_to_ast(text)
        if not isinstance(node, Document):
            return Document(children=[node])
        return node
    return mdast_json_to_ast(text)


def _title_source(args: argparse.Namespace) -> Optional[str]:
    if args.source:
        return args.source
    if args.input == "-":
        return None
    name = Path(args.input).name
    while name.lower().endswith(_INPUT_SUFFIXES):
        name = name[: name.rfind(".")]
    return name or None


def _collect_metadata(args: argparse.Namespace, source_text: str) -> Dict[str, Any]:
    frontmatter: Dict[str, Any] = {}
    if source_text:
        yaml_text, _body = split_frontmatter(source_text)
        if yaml_text is not None:
            frontmatter = parse_frontmatter(yaml_text)
    metadata_file = load_metadata_file(args.metadata) if args.metadata else {}
    return merge_metadata(frontmatter, metadata_file, dict(args.meta))


def _write_output(text: str, out: Optional[str]) -> None:
    if not out:
        sys.stdout.write(text)
        return
    try:
        Path(out).write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"Could not write {out}: {e}", output_path=out, original_error=e) from e
    logger.info("Wrote %s", out)


def _run(args: argparse.Namespace) -> int:
    settings: TexExportSettings = ensure_settings(load_config_with_priority(args.config))

    document = _load_document(_read_text(args.input), args.input_format)
    source_text = _read_text(args.source) if args.source else ""
    if args.root_dir:
        root_dir: Optional[Path] = Path(args.root_dir)
    elif args.source:
        root_dir = Path(args.source).resolve().parent
    else:
        root_dir = None
    export_dir = Path(args.out).resolve().parent if args.out else Path.cwd()

    use_rich = should_use_rich_output(args)

    if args.list_items or args.body_only:
        result = compile_document(
            document, settings, source_text=source_text, root_dir=root_dir, export_dir=export_dir
        )
        report_diagnostics(result.diagnostics, use_rich)
        if args.list_items:
            print_items(result.items_in_order, should_use_rich_output(args, sys.stdout))
            return EXIT_SUCCESS
        body = compress_newlines(result.body) if settings.compress_newlines else result.body
        _write_output(body, args.out)
        return EXIT_SUCCESS

    exported = export_document(
        document,
        settings,
        _collect_metadata(args, source_text),
        captions=dict(args.caption),
        file_name=_title_source(args),
        source_text=source_text,
        root_dir=root_dir,
        export_dir=export_dir,
    )
    report_diagnostics(exported.diagnostics, use_rich)
    _write_output(exported.tex, args.out)
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the export2tex command line.

    Parameters
    ----------
    argv : sequence of str, optional
        Arguments; defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit code: 0 on success, 1 on a general error, 2 on invalid settings
        or configuration, 3 when a file cannot be read or written

    """
    parser = create_parser()
    args = parser.parse_args(argv)
    _setup_logging(args)

    try:
        return _run(args)
    except (ValidationError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except OutputWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except Export2TexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR


__all__ = ["main", "create_parser"]
