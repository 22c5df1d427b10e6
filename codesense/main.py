#!/usr/bin/env python3
"""codesense/main.py — CLI entry-point for the codesense analyzer.

Usage examples
--------------
    # Run every pass and print a learner-friendly summary
    python -m codesense analyze program.cpp

    # Same, as JSON, skipping the math-safety pass
    python -m codesense analyze program.cpp --format json --skip math

    # Render the control flow graph for Graphviz
    python -m codesense cfg program.cpp --format dot -o program.dot

    # Views
    python -m codesense tokens program.cpp
    python -m codesense symbols program.cpp --format json
    python -m codesense score program.cpp
    python -m codesense explain program.cpp

    # Dump the syntax tree (debugging aid)
    python -m codesense parse program.cpp --format sexp

    # Analyse a tree produced by another front-end
    python -m codesense analyze tree.json --ast

Exit codes
----------
    0   Success (no diagnostics).
    1   A diagnostic was raised (syntax, type, data-flow or math error).
    2   Infrastructure failure (missing file, unreadable JSON, etc.).

The module doubles as ``python -m codesense`` via the companion
``codesense/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, List, Optional, Sequence, TextIO, Union

from codesense import __version__
from codesense import ast as A
from codesense.cfg import build_cfg
from codesense.errors import CodeSenseError
from codesense.explain import explain_program
from codesense.extract import extract_math_ops, extract_symbols, extract_tokens
from codesense.parser import parse
from codesense.pipeline import AnalysisConfig, AnalysisReport, analyze
from codesense.score import score_card

_log = logging.getLogger("codesense")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2

_SKIPPABLE = ("types", "dataflow", "math", "cfg", "score")


# ===========================================================================
# Helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``codesense`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("codesense")
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.is_file():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _write(args: argparse.Namespace, text: str) -> None:
    out = _open_output(getattr(args, "output", None))
    try:
        out.write(text if text.endswith("\n") else text + "\n")
    finally:
        if out is not sys.stdout:
            out.close()


def _read_input(args: argparse.Namespace) -> Union[str, A.Program]:
    """Source text, or a ``Program`` when ``--ast`` is given.

    Unreadable JSON exits with EXIT_INFRA; a malformed tree raises
    ``ParserError``.
    """
    path = _resolve_path(args.file, "input file")
    text = path.read_text(encoding="utf-8")
    if not args.ast:
        return text
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        _log.error("Invalid JSON in %s: %s", path, exc)
        raise SystemExit(EXIT_INFRA)
    node = A.from_dict(data)
    if not isinstance(node, A.Program):
        node = A.Program(body=(node,))
    return node


def _load_program(args: argparse.Namespace) -> A.Program:
    loaded = _read_input(args)
    if isinstance(loaded, str):
        return parse(loaded)
    return loaded


def _report_error(exc: CodeSenseError, filename: str) -> int:
    sys.stderr.write(exc.to_gcc_format(filename) + "\n")
    return EXIT_ERROR


# ===========================================================================
# Sub-commands
# ===========================================================================

def _summary(report: AnalysisReport, filename: str) -> str:
    lines: List[str] = list(report.log)
    if report.score is not None:
        lines.append(f"Complexity: {report.score.score} → {report.score.caption}")
    if report.cfg is not None:
        lines.append(f"Control flow: {len(report.cfg.nodes)} node(s), {len(report.cfg.edges)} edge(s)")
    if report.known_values:
        known = ", ".join(f"{k} = {v}" for k, v in report.known_values.items())
        lines.append(f"Known values: {known}")
    if report.error is not None:
        lines.append("")
        lines.append(report.error.to_gcc_format(filename))
    return "\n".join(lines)


def cmd_analyze(args: argparse.Namespace) -> int:
    """Run the full pipeline."""
    skip = set(args.skip or ())
    config = AnalysisConfig(
        type_check="types" not in skip,
        data_flow="dataflow" not in skip,
        math_safety="math" not in skip,
        build_cfg="cfg" not in skip,
        score="score" not in skip,
        branch_scoped_constants=args.branch_scoped_constants,
        strict_operand_types=args.strict_operands,
    )
    try:
        loaded = _read_input(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)

    report = analyze(loaded, config)

    if args.format == "json":
        _write(args, json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    elif args.format == "gcc":
        if report.error is not None:
            _write(args, report.error.to_gcc_format(args.file))
    else:
        _write(args, _summary(report, args.file))

    return EXIT_OK if report.ok else EXIT_ERROR


def cmd_cfg(args: argparse.Namespace) -> int:
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    cfg = build_cfg(program)
    if args.format == "dot":
        _write(args, cfg.to_dot(title=Path(args.file).name))
    else:
        _write(args, json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False))
    return EXIT_OK


def _emit_rows(args: argparse.Namespace, rows: List[Any], render) -> None:
    if args.format == "json":
        _write(args, json.dumps([r.to_dict() for r in rows], indent=2, ensure_ascii=False))
    else:
        _write(args, "\n".join(render(r) for r in rows))


def cmd_tokens(args: argparse.Namespace) -> int:
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    _emit_rows(args, extract_tokens(program), lambda t: f"{t.kind.value:<10} {t.value}")
    return EXIT_OK


def cmd_symbols(args: argparse.Namespace) -> int:
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    _emit_rows(args, extract_symbols(program), lambda s: f"{s.line:>4}  {s.type:<8} {s.name}")
    return EXIT_OK


def cmd_math(args: argparse.Namespace) -> int:
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    _emit_rows(
        args,
        extract_math_ops(program),
        lambda m: f"{m.line:>4}  {m.left} {m.op} {m.right}",
    )
    return EXIT_OK


def cmd_score(args: argparse.Namespace) -> int:
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    card = score_card(program)
    if args.format == "json":
        _write(args, json.dumps(card.to_dict()))
    else:
        _write(args, f"{card.score} {card.caption}")
    return EXIT_OK


def cmd_explain(args: argparse.Namespace) -> int:
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    lines = []
    for line, text in explain_program(program):
        prefix = f"Line {line}" if line is not None else "Line ?"
        lines.append(f"{prefix}: {text}")
    _write(args, "\n".join(lines))
    return EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a file and pretty-print its syntax tree."""
    try:
        program = _load_program(args)
    except CodeSenseError as exc:
        return _report_error(exc, args.file)
    if args.format == "sexp":
        _write(args, A.to_sexp(program))
    else:
        _write(args, json.dumps(A.to_dict(program), indent=2, ensure_ascii=False))
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    parser = argparse.ArgumentParser(
        prog="codesense",
        description=(
            "codesense — static analysis for a small C-like teaching language.\n\n"
            "Type checking, definite initialization, division-by-zero detection,\n"
            "control flow graphs and a nesting-based complexity score."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              codesense analyze program.cpp
              codesense cfg program.cpp --format dot -o program.dot
              codesense explain program.cpp
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_input_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("file", metavar="FILE", help="Source file to analyse.")
        p.add_argument(
            "--ast",
            action="store_true",
            help="FILE is a JSON syntax tree rather than source text.",
        )
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )

    def _add_format(p: argparse.ArgumentParser, choices: Sequence[str], default: str) -> None:
        p.add_argument(
            "-f", "--format",
            choices=list(choices),
            default=default,
            help=f"Output format (default: {default}).",
        )

    # --- analyze -----------------------------------------------------------
    p_analyze = subparsers.add_parser(
        "analyze",
        aliases=["analyse"],
        help="Run every analysis pass.",
    )
    _add_input_args(p_analyze)
    _add_format(p_analyze, ("summary", "json", "gcc"), "summary")
    p_analyze.add_argument(
        "--skip",
        action="append",
        choices=_SKIPPABLE,
        metavar="PASS",
        help=f"Skip a pass; repeatable. One of: {', '.join(_SKIPPABLE)}.",
    )
    p_analyze.add_argument(
        "--branch-scoped-constants",
        action="store_true",
        help="Only trust constants that hold on every path (must-analysis).",
    )
    p_analyze.add_argument(
        "--strict-operands",
        action="store_true",
        help="Also reject binary operations whose operand types differ.",
    )
    p_analyze.set_defaults(func=cmd_analyze)

    # --- cfg ---------------------------------------------------------------
    p_cfg = subparsers.add_parser("cfg", help="Build the control flow graph.")
    _add_input_args(p_cfg)
    _add_format(p_cfg, ("json", "dot"), "json")
    p_cfg.set_defaults(func=cmd_cfg)

    # --- views -------------------------------------------------------------
    for name, func, help_text in (
        ("tokens", cmd_tokens, "List the tokens of the program."),
        ("symbols", cmd_symbols, "List every variable declaration."),
        ("math", cmd_math, "List every binary operation."),
        ("score", cmd_score, "Compute the complexity score and rank."),
    ):
        p_view = subparsers.add_parser(name, help=help_text)
        _add_input_args(p_view)
        _add_format(p_view, ("text", "json"), "text")
        p_view.set_defaults(func=func)

    p_explain = subparsers.add_parser("explain", help="Explain each statement in plain words.")
    _add_input_args(p_explain)
    p_explain.set_defaults(func=cmd_explain)

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser("parse", help="Parse and dump the syntax tree.")
    _add_input_args(p_parse)
    _add_format(p_parse, ("json", "sexp"), "json")
    p_parse.set_defaults(func=cmd_parse)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the codesense CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except OSError as exc:
        _log.error("I/O error: %s", exc)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
