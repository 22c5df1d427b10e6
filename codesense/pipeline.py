"""
codesense/pipeline.py — analysis orchestration

Runs the whole tool chain over one program:

1. parse (when given source text);
2. derive the views that cannot fail: tokens, symbols, math operations,
   complexity score, control flow graph;
3. run the checking passes fail-fast: types → data flow → math safety.

The first failure is stored on the report as an
:class:`~codesense.errors.ErrorMessage` and the remaining checks are
skipped.  Everything produced before the failure stays on the report.
Every call builds fresh pass state, so runs are independent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from codesense import ast as A
from codesense.cfg import CFG, build_cfg
from codesense.dataflow import check_initialization
from codesense.errors import CodeSenseError, ErrorMessage
from codesense.extract import (
    MathOp,
    SymbolEntry,
    Token,
    extract_math_ops,
    extract_symbols,
    extract_tokens,
)
from codesense.parser import parse
from codesense.score import ScoreCard, score_card
from codesense.symbolic import check_math_safety
from codesense.typecheck import type_check
from codesense.visitor import check_nesting

__all__ = ["AnalysisConfig", "AnalysisReport", "analyze"]

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Which passes run, and how."""

    type_check: bool = True
    data_flow: bool = True
    math_safety: bool = True
    build_cfg: bool = True
    score: bool = True
    branch_scoped_constants: bool = False
    strict_operand_types: bool = False

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not (self.type_check or self.data_flow or self.math_safety):
            warnings.append("all checking passes are disabled; only views are produced")
        if self.branch_scoped_constants and not self.math_safety:
            warnings.append("branch_scoped_constants has no effect without math_safety")
        if self.strict_operand_types and not self.type_check:
            warnings.append("strict_operand_types has no effect without type_check")
        return warnings


@dataclass
class AnalysisReport:
    config: AnalysisConfig
    program: Optional[A.Program] = None
    tokens: List[Token] = field(default_factory=list)
    symbols: List[SymbolEntry] = field(default_factory=list)
    math_ops: List[MathOp] = field(default_factory=list)
    score: Optional[ScoreCard] = None
    cfg: Optional[CFG] = None
    declared_types: Dict[str, str] = field(default_factory=dict)
    known_values: Dict[str, Union[int, float]] = field(default_factory=dict)
    passes_run: List[str] = field(default_factory=list)
    error: Optional[ErrorMessage] = None
    log: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error.to_json() if self.error is not None else None,
            "passes": list(self.passes_run),
            "tokens": [t.to_dict() for t in self.tokens],
            "symbols": [s.to_dict() for s in self.symbols],
            "mathOps": [m.to_dict() for m in self.math_ops],
            "score": self.score.to_dict() if self.score is not None else None,
            "cfg": self.cfg.to_dict() if self.cfg is not None else None,
            "declaredTypes": dict(self.declared_types),
            "knownValues": dict(self.known_values),
            "log": list(self.log),
        }


def _fail(report: AnalysisReport, exc: CodeSenseError) -> AnalysisReport:
    report.error = exc.error_message
    if exc.line is not None:
        report.log.append(f"❌ Error at Line {exc.line}: {exc.message}")
    else:
        report.log.append(f"❌ Error: {exc.message}")
    logger.warning("%s", exc.to_gcc_format())
    return report


def analyze(
    program_or_source: Union[str, A.Program],
    config: Optional[AnalysisConfig] = None,
) -> AnalysisReport:
    """Run every enabled pass and return the report (never raises
    :class:`CodeSenseError`)."""
    config = config or AnalysisConfig()
    for warning in config.validate():
        logger.warning("config: %s", warning)
    report = AnalysisReport(config=config)

    # 1. Parsing
    if isinstance(program_or_source, str):
        report.log.append("1. Starting Lexical & Syntactic Analysis...")
        try:
            program = parse(program_or_source)
        except CodeSenseError as exc:
            return _fail(report, exc)
        report.log.append("✅ Parsing Successful! AST Generated.")
    else:
        program = program_or_source
        try:
            check_nesting(program)
        except CodeSenseError as exc:
            return _fail(report, exc)
    report.program = program
    report.passes_run.append("parse")

    # 2. Views
    report.tokens = extract_tokens(program)
    report.symbols = extract_symbols(program)
    report.math_ops = extract_math_ops(program)
    if config.score:
        report.score = score_card(program)
        report.passes_run.append("score")
    if config.build_cfg:
        report.cfg = build_cfg(program)
        report.passes_run.append("cfg")

    # 3. Checks
    report.log.append("2. Running Semantic Safety Checks...")
    try:
        if config.type_check:
            table = type_check(program, strict_operand_types=config.strict_operand_types)
            report.declared_types = dict(table.items())
            report.passes_run.append("types")
            report.log.append("✅ Type Safety: Passed.")
        if config.data_flow:
            check_initialization(program)
            report.passes_run.append("dataflow")
            report.log.append("✅ Data Flow: Checked.")
        if config.math_safety:
            report.known_values = check_math_safety(
                program, branch_scoped_constants=config.branch_scoped_constants
            )
            report.passes_run.append("math")
            report.log.append("✅ Mathematical Safety: No division by zero detected.")
    except CodeSenseError as exc:
        return _fail(report, exc)

    logger.info("Analysis finished: %s", ", ".join(report.passes_run))
    return report
