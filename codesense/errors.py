# codesense/errors.py
"""
Error Types and Reporting for the codesense analysis pipeline

Every pass is fail-fast: it raises on the first violation it meets and the
orchestrator (``codesense.pipeline``) turns that exception into a report
entry.  The exceptions therefore carry everything a front-end needs to
highlight the offending code: a structured ``ErrorKind``, a stable error
code and an optional source ``Location``.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  CodeSenseError (base)                                                      │
│  ├── ParserError                 - source text / JSON AST rejected           │
│  ├── SemanticError               - TypeChecker                              │
│  │   ├── TypeMismatchError                                                  │
│  │   └── UndeclaredVariableError                                            │
│  ├── DataFlowError               - DataFlowAnalyzer                         │
│  │   └── UninitializedUseError                                              │
│  ├── MathSafetyError             - SymbolicExecutor                         │
│  │   ├── DivisionByLiteralZeroError                                         │
│  │   └── DivisionByTrackedZeroError                                         │
│  └── InternalError               - analyzer bugs                            │
│      └── ScopeUnderflowError                                                │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Codes follow the pattern CS-NNNN:
  - 1000-1999: Syntax errors
  - 2000-2999: Type errors
  - 3000-3999: Data-flow errors
  - 4000-4999: Math-safety errors
  - 9000-9999: Internal errors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Dict, List, Optional

from codesense.ast import Location

__all__ = [
    "ErrorKind",
    "ErrorPhase",
    "ErrorCode",
    "ErrorCodes",
    "ErrorNote",
    "ErrorMessage",
    "CodeSenseError",
    "ParserError",
    "SemanticError",
    "TypeMismatchError",
    "UndeclaredVariableError",
    "DataFlowError",
    "UninitializedUseError",
    "MathSafetyError",
    "DivisionByLiteralZeroError",
    "DivisionByTrackedZeroError",
    "InternalError",
    "ScopeUnderflowError",
]


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorKind(Enum):
    """What went wrong, independent of message wording."""

    TYPE_MISMATCH = "TypeMismatch"
    UNDECLARED_VARIABLE = "UndeclaredVariable"
    UNINITIALIZED_USE = "UninitializedUse"
    DIVISION_BY_LITERAL_ZERO = "DivisionByLiteralZero"
    DIVISION_BY_TRACKED_ZERO = "DivisionByTrackedZero"
    PARSER_ERROR = "ParserError"
    INTERNAL = "Internal"


@unique
class ErrorPhase(Enum):
    """Pipeline stage where the error was raised."""

    SYNTAX = "syntax"          # Parsing
    TYPE = "type"              # TypeChecker
    DATAFLOW = "dataflow"      # DataFlowAnalyzer
    SYMBOLIC = "symbolic"      # SymbolicExecutor
    INTERNAL = "internal"


class ErrorCode:
    """
    Structured error code ``CS-NNNN``.

    The number ranges are listed in the module docstring.
    """

    __slots__ = ("number", "kind", "phase")

    PREFIX = "CS"

    def __init__(self, number: int, kind: ErrorKind, phase: ErrorPhase) -> None:
        self.number = number
        self.kind = kind
        self.phase = phase

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.PREFIX}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.kind.name})"

    def __hash__(self) -> int:
        return hash(self.number)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    # SYNTAX (1000-1999)
    PARSE_FAILURE = ErrorCode(1000, ErrorKind.PARSER_ERROR, ErrorPhase.SYNTAX)
    MALFORMED_AST = ErrorCode(1001, ErrorKind.PARSER_ERROR, ErrorPhase.SYNTAX)
    NESTING_TOO_DEEP = ErrorCode(1002, ErrorKind.PARSER_ERROR, ErrorPhase.SYNTAX)

    # TYPE (2000-2999)
    TYPE_MISMATCH = ErrorCode(2000, ErrorKind.TYPE_MISMATCH, ErrorPhase.TYPE)
    UNDECLARED_VARIABLE = ErrorCode(2001, ErrorKind.UNDECLARED_VARIABLE, ErrorPhase.TYPE)

    # DATAFLOW (3000-3999)
    UNINITIALIZED_USE = ErrorCode(3000, ErrorKind.UNINITIALIZED_USE, ErrorPhase.DATAFLOW)

    # SYMBOLIC (4000-4999)
    DIVISION_BY_LITERAL_ZERO = ErrorCode(
        4000, ErrorKind.DIVISION_BY_LITERAL_ZERO, ErrorPhase.SYMBOLIC
    )
    DIVISION_BY_TRACKED_ZERO = ErrorCode(
        4001, ErrorKind.DIVISION_BY_TRACKED_ZERO, ErrorPhase.SYMBOLIC
    )

    # INTERNAL (9000-9999)
    INTERNAL_ERROR = ErrorCode(9000, ErrorKind.INTERNAL, ErrorPhase.INTERNAL)
    SCOPE_UNDERFLOW = ErrorCode(9001, ErrorKind.INTERNAL, ErrorPhase.INTERNAL)


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGE FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ErrorNote:
    """Additional context attached to an error (e.g. the declared type)."""

    message: str
    label: str = "note"

    def __str__(self) -> str:
        return f"{self.label}: {self.message}" if self.label else self.message


@dataclass
class ErrorMessage:
    """
    A complete error message with all context.

    This is what the pipeline stores on a report once the exception has
    been caught, so it must be self-contained and serialisable.
    """

    code: ErrorCode
    message: str
    location: Optional[Location] = None
    notes: List[ErrorNote] = field(default_factory=list)
    hint: str = ""

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    @property
    def line(self) -> Optional[int]:
        return self.location.start.line if self.location is not None else None

    def add_note(self, message: str, label: str = "note") -> "ErrorMessage":
        self.notes.append(ErrorNote(message=message, label=label))
        return self

    def to_gcc_format(self, filename: str = "") -> str:
        """Format as ``file:line:col: error: message [CS-NNNN]``."""
        parts = [filename] if filename else []
        if self.location is not None:
            parts.append(str(self.location.start.line))
            parts.append(str(self.location.start.column))
        prefix = ":".join(parts)
        main = f"error: {self.message} [{self.code}]"
        lines = [f"{prefix}: {main}" if prefix else main]
        for note in self.notes:
            lines.append(f"    {note}")
        if self.hint:
            lines.append(f"    hint: {self.hint}")
        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        location = None
        if self.location is not None:
            start, end = self.location.start, self.location.end
            location = {
                "start": {"line": start.line, "column": start.column, "offset": start.offset},
                "end": {"line": end.line, "column": end.column, "offset": end.offset},
            }
        return {
            "code": self.code.code,
            "kind": self.code.kind.value,
            "phase": self.code.phase.value,
            "message": self.message,
            "location": location,
            "notes": [{"label": n.label, "message": n.message} for n in self.notes],
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class CodeSenseError(Exception):
    """
    Base exception for all analysis failures.

    Carries a structured :class:`ErrorMessage`; ``location`` is ``None``
    when the offending node had no source position.
    """

    default_code: ErrorCode = ErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        location: Optional[Location] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.error_message = ErrorMessage(
            code=code or self.default_code,
            message=message,
            location=location,
            hint=hint,
        )

    @property
    def message(self) -> str:
        return self.error_message.message

    @property
    def code(self) -> ErrorCode:
        return self.error_message.code

    @property
    def kind(self) -> ErrorKind:
        return self.error_message.code.kind

    @property
    def location(self) -> Optional[Location]:
        return self.error_message.location

    @property
    def line(self) -> Optional[int]:
        return self.error_message.line

    def add_note(self, message: str, label: str = "note") -> "CodeSenseError":
        self.error_message.add_note(message, label)
        return self

    def to_gcc_format(self, filename: str = "") -> str:
        return self.error_message.to_gcc_format(filename)

    def __str__(self) -> str:
        return self.to_gcc_format()


# ───────────────────────────────────────────────────────────────────────────────
# SYNTAX
# ───────────────────────────────────────────────────────────────────────────────

class ParserError(CodeSenseError):
    """Source text (or a JSON AST) could not be turned into a tree."""

    default_code = ErrorCodes.PARSE_FAILURE


# ───────────────────────────────────────────────────────────────────────────────
# TYPE CHECKING
# ───────────────────────────────────────────────────────────────────────────────

class SemanticError(CodeSenseError):
    """Error raised by the TypeChecker."""

    default_code = ErrorCodes.TYPE_MISMATCH


class TypeMismatchError(SemanticError):
    """A value's inferred type differs from the variable's declared type."""

    def __init__(
        self,
        declared_type: str,
        inferred_type: str,
        name: str = "",
        location: Optional[Location] = None,
    ) -> None:
        target = f"variable '{name}'" if name else "this operation"
        super().__init__(
            f"Cannot assign value of type '{inferred_type}' to {target} "
            f"(expects '{declared_type}').",
            code=ErrorCodes.TYPE_MISMATCH,
            location=location,
        )
        self.declared_type = declared_type
        self.inferred_type = inferred_type
        self.name = name
        self.add_note(f"Expected type: {declared_type}")
        self.add_note(f"Actual type: {inferred_type}")


class UndeclaredVariableError(SemanticError):
    """Assignment to a name that was never declared."""

    def __init__(self, name: str, location: Optional[Location] = None) -> None:
        super().__init__(
            f"Variable '{name}' is not declared.",
            code=ErrorCodes.UNDECLARED_VARIABLE,
            location=location,
            hint=f"Declare it first, e.g. 'int {name} = 0;'",
        )
        self.name = name


# ───────────────────────────────────────────────────────────────────────────────
# DATA FLOW
# ───────────────────────────────────────────────────────────────────────────────

class DataFlowError(CodeSenseError):
    """Error raised by the DataFlowAnalyzer."""

    default_code = ErrorCodes.UNINITIALIZED_USE


class UninitializedUseError(DataFlowError):
    """A variable is read before it is definitely assigned."""

    def __init__(self, name: str, location: Optional[Location] = None) -> None:
        super().__init__(
            f"Variable '{name}' is used here, but it has not been initialized yet.",
            code=ErrorCodes.UNINITIALIZED_USE,
            location=location,
        )
        self.name = name


# ───────────────────────────────────────────────────────────────────────────────
# MATH SAFETY
# ───────────────────────────────────────────────────────────────────────────────

class MathSafetyError(CodeSenseError):
    """Error raised by the SymbolicExecutor."""

    default_code = ErrorCodes.DIVISION_BY_LITERAL_ZERO


class DivisionByLiteralZeroError(MathSafetyError):
    """``x / 0`` or ``x % 0.0`` written out literally."""

    def __init__(self, operator: str = "/", location: Optional[Location] = None) -> None:
        what = "Modulo" if operator == "%" else "Division"
        super().__init__(
            f"{what} by Literal Zero.",
            code=ErrorCodes.DIVISION_BY_LITERAL_ZERO,
            location=location,
        )
        self.operator = operator


class DivisionByTrackedZeroError(MathSafetyError):
    """The divisor is a variable statically known to hold zero."""

    def __init__(
        self,
        name: str,
        operator: str = "/",
        location: Optional[Location] = None,
    ) -> None:
        what = "Modulo" if operator == "%" else "Division"
        super().__init__(
            f"{what} by Zero: variable '{name}' is known to be 0 here.",
            code=ErrorCodes.DIVISION_BY_TRACKED_ZERO,
            location=location,
        )
        self.name = name
        self.operator = operator


# ───────────────────────────────────────────────────────────────────────────────
# INTERNAL
# ───────────────────────────────────────────────────────────────────────────────

class InternalError(CodeSenseError):
    """Analyzer bug (should never happen)."""

    default_code = ErrorCodes.INTERNAL_ERROR


class ScopeUnderflowError(InternalError):
    """``exit_scope`` was called on the outermost scope."""

    def __init__(self) -> None:
        super().__init__(
            "Cannot exit the outermost scope.",
            code=ErrorCodes.SCOPE_UNDERFLOW,
        )
