"""codesense/ast.py – AST definitions for the teaching language.

The teaching language is a small C-like subset: typed variable
declarations, assignment, binary expressions, ``if``/``else``, ``while``
and ``return``.  This module defines the *abstract* syntax – a closed set
of frozen dataclasses that the parser (or an external front-end, through
:func:`from_dict`) produces and every analysis pass consumes read-only.

Design invariants
-----------------
* Every AST node is a frozen dataclass (immutable after construction).
* Nodes that carry children use tuples, never lists.
* Every node may record its source ``Location`` for diagnostics and
  editor highlighting.  Synthesised nodes carry ``None``.
* Each node class exposes a ``kind`` class attribute equal to the tag the
  external parser uses in its JSON output (``"VariableDecl"``, ...).

Module layout
-------------
§1  Source locations
§2  Expressions
§3  Statements
§4  JSON (de)serialisation
§5  S-expression rendering
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Union

from sexpdata import Symbol, dumps

__all__ = [
    "Position",
    "Location",
    "Integer",
    "Float",
    "String",
    "Boolean",
    "Identifier",
    "BinaryExpr",
    "VariableDecl",
    "Assignment",
    "IfStatement",
    "WhileStatement",
    "ForStatement",
    "ReturnStatement",
    "Block",
    "Program",
    "Node",
    "Expression",
    "Statement",
    "COMPARISON_OPERATORS",
    "DIVISION_OPERATORS",
    "is_numeric_literal",
    "from_dict",
    "to_dict",
    "location_to_dict",
    "to_sexp",
]

# ════════════════════════════════════════════════════════════════════════
# §1  Source locations
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Position:
    """A point in the source text.

    ``line`` and ``column`` are 1-based, ``offset`` is the 0-based
    character index (what an editor needs for selection ranges).
    """

    line: int = 0
    column: int = 0
    offset: int = 0


@dataclass(frozen=True, slots=True)
class Location:
    """A half-open ``[start, end)`` range of source text."""

    start: Position
    end: Position

    @property
    def line(self) -> int:
        return self.start.line

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}"


# ════════════════════════════════════════════════════════════════════════
# §2  Expressions
# ════════════════════════════════════════════════════════════════════════

#: Operators whose result is always ``bool``.
COMPARISON_OPERATORS = frozenset({">", "<", ">=", "<=", "==", "!="})

#: Operators checked for a zero right operand.
DIVISION_OPERATORS = frozenset({"/", "%"})


@dataclass(frozen=True, slots=True)
class Integer:
    kind: ClassVar[str] = "Integer"

    value: int
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class Float:
    kind: ClassVar[str] = "Float"

    value: float
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class String:
    kind: ClassVar[str] = "String"

    value: str
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class Boolean:
    kind: ClassVar[str] = "Boolean"

    value: bool
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class Identifier:
    """A use of a variable by name."""

    kind: ClassVar[str] = "Identifier"

    name: str
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class BinaryExpr:
    """``left <operator> right``; the operator is kept as source text."""

    kind: ClassVar[str] = "BinaryExpr"

    operator: str
    left: Expression
    right: Expression
    location: Optional[Location] = None


Expression = Union[Integer, Float, String, Boolean, Identifier, BinaryExpr]


def is_numeric_literal(node: Any) -> bool:
    """``True`` for ``Integer`` and ``Float`` literals (not ``Boolean``)."""
    return isinstance(node, (Integer, Float))


# ════════════════════════════════════════════════════════════════════════
# §3  Statements
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class VariableDecl:
    """``<var_type> <name> [= value];``"""

    kind: ClassVar[str] = "VariableDecl"

    var_type: str
    name: str
    value: Optional[Expression] = None
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class Assignment:
    kind: ClassVar[str] = "Assignment"

    name: str
    value: Expression
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class IfStatement:
    kind: ClassVar[str] = "IfStatement"

    condition: Expression
    body: Statement
    else_body: Optional[Statement] = None
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class WhileStatement:
    kind: ClassVar[str] = "WhileStatement"

    condition: Expression
    body: Statement
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class ForStatement:
    """A counted loop from an external front-end.

    The grammar reserves ``for`` without parsing it, so only trees loaded
    through :func:`from_dict` contain one.  The loop header is not
    modelled; passes see the body alone.
    """

    kind: ClassVar[str] = "ForStatement"

    body: Statement
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    kind: ClassVar[str] = "ReturnStatement"

    value: Optional[Expression] = None
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class Block:
    """``{ ... }`` – an ordered statement sequence."""

    kind: ClassVar[str] = "Block"

    body: Tuple[Statement, ...] = ()
    location: Optional[Location] = None


@dataclass(frozen=True, slots=True)
class Program:
    """Root of every tree."""

    kind: ClassVar[str] = "Program"

    body: Tuple[Statement, ...] = ()
    location: Optional[Location] = None


Statement = Union[
    VariableDecl,
    Assignment,
    IfStatement,
    WhileStatement,
    ForStatement,
    ReturnStatement,
    Block,
]

Node = Union[Program, Statement, Expression]


# ════════════════════════════════════════════════════════════════════════
# §4  JSON (de)serialisation
# ════════════════════════════════════════════════════════════════════════
#
# The external front-end emits trees shaped like
#
#   {"type": "VariableDecl", "varType": "int", "name": "x",
#    "value": {"type": "Integer", "value": 10},
#    "location": {"start": {"line": 2, "column": 3, "offset": 15},
#                 "end":   {"line": 2, "column": 14, "offset": 26}}}
#
# ``from_dict`` / ``to_dict`` convert between that shape and the
# dataclasses above.


def _position_from_dict(data: Mapping[str, Any]) -> Position:
    return Position(
        line=int(data.get("line", 0)),
        column=int(data.get("column", 0)),
        offset=int(data.get("offset", 0)),
    )


def _location_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[Location]:
    if not data:
        return None
    return Location(
        start=_position_from_dict(data.get("start") or {}),
        end=_position_from_dict(data.get("end") or {}),
    )


def _body_from_dict(raw: Any) -> Tuple[Statement, ...]:
    # Some front-ends emit a bare node instead of a one-element list.
    if raw is None:
        return ()
    if isinstance(raw, (list, tuple)):
        return tuple(_from_dict(child) for child in raw)
    return (_from_dict(raw),)


def _optional(raw: Any) -> Optional[Node]:
    return _from_dict(raw) if raw is not None else None


def from_dict(data: Mapping[str, Any]) -> Node:
    """Build an AST from the external parser's JSON shape.

    Raises
    ------
    ParserError
        If *data* is not a mapping, carries an unknown ``type`` tag, has a
        missing or ill-typed field, or nests too deeply for the passes.
    """
    from codesense.errors import ErrorCodes, ParserError
    from codesense.visitor import check_nesting

    try:
        node = _from_dict(data)
    except RecursionError as exc:
        raise ParserError(
            "AST nesting is too deep to analyse.",
            code=ErrorCodes.NESTING_TOO_DEEP,
        ) from exc
    check_nesting(node)
    return node


def _from_dict(data: Mapping[str, Any]) -> Node:
    from codesense.errors import ErrorCodes, ParserError

    if not isinstance(data, Mapping):
        raise ParserError(
            f"Expected an AST object, got {type(data).__name__}",
            code=ErrorCodes.MALFORMED_AST,
        )

    tag = data.get("type")
    try:
        loc = _location_from_dict(data.get("location"))
    except (AttributeError, TypeError, ValueError) as exc:
        raise ParserError(
            f"{tag} node has a malformed location",
            code=ErrorCodes.MALFORMED_AST,
        ) from exc
    try:
        if tag == "Program":
            return Program(body=_body_from_dict(data.get("body")), location=loc)
        if tag == "Block":
            return Block(body=_body_from_dict(data.get("body")), location=loc)
        if tag == "VariableDecl":
            return VariableDecl(
                var_type=data["varType"],
                name=data["name"],
                value=_optional(data.get("value")),
                location=loc,
            )
        if tag == "Assignment":
            return Assignment(name=data["name"], value=_from_dict(data["value"]), location=loc)
        if tag == "BinaryExpr":
            return BinaryExpr(
                operator=data["operator"],
                left=_from_dict(data["left"]),
                right=_from_dict(data["right"]),
                location=loc,
            )
        if tag == "IfStatement":
            return IfStatement(
                condition=_from_dict(data["condition"]),
                body=_from_dict(data["body"]),
                else_body=_optional(data.get("elseBody")),
                location=loc,
            )
        if tag == "WhileStatement":
            return WhileStatement(
                condition=_from_dict(data["condition"]),
                body=_from_dict(data["body"]),
                location=loc,
            )
        if tag == "ForStatement":
            return ForStatement(body=_from_dict(data["body"]), location=loc)
        if tag == "ReturnStatement":
            return ReturnStatement(value=_optional(data.get("value")), location=loc)
        if tag == "Integer":
            return Integer(value=int(data["value"]), location=loc)
        if tag == "Float":
            return Float(value=float(data["value"]), location=loc)
        if tag == "String":
            return String(value=str(data["value"]), location=loc)
        if tag == "Boolean":
            return Boolean(value=bool(data["value"]), location=loc)
        if tag == "Identifier":
            return Identifier(name=data["name"], location=loc)
    except KeyError as exc:
        raise ParserError(
            f"{tag} node is missing field {exc.args[0]!r}",
            code=ErrorCodes.MALFORMED_AST,
            location=loc,
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ParserError(
            f"{tag} node has a malformed field: {exc}",
            code=ErrorCodes.MALFORMED_AST,
            location=loc,
        ) from exc

    raise ParserError(
        f"Unknown AST node type: {tag!r}",
        code=ErrorCodes.MALFORMED_AST,
        location=loc,
    )


def location_to_dict(loc: Optional[Location]) -> Optional[Dict[str, Any]]:
    if loc is None:
        return None
    return {
        "start": {"line": loc.start.line, "column": loc.start.column, "offset": loc.start.offset},
        "end": {"line": loc.end.line, "column": loc.end.column, "offset": loc.end.offset},
    }


def to_dict(node: Node) -> Dict[str, Any]:
    """Inverse of :func:`from_dict`."""
    out: Dict[str, Any] = {"type": node.kind}
    if isinstance(node, (Program, Block)):
        out["body"] = [to_dict(child) for child in node.body]
    elif isinstance(node, VariableDecl):
        out["varType"] = node.var_type
        out["name"] = node.name
        out["value"] = to_dict(node.value) if node.value is not None else None
    elif isinstance(node, Assignment):
        out["name"] = node.name
        out["value"] = to_dict(node.value)
    elif isinstance(node, BinaryExpr):
        out["operator"] = node.operator
        out["left"] = to_dict(node.left)
        out["right"] = to_dict(node.right)
    elif isinstance(node, IfStatement):
        out["condition"] = to_dict(node.condition)
        out["body"] = to_dict(node.body)
        out["elseBody"] = to_dict(node.else_body) if node.else_body is not None else None
    elif isinstance(node, WhileStatement):
        out["condition"] = to_dict(node.condition)
        out["body"] = to_dict(node.body)
    elif isinstance(node, ForStatement):
        out["body"] = to_dict(node.body)
    elif isinstance(node, ReturnStatement):
        out["value"] = to_dict(node.value) if node.value is not None else None
    elif isinstance(node, Identifier):
        out["name"] = node.name
    elif isinstance(node, (Integer, Float, String, Boolean)):
        out["value"] = node.value
    else:
        raise TypeError(f"Unknown AST node type: {type(node).__name__}")
    out["location"] = location_to_dict(node.location)
    return out


# ════════════════════════════════════════════════════════════════════════
# §5  S-expression rendering
# ════════════════════════════════════════════════════════════════════════
#
# Debugging aid for ``codesense parse --format sexp``; locations are
# dropped.


def _sexp(node: Optional[Node]) -> Any:
    if node is None:
        return Symbol("nil")
    if isinstance(node, (Program, Block)):
        return [Symbol(node.kind)] + [_sexp(child) for child in node.body]
    if isinstance(node, VariableDecl):
        return [Symbol("VariableDecl"), Symbol(node.var_type), Symbol(node.name), _sexp(node.value)]
    if isinstance(node, Assignment):
        return [Symbol("Assignment"), Symbol(node.name), _sexp(node.value)]
    if isinstance(node, BinaryExpr):
        return [Symbol(node.operator), _sexp(node.left), _sexp(node.right)]
    if isinstance(node, IfStatement):
        return [Symbol("IfStatement"), _sexp(node.condition), _sexp(node.body), _sexp(node.else_body)]
    if isinstance(node, WhileStatement):
        return [Symbol("WhileStatement"), _sexp(node.condition), _sexp(node.body)]
    if isinstance(node, ForStatement):
        return [Symbol("ForStatement"), _sexp(node.body)]
    if isinstance(node, ReturnStatement):
        return [Symbol("ReturnStatement"), _sexp(node.value)]
    if isinstance(node, Identifier):
        return Symbol(node.name)
    if isinstance(node, Boolean):
        return Symbol("true" if node.value else "false")
    if isinstance(node, (Integer, Float, String)):
        return node.value
    raise TypeError(f"Unknown AST node type: {type(node).__name__}")


def to_sexp(node: Node) -> str:
    """Return a compact S-expression string for *node*."""
    return dumps(_sexp(node))
