"""
codesense/parser.py — Parse tree → AST
======================================

Turns source text into a :class:`codesense.ast.Program` using the PEG
grammar in :mod:`codesense.grammar`.

Usage::

    from codesense.parser import parse

    program = parse('''
        int main() {
            int x = 10;
            while (x > 0) { x = x - 1; }
            return 0;
        }
    ''')

The analysis passes never import this module: they only consume the AST,
which may equally come from an external front-end via
:func:`codesense.ast.from_dict`.
"""

from __future__ import annotations

import bisect
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Union

from parsimonious.exceptions import ParseError, VisitationError
from parsimonious.nodes import Node, NodeVisitor

from codesense import ast as A
from codesense.errors import ErrorCodes, ParserError
from codesense.grammar import GRAMMAR
from codesense.visitor import check_nesting

__all__ = ["ASTBuilder", "parse", "parse_file"]

logger = logging.getLogger(__name__)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", '"': '"', "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(.)")


def _unescape(raw: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), raw)


def _many(value: Any) -> List[Any]:
    """Children of a ``*``/``?`` rule; an empty match comes back as a Node."""
    return value if isinstance(value, list) else []


class ASTBuilder(NodeVisitor):
    """Transforms a parsimonious parse tree into a codesense AST."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]

    # ─────────────────────────────────────────────────────────────
    # Locations
    # ─────────────────────────────────────────────────────────────

    def position(self, offset: int) -> A.Position:
        index = bisect.bisect_right(self._line_starts, offset) - 1
        return A.Position(
            line=index + 1,
            column=offset - self._line_starts[index] + 1,
            offset=offset,
        )

    def location(self, node: Node) -> A.Location:
        return A.Location(start=self.position(node.start), end=self.position(node.end))

    @staticmethod
    def _span(left: A.Expression, right: A.Expression) -> Optional[A.Location]:
        if left.location is None or right.location is None:
            return None
        return A.Location(start=left.location.start, end=right.location.end)

    def generic_visit(self, node, visited_children):
        """Default: return children or the node itself."""
        return visited_children or node

    # ─────────────────────────────────────────────────────────────
    # Top level
    # ─────────────────────────────────────────────────────────────

    def visit_program(self, node, visited_children):
        _, body, _ = visited_children
        return A.Program(body=tuple(body), location=self.location(node))

    def visit_body(self, node, visited_children):
        return visited_children[0]

    def visit_main_function(self, node, visited_children):
        return visited_children[9]

    def visit_statements(self, node, visited_children):
        return _many(visited_children)

    def visit_statement_item(self, node, visited_children):
        _, statement = visited_children
        return statement

    # ─────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────

    def visit_statement(self, node, visited_children):
        return visited_children[0]

    def visit_block(self, node, visited_children):
        return A.Block(body=tuple(visited_children[1]), location=self.location(node))

    def visit_var_decl(self, node, visited_children):
        var_type, _, name, _, initializer, _, _ = visited_children
        initializer = _many(initializer)
        return A.VariableDecl(
            var_type=var_type,
            name=name,
            value=initializer[0] if initializer else None,
            location=self.location(node),
        )

    def visit_initializer(self, node, visited_children):
        return visited_children[-1]

    def visit_assignment(self, node, visited_children):
        return A.Assignment(
            name=visited_children[0],
            value=visited_children[5],
            location=self.location(node),
        )

    def visit_if_stmt(self, node, visited_children):
        else_clause = _many(visited_children[9])
        return A.IfStatement(
            condition=visited_children[4],
            body=visited_children[8],
            else_body=else_clause[0] if else_clause else None,
            location=self.location(node),
        )

    def visit_else_clause(self, node, visited_children):
        return visited_children[3]

    def visit_while_stmt(self, node, visited_children):
        return A.WhileStatement(
            condition=visited_children[4],
            body=visited_children[8],
            location=self.location(node),
        )

    def visit_return_stmt(self, node, visited_children):
        value = _many(visited_children[1])
        return A.ReturnStatement(
            value=value[0] if value else None,
            location=self.location(node),
        )

    def visit_return_value(self, node, visited_children):
        return visited_children[1]

    # ─────────────────────────────────────────────────────────────
    # Expressions
    # ─────────────────────────────────────────────────────────────

    def _fold(self, first, tails):
        result = first
        for operator, right in _many(tails):
            result = A.BinaryExpr(
                operator=operator,
                left=result,
                right=right,
                location=self._span(result, right),
            )
        return result

    def visit_expression(self, node, visited_children):
        return self._fold(*visited_children)

    def visit_additive(self, node, visited_children):
        return self._fold(*visited_children)

    def visit_term(self, node, visited_children):
        return self._fold(*visited_children)

    def _tail(self, node, visited_children):
        _, operator, _, right = visited_children
        return (operator, right)

    visit_comparison_tail = _tail
    visit_additive_tail = _tail
    visit_term_tail = _tail

    def _operator(self, node, visited_children):
        return node.text

    visit_comparison_op = _operator
    visit_additive_op = _operator
    visit_multiplicative_op = _operator

    def visit_primary(self, node, visited_children):
        value = visited_children[0]
        if isinstance(value, str):
            return A.Identifier(name=value, location=self.location(node))
        return value

    def visit_paren(self, node, visited_children):
        return visited_children[2]

    # ─────────────────────────────────────────────────────────────
    # Lexical
    # ─────────────────────────────────────────────────────────────

    def visit_float_lit(self, node, visited_children):
        return A.Float(value=float(node.text), location=self.location(node))

    def visit_integer_lit(self, node, visited_children):
        return A.Integer(value=int(node.text), location=self.location(node))

    def visit_string_lit(self, node, visited_children):
        return A.String(value=_unescape(node.text[1:-1]), location=self.location(node))

    def visit_boolean_lit(self, node, visited_children):
        return A.Boolean(value=node.text == "true", location=self.location(node))

    def visit_identifier(self, node, visited_children):
        return node.text

    def visit_type_name(self, node, visited_children):
        return node.text


def _syntax_error(source: str, exc: ParseError) -> ParserError:
    builder = ASTBuilder(source)
    pos = min(exc.pos, len(source))
    start = builder.position(pos)
    end = builder.position(min(pos + 1, len(source)))
    snippet = source[pos:pos + 20].split("\n", 1)[0]
    if snippet:
        message = f"Syntax Error: unexpected '{snippet}'."
    else:
        message = "Syntax Error: unexpected end of input."
    return ParserError(
        message,
        code=ErrorCodes.PARSE_FAILURE,
        location=A.Location(start=start, end=end),
    )


def _too_deep() -> ParserError:
    return ParserError("Source nests too deeply to parse.", code=ErrorCodes.NESTING_TOO_DEEP)


def parse(source: str) -> A.Program:
    """Parse *source* into a ``Program``.

    Raises
    ------
    ParserError
        On any syntax error; ``location`` points at the offending text.
        Also raised when the program nests deeper than
        :data:`~codesense.visitor.MAX_NESTING_DEPTH`.
    """
    try:
        tree = GRAMMAR.parse(source)
    except ParseError as exc:
        logger.debug("PEG parse failed at offset %d", exc.pos)
        raise _syntax_error(source, exc) from exc
    except RecursionError as exc:
        raise _too_deep() from exc
    try:
        program = ASTBuilder(source).visit(tree)
    except VisitationError as exc:
        raise ParserError(
            f"Could not build the syntax tree: {exc}",
            code=ErrorCodes.PARSE_FAILURE,
        ) from exc
    except RecursionError as exc:
        raise _too_deep() from exc
    check_nesting(program)
    logger.debug("Parsed %d top-level statement(s)", len(program.body))
    return program


def parse_file(path: Union[str, Path]) -> A.Program:
    """Read and parse a source file (UTF-8)."""
    text = Path(path).read_text(encoding="utf-8")
    return parse(text)
