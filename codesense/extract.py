"""
codesense/extract.py — display views over an AST
=================================================

Three read-only views for front-ends:

* :func:`extract_tokens` — a token list rebuilt from the tree (wrapped in
  ``int main ( ) { ... }``).  It is a display aid, not a lexer: spacing,
  comments and parentheses inside expressions are not reproduced.
* :func:`extract_symbols` — every declaration as ``(type, name, line)``.
* :func:`extract_math_ops` — every binary operation as
  ``(op, left, right, line)``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from codesense import ast as A
from codesense.visitor import ASTVisitor, walk

__all__ = [
    "TokenKind",
    "Token",
    "SymbolEntry",
    "MathOp",
    "TokenExtractor",
    "extract_tokens",
    "extract_symbols",
    "extract_math_ops",
]


class TokenKind(enum.Enum):
    KEYWORD = "Keyword"
    IDENTIFIER = "Identifier"
    SEPARATOR = "Separator"
    OPERATOR = "Operator"
    LITERAL = "Literal"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "value": self.value}


@dataclass(frozen=True)
class SymbolEntry:
    type: str
    name: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "name": self.name, "line": self.line}


@dataclass(frozen=True)
class MathOp:
    op: str
    left: str
    right: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "left": self.left, "right": self.right, "line": self.line}


def _line(node: A.Node) -> int:
    return node.location.line if node.location is not None else 0


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenExtractor(ASTVisitor):
    """Appends tokens for each node to the list passed through ``visit``."""

    def _emit(self, tokens: List[Token], kind: TokenKind, *values: str) -> None:
        tokens.extend(Token(kind, value) for value in values)

    def visit_program(self, node: A.Program, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.KEYWORD, "int")
        self._emit(tokens, TokenKind.IDENTIFIER, "main")
        self._emit(tokens, TokenKind.SEPARATOR, "(", ")", "{")
        for child in node.body:
            self.visit(child, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, "}")

    def visit_block(self, node: A.Block, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.SEPARATOR, "{")
        for child in node.body:
            self.visit(child, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, "}")

    def visit_variable_decl(self, node: A.VariableDecl, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.KEYWORD, node.var_type)
        self._emit(tokens, TokenKind.IDENTIFIER, node.name)
        if node.value is not None:
            self._emit(tokens, TokenKind.OPERATOR, "=")
            self.visit(node.value, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, ";")

    def visit_assignment(self, node: A.Assignment, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.IDENTIFIER, node.name)
        self._emit(tokens, TokenKind.OPERATOR, "=")
        self.visit(node.value, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, ";")

    def visit_if_statement(self, node: A.IfStatement, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.KEYWORD, "if")
        self._emit(tokens, TokenKind.SEPARATOR, "(")
        self.visit(node.condition, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, ")")
        self.visit(node.body, tokens)
        if node.else_body is not None:
            self._emit(tokens, TokenKind.KEYWORD, "else")
            self.visit(node.else_body, tokens)

    def visit_while_statement(self, node: A.WhileStatement, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.KEYWORD, "while")
        self._emit(tokens, TokenKind.SEPARATOR, "(")
        self.visit(node.condition, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, ")")
        self.visit(node.body, tokens)

    def visit_for_statement(self, node: A.ForStatement, tokens: List[Token]) -> None:
        # The header is not modelled; render it as C's bare ``for (;;)``.
        self._emit(tokens, TokenKind.KEYWORD, "for")
        self._emit(tokens, TokenKind.SEPARATOR, "(", ";", ";", ")")
        self.visit(node.body, tokens)

    def visit_return_statement(self, node: A.ReturnStatement, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.KEYWORD, "return")
        if node.value is not None:
            self.visit(node.value, tokens)
        self._emit(tokens, TokenKind.SEPARATOR, ";")

    def visit_binary_expr(self, node: A.BinaryExpr, tokens: List[Token]) -> None:
        self.visit(node.left, tokens)
        self._emit(tokens, TokenKind.OPERATOR, node.operator)
        self.visit(node.right, tokens)

    def visit_identifier(self, node: A.Identifier, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.IDENTIFIER, node.name)

    def visit_integer(self, node: A.Integer, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.LITERAL, str(node.value))

    def visit_float(self, node: A.Float, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.LITERAL, str(node.value))

    def visit_string(self, node: A.String, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.LITERAL, f'"{node.value}"')

    def visit_boolean(self, node: A.Boolean, tokens: List[Token]) -> None:
        self._emit(tokens, TokenKind.LITERAL, "true" if node.value else "false")


def extract_tokens(program: A.Node) -> List[Token]:
    tokens: List[Token] = []
    TokenExtractor().visit(program, tokens)
    return tokens


# ---------------------------------------------------------------------------
# Symbols and math operations
# ---------------------------------------------------------------------------


def extract_symbols(program: A.Node) -> List[SymbolEntry]:
    """Every ``VariableDecl`` in source order, nested ones included."""
    return [
        SymbolEntry(node.var_type, node.name, _line(node))
        for node in walk(program)
        if isinstance(node, A.VariableDecl)
    ]


def _operand(node: Optional[A.Expression]) -> str:
    if isinstance(node, A.Identifier):
        return node.name
    if isinstance(node, (A.Integer, A.Float)):
        return str(node.value)
    if isinstance(node, A.BinaryExpr):
        return "(Expr)"
    return "?"


def extract_math_ops(program: A.Node) -> List[MathOp]:
    """Every ``BinaryExpr``, outer operations before the ones they contain."""
    return [
        MathOp(node.operator, _operand(node.left), _operand(node.right), _line(node))
        for node in walk(program)
        if isinstance(node, A.BinaryExpr)
    ]
