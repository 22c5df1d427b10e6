"""
codesense/typecheck.py — declared-type validation

Walks statements in order, recording every declaration in a
:class:`~codesense.symbols.SymbolTable` and checking each stored value
against the declared type of its target.

Inference rules
---------------
* literals map directly: ``Integer → int``, ``Float → float``,
  ``String → string``, ``Boolean → bool``;
* an ``Identifier`` takes its declared type, ``"unknown"`` if undeclared;
* comparison operators always give ``bool``;
* any other operator gives ``float`` when either side is ``float``,
  otherwise the *left* operand's type.  The right operand is not checked
  against the left unless ``strict_operand_types`` is set, in which case
  two known, non-``float`` operand types must match for every operator,
  comparisons included.

``"unknown"`` never causes a mismatch.  Conditions of ``if``/``while``
and ``return`` values are not type-checked.
"""

from __future__ import annotations

import logging
from typing import Optional

from codesense import ast as A
from codesense.errors import TypeMismatchError, UndeclaredVariableError
from codesense.symbols import SymbolTable
from codesense.visitor import ASTVisitor, walk

__all__ = ["UNKNOWN", "TypeChecker", "type_check"]

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

_LITERAL_TYPES = {
    A.Integer: "int",
    A.Float: "float",
    A.String: "string",
    A.Boolean: "bool",
}


class TypeChecker(ASTVisitor):
    """Fail-fast type checker over one program."""

    def __init__(
        self,
        symbols: Optional[SymbolTable] = None,
        strict_operand_types: bool = False,
    ) -> None:
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.strict_operand_types = strict_operand_types

    def check(self, program: A.Node) -> SymbolTable:
        self.visit(program)
        return self.symbols

    # --- inference -----------------------------------------------------

    def infer_type(self, node: Optional[A.Expression]) -> str:
        if node is None:
            return UNKNOWN
        literal = _LITERAL_TYPES.get(type(node))
        if literal is not None:
            return literal
        if isinstance(node, A.Identifier):
            return self.symbols.lookup(node.name) or UNKNOWN
        if isinstance(node, A.BinaryExpr):
            left = self.infer_type(node.left)
            right = self.infer_type(node.right)
            if (
                self.strict_operand_types
                and UNKNOWN not in (left, right)
                and "float" not in (left, right)
                and left != right
            ):
                raise TypeMismatchError(left, right, location=node.location)
            if node.operator in A.COMPARISON_OPERATORS:
                return "bool"
            if left == "float" or right == "float":
                return "float"
            return left
        return UNKNOWN

    def _require_declared(self, value: Optional[A.Expression]) -> None:
        if value is None:
            return
        for node in walk(value):
            if isinstance(node, A.Identifier) and self.symbols.lookup(node.name) is None:
                raise UndeclaredVariableError(node.name, location=node.location)

    # --- statements ----------------------------------------------------

    def visit_program(self, node: A.Program) -> None:
        for child in node.body:
            self.visit(child)

    def visit_block(self, node: A.Block) -> None:
        for child in node.body:
            self.visit(child)

    def visit_variable_decl(self, node: A.VariableDecl) -> None:
        inferred = self.infer_type(node.value)
        # Defined before validation: ``int x = x;`` is left to the
        # data-flow pass.
        self.symbols.define(node.name, node.var_type)
        self._require_declared(node.value)
        if inferred != UNKNOWN and inferred != node.var_type:
            raise TypeMismatchError(node.var_type, inferred, node.name, node.location)

    def visit_assignment(self, node: A.Assignment) -> None:
        declared = self.symbols.lookup(node.name)
        if declared is None:
            raise UndeclaredVariableError(node.name, location=node.location)
        self._require_declared(node.value)
        inferred = self.infer_type(node.value)
        if inferred != UNKNOWN and inferred != declared:
            raise TypeMismatchError(declared, inferred, node.name, node.location)

    def visit_if_statement(self, node: A.IfStatement) -> None:
        self.visit(node.body)
        if node.else_body is not None:
            self.visit(node.else_body)

    def visit_while_statement(self, node: A.WhileStatement) -> None:
        self.visit(node.body)

    def visit_for_statement(self, node: A.ForStatement) -> None:
        self.visit(node.body)


def type_check(
    program: A.Node,
    symbols: Optional[SymbolTable] = None,
    strict_operand_types: bool = False,
) -> SymbolTable:
    """Type-check *program*; return the populated symbol table.

    Raises ``TypeMismatchError`` or ``UndeclaredVariableError``.
    """
    checker = TypeChecker(symbols, strict_operand_types=strict_operand_types)
    table = checker.check(program)
    logger.debug("Type check passed (%d symbol(s))", len(dict(table.items())))
    return table
