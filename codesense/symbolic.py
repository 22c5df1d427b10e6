"""
codesense/symbolic.py — division and modulo safety

A lightweight abstract interpreter: it tracks which variables are bound
to a statically known numeric value (the *constraint map*) and rejects
any ``/`` or ``%`` whose right operand is the literal zero or a variable
known to hold zero.

Two propagation modes are supported:

``branch_scoped_constants=False`` (default)
    One mutable map is threaded through every branch and loop body, so
    facts learned inside an ``if`` survive after it whether or not the
    branch ran.  Optimistic, and the behaviour older tooling relied on.

``branch_scoped_constants=True``
    Must-analysis.  Each branch runs on a copy; afterwards only the
    bindings that agree on every path (including the path that skips
    the branch or loop) are kept.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from codesense import ast as A
from codesense.errors import DivisionByLiteralZeroError, DivisionByTrackedZeroError
from codesense.visitor import DepthFirstVisitor

__all__ = ["Constraints", "SymbolicExecutor", "check_math_safety"]

logger = logging.getLogger(__name__)

Number = Union[int, float]
Constraints = Dict[str, Number]


def _meet(*paths: Constraints) -> Constraints:
    first, *rest = paths
    return {
        name: value
        for name, value in first.items()
        if all(name in other and other[name] == value for other in rest)
    }


class SymbolicExecutor(DepthFirstVisitor):
    """Fail-fast division-by-zero checker."""

    def __init__(self, branch_scoped_constants: bool = False) -> None:
        self.branch_scoped_constants = branch_scoped_constants

    def check(self, program: A.Node, constraints: Optional[Constraints] = None) -> Constraints:
        constraints = {} if constraints is None else constraints
        self.visit(program, constraints)
        return constraints

    # --- constraint updates ----------------------------------------------

    @staticmethod
    def _bind(name: str, value: Optional[A.Expression], constraints: Constraints) -> None:
        if A.is_numeric_literal(value):
            constraints[name] = value.value
        elif isinstance(value, A.Identifier) and value.name in constraints:
            constraints[name] = constraints[value.name]
        else:
            constraints.pop(name, None)

    def visit_variable_decl(self, node: A.VariableDecl, constraints: Constraints) -> None:
        if node.value is not None:
            self.visit(node.value, constraints)
        self._bind(node.name, node.value, constraints)

    def visit_assignment(self, node: A.Assignment, constraints: Constraints) -> None:
        self.visit(node.value, constraints)
        self._bind(node.name, node.value, constraints)

    # --- control flow ----------------------------------------------------

    def visit_if_statement(self, node: A.IfStatement, constraints: Constraints) -> None:
        self.visit(node.condition, constraints)
        if not self.branch_scoped_constants:
            self.visit(node.body, constraints)
            if node.else_body is not None:
                self.visit(node.else_body, constraints)
            return

        then_path = dict(constraints)
        self.visit(node.body, then_path)
        if node.else_body is not None:
            else_path = dict(constraints)
            self.visit(node.else_body, else_path)
        else:
            else_path = constraints
        merged = _meet(then_path, else_path)
        constraints.clear()
        constraints.update(merged)

    def _loop_body(self, body: A.Statement, constraints: Constraints) -> None:
        if not self.branch_scoped_constants:
            self.visit(body, constraints)
            return

        body_path = dict(constraints)
        self.visit(body, body_path)
        merged = _meet(constraints, body_path)
        constraints.clear()
        constraints.update(merged)

    def visit_while_statement(self, node: A.WhileStatement, constraints: Constraints) -> None:
        self.visit(node.condition, constraints)
        self._loop_body(node.body, constraints)

    def visit_for_statement(self, node: A.ForStatement, constraints: Constraints) -> None:
        self._loop_body(node.body, constraints)

    # --- the check -------------------------------------------------------

    def visit_binary_expr(self, node: A.BinaryExpr, constraints: Constraints) -> None:
        if node.operator in A.DIVISION_OPERATORS:
            divisor = node.right
            if A.is_numeric_literal(divisor) and divisor.value == 0:
                raise DivisionByLiteralZeroError(node.operator, location=node.location)
            if isinstance(divisor, A.Identifier) and constraints.get(divisor.name) == 0:
                raise DivisionByTrackedZeroError(
                    divisor.name, node.operator, location=node.location
                )
        self.generic_visit(node, constraints)


def check_math_safety(program: A.Node, branch_scoped_constants: bool = False) -> Constraints:
    """Check every division and modulo in *program*.

    Returns the final constraint map.  Raises
    ``DivisionByLiteralZeroError`` or ``DivisionByTrackedZeroError``.
    """
    executor = SymbolicExecutor(branch_scoped_constants=branch_scoped_constants)
    constraints = executor.check(program)
    logger.debug("Math safety passed (%d known value(s))", len(constraints))
    return constraints
