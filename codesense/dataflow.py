"""
codesense/dataflow.py — definite-initialization analysis

A variable may only be read once a declaration with a value, or an
assignment, has been seen on the path leading to the read.  The set of
initialized names is an explicit argument of every visit call; each
container and branch works on its own copy, so nothing declared inside
an ``if``/``while`` body or a nested block is visible after it.
"""

from __future__ import annotations

import logging
from typing import Optional, Set

from codesense import ast as A
from codesense.errors import UninitializedUseError
from codesense.visitor import DepthFirstVisitor

__all__ = ["DataFlowAnalyzer", "check_initialization"]

logger = logging.getLogger(__name__)

Initialized = Set[str]


class DataFlowAnalyzer(DepthFirstVisitor):
    """Fail-fast detector of reads before initialization.

    Expressions fall through to :meth:`generic_visit`, which recurses into
    ``BinaryExpr`` operands and ``ReturnStatement`` values with the same
    set.
    """

    def check(self, program: A.Node, initialized: Optional[Initialized] = None) -> None:
        self.visit(program, set() if initialized is None else initialized)

    def _sequence(self, body, initialized: Initialized) -> None:
        scope = set(initialized)
        for statement in body:
            self.visit(statement, scope)

    def visit_program(self, node: A.Program, initialized: Initialized) -> None:
        self._sequence(node.body, initialized)

    def visit_block(self, node: A.Block, initialized: Initialized) -> None:
        self._sequence(node.body, initialized)

    def visit_variable_decl(self, node: A.VariableDecl, initialized: Initialized) -> None:
        if node.value is not None:
            self.visit(node.value, initialized)
        # A bare declaration counts as initialized, matching the original checker.
        initialized.add(node.name)

    def visit_assignment(self, node: A.Assignment, initialized: Initialized) -> None:
        self.visit(node.value, initialized)
        initialized.add(node.name)

    def visit_if_statement(self, node: A.IfStatement, initialized: Initialized) -> None:
        self.visit(node.condition, initialized)
        self.visit(node.body, set(initialized))
        if node.else_body is not None:
            self.visit(node.else_body, set(initialized))

    def visit_while_statement(self, node: A.WhileStatement, initialized: Initialized) -> None:
        self.visit(node.condition, initialized)
        self.visit(node.body, set(initialized))

    def visit_for_statement(self, node: A.ForStatement, initialized: Initialized) -> None:
        self.visit(node.body, set(initialized))

    def visit_identifier(self, node: A.Identifier, initialized: Initialized) -> None:
        if node.name not in initialized:
            raise UninitializedUseError(node.name, location=node.location)


def check_initialization(program: A.Node) -> None:
    """Raise ``UninitializedUseError`` at the first read of an unset name."""
    DataFlowAnalyzer().check(program)
    logger.debug("Initialization check passed")
