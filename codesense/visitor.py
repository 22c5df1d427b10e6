#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
codesense/visitor.py
====================

Visitor pattern infrastructure for AST traversal.

Provides:
- ``ASTVisitor`` — dispatch base with one ``visit_X`` hook per node kind
- ``DepthFirstVisitor`` — generic traversal that visits all children
- ``iter_children`` / ``walk`` — plain iteration helpers
- ``check_nesting`` — rejects trees too deep for the recursive passes

Every analysis pass threads its state through the extra positional
arguments of :meth:`ASTVisitor.visit`, so a pass never hides mutable
state in globals: ``visitor.visit(node, initialized)`` calls
``visitor.visit_identifier(node, initialized)``.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, Iterator, Tuple

from codesense import ast as A
from codesense.errors import ErrorCodes, ParserError

__all__ = [
    "MAX_NESTING_DEPTH",
    "ASTVisitor",
    "DepthFirstVisitor",
    "check_nesting",
    "iter_children",
    "walk",
]


_DISPATCH: Dict[type, str] = {
    A.Program: "visit_program",
    A.Block: "visit_block",
    A.VariableDecl: "visit_variable_decl",
    A.Assignment: "visit_assignment",
    A.IfStatement: "visit_if_statement",
    A.WhileStatement: "visit_while_statement",
    A.ForStatement: "visit_for_statement",
    A.ReturnStatement: "visit_return_statement",
    A.BinaryExpr: "visit_binary_expr",
    A.Identifier: "visit_identifier",
    A.Integer: "visit_integer",
    A.Float: "visit_float",
    A.String: "visit_string",
    A.Boolean: "visit_boolean",
}


def iter_children(node: A.Node) -> Tuple[A.Node, ...]:
    """Return the direct children of *node* in source order."""
    if isinstance(node, (A.Program, A.Block)):
        return node.body
    if isinstance(node, (A.VariableDecl, A.ReturnStatement)):
        return (node.value,) if node.value is not None else ()
    if isinstance(node, A.Assignment):
        return (node.value,)
    if isinstance(node, A.BinaryExpr):
        return (node.left, node.right)
    if isinstance(node, A.IfStatement):
        if node.else_body is None:
            return (node.condition, node.body)
        return (node.condition, node.body, node.else_body)
    if isinstance(node, A.WhileStatement):
        return (node.condition, node.body)
    if isinstance(node, A.ForStatement):
        return (node.body,)
    if type(node) in _DISPATCH:
        return ()
    raise TypeError(f"Unknown AST node type: {type(node).__name__}")


def walk(node: A.Node) -> Iterator[A.Node]:
    """Yield *node* and all its descendants, pre-order."""
    yield node
    for child in iter_children(node):
        yield from walk(child)


#: Deepest tree the passes accept.  Expression visitors spend up to three
#: stack frames per level, which must stay under the interpreter's default
#: recursion limit.
MAX_NESTING_DEPTH = 200


def check_nesting(node: A.Node, limit: int = MAX_NESTING_DEPTH) -> None:
    """Raise ``ParserError`` if *node* is more than *limit* levels deep.

    Walks with an explicit stack, so any tree can be measured.  The error
    points at the nearest located ancestor of the first node past the limit.
    """
    stack = [(node, 1, node.location)]
    while stack:
        current, depth, located = stack.pop()
        if depth > limit:
            raise ParserError(
                f"Nesting exceeds {limit} levels here; split the expression or statement.",
                code=ErrorCodes.NESTING_TOO_DEEP,
                location=located,
            )
        for child in iter_children(current):
            stack.append((child, depth + 1, child.location or located))


class ASTVisitor(abc.ABC):
    """Abstract base class for AST visitors.

    Each ``visit_X`` method corresponds to an AST node kind.  The default
    implementations call ``generic_visit``, which does nothing.  Subclasses
    override the methods they care about.
    """

    def visit(self, node: A.Node, *args: Any) -> Any:
        """Dispatch to the appropriate visit method."""
        method_name = _DISPATCH.get(type(node))
        if method_name is None:
            raise TypeError(f"Unknown AST node type: {type(node).__name__}")
        return getattr(self, method_name)(node, *args)

    def generic_visit(self, node: A.Node, *args: Any) -> Any:
        """Called when no specific visitor method exists.

        Default: return None.  Override for catch-all behavior.
        """
        return None

    # --- Containers ---

    def visit_program(self, node: A.Program, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_block(self, node: A.Block, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    # --- Statements ---

    def visit_variable_decl(self, node: A.VariableDecl, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_assignment(self, node: A.Assignment, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_if_statement(self, node: A.IfStatement, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_while_statement(self, node: A.WhileStatement, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_for_statement(self, node: A.ForStatement, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_return_statement(self, node: A.ReturnStatement, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    # --- Expressions ---

    def visit_binary_expr(self, node: A.BinaryExpr, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_identifier(self, node: A.Identifier, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_integer(self, node: A.Integer, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_float(self, node: A.Float, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_string(self, node: A.String, *args: Any) -> Any:
        return self.generic_visit(node, *args)

    def visit_boolean(self, node: A.Boolean, *args: Any) -> Any:
        return self.generic_visit(node, *args)


class DepthFirstVisitor(ASTVisitor):
    """Visitor that recurses into every child, passing the context along.

    Subclasses override individual ``visit_X`` methods and call
    ``self.generic_visit(node, *args)`` to continue into children.
    """

    def generic_visit(self, node: A.Node, *args: Any) -> Any:
        for child in iter_children(node):
            self.visit(child, *args)
        return None
