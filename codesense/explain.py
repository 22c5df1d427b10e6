"""
codesense/explain.py — plain-language statement explanations

Learner-facing sentences for each statement, rendered from fixed
templates.  ``**bold**`` markers are Markdown and are left in the text.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from codesense import ast as A
from codesense.visitor import walk

__all__ = ["explain_node", "explain_program", "synthesize_expression"]

_TEMPLATES = {
    "VariableDecl": (
        "You are declaring a new variable named **{name}**. It is a storage box "
        "that holds **{type}** data. You have initialized it with the value **{val}**."
    ),
    "UninitializedDecl": (
        "You are declaring a new variable named **{name}**. It is a storage box "
        "that holds **{type}** data. It has not been given a value yet."
    ),
    "WhileStatement": (
        "This is a **Loop**. The computer will keep repeating the code inside this "
        "block as long as the condition **({cond})** remains True. "
        "Be careful of infinite loops!"
    ),
    "ForStatement": (
        "This is a **Loop**. The computer runs the code inside this block "
        "once for every round the loop header allows."
    ),
    "IfStatement": (
        "This is a **Decision Gate**. The computer checks **({cond})**. "
        "If it is True, it enters the block. If False, it skips it."
    ),
    "Assignment": (
        "You are updating the value of **{name}**. The old value is erased, "
        "and **{val}** is stored in its place."
    ),
}

_DEFAULT = "This is a C++ statement."


def synthesize_expression(expr: Optional[A.Expression]) -> str:
    """Turn an expression back into source-like text (``x > 0``)."""
    if isinstance(expr, A.BinaryExpr):
        left = synthesize_expression(expr.left)
        right = synthesize_expression(expr.right)
        return f"{left} {expr.operator} {right}"
    if isinstance(expr, A.Identifier):
        return expr.name
    if isinstance(expr, (A.Integer, A.Float)):
        return str(expr.value)
    if isinstance(expr, A.String):
        return f'"{expr.value}"'
    if isinstance(expr, A.Boolean):
        return "true" if expr.value else "false"
    return "..."


def explain_node(node: A.Node) -> str:
    if isinstance(node, A.VariableDecl):
        if node.value is None:
            return _TEMPLATES["UninitializedDecl"].format(name=node.name, type=node.var_type)
        return _TEMPLATES["VariableDecl"].format(
            name=node.name,
            type=node.var_type,
            val=synthesize_expression(node.value),
        )
    if isinstance(node, A.Assignment):
        return _TEMPLATES["Assignment"].format(
            name=node.name, val=synthesize_expression(node.value)
        )
    if isinstance(node, A.WhileStatement):
        return _TEMPLATES["WhileStatement"].format(cond=synthesize_expression(node.condition))
    if isinstance(node, A.ForStatement):
        return _TEMPLATES["ForStatement"]
    if isinstance(node, A.IfStatement):
        return _TEMPLATES["IfStatement"].format(cond=synthesize_expression(node.condition))
    return _DEFAULT


def explain_program(program: A.Node) -> Iterator[Tuple[Optional[int], str]]:
    """Yield ``(line, explanation)`` for every statement, in source order.

    Containers (``Program``, ``Block``) and expressions are skipped.
    """
    for node in walk(program):
        if not _is_statement(node):
            continue
        line = node.location.line if node.location is not None else None
        yield line, explain_node(node)


def _is_statement(node: A.Node) -> bool:
    return isinstance(
        node,
        (
            A.VariableDecl,
            A.Assignment,
            A.IfStatement,
            A.WhileStatement,
            A.ForStatement,
            A.ReturnStatement,
        ),
    )
