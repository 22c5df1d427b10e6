"""
score.py — Nesting-weighted complexity score
============================================

Every control structure costs ``1 + depth``, where *depth* is the number
of control structures enclosing it.  Straight-line statements are free.
The total maps onto a letter rank::

    0        S+  Perfectly Flat
    1 .. 5   A   Clean
    6 .. 10  B   Acceptable
    11 .. 15 C   Complex
    16+      F   Spaghetti Code

Usage::

    from codesense.score import score_card

    card = score_card(program)
    print(f"{card.score} → {card.rank} ({card.title})")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from codesense import ast as A
from codesense.visitor import ASTVisitor

__all__ = [
    "CONTROL_KINDS",
    "ComplexityScorer",
    "ScoreCard",
    "score",
    "rank",
    "rank_title",
    "score_card",
]

logger = logging.getLogger(__name__)

#: Node kinds that add complexity.  The grammar reserves ``for`` without
#: parsing it; ``ForStatement`` nodes arrive only through ``from_dict``.
CONTROL_KINDS = frozenset({"IfStatement", "WhileStatement", "ForStatement"})

_RANKS = (
    (0, "S+"),
    (5, "A"),
    (10, "B"),
    (15, "C"),
)

_TITLES = {
    "S+": "Perfectly Flat",
    "A": "Clean",
    "B": "Acceptable",
    "C": "Complex",
    "F": "Spaghetti Code",
}


class ComplexityScorer(ASTVisitor):
    """Pure scorer; ``visit(node, depth)`` returns the subtree's score.

    Any node whose ``kind`` is in :data:`CONTROL_KINDS` is scored as a
    control structure.
    """

    def visit(self, node: A.Node, depth: int) -> int:
        if getattr(node, "kind", None) in CONTROL_KINDS:
            return self._control(node, depth)
        return super().visit(node, depth)

    def generic_visit(self, node: A.Node, depth: int) -> int:
        return 0

    def _sum(self, body, depth: int) -> int:
        return sum(self.visit(child, depth) for child in body)

    def visit_program(self, node: A.Program, depth: int) -> int:
        return self._sum(node.body, depth)

    def visit_block(self, node: A.Block, depth: int) -> int:
        return self._sum(node.body, depth)

    def _control(self, node, depth: int) -> int:
        total = 1 + depth + self.visit(node.body, depth + 1)
        else_body = getattr(node, "else_body", None)
        if else_body is not None:
            total += self.visit(else_body, depth + 1)
        return total


def score(program: A.Node) -> int:
    """Return the complexity score of *program* (never fails)."""
    return ComplexityScorer().visit(program, 0)


def rank(value: int) -> str:
    """Map a score to its rank code (``"S+"``, ``"A"`` ... ``"F"``)."""
    for ceiling, code in _RANKS:
        if value <= ceiling:
            return code
    return "F"


def rank_title(code: str) -> str:
    """Human caption for a rank code."""
    return _TITLES[code]


@dataclass(frozen=True)
class ScoreCard:
    score: int
    rank: str
    title: str

    @property
    def caption(self) -> str:
        return f"{self.rank} ({self.title})"

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "rank": self.rank, "title": self.title}


def score_card(program: A.Node) -> ScoreCard:
    value = score(program)
    code = rank(value)
    logger.debug("Complexity score %d (%s)", value, code)
    return ScoreCard(value, code, rank_title(code))
