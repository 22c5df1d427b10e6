"""
codesense.cfg
=============

Builds a statement-level Control Flow Graph from a codesense AST.

Every statement becomes one node; ``if`` adds a decision node and an
"End If" merge node, ``while`` adds a condition node, a labelled
back-edge (``"Loop"``) and an "End While" exit node reached by an
``"Exit"`` edge.  A ``for`` loop is shaped the same way, with a "for (...)"
header and an "End For" exit.  The graph is bracketed by synthetic ``Start`` and
``End`` nodes.

Public API
----------
    CFGNode     - one program point, with a learner-facing description
    CFGEdge     - a directed transition, optionally labelled
    CFG         - nodes + edges, JSON and Graphviz export
    CFGBuilder  - the AST visitor that produces a CFG
    build_cfg   - convenience wrapper

Typical usage::

    from codesense.parser import parse
    from codesense.cfg import build_cfg

    cfg = build_cfg(parse("int x = 1; while (x < 3) { x = x + 1; }"))
    print(cfg.to_dot())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from codesense import ast as A
from codesense.visitor import ASTVisitor

__all__ = ["CFGNode", "CFGEdge", "CFG", "CFGBuilder", "build_cfg", "readable_value"]

logger = logging.getLogger(__name__)

LOOP_LABEL = "Loop"
EXIT_LABEL = "Exit"


# ---------------------------------------------------------------------------
# Nodes and edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CFGNode:
    id: str
    label: str
    description: str
    location: Optional[A.Location] = None

    @property
    def line(self) -> Optional[int]:
        return self.location.line if self.location is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "location": A.location_to_dict(self.location),
        }


@dataclass(frozen=True)
class CFGEdge:
    source: str
    target: str
    label: Optional[str] = None

    @property
    def is_back_edge(self) -> bool:
        return self.label == LOOP_LABEL

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "label": self.label}


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


@dataclass
class CFG:
    """The control flow graph of one program."""

    nodes: List[CFGNode] = field(default_factory=list)
    edges: List[CFGEdge] = field(default_factory=list)
    start_id: Optional[str] = None
    end_id: Optional[str] = None

    def node(self, node_id: str) -> CFGNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def successors(self, node_id: str) -> List[str]:
        return [e.target for e in self.edges if e.source == node_id]

    def predecessors(self, node_id: str) -> List[str]:
        return [e.source for e in self.edges if e.target == node_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    def to_dot(self, title: Optional[str] = None) -> str:
        """Return a Graphviz DOT representation of this CFG."""
        lines = ["digraph CFG {"]
        if title:
            lines.append(f'  label="{_dot_escape(title)}";')
        lines.append("  node [shape=box, fontname=monospace, fontsize=10];")
        for n in self.nodes:
            color = ""
            if n.id == self.start_id:
                color = ', style=filled, fillcolor="#ccffcc"'
            elif n.id == self.end_id:
                color = ', style=filled, fillcolor="#ffcccc"'
            elif n.label.startswith(("if", "while", "for")):
                color = ", shape=diamond"
            lines.append(
                f'  N{n.id} [label="{_dot_escape(n.label)}", '
                f'tooltip="{_dot_escape(n.description)}"{color}];'
            )
        for e in self.edges:
            attrs = []
            if e.label:
                attrs.append(f'label="{_dot_escape(e.label)}"')
            if e.is_back_edge:
                attrs.append("style=dashed, color=blue, fontcolor=blue")
            elif e.label == EXIT_LABEL:
                attrs.append("color=red, fontcolor=red")
            suffix = f" [{', '.join(attrs)}]" if attrs else ""
            lines.append(f"  N{e.source} -> N{e.target}{suffix};")
        lines.append("}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CFG(nodes={len(self.nodes)}, edges={len(self.edges)})"


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


def readable_value(node: Optional[A.Expression]) -> str:
    """Render a stored value the way the CFG tooltips show it."""
    if node is None:
        return "unknown"
    if isinstance(node, (A.Integer, A.Float)):
        return f"{node.value}"
    if isinstance(node, A.String):
        return f'"{node.value}"'
    if isinstance(node, A.Boolean):
        return "true" if node.value else "false"
    if isinstance(node, A.Identifier):
        return node.name
    if isinstance(node, A.BinaryExpr):
        return "a calculated result"
    return "a value"


# ===========================================================================
# CFG BUILDER
# ===========================================================================


class CFGBuilder(ASTVisitor):
    """Threads control flow through the tree.

    ``visit(node, previous_id)`` returns the id of the node control leaves
    *node* through; containers fold that id over their statements.
    """

    def __init__(self) -> None:
        self._cfg = CFG()
        self._counter = 0

    def _node(self, label: str, description: str, location: Optional[A.Location] = None) -> str:
        node_id = str(self._counter)
        self._counter += 1
        self._cfg.nodes.append(CFGNode(node_id, label, description, location))
        return node_id

    def _edge(self, source: str, target: str, label: Optional[str] = None) -> None:
        self._cfg.edges.append(CFGEdge(source, target, label))

    def build(self, program: A.Node) -> CFG:
        start_id = self._node("Start", "Program Begin")
        exit_id = self.visit(program, start_id)
        end_id = self._node("End", "Program End")
        self._edge(exit_id, end_id)
        self._cfg.start_id = start_id
        self._cfg.end_id = end_id
        return self._cfg

    def generic_visit(self, node: A.Node, previous_id: str) -> str:
        # Bare expressions never reach the graph.
        return previous_id

    def _sequence(self, body, previous_id: str) -> str:
        current = previous_id
        for statement in body:
            current = self.visit(statement, current)
        return current

    def visit_program(self, node: A.Program, previous_id: str) -> str:
        return self._sequence(node.body, previous_id)

    def visit_block(self, node: A.Block, previous_id: str) -> str:
        return self._sequence(node.body, previous_id)

    def visit_variable_decl(self, node: A.VariableDecl, previous_id: str) -> str:
        description = (
            f"Initialization: This creates a '{node.var_type}' variable named "
            f"'{node.name}' and stores the value [ {readable_value(node.value)} ] inside it."
        )
        node_id = self._node(f"{node.var_type} {node.name} = ...", description, node.location)
        self._edge(previous_id, node_id)
        return node_id

    def visit_assignment(self, node: A.Assignment, previous_id: str) -> str:
        description = (
            f"Update: The variable '{node.name}' is being updated. "
            f"The new value stored is [ {readable_value(node.value)} ]."
        )
        node_id = self._node(f"{node.name} = ...", description, node.location)
        self._edge(previous_id, node_id)
        return node_id

    def visit_if_statement(self, node: A.IfStatement, previous_id: str) -> str:
        if node.location is not None:
            description = f"Decision: Checks if the condition at Line {node.location.line} is TRUE."
        else:
            description = "Decision: Checks if the condition is TRUE."
        condition_id = self._node("if (...)", description, node.location)
        self._edge(previous_id, condition_id)

        end_true = self.visit(node.body, condition_id)
        end_false = condition_id
        if node.else_body is not None:
            end_false = self.visit(node.else_body, condition_id)

        merge_id = self._node("End If", "Merge: The True and False paths rejoin here.")
        self._edge(end_true, merge_id)
        self._edge(end_false, merge_id)
        return merge_id

    def _loop(self, node, previous_id: str, header: Tuple[str, str], footer: Tuple[str, str]) -> str:
        condition_id = self._node(*header, node.location)
        self._edge(previous_id, condition_id)

        end_body = self.visit(node.body, condition_id)
        self._edge(end_body, condition_id, LOOP_LABEL)

        exit_id = self._node(*footer)
        self._edge(condition_id, exit_id, EXIT_LABEL)
        return exit_id

    def visit_while_statement(self, node: A.WhileStatement, previous_id: str) -> str:
        return self._loop(
            node,
            previous_id,
            ("while (...)", "Loop: Checks if the condition is still TRUE to decide whether to repeat."),
            ("End While", "Exit: The loop condition became FALSE, so we stop repeating."),
        )

    def visit_for_statement(self, node: A.ForStatement, previous_id: str) -> str:
        return self._loop(
            node,
            previous_id,
            ("for (...)", "Loop: Checks whether another round of the loop should run."),
            ("End For", "Exit: The loop has run its last round, so we stop repeating."),
        )

    def visit_return_statement(self, node: A.ReturnStatement, previous_id: str) -> str:
        description = (
            f"Return: The function stops and sends the value "
            f"[ {readable_value(node.value)} ] back to the system."
        )
        node_id = self._node("Return", description, node.location)
        self._edge(previous_id, node_id)
        return node_id


def build_cfg(program: A.Node) -> CFG:
    """Build a fresh CFG for *program*."""
    cfg = CFGBuilder().build(program)
    logger.debug("Built CFG: %d node(s), %d edge(s)", len(cfg.nodes), len(cfg.edges))
    return cfg
