"""
codesense/symbols.py — scoped name → declared-type mapping.

Scopes are kept as an explicit stack of frames (index 0 is the global
scope).  The stack is never empty: popping the global scope raises
:class:`~codesense.errors.ScopeUnderflowError`.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from codesense.errors import ScopeUnderflowError

__all__ = ["SymbolTable"]


class SymbolTable:
    """Ordered stack of scopes used by the type checker."""

    def __init__(self) -> None:
        self._scopes: List[Dict[str, str]] = [{}]

    @property
    def depth(self) -> int:
        """Number of open scopes (1 = only the global scope)."""
        return len(self._scopes)

    def enter_scope(self) -> None:
        self._scopes.append({})

    def exit_scope(self) -> None:
        if len(self._scopes) == 1:
            raise ScopeUnderflowError()
        self._scopes.pop()

    def define(self, name: str, var_type: str) -> None:
        """Insert or overwrite *name* in the innermost scope."""
        self._scopes[-1][name] = var_type

    def lookup(self, name: str) -> Optional[str]:
        """Return the declared type of *name*, innermost scope first.

        A miss returns ``None``; callers decide whether that is fatal.
        """
        for scope in reversed(self._scopes):
            if name in scope:
                return scope[name]
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def items(self) -> Iterator[Tuple[str, str]]:
        """Visible bindings, inner definitions shadowing outer ones."""
        merged: Dict[str, str] = {}
        for scope in self._scopes:
            merged.update(scope)
        return iter(merged.items())

    def __repr__(self) -> str:
        return f"SymbolTable(depth={self.depth}, symbols={dict(self.items())!r})"
