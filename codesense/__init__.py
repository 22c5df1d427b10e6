"""codesense — static analysis for a small C-like teaching language.

Source text is parsed into an immutable AST which the analysis passes
walk read-only.

Submodules
----------
ast
    Frozen dataclass nodes, ``Location``, JSON and S-expression forms.
grammar / parser
    parsimonious PEG grammar and the parse tree → AST builder.
errors
    ``ErrorKind`` / ``ErrorCode`` (``CS-NNNN``), ``ErrorMessage`` and the
    exception hierarchy raised by every pass.
symbols, typecheck
    Scoped symbol table and the declared-type checker.
dataflow
    Definite-initialization analysis.
symbolic
    Constant tracking and division/modulo-by-zero detection.
cfg
    Statement-level control flow graph, JSON and Graphviz export.
score
    Nesting-weighted complexity score and rank.
explain, extract
    Learner-facing explanations and token/symbol/math views.
pipeline
    ``analyze`` — runs everything, fail-fast on the first diagnostic.
main
    CLI: ``analyze``, ``cfg``, ``tokens``, ``symbols``, ``math``,
    ``score``, ``explain``, ``parse``.

Usage
-----
Command-line::

    python -m codesense analyze program.cpp

Library::

    from codesense.pipeline import analyze

    report = analyze("int x = 10; int y = 0; int r = x / y;")
    print(report.error.to_gcc_format())
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
