"""
codesense/grammar.py — PEG grammar for the teaching language
============================================================

The grammar is fed to parsimonious and walked by
:class:`codesense.parser.ASTBuilder`.  It accepts either a bare statement
list or one wrapped in ``int main() { ... }``.

Rule-writing conventions:

* ``_`` is optional whitespace / comments and is written explicitly.
* Keywords are regexes with a trailing ``(?![A-Za-z0-9_])`` guard so
  that ``iffy`` or ``elsewhere`` are never split into keyword + name.
* No rule is a bare alias of another rule: parsimonious collapses those
  and the builder would never see the alias name.
"""

from __future__ import annotations

from parsimonious.grammar import Grammar

__all__ = ["CODESENSE_GRAMMAR", "GRAMMAR", "TYPE_NAMES", "KEYWORDS"]

#: Type names accepted in declarations.
TYPE_NAMES = ("int", "float", "double", "char", "long", "string", "bool")

#: Words that can never be identifiers.  ``for`` is reserved, not parsed.
KEYWORDS = TYPE_NAMES + ("if", "else", "while", "for", "return", "true", "false")

CODESENSE_GRAMMAR = r'''
    # ─────────────────────────────────────────────────────────────
    # Top-Level Structure
    # ─────────────────────────────────────────────────────────────

    program             = _ body _
    body                = main_function / statements
    main_function       = kw_int _ kw_main _ "(" _ ")" _ "{" statements _ "}"

    statements          = statement_item*
    statement_item      = _ statement

    # ─────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────

    statement           = block / if_stmt / while_stmt / return_stmt
                        / var_decl / assignment

    block               = "{" statements _ "}"
    var_decl            = type_name _ identifier _ initializer? _ ";"
    initializer         = "=" !"=" _ expression
    assignment          = identifier _ "=" !"=" _ expression _ ";"
    if_stmt             = kw_if _ "(" _ expression _ ")" _ statement else_clause?
    else_clause         = _ kw_else _ statement
    while_stmt          = kw_while _ "(" _ expression _ ")" _ statement
    return_stmt         = kw_return return_value? _ ";"
    return_value        = _ expression

    # ─────────────────────────────────────────────────────────────
    # Expressions (lowest precedence first, all left-associative)
    # ─────────────────────────────────────────────────────────────

    expression          = additive comparison_tail*
    comparison_tail     = _ comparison_op _ additive
    comparison_op       = "==" / "!=" / "<=" / ">=" / "<" / ">"

    additive            = term additive_tail*
    additive_tail       = _ additive_op _ term
    additive_op         = "+" / "-"

    term                = primary term_tail*
    term_tail           = _ multiplicative_op _ primary
    multiplicative_op   = "*" / "/" / "%"

    primary             = paren / float_lit / integer_lit / string_lit
                        / boolean_lit / identifier
    paren               = "(" _ expression _ ")"

    # ─────────────────────────────────────────────────────────────
    # Lexical
    # ─────────────────────────────────────────────────────────────

    float_lit           = ~r"-?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?|-?\d+[eE][+-]?\d+"
    integer_lit         = ~r"-?\d+"
    string_lit          = ~r'"(?:[^"\\\n]|\\.)*"'
    boolean_lit         = ~r"(?:true|false)(?![A-Za-z0-9_])"

    identifier          = !keyword ~r"[A-Za-z_][A-Za-z0-9_]*"
    type_name           = ~r"(?:int|float|double|char|long|string|bool)(?![A-Za-z0-9_])"
    keyword             = ~r"(?:int|float|double|char|long|string|bool|if|else|while|for|return|true|false)(?![A-Za-z0-9_])"

    kw_int              = ~r"int(?![A-Za-z0-9_])"
    kw_main             = ~r"main(?![A-Za-z0-9_])"
    kw_if               = ~r"if(?![A-Za-z0-9_])"
    kw_else             = ~r"else(?![A-Za-z0-9_])"
    kw_while            = ~r"while(?![A-Za-z0-9_])"
    kw_return           = ~r"return(?![A-Za-z0-9_])"

    _                   = (whitespace / comment)*
    whitespace          = ~r"\s+"
    comment             = ~r"//[^\n]*" / ~r"/\*[\s\S]*?\*/"
'''

GRAMMAR = Grammar(CODESENSE_GRAMMAR)
