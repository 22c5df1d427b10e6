# tests/test_grammar.py
"""
Tests that the PEG grammar compiles and accepts the lexical building
blocks of the language (before visitor transformation).
"""

import pytest
from parsimonious.grammar import Grammar
from parsimonious.exceptions import ParseError, IncompleteParseError

from codesense.grammar import CODESENSE_GRAMMAR, KEYWORDS


@pytest.fixture(scope="module")
def grammar():
    """Compile the grammar once per module."""
    return Grammar(CODESENSE_GRAMMAR)


class TestGrammarWellFormed:

    def test_grammar_compiles(self, grammar):
        assert "program" in grammar

    def test_key_rules_exist(self, grammar):
        for rule in ("program", "main_function", "statement", "var_decl",
                     "assignment", "if_stmt", "while_stmt", "return_stmt",
                     "expression", "primary", "identifier"):
            assert rule in grammar, f"Rule {rule!r} missing"


class TestGrammarAtoms:

    def test_empty_input(self, grammar):
        assert grammar.parse("") is not None

    def test_integer_literals(self, grammar):
        for lit in ("0", "42", "-7"):
            assert grammar["integer_lit"].parse(lit).text == lit

    def test_float_literals(self, grammar):
        for lit in ("3.14", "0.0", ".5", "1e3", "-2.5"):
            assert grammar["float_lit"].parse(lit).text == lit

    def test_string_literals(self, grammar):
        for lit in ('"hello"', '""', r'"say \"hi\""'):
            assert grammar["string_lit"].parse(lit).text == lit

    def test_identifiers(self, grammar):
        for name in ("x", "foo_bar", "_tmp", "iffy", "integer", "main"):
            assert grammar["identifier"].parse(name).text == name

    def test_keywords_are_not_identifiers(self, grammar):
        for kw in KEYWORDS:
            with pytest.raises((ParseError, IncompleteParseError)):
                grammar["identifier"].parse(kw)


class TestGrammarStatements:

    def test_var_decl_with_and_without_value(self, grammar):
        grammar["var_decl"].parse("int x = 1;")
        grammar["var_decl"].parse("float y;")

    def test_assignment_is_not_comparison(self, grammar):
        grammar["assignment"].parse("x = x + 1;")
        with pytest.raises((ParseError, IncompleteParseError)):
            grammar["assignment"].parse("x == 1;")

    def test_comments_are_whitespace(self, grammar):
        grammar.parse("// lead\nint x = 1; /* block\n comment */ x = 2;")

    def test_main_wrapper(self, grammar):
        grammar.parse("int main() { return 0; }")

    def test_for_is_reserved(self, grammar):
        with pytest.raises((ParseError, IncompleteParseError)):
            grammar.parse("for (x = 0;) { }")
