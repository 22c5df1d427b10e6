# tests/test_extract.py
"""
Tests for the token, symbol and math-operation views.
"""

from codesense import ast as A
from codesense.extract import (
    MathOp,
    SymbolEntry,
    TokenKind,
    extract_math_ops,
    extract_symbols,
    extract_tokens,
)
from codesense.parser import parse

from tests.conftest import BRANCHY, COUNTDOWN, FOR_TREE

K, I, S, O, L = (
    TokenKind.KEYWORD,
    TokenKind.IDENTIFIER,
    TokenKind.SEPARATOR,
    TokenKind.OPERATOR,
    TokenKind.LITERAL,
)


def pairs(source):
    return [(t.kind, t.value) for t in extract_tokens(parse(source))]


class TestTokens:

    def test_wrapped_in_main(self):
        assert pairs("int x = 10;") == [
            (K, "int"), (I, "main"), (S, "("), (S, ")"), (S, "{"),
            (K, "int"), (I, "x"), (O, "="), (L, "10"), (S, ";"),
            (S, "}"),
        ]

    def test_declaration_without_value(self):
        assert pairs("bool flag;")[5:8] == [(K, "bool"), (I, "flag"), (S, ";")]

    def test_while_loop(self):
        body = pairs("while (x > 0) { x = x - 1; }")[5:-1]
        assert body == [
            (K, "while"), (S, "("), (I, "x"), (O, ">"), (L, "0"), (S, ")"),
            (S, "{"), (I, "x"), (O, "="), (I, "x"), (O, "-"), (L, "1"), (S, ";"), (S, "}"),
        ]

    def test_if_else(self):
        values = [v for _, v in pairs("if (a) { } else { }")[5:-1]]
        assert values == ["if", "(", "a", ")", "{", "}", "else", "{", "}"]

    def test_literals(self):
        literals = [v for k, v in pairs('string s = "hi"; bool b = true; float f = 0.5;') if k is L]
        assert literals == ['"hi"', "true", "0.5"]

    def test_return(self):
        assert pairs("return;")[5:7] == [(K, "return"), (S, ";")]

    def test_for_renders_bare_header(self):
        tokens = extract_tokens(A.from_dict(FOR_TREE))
        assert [(t.kind, t.value) for t in tokens[10:16]] == [
            (K, "for"), (S, "("), (S, ";"), (S, ";"), (S, ")"), (S, "{"),
        ]

    def test_to_dict(self):
        token = extract_tokens(parse("int x = 1;"))[0]
        assert token.to_dict() == {"type": "Keyword", "value": "int"}


class TestSymbols:

    def test_declarations_in_source_order(self):
        assert extract_symbols(parse(BRANCHY)) == [
            SymbolEntry("int", "a", 1),
            SymbolEntry("int", "b", 3),
        ]

    def test_else_bodies_included(self):
        source = "int a = 1;\nif (a > 0) { }\nelse {\n    float f = 1.5;\n}"
        names = [s.name for s in extract_symbols(parse(source))]
        assert names == ["a", "f"]

    def test_to_dict(self):
        entry = extract_symbols(parse(COUNTDOWN))[0]
        assert entry.to_dict() == {"type": "int", "name": "x", "line": 2}


class TestMathOps:

    def test_operands(self):
        ops = extract_math_ops(parse("int r = a + b * 2;"))
        assert ops == [
            MathOp("+", "a", "(Expr)", 1),
            MathOp("*", "b", "2", 1),
        ]

    def test_conditions_and_bodies(self):
        ops = extract_math_ops(parse(COUNTDOWN))
        assert [(m.op, m.left, m.right, m.line) for m in ops] == [
            (">", "x", "0", 3),
            ("-", "x", "1", 4),
        ]

    def test_for_body_is_walked(self):
        ops = extract_math_ops(A.from_dict(FOR_TREE))
        assert [(m.op, m.left, m.right) for m in ops] == [(">", "x", "0"), ("-", "x", "1")]

    def test_float_and_unknown_shapes(self):
        ops = extract_math_ops(parse('float r = 1.5 / 0.5; bool s = "a" == "b";'))
        assert ops[0].right == "0.5"
        assert (ops[1].left, ops[1].right) == ("?", "?")

    def test_to_dict(self):
        op = extract_math_ops(parse("int r = 6 / 3;"))[0]
        assert op.to_dict() == {"op": "/", "left": "6", "right": "3", "line": 1}
