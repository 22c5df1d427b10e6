# tests/test_parser.py
"""
Tests for source text → AST construction.
"""

import pytest

from codesense import ast as A
from codesense.errors import ErrorCodes, ErrorKind, ParserError
from codesense.parser import parse, parse_file

from tests.conftest import COUNTDOWN, long_sum


def _only(source):
    program = parse(source)
    assert len(program.body) == 1
    return program.body[0]


class TestDeclarations:

    def test_int_declaration(self):
        decl = _only("int x = 10;")
        assert isinstance(decl, A.VariableDecl)
        assert (decl.var_type, decl.name) == ("int", "x")
        assert isinstance(decl.value, A.Integer)
        assert decl.value.value == 10

    def test_declaration_without_value(self):
        decl = _only("float f;")
        assert decl.value is None

    def test_literal_kinds(self):
        program = parse('float f = 0.5; string s = "hi"; bool b = true; int n = -1;')
        values = [stmt.value for stmt in program.body]
        assert isinstance(values[0], A.Float) and values[0].value == 0.5
        assert isinstance(values[1], A.String) and values[1].value == "hi"
        assert isinstance(values[2], A.Boolean) and values[2].value is True
        assert isinstance(values[3], A.Integer) and values[3].value == -1

    def test_string_escapes(self):
        decl = _only(r'string s = "a\"b\n";')
        assert decl.value.value == 'a"b\n'

    def test_assignment(self):
        program = parse("int x = 1; x = x + 2;")
        assign = program.body[1]
        assert isinstance(assign, A.Assignment)
        assert assign.name == "x"
        assert isinstance(assign.value, A.BinaryExpr)


class TestExpressions:

    def test_multiplication_binds_tighter(self):
        value = _only("int r = 1 + 2 * 3;").value
        assert value.operator == "+"
        assert isinstance(value.left, A.Integer)
        assert value.right.operator == "*"

    def test_left_associative(self):
        value = _only("int r = 10 - 3 - 2;").value
        assert value.operator == "-"
        assert value.left.operator == "-"
        assert value.right.value == 2

    def test_parentheses(self):
        value = _only("int r = (1 + 2) * 3;").value
        assert value.operator == "*"
        assert value.left.operator == "+"

    def test_comparison_is_lowest(self):
        value = _only("bool b = x + 1 >= y % 2;").value
        assert value.operator == ">="
        assert value.left.operator == "+"
        assert value.right.operator == "%"

    def test_identifier_operand(self):
        value = _only("int r = a / b;").value
        assert isinstance(value.left, A.Identifier) and value.left.name == "a"
        assert isinstance(value.right, A.Identifier) and value.right.name == "b"


class TestControlFlow:

    def test_main_wrapper_is_unwrapped(self):
        program = parse(COUNTDOWN)
        kinds = [stmt.kind for stmt in program.body]
        assert kinds == ["VariableDecl", "WhileStatement", "ReturnStatement"]

    def test_while(self):
        loop = parse(COUNTDOWN).body[1]
        assert loop.condition.operator == ">"
        assert isinstance(loop.body, A.Block)
        assert len(loop.body.body) == 1

    def test_if_else(self):
        stmt = _only("if (x > 0) { x = 1; } else { x = 2; }")
        assert isinstance(stmt, A.IfStatement)
        assert isinstance(stmt.body, A.Block)
        assert isinstance(stmt.else_body, A.Block)

    def test_if_without_else(self):
        stmt = _only("if (x > 0) x = 1;")
        assert isinstance(stmt.body, A.Assignment)
        assert stmt.else_body is None

    def test_else_if_chain(self):
        stmt = _only("if (x > 0) { } else if (x < 0) { } else { }")
        assert isinstance(stmt.else_body, A.IfStatement)
        assert isinstance(stmt.else_body.else_body, A.Block)

    def test_return_without_value(self):
        stmt = _only("return;")
        assert isinstance(stmt, A.ReturnStatement)
        assert stmt.value is None

    def test_nested_block(self):
        stmt = _only("{ int a = 1; { a = 2; } }")
        assert isinstance(stmt, A.Block)
        assert isinstance(stmt.body[1], A.Block)

    def test_comments_are_ignored(self):
        program = parse("// header\nint x = 1; /* note */\nx = 2; // trailing\n")
        assert len(program.body) == 2


class TestLocations:

    def test_statement_lines(self):
        program = parse(COUNTDOWN)
        assert [stmt.location.line for stmt in program.body] == [2, 3, 6]

    def test_column_is_one_based(self):
        decl = parse(COUNTDOWN).body[0]
        assert decl.location.start.column == 5
        assert str(decl.location) == "2:5"

    def test_binary_expression_spans_operands(self):
        value = _only("int r = ab + cd;").value
        assert value.location.start.offset == 8
        assert value.location.end.offset == 15


class TestSyntaxErrors:

    @pytest.mark.parametrize("source", [
        "int x = ;",
        "int x = 1",
        "int while = 1;",
        "int for = 1;",
        "x == 1;",
        "if x > 0 { }",
        "int main() { int x = 1;",
    ])
    def test_rejected(self, source):
        with pytest.raises(ParserError) as info:
            parse(source)
        assert info.value.kind is ErrorKind.PARSER_ERROR
        assert info.value.message.startswith("Syntax Error")

    def test_error_location_points_at_bad_line(self):
        with pytest.raises(ParserError) as info:
            parse("int x = 1;\nint y = ;\n")
        assert info.value.line == 2


class TestNesting:

    def test_long_sum_within_limit(self):
        decl = _only(long_sum(150))
        assert decl.value.operator == "+"

    def test_long_sum_past_limit(self):
        with pytest.raises(ParserError) as info:
            parse(long_sum(500))
        assert info.value.code == ErrorCodes.NESTING_TOO_DEEP
        assert info.value.line == 1

    def test_deep_parentheses(self):
        with pytest.raises(ParserError) as info:
            parse("int x = " + "(" * 3000 + "1" + ")" * 3000 + ";")
        assert info.value.kind is ErrorKind.PARSER_ERROR


class TestParseFile:

    def test_reads_utf8(self, source_file):
        path = source_file("int x = 1; // héllo\n")
        assert len(parse_file(path).body) == 1
