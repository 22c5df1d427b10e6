# tests/test_explain.py

from codesense import ast as A
from codesense.explain import explain_node, explain_program, synthesize_expression
from codesense.parser import parse

from tests.conftest import COUNTDOWN, FOR_TREE


class TestSynthesize:

    def test_binary(self):
        expr = parse("bool b = x + 1 > y;").body[0].value
        assert synthesize_expression(expr) == "x + 1 > y"

    def test_literals(self):
        assert synthesize_expression(A.Integer(3)) == "3"
        assert synthesize_expression(A.String("s")) == '"s"'
        assert synthesize_expression(A.Boolean(False)) == "false"

    def test_unknown_shape(self):
        assert synthesize_expression(None) == "..."


class TestExplainNode:

    def test_declaration(self):
        text = explain_node(parse("int x = 10;").body[0])
        assert text == (
            "You are declaring a new variable named **x**. It is a storage box "
            "that holds **int** data. You have initialized it with the value **10**."
        )

    def test_declaration_without_value(self):
        text = explain_node(parse("float f;").body[0])
        assert "**f**" in text and "not been given a value" in text

    def test_loop(self):
        loop = parse(COUNTDOWN).body[1]
        text = explain_node(loop)
        assert text.startswith("This is a **Loop**.")
        assert "**(x > 0)**" in text

    def test_decision(self):
        text = explain_node(parse("if (a == 1) { }").body[0])
        assert text.startswith("This is a **Decision Gate**. The computer checks **(a == 1)**.")

    def test_assignment(self):
        text = explain_node(parse("x = x * 2;").body[0])
        assert text == (
            "You are updating the value of **x**. The old value is erased, "
            "and **x * 2** is stored in its place."
        )

    def test_for_loop(self):
        text = explain_node(A.from_dict(FOR_TREE).body[1])
        assert text.startswith("This is a **Loop**. The computer runs the code inside")

    def test_other_statements(self):
        assert explain_node(parse("return 0;").body[0]) == "This is a C++ statement."


class TestExplainProgram:

    def test_every_statement_in_order(self):
        lines = [line for line, _ in explain_program(parse(COUNTDOWN))]
        assert lines == [2, 3, 4, 6]

    def test_for_loop_and_its_body(self):
        texts = [text for _, text in explain_program(A.from_dict(FOR_TREE))]
        assert len(texts) == 4
        assert "once for every round" in texts[1]
        assert "as long as the condition **(x > 0)**" in texts[2]

    def test_synthesised_nodes_have_no_line(self):
        program = A.Program(body=(A.ReturnStatement(),))
        assert list(explain_program(program)) == [(None, "This is a C++ statement.")]
