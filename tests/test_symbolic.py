# tests/test_symbolic.py
"""
Tests for constant tracking and division/modulo-by-zero detection.
"""

import pytest

from codesense import ast as A
from codesense.errors import (
    DivisionByLiteralZeroError,
    DivisionByTrackedZeroError,
    ErrorCodes,
    ErrorKind,
)
from codesense.parser import parse
from codesense.symbolic import SymbolicExecutor, check_math_safety

from tests.conftest import COUNTDOWN, LITERAL_ZERO, TRACKED_ZERO


def check(source, **kwargs):
    return check_math_safety(parse(source), **kwargs)


class TestLiteralZero:

    def test_assignment_divided_by_zero(self):
        with pytest.raises(DivisionByLiteralZeroError) as info:
            check(LITERAL_ZERO)
        assert info.value.kind is ErrorKind.DIVISION_BY_LITERAL_ZERO
        assert info.value.message == "Division by Literal Zero."

    def test_modulo(self):
        with pytest.raises(DivisionByLiteralZeroError) as info:
            check("int r = 7 % 0;")
        assert info.value.message == "Modulo by Literal Zero."
        assert info.value.operator == "%"

    def test_float_zero(self):
        with pytest.raises(DivisionByLiteralZeroError):
            check("float r = 1.0 / 0.0;")

    @pytest.mark.parametrize("source", [
        "int a = 1; if (a > 0) { while (a < 3) { a = (a + 1) / 0; } }",
        "int a = 1; if (a > 0) { } else { { a = 2 * (a / 0); } }",
        "int a = 1; while (a / 0 > 1) { }",
        "return 4 % 0;",
    ])
    def test_found_at_any_depth(self, source):
        with pytest.raises(DivisionByLiteralZeroError):
            check(source)

    def test_location_is_the_division(self):
        with pytest.raises(DivisionByLiteralZeroError) as info:
            check("int x = 5;\nint y = x / 0;")
        assert info.value.line == 2
        assert info.value.location.start.column == 9


class TestTrackedZero:

    def test_scenario(self):
        with pytest.raises(DivisionByTrackedZeroError) as info:
            check(TRACKED_ZERO)
        assert info.value.name == "y"
        assert info.value.code == ErrorCodes.DIVISION_BY_TRACKED_ZERO

    def test_copied_through_identifier(self):
        with pytest.raises(DivisionByTrackedZeroError) as info:
            check("int z = 0; int w = z; int r = 1 / w;")
        assert info.value.name == "w"

    def test_value_checked_before_rebinding(self):
        with pytest.raises(DivisionByTrackedZeroError):
            check("int y = 0; y = 5 / y;")

    def test_reassigned_literal(self):
        with pytest.raises(DivisionByTrackedZeroError):
            check("int d = 4; d = 0; int r = 8 % d;")


class TestInvalidation:

    def test_expression_forgets_value(self):
        check("int z = 0; z = z + 1; int r = 1 / z;")

    def test_unknown_identifier_forgets_value(self):
        check("int z = 0; z = other; int r = 1 / z;")

    def test_declaration_without_value_forgets(self):
        assert "z" not in check("int z = 0; int z;")

    def test_complex_divisor_is_not_analysed(self):
        check("int r = 1 / (2 - 2);")

    def test_constraint_map_returned(self):
        assert check("int a = 3; float b = 2.5; int c = a; int d = a + 1;") == {
            "a": 3,
            "b": 2.5,
            "c": 3,
        }

    def test_countdown_is_safe(self):
        assert check(COUNTDOWN) == {}


class TestBranchPropagation:
    """One shared map by default; must-analysis when branch scoped."""

    BRANCH = "int d = 1; int c = 1; if (c > 0) { d = 0; } int r = 10 / d;"
    LOOP = "int d = 1; while (d > 0) { d = 0; } int r = 10 / d;"

    def test_branch_fact_leaks_by_default(self):
        with pytest.raises(DivisionByTrackedZeroError):
            check(self.BRANCH)

    def test_loop_fact_leaks_by_default(self):
        with pytest.raises(DivisionByTrackedZeroError):
            check(self.LOOP)

    def test_branch_scoped_drops_disputed_facts(self):
        assert "d" not in check(self.BRANCH, branch_scoped_constants=True)

    def test_branch_scoped_loop(self):
        assert "d" not in check(self.LOOP, branch_scoped_constants=True)

    def test_branch_scoped_keeps_agreeing_facts(self):
        source = "int d = 0; if (d == 0) { int k = 1; } else { d = 0; } int r = 1 / d;"
        with pytest.raises(DivisionByTrackedZeroError):
            check(source, branch_scoped_constants=True)

    def test_branch_scoped_still_checks_inside_branch(self):
        with pytest.raises(DivisionByTrackedZeroError):
            check("int d = 0; if (d == 0) { int r = 1 / d; }", branch_scoped_constants=True)

    def test_for_loop_follows_the_same_modes(self):
        program = A.Program(body=(
            A.VariableDecl("int", "d", A.Integer(1)),
            A.ForStatement(body=A.Assignment("d", A.Integer(0))),
            A.VariableDecl("int", "r", A.BinaryExpr("/", A.Integer(10), A.Identifier("d"))),
        ))
        with pytest.raises(DivisionByTrackedZeroError):
            check_math_safety(program)
        assert "d" not in check_math_safety(program, branch_scoped_constants=True)

    def test_caller_map_is_threaded(self):
        constraints = {"seed": 0}
        with pytest.raises(DivisionByTrackedZeroError):
            SymbolicExecutor().check(parse("int r = 1 / seed;"), constraints)
