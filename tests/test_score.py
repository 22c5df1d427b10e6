# tests/test_score.py

import pytest

from codesense import ast as A
from codesense.parser import parse
from codesense.score import ComplexityScorer, rank, rank_title, score, score_card

from tests.conftest import BRANCHY, COUNTDOWN, FOR_TREE


def score_of(source):
    return score(parse(source))


class TestScore:

    def test_flat_program(self):
        assert score_of("int x = 1; x = 2; return x;") == 0

    def test_empty_program(self):
        assert score(A.Program()) == 0

    def test_single_loop(self):
        assert score_of("int x = 10; while (x > 0) { x = x - 1; }") == 1
        assert rank(1) == "A"

    def test_siblings_cost_one_each(self):
        assert score_of("int a = 1; if (a > 0) { } while (a > 0) { a = 0; }") == 2

    def test_nesting_costs_depth(self):
        source = "int a = 1; if (a > 0) { while (a > 0) { if (a > 5) { a = 0; } } }"
        assert score_of(source) == 1 + 2 + 3

    def test_else_branch_is_nested(self):
        assert score_of("int a = 1; if (a > 0) { } else { if (a < 0) { } }") == 1 + 2

    def test_else_if_chain(self):
        assert score_of("int a = 1; if (a > 0) { } else if (a < 0) { } else { }") == 3

    def test_bare_statement_body(self):
        assert score_of("int a = 3; while (a > 0) a = a - 1;") == 1

    def test_plain_blocks_do_not_nest(self):
        assert score_of("{ { int a = 1; if (a > 0) { } } }") == 1

    def test_countdown_and_branchy(self):
        assert score_of(COUNTDOWN) == 1
        assert score_of(BRANCHY) == 1 + 2

    def test_deeper_nesting_never_scores_lower(self):
        flat = score_of("int a = 1; if (a > 0) { } if (a > 1) { }")
        nested = score_of("int a = 1; if (a > 0) { if (a > 1) { } }")
        assert nested >= flat

    def test_scorer_starts_from_given_depth(self):
        program = parse("int a = 1; if (a > 0) { }")
        assert ComplexityScorer().visit(program, 2) == 3

    def test_for_loop_is_a_control_structure(self):
        assert score(A.from_dict(FOR_TREE)) == 1 + 2

    def test_nested_for_loops(self):
        inner = A.ForStatement(body=A.Block())
        outer = A.ForStatement(body=A.Block(body=(inner,)))
        assert score(A.Program(body=(outer,))) == 1 + 2


class TestRank:

    @pytest.mark.parametrize("value, expected", [
        (0, "S+"),
        (1, "A"),
        (5, "A"),
        (6, "B"),
        (10, "B"),
        (11, "C"),
        (15, "C"),
        (16, "F"),
        (200, "F"),
    ])
    def test_boundaries(self, value, expected):
        assert rank(value) == expected

    def test_titles(self):
        assert rank_title("S+") == "Perfectly Flat"
        assert rank_title("F") == "Spaghetti Code"

    def test_score_card(self):
        card = score_card(parse(COUNTDOWN))
        assert (card.score, card.rank, card.title) == (1, "A", "Clean")
        assert card.caption == "A (Clean)"
        assert card.to_dict() == {"score": 1, "rank": "A", "title": "Clean"}
