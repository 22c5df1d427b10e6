# tests/conftest.py
"""
Shared fixtures and sample programs for the codesense test-suite.
"""

import pytest

from codesense.parser import parse

# ── Sample programs ──────────────────────────────────────────────

COUNTDOWN = """\
int main() {
    int x = 10;
    while (x > 0) {
        x = x - 1;
    }
    return 0;
}
"""

TRACKED_ZERO = "int x = 10; int y = 0; int r = x / y;"

LITERAL_ZERO = "int x = 5; x = x / 0;"

BRANCHY = """\
int a = 1;
if (a > 0) {
    int b = a + 1;
    if (b > 1) {
        a = b * 2;
    }
} else {
    a = 0;
}
return a;
"""

# A ``for`` loop only reaches the passes through an external front-end.
FOR_TREE = {
    "type": "Program",
    "body": [
        {"type": "VariableDecl", "varType": "int", "name": "x",
         "value": {"type": "Integer", "value": 3}},
        {
            "type": "ForStatement",
            "body": {
                "type": "Block",
                "body": [
                    {
                        "type": "WhileStatement",
                        "condition": {"type": "BinaryExpr", "operator": ">",
                                      "left": {"type": "Identifier", "name": "x"},
                                      "right": {"type": "Integer", "value": 0}},
                        "body": {"type": "Assignment", "name": "x",
                                 "value": {"type": "BinaryExpr", "operator": "-",
                                           "left": {"type": "Identifier", "name": "x"},
                                           "right": {"type": "Integer", "value": 1}}},
                    }
                ],
            },
        },
    ],
}


def long_sum(terms):
    """``int x = 1 + 1 + ... ;`` with *terms* operands on one line."""
    return "int x = " + " + ".join(["1"] * terms) + ";"


@pytest.fixture
def program():
    """Parse helper: ``program("int x = 1;")``."""
    return parse


@pytest.fixture
def source_file(tmp_path):
    """Write source text to a temporary file and return its path as str."""

    def _write(text, name="program.cpp"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write
