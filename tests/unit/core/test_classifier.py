"""Tests for initializer shape classification."""

import pytest

from react_codemods.core.classifier import ComplexityClass, ExpressionClassifier, UnlistedPolicy
from react_codemods.core.syntax import arguments_of
from react_codemods.core.traversal import Visitor, walk


def _initializer(parse, expression: str):
    doc = parse(f"useState({expression});\n")
    found = []

    class First(Visitor):
        def on_call(self, node, ctx):
            found.append(arguments_of(node)[0])

    walk(doc, First())
    return found[0]


class TestExpressionClassifier:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("() => compute()", ComplexityClass.FUNCTION_INITIALIZATION),
            ("function () { return 1; }", ComplexityClass.FUNCTION_INITIALIZATION),
            ("a ? b : c", ComplexityClass.TERNARY),
            ("a && b", ComplexityClass.LOGICAL_EXPRESSION),
            ("a ?? []", ComplexityClass.LOGICAL_EXPRESSION),
            ("load(id)", ComplexityClass.FUNCTION_CALL),
            ("{ a: 1 }", ComplexityClass.COMPLEX_OBJECT),
            ("[1]", ComplexityClass.NON_EMPTY_ARRAY),
            ("a + 1", ComplexityClass.BINARY_EXPRESSION),
            ("(a ? b : c)", ComplexityClass.TERNARY),
        ],
    )
    def test_complex_shapes(self, parse, expression, expected):
        assert ExpressionClassifier().classify(_initializer(parse, expression)) is expected

    @pytest.mark.parametrize(
        "expression", ["false", "true", "''", '""', "0", "0.0", "0x0", "null", "undefined"]
    )
    def test_trivial_literals_are_not_reported(self, parse, expression):
        assert ExpressionClassifier().classify(_initializer(parse, expression)) is None

    @pytest.mark.parametrize("expression", ["{}", "[]"])
    def test_empty_literals_are_not_reported(self, parse, expression):
        assert ExpressionClassifier().classify(_initializer(parse, expression)) is None

    def test_ternary_wins_over_nested_call(self, parse):
        node = _initializer(parse, "ready ? load() : []")
        assert ExpressionClassifier().classify(node) is ComplexityClass.TERNARY

    def test_logical_wins_over_binary(self, parse):
        node = _initializer(parse, "a || b")
        assert ExpressionClassifier().shape_of(node) is ComplexityClass.LOGICAL_EXPRESSION

    @pytest.mark.parametrize("expression", ["`template`", "-1", "new Map()", "'text'", "42"])
    def test_unlisted_shapes_follow_policy(self, parse, expression):
        node = _initializer(parse, expression)
        assert ExpressionClassifier(UnlistedPolicy.IGNORE).classify(node) is None
        assert (
            ExpressionClassifier(UnlistedPolicy.REPORT).classify(node)
            is ComplexityClass.OTHER_EXPRESSION
        )

    def test_policy_accepts_plain_string(self):
        assert ExpressionClassifier("report").unlisted is UnlistedPolicy.REPORT

    def test_labels(self):
        assert ComplexityClass.NON_EMPTY_ARRAY.label == "Non-empty array"
        assert not ComplexityClass.TRIVIAL.is_complex
