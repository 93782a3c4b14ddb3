"""Complexity classes for state hook initializers."""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

from .syntax import FUNCTION_LITERAL_TYPES, named_children, node_text, string_value, unwrap_parens

if TYPE_CHECKING:
    from tree_sitter import Node

LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})


class ComplexityClass(str, Enum):
    """Shape class of an initializer. Values are the report labels."""

    FUNCTION_INITIALIZATION = "function initialization"
    TERNARY = "ternary"
    LOGICAL_EXPRESSION = "logical expression"
    FUNCTION_CALL = "function call"
    COMPLEX_OBJECT = "complex object"
    NON_EMPTY_ARRAY = "non-empty array"
    BINARY_EXPRESSION = "binary expression"
    OTHER_EXPRESSION = "other expression"
    TRIVIAL = "trivial"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_complex(self) -> bool:
        return self is not ComplexityClass.TRIVIAL


class UnlistedPolicy(str, Enum):
    """Handling of initializer shapes outside the enumerated classes."""

    IGNORE = "ignore"
    REPORT = "report"


def _is_zero(text: str) -> bool:
    """Numeric literal equal to zero (decimal, hex, octal, binary)."""
    cleaned = text.replace("_", "").lower()
    if cleaned.endswith("n"):
        # BigInt literals are a different literal kind
        return False
    try:
        if re.match(r"^0[xob]", cleaned):
            return int(cleaned, 0) == 0
        return float(cleaned) == 0
    except ValueError:
        return False


def is_trivial(node: Node) -> bool:
    """Boolean, empty string, zero, null or ``undefined``."""
    node_type = node.type
    if node_type in ("true", "false", "null", "undefined"):
        return True
    if node_type == "identifier":
        return node_text(node) == "undefined"
    if node_type == "string":
        return string_value(node) == ""
    if node_type == "number":
        return _is_zero(node_text(node))
    return False


def _binary_operator(node: Node) -> str | None:
    operator = node.child_by_field_name("operator")
    return operator.type if operator is not None else None


class ExpressionClassifier:
    """Classifies an initializer by shape, never by value.

    Precedence matters: a logical expression is also a binary expression in
    the tree-sitter grammar, and a call can appear inside any other shape.
    """

    def __init__(self, unlisted: UnlistedPolicy | str = UnlistedPolicy.IGNORE) -> None:
        self.unlisted = UnlistedPolicy(unlisted)

    def classify(self, node: Node) -> ComplexityClass | None:
        """Return the complexity class, or ``None`` when nothing is reported.

        ``None`` covers trivial literals, empty object/array literals and,
        under the ``ignore`` policy, shapes outside the known classes.
        """
        result = self.shape_of(node)
        if result is ComplexityClass.TRIVIAL:
            return None
        if result is ComplexityClass.OTHER_EXPRESSION and self.unlisted is UnlistedPolicy.IGNORE:
            return None
        return result

    def shape_of(self, node: Node) -> ComplexityClass:
        node = unwrap_parens(node)
        node_type = node.type

        if node_type in FUNCTION_LITERAL_TYPES:
            return ComplexityClass.FUNCTION_INITIALIZATION
        if node_type == "ternary_expression":
            return ComplexityClass.TERNARY
        if node_type == "binary_expression" and _binary_operator(node) in LOGICAL_OPERATORS:
            return ComplexityClass.LOGICAL_EXPRESSION
        if node_type == "call_expression":
            return ComplexityClass.FUNCTION_CALL
        if node_type == "object":
            return ComplexityClass.COMPLEX_OBJECT if named_children(node) else ComplexityClass.TRIVIAL
        if node_type == "array":
            return ComplexityClass.NON_EMPTY_ARRAY if named_children(node) else ComplexityClass.TRIVIAL
        if node_type == "binary_expression":
            return ComplexityClass.BINARY_EXPRESSION
        if is_trivial(node):
            return ComplexityClass.TRIVIAL
        return ComplexityClass.OTHER_EXPRESSION
