"""Function naming and owner resolution on the traversal scope stack."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config.defaults import UNKNOWN_COMPONENT
from .syntax import is_capitalized, node_text, same_node

if TYPE_CHECKING:
    from tree_sitter import Node

# Names a function can receive from its own declaration
_OWN_NAME_TYPES = ("identifier", "property_identifier", "private_property_identifier")

# Class field declarations: (node type, field holding the property name)
_CLASS_FIELDS = (
    ("field_definition", "property"),
    ("public_field_definition", "name"),
)


@dataclass(frozen=True)
class FunctionScope:
    """One entry of the scope stack: a function node and its resolved name."""

    node: Node
    name: str | None
    kind: str

    @property
    def is_component_named(self) -> bool:
        return is_capitalized(self.name)


def function_name(node: Node, parent: Node | None) -> str | None:
    """Resolve the name a function is known by.

    Order: the function's own name, the identifier of the variable it
    initializes, the key of the object property it is the value of, the
    class field it initializes.
    """
    own = node.child_by_field_name("name")
    if own is not None and own.type in _OWN_NAME_TYPES:
        return node_text(own)

    if parent is None:
        return None

    if parent.type == "variable_declarator":
        target = parent.child_by_field_name("name")
        if target is not None and target.type == "identifier" and same_node(
            parent.child_by_field_name("value"), node
        ):
            return node_text(target)
        return None

    if parent.type == "pair":
        key = parent.child_by_field_name("key")
        if key is not None and key.type == "property_identifier" and same_node(
            parent.child_by_field_name("value"), node
        ):
            return node_text(key)
        return None

    for field_type, name_field in _CLASS_FIELDS:
        if parent.type == field_type:
            prop = parent.child_by_field_name(name_field)
            if prop is not None and prop.type in _OWN_NAME_TYPES and same_node(
                parent.child_by_field_name("value"), node
            ):
                return node_text(prop)

    return None


def owner_name(scopes: Sequence[FunctionScope], default: str = UNKNOWN_COMPONENT) -> str:
    """Innermost named enclosing function, whatever its case."""
    for scope in reversed(scopes):
        if scope.name:
            return scope.name
    return default


def component_name(
    scopes: Sequence[FunctionScope], default: str | None = None
) -> str | None:
    """Innermost enclosing function whose name is capitalized.

    Lower-case helpers between the node and the component are skipped.
    """
    for scope in reversed(scopes):
        if scope.is_component_named:
            return scope.name
    return default


def parent_function_name(scopes: Sequence[FunctionScope]) -> str | None:
    """Innermost named function strictly enclosing the current one.

    ``scopes[-1]`` is the current function itself.
    """
    for scope in reversed(scopes[:-1]):
        if scope.name:
            return scope.name
    return None
