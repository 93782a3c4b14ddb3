"""Recognition of hook calls, setter calls, components and JSX references."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .scope import FunctionScope
from .syntax import (
    FUNCTION_TYPES,
    JSX_ELEMENT_TYPES,
    function_body,
    identifier_name,
    is_capitalized,
    jsx_tag_name,
    named_children,
    node_key,
    node_text,
    string_value,
    unwrap_parens,
)

if TYPE_CHECKING:
    from tree_sitter import Node

# Subtrees that belong to another function body
_SCOPE_BOUNDARIES = FUNCTION_TYPES | {"class_declaration", "class", "abstract_class_declaration"}


# ── Imports ─────────────────────────────────────────────────────────────


@dataclass
class ImportIndex:
    """Value imports of one module, keyed by the local name they bind."""

    named: dict[str, tuple[str, str]] = field(default_factory=dict)
    defaults: dict[str, str] = field(default_factory=dict)
    namespaces: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_program(cls, root: Node) -> ImportIndex:
        """Collect top-level ``import`` declarations."""
        index = cls()
        for statement in root.named_children:
            if statement.type != "import_statement":
                continue
            # import type { X } from '...'
            if any(child.type == "type" for child in statement.children):
                continue
            module = string_value(statement.child_by_field_name("source"))
            if module is None:
                continue
            for clause in statement.named_children:
                if clause.type == "import_clause":
                    index._add_clause(clause, module)
        return index

    def _add_clause(self, clause: Node, module: str) -> None:
        for part in clause.named_children:
            if part.type == "identifier":
                self.defaults[node_text(part)] = module
            elif part.type == "namespace_import":
                local = next((c for c in part.named_children if c.type == "identifier"), None)
                if local is not None:
                    self.namespaces[node_text(local)] = module
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    if any(child.type == "type" for child in spec.children):
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    imported = string_value(name_node) or node_text(name_node)
                    local = node_text(alias_node) if alias_node is not None else imported
                    self.named[local] = (module, imported)

    def local_names(self, module: str, imported: str) -> set[str]:
        """Local names under which ``imported`` from ``module`` is bound."""
        return {
            local
            for local, (source, name) in self.named.items()
            if source == module and name == imported
        }

    def is_imported(self, local: str) -> bool:
        """Whether a local name is bound by a named or default import."""
        return local in self.named or local in self.defaults


# ── Setter bindings ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Binding:
    """A ``[state, setState]`` pair produced by a state hook call."""

    setter: str
    state: str
    declarator: Node
    scope_key: tuple[int, int, str] | None


class BindingTable:
    """Setter bindings of one file, grouped by declaring function."""

    def __init__(self) -> None:
        self._by_scope: dict[tuple[int, int, str] | None, dict[str, Binding]] = {}

    def add(self, binding: Binding) -> None:
        self._by_scope.setdefault(binding.scope_key, {})[binding.setter] = binding

    def resolve(self, name: str, scopes: Sequence[FunctionScope]) -> Binding | None:
        """Find the binding visible from the given scope stack."""
        for scope in reversed(scopes):
            table = self._by_scope.get(node_key(scope.node))
            if table and name in table:
                return table[name]
        return self._by_scope.get(None, {}).get(name)

    def __len__(self) -> int:
        return sum(len(table) for table in self._by_scope.values())


def pattern_elements(pattern: Node) -> list[Node | None]:
    """Positional elements of an array pattern; holes are ``None``."""
    elements: list[Node | None] = []
    current: Node | None = None
    for child in pattern.children:
        if child.type in ("[", "]", "comment"):
            continue
        if child.type == ",":
            elements.append(current)
            current = None
            continue
        current = child
    if current is not None:
        elements.append(current)
    return elements


# ── Matcher ─────────────────────────────────────────────────────────────


class PatternMatcher:
    """Shape recognition against one file's import context."""

    def __init__(self, imports: ImportIndex, hook_module: str) -> None:
        self.imports = imports
        self.hook_module = hook_module

    def hook_locals(self, hook: str) -> set[str]:
        return self.imports.local_names(self.hook_module, hook)

    def is_hook_call(self, node: Node, hook: str) -> bool:
        """A call to ``hook`` through a name imported from the hook module.

        A same-named local function without the import never matches.
        """
        if node.type != "call_expression":
            return False
        callee = identifier_name(node.child_by_field_name("function"))
        return callee is not None and callee in self.hook_locals(hook)

    def state_binding(
        self, declarator: Node, hook: str, scopes: Sequence[FunctionScope]
    ) -> Binding | None:
        """Binding declared by ``const [state, setState] = useState(...)``."""
        value = declarator.child_by_field_name("value")
        target = declarator.child_by_field_name("name")
        if value is None or target is None or target.type != "array_pattern":
            return None
        if not self.is_hook_call(unwrap_parens(value), hook):
            return None

        elements = pattern_elements(target)
        if len(elements) < 2:
            return None
        state, setter = identifier_name(elements[0]), identifier_name(elements[1])
        if not state or not setter:
            return None

        scope_key = node_key(scopes[-1].node) if scopes else None
        return Binding(setter=setter, state=state, declarator=declarator, scope_key=scope_key)

    def setter_invocation(
        self, node: Node, bindings: BindingTable, scopes: Sequence[FunctionScope]
    ) -> Binding | None:
        """Resolve a call whose callee is a known setter."""
        if node.type != "call_expression":
            return None
        callee = identifier_name(node.child_by_field_name("function"))
        if callee is None:
            return None
        return bindings.resolve(callee, scopes)

    def is_component_function(self, node: Node, name: str | None) -> bool:
        """Capitalized function whose own body returns JSX."""
        return is_capitalized(name) and bool(jsx_returns(node))

    def jsx_child_reference(self, element: Node) -> str | None:
        """Imported, capitalized tag name of a JSX element."""
        if element.type not in JSX_ELEMENT_TYPES:
            return None
        tag = jsx_tag_name(element)
        if tag and is_capitalized(tag) and self.imports.is_imported(tag):
            return tag
        return None


# ── Function body helpers ───────────────────────────────────────────────


def own_statements(function: Node, types: frozenset[str] | set[str]) -> Iterator[Node]:
    """Nodes of the given types inside a function's own body.

    Nested function literals and classes are not entered.
    """
    body = function_body(function)
    if body is None:
        return
    stack = [body]
    while stack:
        node = stack.pop()
        if node.type in types:
            yield node
        for child in reversed(node.children):
            if child.type not in _SCOPE_BOUNDARIES:
                stack.append(child)


def return_values(function: Node) -> list[Node]:
    """Returned expressions of a function, parentheses stripped.

    An arrow function with an expression body returns that expression.
    """
    body = function_body(function)
    if body is None:
        return []
    if body.type != "statement_block":
        return [unwrap_parens(body)]

    values = []
    for statement in own_statements(function, {"return_statement"}):
        argument = named_children(statement)
        if argument:
            values.append(unwrap_parens(argument[0]))
    return values


def is_jsx(node: Node) -> bool:
    """JSX element, self-closing element or fragment."""
    return node.type in JSX_ELEMENT_TYPES


def jsx_returns(function: Node) -> list[Node]:
    """JSX values returned directly by a function."""
    return [value for value in return_values(function) if is_jsx(value)]
