"""Component hierarchy scan and selective ``<Profiler>`` wrapping.

Phase one records every component of every file and the imported
components each one renders. Edges are kept pending until the scan is over,
since a child is often declared in a file scanned after its parent. Phase
two wraps the JSX returned by the selected components.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from ..config.defaults import JSX_FILE_EXTENSIONS
from ..core.matcher import PatternMatcher, jsx_returns
from ..core.mutation import EditPlan, top_level_bindings
from ..core.syntax import JSX_ELEMENT_TYPES, SourceDocument, jsx_tag_name
from ..core.traversal import Visitor, walk
from .base import Codemod

if TYPE_CHECKING:
    from tree_sitter import Node

    from ..config.settings import CodemodConfig
    from ..core.traversal import Traversal

COMPONENT_TYPES = ("page", "layout", "component", "provider")
SELECT_ALL = "*all*"


def detect_component_type(file_path: str, name: str) -> str:
    """Classify a component by where it lives, then by its name."""
    normalized = "/" + file_path.replace("\\", "/").lower()
    if "/pages/" in normalized or "/screens/" in normalized:
        return "page"
    if "/layouts/" in normalized:
        return "layout"
    if "/components/" in normalized:
        return "component"
    if "Provider" in name:
        return "provider"
    return "component"


def group_token(component_type: str) -> str:
    return f"*{component_type}*"


@dataclass
class ComponentNode:
    name: str
    file_path: str
    type: str = "component"
    children: list[str] = field(default_factory=list)
    parents: set[str] = field(default_factory=set)


class ComponentGraph:
    """Components of a project keyed by name, with render relationships."""

    def __init__(self) -> None:
        self.nodes: dict[str, ComponentNode] = {}
        self._pending: list[tuple[str, str]] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, name: str) -> bool:
        return name in self.nodes

    def add_component(self, name: str, file_path: str, type_path: str | None = None) -> ComponentNode:
        """Register a component; the first declaration of a name wins."""
        if name not in self.nodes:
            component_type = detect_component_type(type_path or file_path, name)
            self.nodes[name] = ComponentNode(name=name, file_path=file_path, type=component_type)
        return self.nodes[name]

    def add_reference(self, parent: str, child: str) -> None:
        """Record that ``parent`` renders ``child``; resolved by :meth:`resolve`."""
        self._pending.append((parent, child))

    def resolve(self) -> None:
        """Turn pending references between known components into edges."""
        for parent_name, child_name in self._pending:
            if parent_name == child_name:
                continue
            parent = self.nodes.get(parent_name)
            child = self.nodes.get(child_name)
            if parent is None or child is None:
                continue
            if child_name not in parent.children:
                parent.children.append(child_name)
            child.parents.add(parent_name)
        logger.debug(f"Resolved {len(self._pending)} references among {len(self.nodes)} components")
        self._pending.clear()

    def roots(self) -> list[ComponentNode]:
        """Parentless components, then components only reachable through cycles."""
        roots = [node for node in self.nodes.values() if not node.parents]
        seen = {name for _, name, _ in self._preorder(roots)}
        for node in self.nodes.values():
            if node.name not in seen:
                roots.append(node)
                seen.update(name for _, name, _ in self._preorder([node], seen))
        return roots

    def _preorder(
        self, starts: Iterable[ComponentNode], visited: set[str] | None = None
    ) -> Iterator[tuple[int, str, ComponentNode]]:
        visited = set(visited or ())
        stack = [(0, node) for node in reversed(list(starts))]
        while stack:
            depth, node = stack.pop()
            if node.name in visited:
                continue
            visited.add(node.name)
            yield depth, node.name, node
            for child_name in reversed(node.children):
                child = self.nodes.get(child_name)
                if child is not None and child_name not in visited:
                    stack.append((depth + 1, child))

    def walk(self) -> Iterator[tuple[int, ComponentNode]]:
        """Every component once, depth-first from the roots, with its depth."""
        for depth, _, node in self._preorder(self.roots()):
            yield depth, node

    def as_tree(self) -> list[dict[str, Any]]:
        """Nested ``{name, type, file, children}`` records from the roots."""
        records: list[dict[str, Any]] = []
        stack: list[list[dict[str, Any]]] = [records]
        for depth, node in self.walk():
            del stack[depth + 1 :]
            record = {"name": node.name, "type": node.type, "file": node.file_path, "children": []}
            stack[depth].append(record)
            stack.append(record["children"])
        return records

    def names_of_type(self, component_type: str) -> list[str]:
        return [node.name for node in self.nodes.values() if node.type == component_type]

    def group_counts(self) -> dict[str, int]:
        return {t: len(self.names_of_type(t)) for t in COMPONENT_TYPES if self.names_of_type(t)}

    def expand_selection(self, tokens: Iterable[str]) -> set[str]:
        """Resolve ``*all*`` / ``*<type>*`` tokens and plain names to components."""
        selected: set[str] = set()
        for token in tokens:
            if token == SELECT_ALL:
                return set(self.nodes)
            if token.startswith("*") and token.endswith("*"):
                selected.update(self.names_of_type(token.strip("*")))
            elif token in self.nodes:
                selected.add(token)
            else:
                logger.warning(f"Unknown component '{token}' ignored")
        return selected


# ── Visitors ────────────────────────────────────────────────────────────


def rendered_elements(function: Node) -> Iterator[Node]:
    """JSX elements anywhere inside a function, nested callbacks included."""
    stack = [function]
    while stack:
        node = stack.pop()
        if node.type in JSX_ELEMENT_TYPES:
            yield node
        stack.extend(reversed(node.children))


class _HierarchyCollector(Visitor):
    def __init__(self, document: SourceDocument, matcher: PatternMatcher, graph: ComponentGraph) -> None:
        self.document = document
        self.matcher = matcher
        self.graph = graph

    def on_function(self, node: Node, ctx: Traversal) -> None:
        name = ctx.scopes[-1].name
        if not self.matcher.is_component_function(node, name):
            return
        self.graph.add_component(name, self.document.display_path, self.document.path.as_posix())
        for element in rendered_elements(node):
            child = self.matcher.jsx_child_reference(element)
            if child:
                self.graph.add_reference(name, child)


class _ProfilerPlanner(Visitor):
    def __init__(
        self,
        matcher: PatternMatcher,
        selected: set[str],
        plan: EditPlan,
        tag: str,
        callback: str,
    ) -> None:
        self.matcher = matcher
        self.selected = selected
        self.plan = plan
        self.tag = tag
        self.callback = callback

    def on_function(self, node: Node, ctx: Traversal) -> None:
        name = ctx.scopes[-1].name
        if name not in self.selected or not self.matcher.is_component_function(node, name):
            return

        quote = self.plan.style.quote
        opening = f"<{self.tag} id={quote}{name}{quote} onRender={{{self.callback}}}>"
        closing = f"</{self.tag}>"
        wrapped = False
        for value in jsx_returns(node):
            if jsx_tag_name(value) == self.tag:
                self.plan.record_skip()
                continue
            self.plan.wrap(value, opening, closing)
            wrapped = True
        if wrapped:
            self.plan.record(name)


class ComponentProfiler(Codemod):
    """Two-phase tool: component hierarchy scan, then ``<Profiler>`` wrapping."""

    name = "profile"
    description = "Wrap selected components in <Profiler>"
    extra_ignore_files = ("*.stories.*",)

    def __init__(self, config: CodemodConfig | None = None) -> None:
        super().__init__(config)
        self.graph = ComponentGraph()
        self.selected: set[str] = set()

    @property
    def extensions(self) -> list[str]:
        return [ext for ext in self.config.discovery.extensions if ext in JSX_FILE_EXTENSIONS]

    def collect(self, document: SourceDocument) -> None:
        walk(document, _HierarchyCollector(document, self.matcher_for(document), self.graph))

    def finish_scan(self) -> None:
        self.graph.resolve()

    def select(self, tokens: Iterable[str]) -> set[str]:
        self.selected = self.graph.expand_selection(tokens)
        return self.selected

    def plan(self, document: SourceDocument) -> EditPlan | None:
        if not self.selected:
            return None

        matcher = self.matcher_for(document)
        settings = self.config.profiler
        plan = self.new_plan(document)
        walk(document, _ProfilerPlanner(matcher, self.selected, plan, settings.tag, settings.callback))
        if not plan.sites:
            return plan

        module = self.config.hooks.module
        if not matcher.imports.local_names(module, settings.tag):
            plan.add_preamble(
                f"import {{ {settings.tag} }} from {plan.style.string(module)};"
            )
        if settings.callback not in top_level_bindings(document.root) and not matcher.imports.is_imported(
            settings.callback
        ):
            plan.add_preamble(self.render_callback(document.is_typescript))
        return plan

    def render_callback(self, typed: bool) -> str:
        """Source of the ``onRender`` callback function."""
        if typed:
            params = "id: string, phase: string, actualDuration: number"
        else:
            params = "id, phase, actualDuration"
        log = self.config.output.log_function
        return (
            f"\nfunction {self.config.profiler.callback}({params}) {{\n"
            f"  {log}(`Profiler [${{id}}] Phase: ${{phase}}, Actual Duration: ${{actualDuration}}ms`);\n"
            "}\n"
        )
