"""Catalog named functions, then log calls of the selected ones."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from ..config.defaults import GLOBAL_OWNER
from ..core.mutation import EditPlan, first_statement
from ..core.scope import component_name, parent_function_name
from ..core.syntax import SourceDocument, function_body
from ..core.traversal import Visitor, walk
from .base import Codemod

if TYPE_CHECKING:
    from tree_sitter import Node

    from ..config.settings import CodemodConfig
    from ..core.traversal import Traversal

CATEGORIES = ("handler", "hook", "utility")


def categorize(name: str) -> str:
    """Category from naming convention."""
    if name.startswith("handle") or name.startswith("on"):
        return "handler"
    if name.startswith("use"):
        return "hook"
    return "utility"


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    file_path: str
    owner: str
    category: str


class FunctionCatalog:
    """Named functions of a project, keyed by name; a later scan replaces an entry."""

    def __init__(self) -> None:
        self.entries: dict[str, CatalogEntry] = {}

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def record(self, name: str, file_path: str, owner: str | None) -> CatalogEntry:
        entry = CatalogEntry(
            name=name,
            file_path=file_path,
            owner=owner or GLOBAL_OWNER,
            category=categorize(name),
        )
        self.entries[name] = entry
        return entry

    def owner_of(self, name: str) -> str | None:
        entry = self.entries.get(name)
        return entry.owner if entry else None

    def by_category(self, category: str) -> list[CatalogEntry]:
        return sorted(
            (entry for entry in self.entries.values() if entry.category == category),
            key=lambda entry: entry.name,
        )

    def counts(self) -> dict[str, int]:
        return {category: len(self.by_category(category)) for category in CATEGORIES}

    def select(self, categories: Iterable[str] = (), names: Iterable[str] = ()) -> set[str]:
        """Names in the given categories plus explicitly named functions."""
        selected = {entry.name for category in categories for entry in self.by_category(category)}
        for name in names:
            if name in self.entries:
                selected.add(name)
            else:
                logger.warning(f"Unknown function '{name}' ignored")
        return selected


class _CatalogCollector(Visitor):
    def __init__(self, document: SourceDocument, catalog: FunctionCatalog) -> None:
        self.document = document
        self.catalog = catalog

    def on_function(self, node: Node, ctx: Traversal) -> None:
        name = ctx.scopes[-1].name
        if not name:
            return
        owner = component_name(ctx.scopes) or parent_function_name(ctx.scopes)
        self.catalog.record(name, self.document.display_path, owner)


class _CallLogPlanner(Visitor):
    def __init__(self, catalog: FunctionCatalog, selected: set[str], plan: EditPlan) -> None:
        self.catalog = catalog
        self.selected = selected
        self.plan = plan
        self.style = plan.style

    def on_function(self, node: Node, ctx: Traversal) -> None:
        name = ctx.scopes[-1].name
        if name not in self.selected or function_body(node) is None:
            return

        component = component_name(ctx.scopes)
        # The component's own declaration
        if component == name:
            return

        parent = component or self.catalog.owner_of(name) or GLOBAL_OWNER
        label = f"[{parent}] Called: {name}"
        if self.style.is_log_call(first_statement(node), label):
            self.plan.record_skip()
            return

        self.plan.prepend_to_body(node, [self.style.log_call(label)])
        self.plan.record(name)


class FunctionLogger(Codemod):
    """Two-phase tool: function catalog scan, then call logging."""

    name = "log-functions"
    description = "Log calls of selected functions"
    extra_ignore_dirs = ("__tests__",)

    def __init__(self, config: CodemodConfig | None = None) -> None:
        super().__init__(config)
        self.catalog = FunctionCatalog()
        self.selected: set[str] = set()

    def collect(self, document: SourceDocument) -> None:
        walk(document, _CatalogCollector(document, self.catalog))

    def finish_scan(self) -> None:
        logger.debug(f"Cataloged {len(self.catalog)} functions: {self.catalog.counts()}")

    def select(self, categories: Iterable[str] = (), names: Iterable[str] = ()) -> set[str]:
        self.selected = self.catalog.select(categories, names)
        return self.selected

    def plan(self, document: SourceDocument) -> EditPlan | None:
        if not self.selected:
            return None
        plan = self.new_plan(document)
        walk(document, _CallLogPlanner(self.catalog, self.selected, plan))
        return plan
