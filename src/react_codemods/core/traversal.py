"""Depth-first traversal driver with an explicit scope stack.

The driver never relies on parent pointers stored in the tree: it keeps the
current ancestor path and a stack of enclosing functions itself, pushing on
entry and popping on exit. Visitors receive the driver as context and
implement ``on_<kind>`` / ``leave_<kind>`` hooks for the node kinds they
care about (see :class:`~react_codemods.core.syntax.NodeKind`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .scope import FunctionScope, function_name
from .syntax import NodeKind, SourceDocument, kind_of

if TYPE_CHECKING:
    from tree_sitter import Node

# Returned by an ``on_*`` hook to keep the walk out of the node's subtree
SKIP = False


class Visitor:
    """Base visitor; subclasses define ``on_call``, ``leave_function`` etc."""

    def enter(self, node: Node, kind: NodeKind, ctx: Traversal) -> bool:
        hook = getattr(self, f"on_{kind.value}", None)
        if hook is None:
            return True
        return hook(node, ctx) is not SKIP

    def leave(self, node: Node, kind: NodeKind, ctx: Traversal) -> None:
        hook = getattr(self, f"leave_{kind.value}", None)
        if hook is not None:
            hook(node, ctx)


class Traversal:
    """Walks one document, exposing ancestors and scopes to the visitor."""

    def __init__(self, document: SourceDocument) -> None:
        self.document = document
        self.ancestors: list[Node] = []
        self.scopes: list[FunctionScope] = []

    @property
    def parent(self) -> Node | None:
        """Parent of the node currently being visited."""
        return self.ancestors[-2] if len(self.ancestors) > 1 else None

    @property
    def enclosing_scopes(self) -> list[FunctionScope]:
        """Scopes around the current function, excluding itself."""
        return self.scopes[:-1]

    def path_to_current(self) -> list[Node]:
        """Snapshot of the ancestor path, root first, current node last."""
        return list(self.ancestors)

    def walk(self, visitor: Visitor, root: Node | None = None) -> None:
        """Visit every node under ``root`` in document order."""
        stack: list[tuple[Node, bool]] = [(root or self.document.root, False)]

        while stack:
            node, leaving = stack.pop()
            kind = kind_of(node)

            if leaving:
                visitor.leave(node, kind, self)
                if kind is NodeKind.FUNCTION:
                    self.scopes.pop()
                self.ancestors.pop()
                continue

            parent = self.ancestors[-1] if self.ancestors else None
            self.ancestors.append(node)
            if kind is NodeKind.FUNCTION:
                self.scopes.append(
                    FunctionScope(node=node, name=function_name(node, parent), kind=node.type)
                )

            descend = visitor.enter(node, kind, self)
            stack.append((node, True))
            if descend:
                stack.extend((child, False) for child in reversed(node.children))


def walk(document: SourceDocument, visitor: Visitor) -> Traversal:
    """Run a visitor over a whole document and return the finished driver."""
    traversal = Traversal(document)
    traversal.walk(visitor)
    return traversal
