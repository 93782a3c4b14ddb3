"""Report state hooks initialized with non-trivial expressions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.classifier import ExpressionClassifier
from ..core.matcher import PatternMatcher, pattern_elements
from ..core.models import Finding
from ..core.scope import owner_name
from ..core.syntax import SourceDocument, arguments_of, identifier_name, node_line, node_text
from ..core.traversal import Visitor, walk
from .base import Codemod

if TYPE_CHECKING:
    from tree_sitter import Node

    from ..config.settings import CodemodConfig
    from ..core.traversal import Traversal


def declared_state_name(declarator: Node | None) -> str:
    """Name of the state variable a hook result is destructured into.

    ``"unknown"`` when the first pattern slot is empty or not a plain
    identifier, ``""`` when the result is not array-destructured at all.
    """
    if declarator is None or declarator.type != "variable_declarator":
        return ""
    target = declarator.child_by_field_name("name")
    if target is None or target.type != "array_pattern":
        return ""
    elements = pattern_elements(target)
    first = identifier_name(elements[0]) if elements else None
    return first or "unknown"


class _InitializerVisitor(Visitor):
    def __init__(
        self,
        document: SourceDocument,
        matcher: PatternMatcher,
        classifier: ExpressionClassifier,
        hook: str,
    ) -> None:
        self.document = document
        self.matcher = matcher
        self.classifier = classifier
        self.hook = hook
        self.findings: list[Finding] = []

    def on_call(self, node: Node, ctx: Traversal) -> None:
        if not self.matcher.is_hook_call(node, self.hook):
            return
        arguments = arguments_of(node)
        if not arguments:
            return
        initializer = arguments[0]
        shape = self.classifier.classify(initializer)
        if shape is None:
            return

        self.findings.append(
            Finding(
                component_name=owner_name(ctx.scopes),
                variable_name=declared_state_name(ctx.parent),
                file_path=self.document.display_path,
                line_number=node_line(node),
                complexity_class=shape.label,
                source_snippet=node_text(initializer).strip(),
            )
        )


class UseStateAnalyzer(Codemod):
    """Finds state hooks whose initializer is more than a trivial literal."""

    name = "usestate-analyze"
    description = "Report complex useState initializers"

    def __init__(self, config: CodemodConfig | None = None) -> None:
        super().__init__(config)
        self.required_token = self.config.hooks.state_hook
        self.classifier = ExpressionClassifier(self.config.analysis.unlisted_initializers)

    def analyze(self, document: SourceDocument) -> list[Finding]:
        matcher = self.matcher_for(document)
        if not matcher.hook_locals(self.config.hooks.state_hook):
            return []
        visitor = _InitializerVisitor(
            document, matcher, self.classifier, self.config.hooks.state_hook
        )
        walk(document, visitor)
        return visitor.findings
