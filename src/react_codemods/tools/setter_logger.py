"""Log every state setter call with the value it is given."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ..core.matcher import BindingTable, PatternMatcher
from ..core.mutation import EditPlan, logged_before, resolve_anchor, value_expression
from ..core.scope import component_name, owner_name
from ..core.syntax import SourceDocument, arguments_of
from ..core.traversal import Visitor, walk
from .base import Codemod

if TYPE_CHECKING:
    from tree_sitter import Node

    from ..config.settings import CodemodConfig
    from ..core.traversal import Traversal


class _BindingCollector(Visitor):
    """First pass: every ``[state, setState] = useState(...)`` of the file."""

    def __init__(self, matcher: PatternMatcher, hook: str) -> None:
        self.matcher = matcher
        self.hook = hook
        self.bindings = BindingTable()

    def on_declarator(self, node: Node, ctx: Traversal) -> None:
        binding = self.matcher.state_binding(node, self.hook, ctx.scopes)
        if binding is not None:
            self.bindings.add(binding)


class _SetterCallPlanner(Visitor):
    """Second pass: plan a log line in front of each resolved setter call."""

    def __init__(self, matcher: PatternMatcher, bindings: BindingTable, plan: EditPlan) -> None:
        self.matcher = matcher
        self.bindings = bindings
        self.plan = plan
        self.style = plan.style

    def on_call(self, node: Node, ctx: Traversal) -> None:
        binding = self.matcher.setter_invocation(node, self.bindings, ctx.scopes)
        if binding is None:
            return

        owner = component_name(ctx.scopes) or owner_name(ctx.scopes)
        label = f"[{owner}] {binding.state} updated to:"
        anchor = resolve_anchor(ctx.path_to_current())
        if logged_before(anchor, self.style, label):
            self.plan.record_skip()
            return

        arguments = arguments_of(node)
        value = value_expression(arguments[0] if arguments else None, self.style)
        self.plan.insert_before(anchor, [self.style.log_call(label, value)])
        self.plan.record(binding.setter)


class SetterLogger(Codemod):
    """Inserts ``console.log('[Comp] state updated to:', value)`` before setter calls."""

    name = "usestate-log"
    description = "Log every useState setter call"

    def __init__(self, config: CodemodConfig | None = None) -> None:
        super().__init__(config)
        self.required_token = self.config.hooks.state_hook

    def plan(self, document: SourceDocument) -> EditPlan | None:
        matcher = self.matcher_for(document)
        hook = self.config.hooks.state_hook
        if not matcher.hook_locals(hook):
            return None

        collector = _BindingCollector(matcher, hook)
        walk(document, collector)
        if not collector.bindings:
            return None
        logger.debug(f"{document.display_path}: {len(collector.bindings)} setter bindings")

        plan = self.new_plan(document)
        walk(document, _SetterCallPlanner(matcher, collector.bindings, plan))
        return plan
