"""Count and log every effect callback invocation."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from loguru import logger

from ..config.defaults import EFFECT_COUNTER_PREFIX, UNKNOWN_EFFECT_OWNER
from ..core.matcher import PatternMatcher
from ..core.mutation import EditPlan, first_statement, value_expression
from ..core.scope import component_name, owner_name
from ..core.syntax import FUNCTION_LITERAL_TYPES, SourceDocument, arguments_of, node_line, node_text
from ..core.traversal import Visitor, walk
from .base import Codemod

if TYPE_CHECKING:
    from tree_sitter import Node

    from ..config.settings import CodemodConfig
    from ..core.traversal import Traversal

_COUNTER_RE = re.compile(rf"\b{EFFECT_COUNTER_PREFIX}(\d+)\b")
_INCREMENT_RE = re.compile(rf"^{EFFECT_COUNTER_PREFIX}\d+\s*\+=\s*1\s*;?$")


class EffectCounter:
    """Per-file source of unique counter indices.

    Starts at 0, or right after the highest index already present in the
    file so a second run never reuses a name.
    """

    def __init__(self, start: int = 0) -> None:
        self.next_index = start

    @classmethod
    def for_source(cls, text: str) -> EffectCounter:
        existing = [int(match) for match in _COUNTER_RE.findall(text)]
        return cls(max(existing) + 1 if existing else 0)

    def take(self) -> int:
        index = self.next_index
        self.next_index += 1
        return index


def counter_name(index: int) -> str:
    return f"{EFFECT_COUNTER_PREFIX}{index}"


def is_instrumented(callback: Node) -> bool:
    """Callback body already starts with a counter increment."""
    statement = first_statement(callback)
    return statement is not None and bool(_INCREMENT_RE.match(node_text(statement)))


class _EffectPlanner(Visitor):
    def __init__(
        self,
        document: SourceDocument,
        matcher: PatternMatcher,
        hook: str,
        plan: EditPlan,
    ) -> None:
        self.document = document
        self.matcher = matcher
        self.hook = hook
        self.plan = plan
        self.style = plan.style
        self.counter = EffectCounter.for_source(document.text)

    def on_call(self, node: Node, ctx: Traversal) -> None:
        if not self.matcher.is_hook_call(node, self.hook):
            return

        arguments = arguments_of(node)
        callback = arguments[0] if arguments else None
        if callback is None or callback.type not in FUNCTION_LITERAL_TYPES:
            logger.warning(
                f"{self.document.display_path}:{node_line(node)}: "
                f"{self.hook} callback is not a function literal, skipped"
            )
            self.plan.record_skip()
            return
        if is_instrumented(callback):
            self.plan.record_skip()
            return

        owner = component_name(ctx.scopes) or owner_name(ctx.scopes, UNKNOWN_EFFECT_OWNER)
        index = self.counter.take()
        counter = counter_name(index)
        tag = f"[{owner}_Effect_{index}]"
        where = f"{self.document.display_path}:{node_line(node)}"

        lines = [
            f"{counter} += 1;",
            self.style.log_call(f"{tag} {self.hook} at {where} - Call count:", counter),
        ]
        if len(arguments) > 1:
            deps = value_expression(arguments[1], self.style)
            lines.append(self.style.log_call(f"{tag} Dependencies:", deps))

        self.plan.hoist(f"let {counter} = 0;")
        self.plan.prepend_to_body(callback, lines)
        self.plan.record(counter)


class EffectLogger(Codemod):
    """Adds a per-site call counter and log lines to effect callbacks."""

    name = "effect-debug"
    description = "Count and log useEffect callback runs"
    skip_hidden_dirs = True

    def __init__(self, config: CodemodConfig | None = None) -> None:
        super().__init__(config)
        self.required_token = self.config.hooks.effect_hook

    def plan(self, document: SourceDocument) -> EditPlan | None:
        matcher = self.matcher_for(document)
        hook = self.config.hooks.effect_hook
        if not matcher.hook_locals(hook):
            return None

        plan = self.new_plan(document)
        walk(document, _EffectPlanner(document, matcher, hook, plan))
        return plan
