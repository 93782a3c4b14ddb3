"""Planned, minimal-diff source mutations.

Tools never touch the tree. While traversing they register insertions on an
:class:`EditPlan`, anchored on existing nodes; once the traversal is over the
plan renders every anchor into plain byte-offset insertions and the
serializer splices them into the original source in a single pass. Text that
is not next to an insertion point is carried over byte for byte.

Anchor kinds
------------
``before``      statement inside a statement list; lines go in front of it
``slot``        unbraced body of a control statement; wrapped in braces
``arrow_body``  expression body of an arrow function; rewritten into a block
                ending in ``return <expression>;``
``block``       block body of a function; lines go after the opening brace
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from loguru import logger

from .exceptions import TransformError
from .syntax import (
    FUNCTION_LITERAL_TYPES,
    SLOT_FIELDS,
    STATEMENT_CONTAINERS,
    SourceDocument,
    function_body,
    get_parser,
    identifier_name,
    named_children,
    node_key,
    node_text,
    same_node,
    string_value,
    unwrap_parens,
)

if TYPE_CHECKING:
    from tree_sitter import Node

_MAX_INLINE_VALUE = 80

_PURE_LEAVES = frozenset(
    {
        "identifier",
        "undefined",
        "number",
        "string",
        "true",
        "false",
        "null",
        "this",
        "regex",
        "shorthand_property_identifier",
    }
)
_PURE_UNARY = frozenset({"!", "-", "+", "~", "typeof", "void"})


class Tier(IntEnum):
    """Ordering of insertions that share an offset."""

    CLOSE = 0
    INSERT = 1
    OPEN = 2


@dataclass(frozen=True)
class Insertion:
    """Text to splice in at a byte offset of the original source."""

    offset: int
    text: str
    tier: Tier = Tier.INSERT
    # Among OPENs the wider node goes first, among CLOSEs the narrower one
    rank: int = 0


class AnchorKind(str, Enum):
    BEFORE = "before"
    SLOT = "slot"
    ARROW_BODY = "arrow_body"
    BLOCK = "block"


@dataclass
class Anchor:
    """Node that a group of inserted statements attaches to."""

    kind: AnchorKind
    node: Node
    container: Node | None = None
    lines: list[str] = field(default_factory=list)

    @property
    def key(self) -> tuple[AnchorKind, tuple[int, int, str]]:
        return (self.kind, node_key(self.node))


# ── Code generation ─────────────────────────────────────────────────────


class CodeStyle:
    """How generated JavaScript looks."""

    def __init__(self, quote_style: str = "single", log_function: str = "console.log") -> None:
        self.quote = "'" if quote_style == "single" else '"'
        self.log_function = log_function

    def string(self, value: str) -> str:
        """Render a JavaScript string literal."""
        escaped = (
            value.replace("\\", "\\\\")
            .replace(self.quote, f"\\{self.quote}")
            .replace("\n", "\\n")
            .replace("\r", "\\r")
        )
        return f"{self.quote}{escaped}{self.quote}"

    def log_call(self, label: str, *arguments: str) -> str:
        """Render a complete log statement."""
        rendered = ", ".join((self.string(label), *arguments))
        return f"{self.log_function}({rendered});"

    def is_log_call(self, statement: Node | None, label: str | None = None) -> bool:
        """Whether a statement is a log call, optionally with ``label`` as first argument."""
        if statement is None or statement.type != "expression_statement":
            return False
        expressions = named_children(statement)
        if not expressions or expressions[0].type != "call_expression":
            return False
        call = expressions[0]
        callee = call.child_by_field_name("function")
        if callee is None or node_text(callee) != self.log_function:
            return False
        if label is None:
            return True
        arguments = call.child_by_field_name("arguments")
        values = named_children(arguments) if arguments is not None else []
        return bool(values) and string_value(values[0]) == label


def _pure_operands(node: Node) -> list[Node | None] | None:
    """Sub-expressions that must also be pure, ``None`` when ``node`` is not."""
    node_type = node.type

    if node_type in _PURE_LEAVES:
        return []
    if node_type == "template_string":
        if any(child.type == "template_substitution" for child in node.children):
            return None
        return []
    if node_type == "member_expression":
        return [node.child_by_field_name("object")]
    if node_type == "subscript_expression":
        return [node.child_by_field_name("object"), node.child_by_field_name("index")]
    if node_type == "unary_expression":
        operator = node.child_by_field_name("operator")
        if operator is None or operator.type not in _PURE_UNARY:
            return None
        return [node.child_by_field_name("argument")]
    if node_type in ("binary_expression", "ternary_expression", "array", "object", "spread_element"):
        return list(named_children(node))
    if node_type == "pair":
        key = node.child_by_field_name("key")
        if key is None or key.type == "computed_property_name":
            return None
        return [node.child_by_field_name("value")]
    return None


def is_side_effect_free(node: Node) -> bool:
    """Expression that can be evaluated twice without observable change.

    Walks operands with an explicit stack; long operator chains nest deeply.
    """
    stack: list[Node | None] = [node]
    while stack:
        current = stack.pop()
        if current is None:
            return False
        operands = _pure_operands(unwrap_parens(current))
        if operands is None:
            return False
        stack.extend(operands)
    return True


def value_expression(node: Node | None, style: CodeStyle) -> str:
    """Expression that logs ``node`` without evaluating it a second time.

    Side-effect free shapes are duplicated verbatim; anything else (calls,
    function literals, assignments) is logged as its source text.
    """
    if node is None:
        return "undefined"
    if is_side_effect_free(node) and node.type not in FUNCTION_LITERAL_TYPES:
        return node_text(node)
    compact = re.sub(r"\s+", " ", node_text(node)).strip()
    if len(compact) > _MAX_INLINE_VALUE:
        compact = compact[: _MAX_INLINE_VALUE - 3] + "..."
    return style.string(compact)


# ── Anchors ─────────────────────────────────────────────────────────────


def _is_slot(parent: Node, node: Node) -> bool:
    if parent.type == "else_clause":
        return node.type != "comment"
    return any(
        same_node(parent.child_by_field_name(name), node)
        for name in SLOT_FIELDS.get(parent.type, ())
    )


def resolve_anchor(path: Sequence[Node]) -> Anchor:
    """Find where statements must go to run right before ``path[-1]``.

    ``path`` is the ancestor chain from the program root down to the site.

    Raises:
        TransformError: If no statement encloses the site
    """
    for index in range(len(path) - 1, 0, -1):
        node, parent = path[index], path[index - 1]
        # A switch case test is an expression, not a statement of the list
        if parent.type in STATEMENT_CONTAINERS and not same_node(
            parent.child_by_field_name("value"), node
        ):
            return Anchor(AnchorKind.BEFORE, node, container=parent)
        if _is_slot(parent, node):
            return Anchor(AnchorKind.SLOT, node, container=parent)
        if (
            parent.type == "arrow_function"
            and node.type != "statement_block"
            and same_node(function_body(parent), node)
        ):
            return Anchor(AnchorKind.ARROW_BODY, parent)
    raise TransformError("No enclosing statement for mutation site")


def preceding_statements(anchor: Anchor) -> Iterator[Node]:
    """Statements before a ``before`` anchor, nearest first, comments skipped."""
    if anchor.kind is not AnchorKind.BEFORE or anchor.container is None:
        return
    siblings = named_children(anchor.container)
    for index, sibling in enumerate(siblings):
        if same_node(sibling, anchor.node):
            yield from reversed(siblings[:index])
            return


def logged_before(anchor: Anchor, style: CodeStyle, label: str) -> bool:
    """Whether the log statements right above the anchor include ``label``."""
    for statement in preceding_statements(anchor):
        if not style.is_log_call(statement):
            return False
        if style.is_log_call(statement, label):
            return True
    return False


def first_statement(function: Node) -> Node | None:
    """First statement of a function's block body."""
    body = function_body(function)
    if body is None or body.type != "statement_block":
        return None
    statements = named_children(body)
    return statements[0] if statements else None


def top_level_bindings(root: Node) -> set[str]:
    """Names declared by top-level functions and variables."""
    names: set[str] = set()
    for statement in root.named_children:
        target = statement
        if statement.type == "export_statement":
            declaration = statement.child_by_field_name("declaration")
            if declaration is None:
                continue
            target = declaration
        if target.type in ("function_declaration", "generator_function_declaration", "class_declaration"):
            name_node = target.child_by_field_name("name")
            if name_node is not None:
                names.add(node_text(name_node))
        elif target.type in ("lexical_declaration", "variable_declaration"):
            for declarator in target.named_children:
                if declarator.type == "variable_declarator":
                    name = identifier_name(declarator.child_by_field_name("name"))
                    if name:
                        names.add(name)
    return names


# ── Plan ────────────────────────────────────────────────────────────────


class EditPlan:
    """Insertions planned for one document, rendered after traversal."""

    def __init__(self, document: SourceDocument, style: CodeStyle | None = None) -> None:
        self.document = document
        self.style = style or CodeStyle()
        self.newline = "\r\n" if b"\r\n" in document.source else "\n"
        self.unit = "\t" if b"\n\t" in document.source else "  "
        self.sites = 0
        self.skipped = 0
        self.touched: list[str] = []
        self._anchors: dict[tuple[AnchorKind, tuple[int, int, str]], Anchor] = {}
        self._hoisted: list[str] = []
        self._preamble: list[str] = []
        self._wraps: list[tuple[Node, str, str]] = []

    @property
    def is_empty(self) -> bool:
        return not (self._anchors or self._hoisted or self._preamble or self._wraps)

    def record(self, name: str | None = None) -> None:
        """Count one mutation site, optionally naming what it changed."""
        self.sites += 1
        if name:
            self.touched.append(name)

    def record_skip(self) -> None:
        """Count a site that is already instrumented."""
        self.skipped += 1

    def _anchor(self, anchor: Anchor) -> Anchor:
        return self._anchors.setdefault(anchor.key, anchor)

    def insert_before(self, anchor: Anchor, lines: Sequence[str]) -> None:
        """Add statements that run right before the anchored site."""
        self._anchor(anchor).lines.extend(lines)

    def prepend_to_body(self, function: Node, lines: Sequence[str]) -> None:
        """Add statements at the start of a function body."""
        body = function_body(function)
        if body is None:
            raise TransformError(f"Function at line {function.start_point[0] + 1} has no body")
        if body.type == "statement_block":
            anchor = Anchor(AnchorKind.BLOCK, body)
        else:
            anchor = Anchor(AnchorKind.ARROW_BODY, function)
        self._anchor(anchor).lines.extend(lines)

    def hoist(self, line: str) -> None:
        """Add a module-level declaration after the import block."""
        self._hoisted.append(line)

    def add_preamble(self, code: str) -> None:
        """Add module-level code (imports, helpers) after the import block."""
        self._preamble.append(code)

    def wrap(self, node: Node, opening: str, closing: str) -> None:
        """Surround a node with opening and closing text."""
        self._wraps.append((node, opening, closing))

    # ── rendering ───────────────────────────────────────────────────────

    def render(self) -> list[Insertion]:
        """Turn every anchor into byte-offset insertions."""
        insertions: list[Insertion] = []
        for anchor in self._anchors.values():
            insertions.extend(self._render_anchor(anchor))
        for node, opening, closing in self._wraps:
            span = node.end_byte - node.start_byte
            insertions.append(Insertion(node.start_byte, opening, Tier.OPEN, -span))
            insertions.append(Insertion(node.end_byte, closing, Tier.CLOSE, span))
        module_code = self._preamble + self._hoisted
        if module_code:
            insertions.append(self._render_module_code(module_code))
        return insertions

    def _render_anchor(self, anchor: Anchor) -> list[Insertion]:
        doc = self.document
        node = anchor.node
        lines = anchor.lines

        if anchor.kind is AnchorKind.BEFORE:
            if doc.starts_line(node):
                indent = doc.indent_at(node.start_byte)
                text = "".join(f"{line}{self.newline}{indent}" for line in lines)
            else:
                text = " ".join(lines) + " "
            return [Insertion(node.start_byte, text)]

        if anchor.kind is AnchorKind.SLOT:
            span = node.end_byte - node.start_byte
            return [
                Insertion(node.start_byte, "{ " + " ".join(lines) + " ", Tier.OPEN, -span),
                Insertion(node.end_byte, " }", Tier.CLOSE, span),
            ]

        if anchor.kind is AnchorKind.ARROW_BODY:
            body = function_body(node)
            indent = doc.indent_at(node.start_byte)
            inner = indent + self.unit
            nl = self.newline
            opening = "{" + nl + "".join(f"{inner}{line}{nl}" for line in lines) + f"{inner}return "
            closing = f";{nl}{indent}}}"
            span = body.end_byte - body.start_byte
            return [
                Insertion(body.start_byte, opening, Tier.OPEN, -span),
                Insertion(body.end_byte, closing, Tier.CLOSE, span),
            ]

        # block
        offset = node.start_byte + 1
        if b"\n" not in doc.source[node.start_byte : node.end_byte]:
            trailing = "" if node.named_children else " "
            return [Insertion(offset, " " + " ".join(lines) + trailing)]
        children = node.named_children
        if children and doc.starts_line(children[0]):
            indent = doc.indent_at(children[0].start_byte)
        else:
            indent = doc.indent_at(node.start_byte) + self.unit
        return [Insertion(offset, "".join(f"{self.newline}{indent}{line}" for line in lines))]

    def _render_module_code(self, code: list[str]) -> Insertion:
        """Module-level code goes ahead of anything else at the same offset."""
        doc = self.document
        root = doc.root
        anchor: Node | None = None
        # Hash bang, directive prologue and imports stay in front
        for statement in root.named_children:
            if statement.type == "comment":
                continue
            if statement.type in ("import_statement", "hash_bang_line") or _is_directive(statement):
                anchor = statement
                continue
            break

        nl = self.newline
        block = "\n".join(code).replace("\n", nl)
        if anchor is None:
            first = next((s for s in root.named_children if s.type != "comment"), None)
            if first is None:
                prefix = "" if not doc.source or doc.source.endswith(b"\n") else nl
                return Insertion(len(doc.source), prefix + block + nl, rank=-1)
            return Insertion(doc.line_start(first.start_byte), block + nl + nl, rank=-1)

        newline = doc.source.find(b"\n", anchor.end_byte)
        if newline == -1:
            return Insertion(len(doc.source), nl + block + nl, rank=-1)
        return Insertion(newline + 1, block + nl, rank=-1)

    def apply(self) -> bytes:
        """Render the plan and splice it into the source."""
        return apply_insertions(self.document.source, self.render())


def _is_directive(statement: Node) -> bool:
    """``'use client';`` style prologue entry."""
    if statement.type != "expression_statement":
        return False
    children = named_children(statement)
    return len(children) == 1 and children[0].type == "string"


# ── Serializer ──────────────────────────────────────────────────────────


def apply_insertions(source: bytes, insertions: Sequence[Insertion]) -> bytes:
    """Splice insertions into source bytes in one forward pass.

    Raises:
        TransformError: If an insertion lies outside the source
    """
    if not insertions:
        return source

    ordered = sorted(
        enumerate(insertions),
        key=lambda item: (item[1].offset, item[1].tier, item[1].rank, item[0]),
    )
    chunks: list[bytes] = []
    cursor = 0
    for _, insertion in ordered:
        if not 0 <= insertion.offset <= len(source):
            raise TransformError(f"Insertion offset {insertion.offset} out of range")
        chunks.append(source[cursor : insertion.offset])
        chunks.append(insertion.text.encode("utf-8"))
        cursor = insertion.offset
    chunks.append(source[cursor:])
    return b"".join(chunks)


def serialize(plan: EditPlan) -> str | None:
    """Regenerate source text for a plan, ``None`` when nothing changes.

    The output is parsed again with the document's grammar; a plan that would
    produce unparsable code is rejected instead of written.

    Raises:
        TransformError: If the regenerated source no longer parses
    """
    if plan.is_empty:
        return None

    output = plan.apply()
    document = plan.document
    tree = get_parser(document.language).parse(output)
    if tree.root_node.has_error:
        raise TransformError(
            f"Regenerated source for {document.display_path} does not parse",
            file_path=str(document.path),
        )
    logger.debug(f"Serialized {plan.sites} site(s) in {document.display_path}")
    return output.decode("utf-8")
