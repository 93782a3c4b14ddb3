"""Syntax tree loading and node helpers built on tree-sitter.

Grammars come from ``tree-sitter-language-pack``: ``.js``/``.jsx`` files use
the ``javascript`` grammar (JSX included), ``.ts`` files ``typescript`` and
``.tsx`` files ``tsx``. The rest of the engine only looks at the node types
listed here and classifies them through :func:`kind_of`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from ..config.defaults import get_language_from_extension
from .exceptions import ParsingError, SourceReadError

if TYPE_CHECKING:
    from tree_sitter import Node, Parser, Tree

DEFAULT_LANGUAGE = "javascript"

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",  # older grammars name function expressions "function"
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

FUNCTION_LITERAL_TYPES = frozenset(
    {"function_expression", "function", "generator_function", "arrow_function"}
)

JSX_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})

# Nodes whose children form a statement list
STATEMENT_CONTAINERS = frozenset(
    {"program", "statement_block", "switch_case", "switch_default"}
)

# Control statements whose body may be a single unbraced statement
SLOT_FIELDS: dict[str, tuple[str, ...]] = {
    "if_statement": ("consequence",),
    "for_statement": ("body",),
    "for_in_statement": ("body",),
    "while_statement": ("body",),
    "do_statement": ("body",),
    "labeled_statement": ("body",),
    "with_statement": ("body",),
}

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


class NodeKind(Enum):
    """Node variants the engine dispatches on."""

    PROGRAM = "program"
    IMPORT = "import"
    FUNCTION = "function"
    DECLARATOR = "declarator"
    CALL = "call"
    JSX_ELEMENT = "jsx_element"
    RETURN = "return"
    OTHER = "other"


_KIND_BY_TYPE: dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "import_statement": NodeKind.IMPORT,
    "variable_declarator": NodeKind.DECLARATOR,
    "call_expression": NodeKind.CALL,
    "return_statement": NodeKind.RETURN,
    **{node_type: NodeKind.JSX_ELEMENT for node_type in JSX_ELEMENT_TYPES},
    **{node_type: NodeKind.FUNCTION for node_type in FUNCTION_TYPES},
}


def kind_of(node: Node) -> NodeKind:
    """Classify a tree-sitter node into the engine's variant set."""
    return _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)


@lru_cache(maxsize=None)
def get_parser(language: str) -> Parser:
    """Return a cached tree-sitter parser for a grammar name."""
    from tree_sitter_language_pack import get_parser as load_parser

    logger.debug(f"Loading tree-sitter grammar '{language}'")
    return load_parser(language)


def language_for_path(path: Path) -> str:
    """Pick the grammar for a file, falling back to JavaScript."""
    return get_language_from_extension(path.suffix) or DEFAULT_LANGUAGE


# ── Node helpers ────────────────────────────────────────────────────────


def node_text(node: Node) -> str:
    """Get text content of a node."""
    return node.text.decode("utf-8")


def node_line(node: Node) -> int:
    """Get 1-based start line of a node."""
    return node.start_point[0] + 1


def node_key(node: Node) -> tuple[int, int, str]:
    """Stable identity for a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


def same_node(a: Node | None, b: Node | None) -> bool:
    """Check whether two handles point at the same node."""
    return a is not None and b is not None and node_key(a) == node_key(b)


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parens(node: Node) -> Node:
    """Strip any number of enclosing parentheses from an expression."""
    while node.type == "parenthesized_expression":
        inner = named_children(node)
        if not inner:
            break
        node = inner[0]
    return node


def identifier_name(node: Node | None) -> str | None:
    """Return the name of a bare identifier node."""
    if node is not None and node.type in ("identifier", "undefined"):
        return node_text(node)
    return None


def string_value(node: Node | None) -> str | None:
    """Decode a plain string literal, ``None`` for anything else."""
    if node is None or node.type != "string":
        return None
    raw = node_text(node)[1:-1]
    return _ESCAPE_RE.sub(r"\1", raw)


def is_capitalized(name: str | None) -> bool:
    """Component naming convention: first letter upper-case."""
    return bool(name) and name[0].isupper()


def is_function(node: Node | None) -> bool:
    return node is not None and node.type in FUNCTION_TYPES


def function_body(node: Node) -> Node | None:
    """Body of a function node (block or expression for arrows)."""
    return node.child_by_field_name("body")


def arguments_of(call: Node) -> list[Node]:
    """Argument expressions of a call expression."""
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return named_children(args)


def jsx_tag_name(node: Node) -> str | None:
    """Tag identifier of a JSX element; ``None`` for fragments and dotted tags."""
    if node.type == "jsx_element":
        opening = node.child_by_field_name("open_tag")
        if opening is None:
            return None
        name = opening.child_by_field_name("name")
    elif node.type == "jsx_self_closing_element":
        name = node.child_by_field_name("name")
    else:
        return None
    return identifier_name(name)


def find_first_error(node: Node) -> Node | None:
    """Locate the first ERROR or missing node in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


# ── Documents ───────────────────────────────────────────────────────────


@dataclass
class SourceDocument:
    """One parsed source file.

    ``source`` is the exact byte content; every offset handed out by the
    tree refers to it, so mutations are planned against these bytes.
    """

    path: Path
    source: bytes
    tree: Tree
    language: str
    display_path: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.display_path:
            self.display_path = self.path.as_posix()

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def text(self) -> str:
        return self.source.decode("utf-8")

    @property
    def is_typescript(self) -> bool:
        return self.language in ("typescript", "tsx")

    @classmethod
    def from_source(
        cls,
        text: str,
        path: Path | str,
        display_path: str | None = None,
        language: str | None = None,
    ) -> SourceDocument:
        """Parse source text into a document.

        Raises:
            ParsingError: If the tree contains syntax errors
        """
        path = Path(path)
        language = language or language_for_path(path)
        source = text.encode("utf-8")
        tree = get_parser(language).parse(source)

        if tree.root_node.has_error:
            error = find_first_error(tree.root_node)
            line = node_line(error) if error is not None else None
            where = f" at line {line}" if line else ""
            raise ParsingError(
                f"Syntax error in {path.as_posix()}{where}",
                file_path=str(path),
                line=line,
            )

        return cls(
            path=path,
            source=source,
            tree=tree,
            language=language,
            display_path=display_path or "",
        )

    @classmethod
    def from_path(cls, path: Path, display_path: str | None = None) -> SourceDocument:
        """Read and parse a file from disk.

        Raises:
            SourceReadError: If the file cannot be read as UTF-8
            ParsingError: If the file contains syntax errors
        """
        return cls.from_source(read_source(path), path, display_path=display_path)

    def text_of(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def line_start(self, offset: int) -> int:
        """Byte offset of the start of the line containing ``offset``."""
        return self.source.rfind(b"\n", 0, offset) + 1

    def indent_at(self, offset: int) -> str:
        """Leading whitespace of the line containing ``offset``."""
        start = self.line_start(offset)
        end = start
        while end < len(self.source) and self.source[end : end + 1] in (b" ", b"\t"):
            end += 1
        return self.source[start:end].decode("utf-8")

    def starts_line(self, node: Node) -> bool:
        """True when only whitespace precedes the node on its line."""
        prefix = self.source[self.line_start(node.start_byte) : node.start_byte]
        return not prefix.strip()


def read_source(path: Path) -> str:
    """Read a source file as UTF-8 text, line endings untouched.

    Raises:
        SourceReadError: If the file cannot be read or decoded
    """
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read {path}: {e}", file_path=str(path)) from e
