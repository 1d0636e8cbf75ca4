"""Tree-sitter Java node kinds and traversal helpers."""
from __future__ import annotations

from collections.abc import Iterator
from typing import Final

from tree_sitter import Node

from junitguard.diagnostics import SourceLocation

TRY_STATEMENT: Final[str] = "try_statement"
TRY_WITH_RESOURCES_STATEMENT: Final[str] = "try_with_resources_statement"
CATCH_CLAUSE: Final[str] = "catch_clause"
CATCH_FORMAL_PARAMETER: Final[str] = "catch_formal_parameter"
CATCH_TYPE: Final[str] = "catch_type"
METHOD_INVOCATION: Final[str] = "method_invocation"
OBJECT_CREATION: Final[str] = "object_creation_expression"
LAMBDA_EXPRESSION: Final[str] = "lambda_expression"
CLASS_LITERAL: Final[str] = "class_literal"
EXPRESSION_STATEMENT: Final[str] = "expression_statement"
BLOCK: Final[str] = "block"
IDENTIFIER: Final[str] = "identifier"
TYPE_IDENTIFIER: Final[str] = "type_identifier"
SCOPED_TYPE_IDENTIFIER: Final[str] = "scoped_type_identifier"
GENERIC_TYPE: Final[str] = "generic_type"
FIELD_ACCESS: Final[str] = "field_access"
STRING_LITERAL: Final[str] = "string_literal"

TRY_KINDS: Final[frozenset[str]] = frozenset({
    TRY_STATEMENT,
    TRY_WITH_RESOURCES_STATEMENT,
})

TYPE_DECLARATION_KINDS: Final[frozenset[str]] = frozenset({
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
})

TYPE_BODY_KINDS: Final[frozenset[str]] = frozenset({
    "class_body",
    "interface_body",
    "enum_body",
    "annotation_type_body",
})

COMMENT_KINDS: Final[frozenset[str]] = frozenset({
    "line_comment",
    "block_comment",
})


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node under root in depth-first pre-order."""
    stack: list[Node] = [root]
    while stack:
        node: Node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def node_text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def named_children(node: Node) -> list[Node]:
    """Named children of node, comments excluded."""
    return [c for c in node.named_children if c.type not in COMMENT_KINDS]


def block_statements(block: Node) -> list[Node]:
    return named_children(block)


def invocation_arguments(node: Node) -> list[Node]:
    """Argument expressions of a method invocation or object creation."""
    arguments: Node | None = node.child_by_field_name("arguments")
    if arguments is None:
        return []
    return named_children(arguments)


def invocation_name(node: Node) -> Node:
    """The identifier naming the invoked method."""
    name: Node | None = node.child_by_field_name("name")
    if name is None:
        raise ValueError(f"{node.type} node has no name")
    return name


def enclosing(node: Node, kinds: frozenset[str]) -> Node | None:
    """Nearest strict ancestor of node whose type is one of kinds."""
    parent: Node | None = node.parent
    while parent is not None:
        if parent.type in kinds:
            return parent
        parent = parent.parent
    return None


def char_column(*, source_lines: tuple[str, ...], row: int, byte_column: int) -> int:
    """Convert a 0-based byte column to a 1-based character column."""
    if not 0 <= row < len(source_lines):
        return byte_column + 1
    prefix: bytes = source_lines[row].encode("utf-8")[:byte_column]
    return len(prefix.decode("utf-8", errors="ignore")) + 1


def location_of(node: Node, *, source_lines: tuple[str, ...]) -> SourceLocation:
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return SourceLocation(
        line=start_row + 1,
        column=char_column(
            source_lines=source_lines, row=start_row, byte_column=start_col,
        ),
        end_line=end_row + 1,
        end_column=char_column(
            source_lines=source_lines, row=end_row, byte_column=end_col,
        ),
    )


def source_line_at(line: int, source_lines: tuple[str, ...]) -> str | None:
    if 1 <= line <= len(source_lines):
        return source_lines[line - 1]
    return None
