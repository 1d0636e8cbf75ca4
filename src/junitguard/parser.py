"""Java parsing with syntax error detection for JUnitGuard."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

from junitguard.nodes import char_column, iter_nodes


@dataclass(frozen=True, slots=True)
class SyntaxErrorInfo:
    """Syntax error details. Line/column are 1-based."""

    line: int
    column: int
    message: str
    source_line: str | None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of parsing a Java file."""

    file: Path
    tree: Tree | None
    source: str
    source_lines: tuple[str, ...]
    syntax_error: SyntaxErrorInfo | None


@lru_cache(maxsize=1)
def _java_parser() -> Parser:
    return get_parser("java")


def parse_source(*, source: str, file: Path) -> ParseResult:
    """Parse Java source text, returning the tree or the first syntax error."""
    source_lines: tuple[str, ...] = tuple(source.splitlines())
    tree: Tree = _java_parser().parse(source.encode("utf-8"))

    if not tree.root_node.has_error:
        return ParseResult(
            file=file,
            tree=tree,
            source=source,
            source_lines=source_lines,
            syntax_error=None,
        )

    error_node: Node | None = _first_error_node(tree.root_node)
    line: int = 1
    column: int = 1
    message: str = "Syntax error"
    if error_node is not None:
        row, byte_col = error_node.start_point
        line = row + 1
        column = char_column(source_lines=source_lines, row=row, byte_column=byte_col)
        message = _describe_error(error_node)

    source_line: str | None = None
    if 1 <= line <= len(source_lines):
        source_line = source_lines[line - 1]

    return ParseResult(
        file=file,
        tree=None,
        source=source,
        source_lines=source_lines,
        syntax_error=SyntaxErrorInfo(
            line=line,
            column=column,
            message=message,
            source_line=source_line,
        ),
    )


def parse_file(*, file: Path) -> ParseResult:
    """Parse a Java file, returning the tree or a syntax error."""
    try:
        source: str = file.read_text(encoding="utf-8")
    except OSError as e:
        return ParseResult(
            file=file,
            tree=None,
            source="",
            source_lines=(),
            syntax_error=SyntaxErrorInfo(
                line=1,
                column=1,
                message=f"Cannot read file: {e}",
                source_line=None,
            ),
        )
    except UnicodeDecodeError as e:
        return ParseResult(
            file=file,
            tree=None,
            source="",
            source_lines=(),
            syntax_error=SyntaxErrorInfo(
                line=1,
                column=1,
                message=f"Encoding error: {e}",
                source_line=None,
            ),
        )

    return parse_source(source=source, file=file)


def _first_error_node(root: Node) -> Node | None:
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def _describe_error(node: Node) -> str:
    if node.is_missing:
        return f"Missing '{node.type}'"
    text: str = (node.text or b"").decode("utf-8", errors="replace").strip()
    first_line: str = text.splitlines()[0] if text else ""
    if not first_line:
        return "Syntax error"
    if len(first_line) > 40:
        first_line = first_line[:40] + "..."
    return f"Unexpected '{first_line}'"
