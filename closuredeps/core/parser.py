"""JavaScript parser producing :class:`SyntaxNode` trees.

Source text is parsed with `tree-sitter`_ and the ``tree-sitter-javascript``
grammar, then converted into the small, parser-independent
:class:`~closuredeps.models.syntax.SyntaxNode` model consumed by the
dependency extractor.

Conversion rules:

- ``program`` becomes ``SCRIPT``.
- ``call_expression`` becomes ``CALL`` with children ``[callee, *args]``;
  a tagged template call gets the template as its single argument.
- ``identifier`` becomes ``NAME``, ``this`` becomes ``THIS``.
- ``member_expression`` becomes ``GETPROP`` (child ``[object]``, property
  in ``name``); optional chains (``a?.b``) are not qualified names and
  become ``OTHER``.
- ``subscript_expression`` becomes ``GETELEM``.
- ``string`` becomes ``STRING`` with escape sequences decoded.
- ``template_string`` and ``number`` map to ``TEMPLATE`` and ``NUMBER``.
- Parentheses are transparent: ``(goog.provide)('a')`` converts like
  ``goog.provide('a')``.
- Comments are dropped; every other node becomes ``OTHER`` and keeps its
  named children, so calls nested anywhere are still reachable.

tree-sitter recovers from syntax errors. By default the recovered tree is
converted and the error lines are reported on :class:`ParsedSource`;
a strict parser raises :exc:`ParseError` instead.

Typical usage::

    parser = JavaScriptParser()
    parsed = parser.parse_file("src/app/main.js")
    if parsed.has_errors:
        print("syntax errors on lines", parsed.error_lines)

.. _tree-sitter: https://tree-sitter.github.io/
"""

from __future__ import annotations

import re
import functools
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from closuredeps.exceptions import ParseError
from closuredeps.models.syntax import NodeKind, SyntaxNode
from closuredeps.utils import get_logger, safe_read_file

logger = get_logger("parser")

# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

_SIMPLE_KINDS = {
    "program": NodeKind.SCRIPT,
    "subscript_expression": NodeKind.GETELEM,
    "template_string": NodeKind.TEMPLATE,
    "number": NodeKind.NUMBER,
}

_SKIPPED_TYPES = frozenset({"comment", "html_comment"})


@functools.lru_cache(maxsize=1)
def get_language() -> Language:
    """Return the (cached) tree-sitter JavaScript language."""
    return Language(tree_sitter_javascript.language())


# ---------------------------------------------------------------------------
# String literals
# ---------------------------------------------------------------------------

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}"
    r"|[0-3][0-7]{0,2}|[4-7][0-7]?|\r\n|[\s\S])"
)

_SINGLE_CHAR_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})

_MAX_CODE_POINT = 0x10FFFF


def _replace_escape(match: "re.Match[str]") -> str:
    escape = match.group(1)
    if escape in _LINE_CONTINUATIONS:
        return ""
    if escape in _SINGLE_CHAR_ESCAPES:
        return _SINGLE_CHAR_ESCAPES[escape]
    if escape.startswith("u{"):
        # Out of range code points are kept as written
        code_point = int(escape[2:-1], 16)
        if code_point > _MAX_CODE_POINT:
            return match.group(0)
        return chr(code_point)
    if escape[0] in "ux" and len(escape) > 1:
        return chr(int(escape[1:], 16))
    if escape[0] in "01234567":
        return chr(int(escape, 8))
    return escape


def decode_string_literal(raw: str) -> str:
    """Decode a quoted JavaScript string literal to its value.

    ``raw`` includes the surrounding quotes. Surrogate pairs written as
    two ``\\u`` escapes are combined into one code point.

    Example::

        >>> decode_string_literal("'my.module\\\\x2EFoo'")
        'my.module.Foo'
    """
    body = raw[1:-1] if len(raw) >= 2 else ""
    if "\\" not in body:
        return body

    decoded = _ESCAPE_RE.sub(_replace_escape, body)
    try:
        return decoded.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        # Lone surrogate; keep the code units as written
        return decoded


# ---------------------------------------------------------------------------
# Parse result
# ---------------------------------------------------------------------------


@dataclass
class ParsedSource:
    """Converted syntax tree of one source text.

    Attributes:
        root: ``SCRIPT`` node of the converted tree.
        error_lines: 1-based lines where tree-sitter reported errors.
        path: Source file path, if parsed from a file.
    """

    root: SyntaxNode
    error_lines: List[int] = field(default_factory=list)
    path: Optional[Path] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.error_lines)


class JavaScriptParser:
    """Parses JavaScript source into :class:`SyntaxNode` trees.

    Each instance owns its own tree-sitter parser; instances must not be
    shared across threads.

    Args:
        strict: Raise :exc:`ParseError` when the source has syntax errors
            instead of converting the recovered tree.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._parser = Parser(get_language())

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse_file(self, file_path: Union[str, Path]) -> ParsedSource:
        """Read and parse a source file.

        Raises:
            FileOperationError: The file does not exist or cannot be read.
            ParseError: Strict mode and the file has syntax errors.
        """
        path = Path(file_path)
        content = safe_read_file(path)
        parsed = self.parse_string(content, source_file_path=str(path))
        parsed.path = path
        return parsed

    def parse_string(
        self,
        source: str,
        *,
        source_file_path: Optional[str] = None,
    ) -> ParsedSource:
        """Parse source text.

        Args:
            source: JavaScript source text.
            source_file_path: Path used in log messages and errors.

        Raises:
            ParseError: Strict mode and the source has syntax errors.
        """
        label = source_file_path or "<string>"
        data = source.encode("utf-8")
        tree = self._parser.parse(data)

        error_lines = _collect_error_lines(tree.root_node)
        if error_lines:
            if self.strict:
                raise ParseError(
                    f"Syntax errors in {label}",
                    file_path=source_file_path,
                    line_numbers=error_lines,
                )
            logger.warning(
                "Syntax errors in %s at line(s) %s; using recovered tree",
                label,
                ", ".join(str(n) for n in error_lines),
            )

        root = _convert(tree.root_node, data)
        logger.debug("Parsed %s (%d bytes)", label, len(data))
        return ParsedSource(root=root, error_lines=error_lines)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _text(node: Node, data: bytes) -> str:
    return data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _collect_error_lines(root: Node) -> List[int]:
    """Return sorted lines of ``ERROR`` and missing nodes."""
    if not root.has_error:
        return []

    lines = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            lines.add(_line(node))
            continue
        if node.has_error:
            stack.extend(node.children)
    return sorted(lines)


def _call_children(node: Node) -> List[Node]:
    callee = node.child_by_field_name("function")
    arguments = node.child_by_field_name("arguments")

    children: List[Node] = [callee] if callee is not None else []
    if arguments is None:
        return children
    if arguments.type == "arguments":
        children.extend(arguments.named_children)
    else:
        # Tagged template: foo`bar`
        children.append(arguments)
    return children


def _unwrap(node: Node) -> Node:
    """Return the expression inside any number of parentheses."""
    while node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type not in _SKIPPED_TYPES]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def _convert_one(node: Node, data: bytes) -> Tuple[SyntaxNode, List[Node]]:
    """Convert ``node`` alone and return it with the children to convert next."""
    node_type = node.type
    line = _line(node)

    if node_type == "call_expression":
        return SyntaxNode(NodeKind.CALL, line=line), _call_children(node)

    if node_type == "identifier":
        return SyntaxNode(NodeKind.NAME, name=_text(node, data), line=line), []

    if node_type == "this":
        return SyntaxNode(NodeKind.THIS, line=line), []

    if node_type == "string":
        value = decode_string_literal(_text(node, data))
        return SyntaxNode(NodeKind.STRING, value=value, line=line), []

    if node_type == "member_expression":
        target = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        children = [target] if target is not None else []
        optional = any(child.type in ("optional_chain", "?.") for child in node.children)
        if optional or prop is None:
            return SyntaxNode(NodeKind.OTHER, line=line), children
        prop_name = _text(prop, data)
        return SyntaxNode(NodeKind.GETPROP, name=prop_name, line=line), children

    kind = _SIMPLE_KINDS.get(node_type, NodeKind.OTHER)
    return SyntaxNode(kind, line=line), list(node.named_children)


def _convert(root: Node, data: bytes) -> SyntaxNode:
    """Convert a tree-sitter tree iteratively, pre-order."""
    converted_root, pending = _convert_one(root, data)
    stack: List[Tuple[Node, SyntaxNode]] = [
        (child, converted_root) for child in reversed(pending)
    ]

    while stack:
        node, parent = stack.pop()
        if node.type in _SKIPPED_TYPES:
            continue
        node = _unwrap(node)
        converted, pending = _convert_one(node, data)
        parent.children.append(converted)
        stack.extend((child, converted) for child in reversed(pending))

    return converted_root
