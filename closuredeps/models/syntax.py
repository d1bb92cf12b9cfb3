"""
Syntax tree data model for closuredeps.

A :class:`SyntaxNode` is a small, parser-independent view of a JavaScript
expression tree. It keeps only what dependency extraction needs: a node
kind, the ordered children, and the name or literal value carried by
identifier, property-access and string nodes.

Call nodes follow one shape regardless of the parser that built them:
the first child is the callee and the remaining children are the call
arguments in source order.

Example::

    >>> callee = SyntaxNode.getprop(SyntaxNode.name_node("goog"), "provide")
    >>> call = SyntaxNode.call(callee, SyntaxNode.string("my.Foo"))
    >>> callee.qualified_name
    'goog.provide'
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


class NodeKind(Enum):
    """Closed set of node kinds understood by closuredeps."""

    SCRIPT = "script"
    CALL = "call"
    NAME = "name"
    THIS = "this"
    GETPROP = "getprop"
    GETELEM = "getelem"
    STRING = "string"
    TEMPLATE = "template"
    NUMBER = "number"
    OTHER = "other"


@dataclass
class SyntaxNode:
    """One node of a parsed expression tree.

    Attributes:
        kind: Node kind.
        children: Ordered child nodes.
        name: Identifier for ``NAME`` nodes, property name for ``GETPROP``.
        value: Decoded literal for ``STRING`` nodes.
        line: 1-based source line, ``0`` when unknown.
    """

    kind: NodeKind
    children: List[SyntaxNode] = field(default_factory=list)
    name: Optional[str] = None
    value: Optional[str] = None
    line: int = 0

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def name_node(cls, name: str, *, line: int = 0) -> SyntaxNode:
        return cls(NodeKind.NAME, name=name, line=line)

    @classmethod
    def getprop(cls, target: SyntaxNode, prop: str, *, line: int = 0) -> SyntaxNode:
        return cls(NodeKind.GETPROP, children=[target], name=prop, line=line)

    @classmethod
    def string(cls, value: str, *, line: int = 0) -> SyntaxNode:
        return cls(NodeKind.STRING, value=value, line=line)

    @classmethod
    def call(cls, callee: SyntaxNode, *args: SyntaxNode, line: int = 0) -> SyntaxNode:
        return cls(NodeKind.CALL, children=[callee, *args], line=line)

    @classmethod
    def from_dotted(cls, dotted: str, *, line: int = 0) -> SyntaxNode:
        """Build a ``NAME``/``GETPROP`` chain such as ``goog.provide``."""
        head, *rest = dotted.split(".")
        node = cls.name_node(head, line=line)
        for part in rest:
            node = cls.getprop(node, part, line=line)
        return node

    # ------------------------------------------------------------------
    # Tree navigation
    # ------------------------------------------------------------------

    @property
    def first_child(self) -> Optional[SyntaxNode]:
        return self.children[0] if self.children else None

    def has_children(self) -> bool:
        return bool(self.children)

    def next_sibling(self, child: SyntaxNode) -> Optional[SyntaxNode]:
        """Return the child following ``child``, or ``None``.

        Children are matched by identity, not equality, so structurally
        equal siblings are told apart.
        """
        for index, candidate in enumerate(self.children):
            if candidate is child:
                if index + 1 < len(self.children):
                    return self.children[index + 1]
                return None
        return None

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield this node and all descendants in depth-first pre-order.

        Iterative so that very deep trees (long concatenation chains in
        generated code) do not hit the interpreter recursion limit.
        """
        stack: List[SyntaxNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    @property
    def qualified_name(self) -> Optional[str]:
        """Dotted path of a simple name or property chain.

        ``goog`` -> ``"goog"``, ``goog.provide`` -> ``"goog.provide"``,
        ``this.x`` -> ``"this.x"``. Anything that is not a plain chain
        rooted at a name (calls, subscripts, literals) yields ``None``.
        """
        parts: List[str] = []
        node: Optional[SyntaxNode] = self

        while node is not None and node.kind is NodeKind.GETPROP:
            if not node.name or not node.children:
                return None
            parts.append(node.name)
            node = node.children[0]

        if node is None:
            return None
        if node.kind is NodeKind.NAME and node.name:
            parts.append(node.name)
        elif node.kind is NodeKind.THIS:
            parts.append("this")
        else:
            return None

        return ".".join(reversed(parts))

    def is_string(self) -> bool:
        return self.kind is NodeKind.STRING and self.value is not None

    def __repr__(self) -> str:
        label = self.name if self.name is not None else self.value
        suffix = f" {label!r}" if label is not None else ""
        return f"<SyntaxNode {self.kind.value}{suffix} children={len(self.children)}>"
