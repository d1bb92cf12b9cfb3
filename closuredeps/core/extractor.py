"""Extraction of ``goog.provide`` / ``goog.require`` namespaces.

:class:`DependencyExtractor` classifies call expressions of a
:class:`~closuredeps.models.syntax.SyntaxNode` tree. A call whose callee
has the qualified name ``goog.provide`` or ``goog.require`` and whose
first argument is a string literal contributes that string to
``provides`` or ``requires`` respectively. Everything else is ignored.

Malformed calls (no callee, no argument, non-string argument, computed
callee) are skipped silently so that one odd call never stops extraction
for the rest of a file.

Typical usage::

    extractor = DependencyExtractor()
    result = extractor.extract(parsed.root)
    print(sorted(result.provides), sorted(result.requires))

Callers that drive their own traversal can feed nodes one at a time::

    extractor = DependencyExtractor()
    for node in root.walk():
        extractor.visit(node)
        other_analysis.visit(node)
    result = extractor.result()
"""

from __future__ import annotations

from typing import Callable, Dict, Set

from closuredeps.constants import PROVIDE_CALL, REQUIRE_CALL
from closuredeps.models.syntax import NodeKind, SyntaxNode
from closuredeps.models.dependencies import ExtractionResult


class DependencyExtractor:
    """Accumulates provided and required namespaces from call nodes.

    One instance serves one source file. :meth:`extract` resets the
    accumulated state before traversing, so reusing an instance for a
    second tree never mixes results; incremental :meth:`visit` calls keep
    accumulating until :meth:`reset`.

    Attributes:
        provides: Namespaces seen in ``goog.provide`` calls so far.
        requires: Namespaces seen in ``goog.require`` calls so far.
    """

    def __init__(self) -> None:
        self.provides: Set[str] = set()
        self.requires: Set[str] = set()

        # Qualified callee name -> set receiving the first argument
        self._targets: Dict[str, Set[str]] = {
            PROVIDE_CALL: self.provides,
            REQUIRE_CALL: self.requires,
        }

        # Per-kind handlers; unlisted kinds are no-ops
        self._handlers: Dict[NodeKind, Callable[[SyntaxNode], None]] = {
            NodeKind.CALL: self._visit_call,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def visit(self, node: SyntaxNode) -> None:
        """Inspect a single node, recording at most one namespace."""
        handler = self._handlers.get(node.kind)
        if handler is not None:
            handler(node)

    def extract(self, root: SyntaxNode) -> ExtractionResult:
        """Traverse ``root`` depth-first and return the namespaces found."""
        self.reset()
        for node in root.walk():
            self.visit(node)
        return self.result()

    def result(self) -> ExtractionResult:
        """Return an immutable snapshot of the namespaces accumulated so far."""
        return ExtractionResult(
            provides=frozenset(self.provides),
            requires=frozenset(self.requires),
        )

    def reset(self) -> None:
        """Forget every namespace recorded so far."""
        # Cleared in place: ``_targets`` holds references to these sets
        self.provides.clear()
        self.requires.clear()

    # ------------------------------------------------------------------
    # Node handlers
    # ------------------------------------------------------------------

    def _visit_call(self, call_node: SyntaxNode) -> None:
        """Record the first argument of a ``goog.provide``/``goog.require`` call."""
        if not call_node.has_children():
            return

        callee = call_node.first_child
        qualified_name = callee.qualified_name
        if not qualified_name:
            return

        target = self._targets.get(qualified_name)
        if target is None:
            return

        argument = call_node.next_sibling(callee)
        if argument is None or not argument.is_string():
            return

        target.add(argument.value)
