"""
Dependency data models for closuredeps.

This module defines the result of extracting ``goog.provide`` and
``goog.require`` calls from one syntax tree, and the per-file record the
scanner produces from it.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from closuredeps.constants import DEPS_LINE_TEMPLATE


@dataclass(frozen=True)
class ExtractionResult:
    """Namespaces declared and required by one source file.

    Attributes:
        provides: Namespaces passed to ``goog.provide``.
        requires: Namespaces passed to ``goog.require``.
    """

    provides: FrozenSet[str] = frozenset()
    requires: FrozenSet[str] = frozenset()

    def is_empty(self) -> bool:
        return not self.provides and not self.requires

    def to_json(self) -> Dict[str, List[str]]:
        return {
            "provides": sorted(self.provides),
            "requires": sorted(self.requires),
        }


def _quote(value: str) -> str:
    """Return ``value`` as a single-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _quote_list(values: Iterable[str]) -> str:
    return ", ".join(_quote(v) for v in sorted(values))


@dataclass
class SourceFileDependencies:
    """Dependency information for a single scanned source file.

    Attributes:
        path: Absolute path of the source file.
        provides: Namespaces the file declares.
        requires: Namespaces the file depends on.
        syntax_error_lines: Lines where the parser reported syntax errors.
            Extraction still runs on the recovered tree.
    """

    path: Path
    provides: FrozenSet[str] = frozenset()
    requires: FrozenSet[str] = frozenset()
    syntax_error_lines: List[int] = field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        path: Path,
        result: ExtractionResult,
        *,
        syntax_error_lines: Optional[List[int]] = None,
    ) -> SourceFileDependencies:
        return cls(
            path=path,
            provides=result.provides,
            requires=result.requires,
            syntax_error_lines=list(syntax_error_lines or []),
        )

    @property
    def has_syntax_errors(self) -> bool:
        return bool(self.syntax_error_lines)

    def has_dependencies(self) -> bool:
        return bool(self.provides or self.requires)

    def relative_path(self, base: Optional[Path] = None) -> str:
        """Return the path relative to ``base`` in POSIX form.

        Paths outside ``base`` are returned as ``..`` relative paths;
        paths on another drive fall back to the absolute path.
        """
        if base is None:
            return self.path.as_posix()
        try:
            return PurePath(os.path.relpath(self.path, base)).as_posix()
        except ValueError:
            return self.path.as_posix()

    def to_deps_line(self, base: Optional[Path] = None) -> str:
        """Render a ``goog.addDependency`` line for a Closure ``deps.js``.

        Example::

            goog.addDependency('app/foo.js', ['app.Foo'], ['goog.array']);
        """
        return DEPS_LINE_TEMPLATE.format(
            path=self.relative_path(base).replace("'", "\\'"),
            provides=_quote_list(self.provides),
            requires=_quote_list(self.requires),
        )

    def to_json(self, base: Optional[Path] = None) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.relative_path(base),
            "provides": sorted(self.provides),
            "requires": sorted(self.requires),
        }
        if self.syntax_error_lines:
            data["syntax_error_lines"] = list(self.syntax_error_lines)
        return data
