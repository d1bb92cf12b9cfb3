"""Scanning of files and directories for Closure dependencies.

:class:`DependencyScanner` ties the pieces together: it discovers source
files, parses each with :class:`JavaScriptParser`, runs a fresh
:class:`DependencyExtractor` over the tree and returns one
:class:`SourceFileDependencies` record per file.

Every file gets its own extractor, so results never leak between files.

Typical usage::

    scanner = DependencyScanner(extensions=[".js"], strict=False)
    for deps in scanner.scan([Path("src")]):
        print(deps.path, sorted(deps.provides), sorted(deps.requires))
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from closuredeps.config import ClosureDepsConfig
from closuredeps.exceptions import FileOperationError
from closuredeps.core.parser import JavaScriptParser
from closuredeps.core.extractor import DependencyExtractor
from closuredeps.models.dependencies import SourceFileDependencies
from closuredeps.constants import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXTENSIONS,
    DEFAULT_STRICT,
)
from closuredeps.utils import find_source_files, get_logger, validate_path


class DependencyScanner:
    """Collects ``goog.provide``/``goog.require`` namespaces from files.

    Args:
        extensions: Extensions of files picked up inside directories.
            Files named explicitly are scanned whatever their extension.
        exclude_dirs: Directory names skipped during discovery.
        strict: Abort on the first file with syntax errors.
    """

    def __init__(
        self,
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        strict: bool = DEFAULT_STRICT,
    ) -> None:
        self.logger = get_logger("scanner")
        self.extensions = tuple(extensions)
        self.exclude_dirs = frozenset(exclude_dirs)
        self.strict = strict
        self._parser = JavaScriptParser(strict=strict)

    @classmethod
    def from_config(cls, config: ClosureDepsConfig) -> DependencyScanner:
        return cls(
            extensions=config.extensions,
            exclude_dirs=config.exclude_dirs,
            strict=config.strict,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def collect_files(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        """Expand ``paths`` into a sorted, de-duplicated list of files.

        Raises:
            FileOperationError: A path does not exist.
        """
        files: Set[Path] = set()

        for raw_path in paths:
            path = validate_path(raw_path)
            if path.is_dir():
                found = find_source_files(
                    path,
                    extensions=self.extensions,
                    exclude_dirs=self.exclude_dirs,
                )
                if not found:
                    self.logger.info("No source files found under %s", path)
                files.update(found)
            elif path.is_file():
                files.add(path)
            else:
                raise FileOperationError(
                    f"Path not found: {raw_path}",
                    file_path=str(raw_path),
                    operation="scan",
                )

        return sorted(files)

    def scan(self, paths: Iterable[Union[str, Path]]) -> List[SourceFileDependencies]:
        """Scan files and directories and return per-file dependencies.

        Raises:
            FileOperationError: A path does not exist or a file cannot be read.
            ParseError: Strict mode and a file has syntax errors.
        """
        files = self.collect_files(paths)
        self.logger.info("Scanning %d file(s)", len(files))

        results = [self.scan_file(path) for path in files]

        with_deps = sum(1 for r in results if r.has_dependencies())
        self.logger.info(
            "Found Closure dependency calls in %d of %d file(s)",
            with_deps,
            len(results),
        )
        return results

    def scan_file(self, file_path: Union[str, Path]) -> SourceFileDependencies:
        """Parse one file and extract its namespaces."""
        path = Path(file_path).resolve()
        parsed = self._parser.parse_file(path)

        result = DependencyExtractor().extract(parsed.root)
        self.logger.debug(
            "%s: %d provide(s), %d require(s)",
            path,
            len(result.provides),
            len(result.requires),
        )

        return SourceFileDependencies.from_result(
            path,
            result,
            syntax_error_lines=parsed.error_lines,
        )

    def scan_source(
        self,
        source: str,
        *,
        path: Optional[Path] = None,
    ) -> SourceFileDependencies:
        """Extract namespaces from in-memory source text."""
        parsed = self._parser.parse_string(
            source,
            source_file_path=str(path) if path else None,
        )
        result = DependencyExtractor().extract(parsed.root)
        return SourceFileDependencies.from_result(
            path or Path("<string>"),
            result,
            syntax_error_lines=parsed.error_lines,
        )
