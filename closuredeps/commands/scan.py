"""Scan command implementation for closuredeps.

Extracts the namespaces each JavaScript file declares with
``goog.provide`` and depends on with ``goog.require``.

The command orchestrates two core components:

1. **DependencyScanner**: discovers files and parses each one into a
   syntax tree.
2. **DependencyExtractor**: walks every tree and collects the
   ``provides``/``requires`` sets (one extractor per file).

Typical usage::

    # Rich table of every file with dependency calls
    $ closuredeps scan src/

    # Closure deps.js for the debug loader
    $ closuredeps scan src/ --format deps --base src/ -o src/deps.js

    # Machine-readable JSON output
    $ closuredeps scan src/ --format json > deps.json
"""

from __future__ import annotations

import sys
import json
import click
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rich.markup import escape

from closuredeps.config import ClosureDepsConfig, normalize_extension
from closuredeps.constants import OUTPUT_FORMATS
from closuredeps.core import DependencyScanner
from closuredeps.exceptions import ClosureDepsError
from closuredeps.models import SourceFileDependencies
from closuredeps.context import pass_context, ClosureDepsContext
from closuredeps.utils import (
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
    safe_write_file,
)

logger = get_logger("commands.scan")

DEPS_FILE_HEADER = "// This file was autogenerated by closuredeps.\n// Please do not edit.\n"


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(list(OUTPUT_FORMATS), case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write output to a file instead of stdout (not for table format).",
)
@click.option(
    "--base",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory that reported paths are relative to (default: cwd).",
)
@click.option(
    "--ext",
    "extensions",
    multiple=True,
    help="File extension to scan inside directories (repeatable).",
)
@click.option(
    "--exclude-dir",
    "exclude_dirs",
    multiple=True,
    help="Additional directory name to skip (repeatable).",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Fail on syntax errors instead of scanning the recovered tree.",
)
@click.option(
    "--include-empty",
    is_flag=True,
    help="Also list files without goog.provide/goog.require calls.",
)
@pass_context
def scan(
    ctx: ClosureDepsContext,
    paths: Tuple[Path, ...],
    output_format: str,
    output: Optional[Path],
    base: Optional[Path],
    extensions: Tuple[str, ...],
    exclude_dirs: Tuple[str, ...],
    strict: Optional[bool],
    include_empty: bool,
) -> None:
    """Extract goog.provide / goog.require namespaces from PATHS.

    PATHS may be files or directories (default: current directory).
    Directories are searched recursively for files with the configured
    extensions.

    Exits:
        0 on success, 1 if a file cannot be read or, in strict mode,
        contains syntax errors.
    """
    output_format = output_format.lower()
    if output is not None and output_format == "table":
        raise click.UsageError(
            "--output requires --format simple, json or deps",
        )

    scanner = _build_scanner(
        ctx.config or ClosureDepsConfig(),
        extensions=extensions,
        exclude_dirs=exclude_dirs,
        strict=strict,
    )
    base_dir = (base or Path.cwd()).resolve()

    try:
        results = scanner.scan(paths or (Path("."),))
    except ClosureDepsError as e:
        print_error(f"{e}")
        sys.exit(1)

    if not include_empty:
        results = [r for r in results if r.has_dependencies()]

    if output_format == "table":
        _display_table(results, base_dir)
        _display_summary(results)
        return

    rendered = RENDERERS[output_format](results, base_dir)

    if output is None:
        click.echo(rendered, nl=False)
        return

    try:
        safe_write_file(output, rendered)
    except ClosureDepsError as e:
        print_error(f"{e}")
        sys.exit(1)

    logger.info("Wrote %d file record(s) to %s", len(results), output)
    if ctx.verbose > 0:
        print_success(f"Output written to: {output}")


def _build_scanner(
    config: ClosureDepsConfig,
    *,
    extensions: Tuple[str, ...],
    exclude_dirs: Tuple[str, ...],
    strict: Optional[bool],
) -> DependencyScanner:
    """Merge CLI overrides into ``config`` and build a scanner.

    ``--ext`` replaces the configured extensions, ``--exclude-dir`` adds to
    the configured exclusions, and ``--strict/--no-strict`` overrides the
    configured strict mode.
    """
    return DependencyScanner(
        extensions=(
            [normalize_extension(e) for e in extensions]
            if extensions
            else config.extensions
        ),
        exclude_dirs=set(config.exclude_dirs) | set(exclude_dirs),
        strict=config.strict if strict is None else strict,
    )


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def render_simple(results: List[SourceFileDependencies], base: Path) -> str:
    """One block per file: path line, then indented provides and requires.

    Example::

        app/foo.js
          provides: app.Foo
          requires: goog.array, goog.dom
    """
    lines: List[str] = []
    for deps in results:
        lines.append(deps.relative_path(base))
        lines.append(f"  provides: {', '.join(sorted(deps.provides)) or '-'}")
        lines.append(f"  requires: {', '.join(sorted(deps.requires)) or '-'}")
    return "".join(f"{line}\n" for line in lines)


def render_json(results: List[SourceFileDependencies], base: Path) -> str:
    data = {"files": [deps.to_json(base) for deps in results]}
    return json.dumps(data, indent=2) + "\n"


def render_deps(results: List[SourceFileDependencies], base: Path) -> str:
    """Closure ``deps.js``: one ``goog.addDependency`` line per file."""
    body = "".join(f"{deps.to_deps_line(base)}\n" for deps in results)
    return f"{DEPS_FILE_HEADER}\n{body}"


RENDERERS = {
    "simple": render_simple,
    "json": render_json,
    "deps": render_deps,
}


def _display_table(results: List[SourceFileDependencies], base: Path) -> None:
    """Render results as a Rich table, one row per file."""
    if not results:
        print_warning("No goog.provide / goog.require calls found")
        return

    print_table(
        [_create_table_row(deps, base) for deps in results],
        [
            ("File", "path"),
            ("Provides", "provide"),
            ("Requires", "require"),
            ("Notes", "error"),
        ],
        title="Closure Dependencies",
        show_row_lines=True,
    )


def _create_table_row(deps: SourceFileDependencies, base: Path) -> Dict[str, str]:
    notes = ""
    if deps.has_syntax_errors:
        lines = ", ".join(str(n) for n in deps.syntax_error_lines)
        notes = f"syntax errors: line {lines}"
    provides = "\n".join(escape(ns) for ns in sorted(deps.provides))
    requires = "\n".join(escape(ns) for ns in sorted(deps.requires))
    return {
        "File": escape(deps.relative_path(base)),
        "Provides": provides or "[dim]-[/dim]",
        "Requires": requires or "[dim]-[/dim]",
        "Notes": notes,
    }


def _display_summary(results: List[SourceFileDependencies]) -> None:
    provides = sum(len(r.provides) for r in results)
    requires = sum(len(r.requires) for r in results)
    broken = [r for r in results if r.has_syntax_errors]

    print_success(
        f"{len(results)} file(s): {provides} provide(s), {requires} require(s)"
    )
    if broken:
        print_warning(
            f"{len(broken)} file(s) had syntax errors; results come from the recovered tree"
        )
