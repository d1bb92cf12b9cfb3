from __future__ import annotations

from pathlib import Path

import pytest

from closuredeps.config import ClosureDepsConfig
from closuredeps.core.scanner import DependencyScanner
from closuredeps.exceptions import FileOperationError, ParseError


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a small Closure project.

    Layout:
    - src/app/main.js        provides app.main, requires app.ui.Widget
    - src/app/ui/widget.js   provides app.ui.Widget, requires goog.dom
    - src/app/util.js        no Closure calls
    - src/app/legacy.mjs     provides app.legacy (non-default extension)
    - src/node_modules/x.js  provides should.not.appear
    - src/.cache/y.js        provides hidden.not.appear
    """
    src = tmp_path / "src"
    (src / "app" / "ui").mkdir(parents=True)
    (src / "node_modules").mkdir()
    (src / ".cache").mkdir()

    (src / "app" / "main.js").write_text(
        "goog.provide('app.main');\ngoog.require('app.ui.Widget');\n",
        encoding="utf-8",
    )
    (src / "app" / "ui" / "widget.js").write_text(
        "goog.provide('app.ui.Widget');\ngoog.require('goog.dom');\n",
        encoding="utf-8",
    )
    (src / "app" / "util.js").write_text("var x = 1;\n", encoding="utf-8")
    (src / "app" / "legacy.mjs").write_text(
        "goog.provide('app.legacy');\n", encoding="utf-8"
    )
    (src / "node_modules" / "x.js").write_text(
        "goog.provide('should.not.appear');\n", encoding="utf-8"
    )
    (src / ".cache" / "y.js").write_text(
        "goog.provide('hidden.not.appear');\n", encoding="utf-8"
    )
    return src


def _provides(results) -> set:
    found = set()
    for deps in results:
        found |= deps.provides
    return found


@pytest.mark.integration
class TestScan:
    """Tests for DependencyScanner.scan."""

    def test_scans_directory(self, project: Path) -> None:
        results = DependencyScanner().scan([project])

        names = [r.relative_path(project.resolve()) for r in results]
        assert names == ["app/main.js", "app/ui/widget.js", "app/util.js"]

    def test_results_per_file(self, project: Path) -> None:
        results = {r.relative_path(project.resolve()): r for r in DependencyScanner().scan([project])}

        main = results["app/main.js"]
        assert main.provides == frozenset({"app.main"})
        assert main.requires == frozenset({"app.ui.Widget"})

        widget = results["app/ui/widget.js"]
        assert widget.provides == frozenset({"app.ui.Widget"})
        assert widget.requires == frozenset({"goog.dom"})

        assert results["app/util.js"].has_dependencies() is False

    def test_excluded_and_hidden_dirs_are_skipped(self, project: Path) -> None:
        found = _provides(DependencyScanner().scan([project]))

        assert "should.not.appear" not in found
        assert "hidden.not.appear" not in found

    def test_custom_extensions(self, project: Path) -> None:
        scanner = DependencyScanner(extensions=[".mjs"])

        results = scanner.scan([project])

        assert [r.path.name for r in results] == ["legacy.mjs"]

    def test_custom_exclude_dirs(self, project: Path) -> None:
        scanner = DependencyScanner(exclude_dirs=["ui"])

        found = _provides(scanner.scan([project]))

        assert "app.ui.Widget" not in found
        # Replacing the defaults brings node_modules back in
        assert "should.not.appear" in found

    def test_explicit_file_any_extension(self, project: Path) -> None:
        results = DependencyScanner().scan([project / "app" / "legacy.mjs"])

        assert _provides(results) == {"app.legacy"}

    def test_duplicate_inputs_scanned_once(self, project: Path) -> None:
        main = project / "app" / "main.js"

        results = DependencyScanner().scan([main, project / "app", main])

        assert [r.path for r in results].count(main.resolve()) == 1

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError):
            DependencyScanner().scan([tmp_path / "nope"])

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert DependencyScanner().scan([tmp_path]) == []

    def test_files_do_not_share_results(self, tmp_path: Path) -> None:
        (tmp_path / "a.js").write_text("goog.provide('a');", encoding="utf-8")
        (tmp_path / "b.js").write_text("goog.provide('b');", encoding="utf-8")

        a, b = DependencyScanner().scan([tmp_path])

        assert a.provides == frozenset({"a"})
        assert b.provides == frozenset({"b"})


@pytest.mark.integration
class TestSyntaxErrorHandling:
    """Tests for lenient and strict scanning of broken files."""

    @pytest.fixture
    def broken(self, tmp_path: Path) -> Path:
        path = tmp_path / "broken.js"
        path.write_text("goog.provide('broken');\n)))\n", encoding="utf-8")
        return path

    def test_lenient_scan_records_error_lines(self, broken: Path) -> None:
        (deps,) = DependencyScanner().scan([broken])

        assert deps.has_syntax_errors is True
        assert deps.provides == frozenset({"broken"})

    def test_strict_scan_raises(self, broken: Path) -> None:
        with pytest.raises(ParseError):
            DependencyScanner(strict=True).scan([broken])

    def test_out_of_range_escape_does_not_stop_scan(self, tmp_path: Path) -> None:
        odd = tmp_path / "a_odd.js"
        odd.write_text(
            "goog.provide('app.A');\nvar s = '\\u{110000}';\n", encoding="utf-8"
        )
        (tmp_path / "b_plain.js").write_text("goog.provide('app.B');\n", encoding="utf-8")

        assert DependencyScanner().scan_file(odd).provides == frozenset({"app.A"})
        results = DependencyScanner(strict=True).scan([tmp_path])
        assert [sorted(r.provides) for r in results] == [["app.A"], ["app.B"]]


@pytest.mark.integration
class TestScanSource:
    def test_scan_source(self) -> None:
        deps = DependencyScanner().scan_source(
            "goog.provide('x');\ngoog.require('y');", path=Path("inline.js")
        )

        assert deps.path == Path("inline.js")
        assert deps.provides == frozenset({"x"})
        assert deps.requires == frozenset({"y"})


@pytest.mark.unit
class TestFromConfig:
    def test_from_config(self) -> None:
        config = ClosureDepsConfig(extensions=[".es6"], exclude_dirs=["dist"], strict=True)

        scanner = DependencyScanner.from_config(config)

        assert scanner.extensions == (".es6",)
        assert scanner.exclude_dirs == frozenset({"dist"})
        assert scanner.strict is True
