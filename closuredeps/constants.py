"""
Centralized constants for closuredeps.

This module defines immutable configuration values used across
closuredeps, including the recognized dependency calls, file discovery
defaults, output formats and logging formats. All values are intended to
be treated as read-only.
"""

from typing import Final, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Recognized dependency calls
# ---------------------------------------------------------------------------

#: Qualified callee name of a namespace declaration.
PROVIDE_CALL: Final[str] = "goog.provide"

#: Qualified callee name of a namespace dependency.
REQUIRE_CALL: Final[str] = "goog.require"

# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------

#: File extensions scanned when none are configured.
DEFAULT_EXTENSIONS: Final[Tuple[str, ...]] = (".js",)

#: Directory names never descended into.
DEFAULT_EXCLUDE_DIRS: Final[FrozenSet[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "__pycache__",
        ".venv",
        "venv",
    }
)

#: Default strict mode (syntax errors abort the scan).
DEFAULT_STRICT: Final[bool] = False

#: Maximum allowed file size (in bytes) when reading source files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

#: Output formats accepted by ``closuredeps scan``.
OUTPUT_FORMATS: Final[Tuple[str, ...]] = ("table", "simple", "json", "deps")

#: Template for one line of a Closure ``deps.js`` file.
DEPS_LINE_TEMPLATE: Final[str] = "goog.addDependency('{path}', [{provides}], [{requires}]);"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
