"""Shared helpers: Rich console output, logging and filesystem access."""

from __future__ import annotations

from closuredeps.utils.filesystem import (
    find_source_files,
    safe_read_file,
    safe_write_file,
    validate_path,
)
from closuredeps.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
    verbosity_to_level,
)
from closuredeps.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "verbosity_to_level",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "find_source_files",
    "validate_path",
]
