"""
Custom exception hierarchy for closuredeps.

This module defines structured exception types used across closuredeps.
All exceptions inherit from :class:`ClosureDepsError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

The dependency extractor itself never raises; these errors belong to the
outer layers (file access, parsing in strict mode, configuration).
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence


class ClosureDepsError(Exception):
    """Base exception for all closuredeps errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


class ParseError(ClosureDepsError):
    """Raised when a source file contains syntax errors in strict mode.

    Args:
        message: Error description.
        file_path: Path to the file being parsed.
        line_numbers: 1-based lines where the parser reported errors.
    """

    __slots__ = ("file_path", "line_numbers")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        line_numbers: Optional[Sequence[int]] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)
        if line_numbers:
            details["lines"] = ",".join(str(n) for n in line_numbers)

        super().__init__(message, details)

        self.file_path = file_path
        self.line_numbers = list(line_numbers) if line_numbers else []


class FileOperationError(ClosureDepsError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/scan).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(ClosureDepsError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
