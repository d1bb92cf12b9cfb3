"""
Filesystem helpers for closuredeps.

Reading JavaScript sources, writing generated output and discovering
source files below a directory. Every ``OSError`` raised here reaches
callers as :exc:`~closuredeps.exceptions.FileOperationError`.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from closuredeps.utils.logger import get_logger
from closuredeps.exceptions import FileOperationError
from closuredeps.constants import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXTENSIONS,
    MAX_FILE_SIZE,
)


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a source file as text.

    Args:
        file_path: File to read.
        max_size: Largest accepted size in bytes; ``None`` for no limit.
        encoding: Text encoding of the file.

    Raises:
        FileOperationError: The file is missing, too large, unreadable or
            not valid in ``encoding``.
    """
    path = _require_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Write ``content`` to ``file_path`` atomically.

    The text goes to a temporary file in the target directory which then
    replaces the target, so readers never see a half-written deps file.
    Missing parent directories are created.

    Returns:
        The written path.
    """
    target = Path(file_path)
    temp_path: Optional[Path] = None

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)
    except OSError as exc:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to remove temporary file %s: %s", temp_path, cleanup_exc
                )
        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc

    logger.debug("Wrote %d character(s) to %s", len(content), target)
    return target


def validate_path(path: PathLike) -> Path:
    """Return ``path`` absolute and normalized, with ``~`` expanded."""
    return Path(path).expanduser().resolve(strict=False)


def find_source_files(
    directory: PathLike = ".",
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> List[Path]:
    """Find source files with one of ``extensions`` below ``directory``.

    Directories whose name is in ``exclude_dirs`` are pruned, as are
    hidden directories. Extension matching is case-insensitive.

    Returns:
        Sorted list of resolved file paths; empty if ``directory`` is not
        a directory.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        return []

    suffixes = {ext.lower() for ext in extensions}
    excluded = set(exclude_dirs)
    matches: List[Path] = []

    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = [
            d for d in dirnames if d not in excluded and not d.startswith(".")
        ]

        for filename in filenames:
            if Path(filename).suffix.lower() in suffixes:
                matches.append(Path(current) / filename)

    logger.debug("Discovered %d source file(s) under %s", len(matches), root)
    return sorted(matches)
