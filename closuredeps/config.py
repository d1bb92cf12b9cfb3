"""Configuration file loader for closuredeps.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``closuredeps.toml``: settings under the ``[closuredeps]`` table
- ``pyproject.toml``: settings under the ``[tool.closuredeps]`` table

Discovery order:

1. Explicit path from ``--config`` or ``CLOSUREDEPS_CONFIG``
2. ``closuredeps.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.closuredeps]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``closuredeps.toml``)::

    [closuredeps]
    extensions = [".js", ".mjs"]
    exclude_dirs = ["node_modules", "build"]
    strict = false
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from closuredeps.exceptions import ConfigError
from closuredeps.utils.logger import get_logger
from closuredeps.constants import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXTENSIONS,
    DEFAULT_STRICT,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "closuredeps.toml"
SECTION_NAME = "closuredeps"


def _default_extensions() -> List[str]:
    return list(DEFAULT_EXTENSIONS)


def _default_exclude_dirs() -> List[str]:
    return sorted(DEFAULT_EXCLUDE_DIRS)


@dataclass
class ClosureDepsConfig:
    """Parsed and validated closuredeps configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        extensions: File extensions scanned inside directories. Each
            starts with a dot; matching is case-insensitive.
        exclude_dirs: Directory names never descended into.
        strict: Treat syntax errors as fatal instead of extracting from
            the recovered tree.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    extensions: List[str] = field(default_factory=_default_extensions)
    exclude_dirs: List[str] = field(default_factory=_default_exclude_dirs)
    strict: bool = DEFAULT_STRICT

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "extensions": list(self.extensions),
            "exclude_dirs": list(self.exclude_dirs),
            "strict": self.strict,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    own_file = cwd / CONFIG_FILE_NAME
    if own_file.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, own_file)
        return own_file

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.closuredeps] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.closuredeps]`` section.

    Parse errors count as "no section" so that a broken pyproject.toml
    does not block tools that never asked for it.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return SECTION_NAME in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> ClosureDepsConfig:
    """Load and validate closuredeps configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`ClosureDepsConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return ClosureDepsConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(SECTION_NAME, {})
    else:
        section = raw.get(SECTION_NAME, {})

    if not section:
        logger.debug("Config file found but no closuredeps section, using defaults")
        return ClosureDepsConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _string_list(value: Any, *, option: str, config_path: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(
            f"{option} must be a list of strings, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    return list(value)


def normalize_extension(ext: str) -> str:
    """Return ``ext`` lower-cased with a leading dot (``JS`` -> ``.js``)."""
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> ClosureDepsConfig:
    """Parse and validate the closuredeps configuration section.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = ClosureDepsConfig()

    known_top = {"extensions", "exclude_dirs", "strict"}

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "extensions" in section:
        extensions = _string_list(
            section["extensions"], option="extensions", config_path=config_path
        )
        if not extensions:
            raise ConfigError(
                "extensions must not be empty",
                config_path=config_path,
                option="extensions",
            )
        config.extensions = [normalize_extension(e) for e in extensions]

    if "exclude_dirs" in section:
        config.exclude_dirs = _string_list(
            section["exclude_dirs"], option="exclude_dirs", config_path=config_path
        )

    if "strict" in section:
        val = section["strict"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"strict must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="strict",
            )
        config.strict = val

    return config
