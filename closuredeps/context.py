"""Per-invocation state handed from the ``closuredeps`` group to its commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import click

if TYPE_CHECKING:
    from closuredeps.config import ClosureDepsConfig


class ClosureDepsContext:
    """Global options of one CLI run.

    Attributes:
        config_path: Configuration file in use, if any.
        verbose: Number of ``-v`` flags.
        color: Whether colored output is enabled.
        config: Loaded configuration; ``None`` until the group callback runs.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[ClosureDepsConfig] = None


pass_context = click.make_pass_decorator(ClosureDepsContext, ensure=True)
