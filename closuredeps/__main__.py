"""
Executable module for closuredeps.

Running:
    python -m closuredeps

is equivalent to:
    closuredeps

This module forwards execution to the CLI entrypoint defined in
`closuredeps.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure with enough context to debug it."""
    sys.stderr.write("closuredeps CLI could not be started.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from closuredeps.__version__ import __version__

        sys.stderr.write(f"closuredeps version: {__version__}\n")
    except ImportError:
        sys.stderr.write("closuredeps version: <unknown>\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m closuredeps`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from closuredeps.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
