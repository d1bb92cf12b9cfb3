"""
closuredeps command line.

The ``closuredeps`` group owns the options shared by every command
(config file, verbosity, color) and stores them on a
:class:`~closuredeps.context.ClosureDepsContext` for the commands.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Sequence

import click

from closuredeps.config import ClosureDepsConfig, load_config
from closuredeps.__version__ import __version__
from closuredeps.context import ClosureDepsContext
from closuredeps.exceptions import ConfigError, ClosureDepsError
from closuredeps.utils.logger import get_logger, setup_logging, verbosity_to_level
from closuredeps.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="CLOSUREDEPS_CONFIG",
    help="Configuration file (default: closuredeps.toml or pyproject.toml).",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Log progress to stderr; -vv adds debug details.",
)
@click.option(
    "--color/--no-color",
    default=True,
    envvar="CLOSUREDEPS_COLOR",
    help="Colorize terminal output.",
)
@click.version_option(
    __version__,
    prog_name="closuredeps",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """List the goog.provide / goog.require namespaces of JavaScript files.

    \b
    Examples:
      closuredeps scan src/
      closuredeps scan src/ --format deps --base src/ -o src/deps.js
      closuredeps -v scan app.js --format json
    """
    level = verbosity_to_level(verbose)
    setup_logging(level=level, verbose=verbose >= 2)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    _apply_color(color)
    ctx.obj = _make_context(config, loaded_config, verbose=verbose, color=color)

    logger.debug(
        "closuredeps %s, log level %s, color %s",
        __version__,
        logging.getLevelName(level),
        color,
    )
    if loaded_config.source_path:
        logger.debug("Configuration %s: %s", loaded_config.source_path, loaded_config.to_log_dict())


def _apply_color(color: bool) -> None:
    # Rich and the log formatter both read NO_COLOR
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


def _make_context(
    config_path: Optional[Path],
    config: ClosureDepsConfig,
    *,
    verbose: int,
    color: bool,
) -> ClosureDepsContext:
    context = ClosureDepsContext()
    context.config_path = config_path or config.source_path
    context.config = config
    context.verbose = verbose
    context.color = color
    return context


from closuredeps.commands.scan import scan  # noqa: E402

cli.add_command(scan)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return its exit code.

    0 on success, 1 for closuredeps errors and unexpected failures,
    2 for usage errors and 130 when interrupted.
    """
    try:
        rv = cli.main(args=argv, prog_name="closuredeps", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except (click.Abort, KeyboardInterrupt):
        print_warning("Interrupted")
        return 130
    except ClosureDepsError as exc:
        print_error(str(exc))
        logger.debug("Error details: %s", exc.details or "<none>", exc_info=True)
        return 1
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1

    # Without standalone mode click returns the exit code of --help/--version
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    sys.exit(main())
