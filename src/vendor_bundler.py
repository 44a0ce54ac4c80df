#!/usr/bin/env python3
"""typo3-vendor-bundler: bundle vendor libraries of TYPO3 extensions.

Entry point of the command line tool. Parses arguments, sets up logging and
dispatches to the command implementations.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Dict

from constants import Constants, ExitCodes, Verbosity
from args import parse_args
from cli_autoload import run_bundle_autoload
from cli_bundle import run_bundle
from cli_dependencies import run_bundle_dependencies
from cli_extract import run_extract
from cli_validate import run_validate_config
from common.exceptions import (
    DependencyExtractionFailed,
    VendorBundlerError,
)
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from console.output import ConsoleOutput

logger = logging.getLogger(__name__)

COMMANDS: Dict[str, Callable[..., ExitCodes]] = {
    "bundle": run_bundle,
    "bundle-autoload": run_bundle_autoload,
    "bundle-dependencies": run_bundle_dependencies,
    "extract-dependencies": run_extract,
    "validate-config": run_validate_config,
}


def verbosity_from_args(args) -> Verbosity:
    """Map ``-q`` and the ``-v`` count to a console verbosity."""
    if getattr(args, "QUIET", False):
        return Verbosity.QUIET
    count = getattr(args, "VERBOSE", 0) or 0
    if count >= 3:
        return Verbosity.DEBUG
    if count == 2:
        return Verbosity.VERY_VERBOSE
    if count == 1:
        return Verbosity.VERBOSE
    return Verbosity.NORMAL


def report_error(exc: VendorBundlerError, output: ConsoleOutput) -> None:
    """Print a bundler failure to the console."""
    output.error(exc.message)
    if isinstance(exc, DependencyExtractionFailed):
        output.listing(exc.problems)


def run(args, output: ConsoleOutput) -> ExitCodes:
    """Dispatch to the selected command and turn bundler failures into an exit code."""
    command = COMMANDS[args.COMMAND]
    try:
        return command(args, output)
    except VendorBundlerError as exc:
        logger.debug("Command %s failed with code %d", args.COMMAND, exc.code, exc_info=True)
        report_error(exc, output)
        return ExitCodes.FAILURE


def main(argv=None) -> None:
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.LOG_LEVEL_ENV] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND),
        )

    output = ConsoleOutput(verbosity=verbosity_from_args(args))
    result = run(args, output)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit", component="cli", action=args.COMMAND, outcome=result.name
            ),
        )
    sys.exit(result.value)


if __name__ == "__main__":
    main()
