"""``bundle`` command: run every bundler in order, stopping at the first failure."""

from __future__ import annotations

from typing import Callable, List, Tuple

from constants import Constants, ExitCodes
from args import build_parser
from cli_autoload import run_bundle_autoload
from cli_dependencies import run_bundle_dependencies
from console.output import ConsoleOutput

Command = Callable[..., ExitCodes]

BUNDLERS: List[Tuple[str, str, Command]] = [
    (
        "bundle-autoload",
        "Bundle autoloader for vendor libraries in composer.json or ext_emconf.php",
        run_bundle_autoload,
    ),
    (
        "bundle-dependencies",
        "Bundle dependency information of vendor libraries",
        run_bundle_dependencies,
    ),
]


def run_bundle(args, output: ConsoleOutput) -> ExitCodes:
    """Execute all available bundlers with their configured defaults."""
    passthrough = ["--config", args.CONFIG] if getattr(args, "CONFIG", None) else []
    parser = build_parser()

    for name, description, command in BUNDLERS:
        output.title(description)
        output.writeln(f"💡 Run manually with {Constants.PROGRAM_NAME} {name}")
        output.writeln()

        result = command(parser.parse_args([name, *passthrough]), output)
        if result is not ExitCodes.SUCCESS:
            return result

    return ExitCodes.SUCCESS
