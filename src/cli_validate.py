"""``validate-config`` command."""

from __future__ import annotations

from constants import ExitCodes
from cli_config import load_config
from console.output import ConsoleOutput


def run_validate_config(args, output: ConsoleOutput) -> ExitCodes:
    if load_config(args, output) is None:
        return ExitCodes.INVALID

    output.success("Congratulations, your config file is valid.")
    return ExitCodes.SUCCESS
