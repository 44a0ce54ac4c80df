"""Run bundling steps with a one-line progress report each."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar

from constants import Verbosity
from common.logging_utils import Timer, extra_context, is_debug_enabled

from .output import ConsoleOutput

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RunnerContext:
    """Handed to every task; lets a task report failure without raising."""
    output: ConsoleOutput
    successful: bool = True

    def mark_as_failed(self) -> None:
        self.successful = False


class TaskRunner:
    """Print ``<message>... Done`` or ``<message>... Failed`` around a task."""

    def __init__(self, output: ConsoleOutput):
        self.output = output

    def run(
        self,
        message: str,
        task: Callable[[RunnerContext], T],
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> T:
        """Run ``task`` and return its result.

        Exceptions raised by the task are re-raised after ``Failed`` is printed.
        """
        context = RunnerContext(self.output)
        self.output.write(f"{message}... ", verbosity)

        try:
            with Timer() as timer:
                result = task(context)
        except Exception:
            self.output.writeln("Failed", verbosity)
            raise

        self.output.writeln("Done" if context.successful else "Failed", verbosity)
        if is_debug_enabled(logger):
            logger.debug(
                "Task finished",
                extra=extra_context(
                    event="task",
                    component="task_runner",
                    action=message,
                    outcome="success" if context.successful else "failed",
                    duration_ms=timer.duration_ms(),
                ),
            )
        return result
