"""User facing console output.

Logging carries diagnostics; this module carries the messages a user of the
command line tool reads, filtered by the ``-q``/``-v`` verbosity.
"""
from __future__ import annotations

import sys
from typing import IO, Iterable, List, Optional

from constants import Verbosity


class ConsoleOutput:
    """Verbosity aware writer for command output.

    Args:
        stream: Target stream, stdout by default.
        verbosity: Messages above this verbosity are suppressed.
    """

    def __init__(self, stream: Optional[IO[str]] = None, verbosity: Verbosity = Verbosity.NORMAL):
        self.stream = stream if stream is not None else sys.stdout
        self.verbosity = verbosity

    def is_quiet(self) -> bool:
        return self.verbosity is Verbosity.QUIET

    def is_verbose(self) -> bool:
        return self.verbosity.value >= Verbosity.VERBOSE.value

    def is_very_verbose(self) -> bool:
        return self.verbosity.value >= Verbosity.VERY_VERBOSE.value

    def is_debug(self) -> bool:
        return self.verbosity.value >= Verbosity.DEBUG.value

    def _enabled(self, verbosity: Verbosity) -> bool:
        return verbosity.value <= self.verbosity.value

    def write(self, message: str, verbosity: Verbosity = Verbosity.NORMAL) -> None:
        if self._enabled(verbosity):
            self.stream.write(message)
            self.stream.flush()

    def writeln(self, message: str = "", verbosity: Verbosity = Verbosity.NORMAL) -> None:
        self.write(message + "\n", verbosity)

    def title(self, message: str) -> None:
        self.writeln()
        self.writeln(message)
        self.writeln("=" * len(message))
        self.writeln()

    def _block(self, label: str, message: str, verbosity: Verbosity) -> None:
        self.writeln()
        self.writeln(f"[{label}] {message}", verbosity)
        self.writeln()

    def success(self, message: str) -> None:
        self._block("OK", message, Verbosity.NORMAL)

    def warning(self, message: str) -> None:
        self._block("WARNING", message, Verbosity.NORMAL)

    def error(self, message: str) -> None:
        # Errors are shown even in quiet mode
        self._block("ERROR", message, Verbosity.QUIET)

    def listing(self, elements: Iterable[str], verbosity: Verbosity = Verbosity.NORMAL) -> None:
        items: List[str] = list(elements)
        for element in items:
            self.writeln(f" * {element}", verbosity)
        if items:
            self.writeln("", verbosity)
