"""Console output helpers for the command line tool."""

from .output import ConsoleOutput
from .task_runner import RunnerContext, TaskRunner

__all__ = ["ConsoleOutput", "RunnerContext", "TaskRunner"]
