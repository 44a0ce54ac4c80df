"""Tests for console output and the task runner."""

import io

import pytest

from constants import Verbosity
from console import ConsoleOutput, TaskRunner


def make_output(verbosity=Verbosity.NORMAL):
    stream = io.StringIO()
    return ConsoleOutput(stream, verbosity), stream


class TestConsoleOutput:
    """Tests for ConsoleOutput."""

    def test_verbosity_filter(self):
        output, stream = make_output(Verbosity.VERBOSE)
        output.writeln("normal")
        output.writeln("verbose", Verbosity.VERBOSE)
        output.writeln("very verbose", Verbosity.VERY_VERBOSE)
        assert stream.getvalue() == "normal\nverbose\n"

    def test_quiet_output_only_shows_errors(self):
        output, stream = make_output(Verbosity.QUIET)
        output.writeln("hello")
        output.success("done")
        output.warning("careful")
        output.error("broken")
        assert stream.getvalue() == "[ERROR] broken\n"
        assert output.is_quiet()
        assert not output.is_verbose()

    def test_blocks_and_listing(self):
        output, stream = make_output()
        output.title("Bundle")
        output.success("All good")
        output.listing(["first", "second"])
        assert stream.getvalue() == (
            "\nBundle\n======\n\n"
            "\n[OK] All good\n\n"
            " * first\n * second\n\n"
        )

    def test_empty_listing_prints_nothing(self):
        output, stream = make_output()
        output.listing([])
        assert stream.getvalue() == ""

    def test_verbosity_checks(self):
        output, _ = make_output(Verbosity.DEBUG)
        assert output.is_verbose()
        assert output.is_very_verbose()
        assert output.is_debug()


class TestTaskRunner:
    """Tests for TaskRunner."""

    def test_successful_task(self):
        output, stream = make_output()
        result = TaskRunner(output).run("Doing things", lambda context: 42)
        assert result == 42
        assert stream.getvalue() == "Doing things... Done\n"

    def test_task_marked_as_failed(self):
        output, stream = make_output()

        def task(context):
            context.mark_as_failed()
            return "partial"

        assert TaskRunner(output).run("Doing things", task) == "partial"
        assert stream.getvalue() == "Doing things... Failed\n"

    def test_exception_is_reraised(self):
        output, stream = make_output()

        def task(_context):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            TaskRunner(output).run("Doing things", task)
        assert stream.getvalue() == "Doing things... Failed\n"

    def test_verbose_task_is_hidden_at_normal_verbosity(self):
        output, stream = make_output()
        assert TaskRunner(output).run("Hidden", lambda context: "x", Verbosity.VERBOSE) == "x"
        assert stream.getvalue() == ""
