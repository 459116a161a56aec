"""Unit tests for RichProgressReporter adapter."""

import io

import pytest


@pytest.mark.progress
class TestRichProgressReporter:
    """Tests for RichProgressReporter."""

    def test_rich_reporter_satisfies_protocol(self) -> None:
        """RichProgressReporter should implement ProgressReporter."""
        from coreinventory.core.ports import ProgressReporter
        from coreinventory.progress import RichProgressReporter

        reporter = RichProgressReporter()
        assert isinstance(reporter, ProgressReporter)

    def test_start_task_returns_callable(self) -> None:
        """start_task() should return a callable progress callback."""
        from coreinventory.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            callback = reporter.start_task("agg23/openfpga-pong", 1000)
            callback(100, 1000)

        assert callable(callback)

    def test_unknown_total(self) -> None:
        """Downloads without Content-Length are indeterminate."""
        from coreinventory.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            callback = reporter.start_task("agg23/openfpga-pong", 0)
            callback(4096, 0)
            reporter.finish_task("agg23/openfpga-pong")

    def test_multiple_concurrent_tasks(self) -> None:
        """Reporter should handle one task per repository at once."""
        from coreinventory.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            cb1 = reporter.start_task("agg23/openfpga-pong", 1000)
            cb2 = reporter.start_task("jotego/jtcps1", 2000)
            cb1(500, 1000)
            cb2(1000, 2000)
            reporter.finish_task("agg23/openfpga-pong")
            reporter.finish_task("jotego/jtcps1")

    def test_finish_unknown_task_is_noop(self) -> None:
        """Finishing a task that was never started does nothing."""
        from coreinventory.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            reporter.finish_task("never-started")

    def test_custom_console(self) -> None:
        """A console can be injected, e.g. to capture output."""
        from rich.console import Console

        from coreinventory.progress import RichProgressReporter

        console = Console(file=io.StringIO())

        with RichProgressReporter(console=console) as reporter:
            reporter.start_task("agg23/openfpga-pong", 10)(10, 10)


@pytest.mark.progress
class TestNullProgressReporter:
    """Tests for NullProgressReporter."""

    def test_null_reporter_accepts_updates(self) -> None:
        """The null reporter's callbacks accept updates silently."""
        from coreinventory.core.ports import NullProgressReporter

        reporter = NullProgressReporter()
        callback = reporter.start_task("agg23/openfpga-pong", 0)
        callback(10, 0)
        reporter.finish_task("agg23/openfpga-pong")
