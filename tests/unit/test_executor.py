"""Unit tests for executor adapters."""

import threading

import pytest


@pytest.mark.core
@pytest.mark.tier(0)
class TestSynchronousExecutor:
    """Tests for SynchronousExecutor."""

    def test_satisfies_protocol(self) -> None:
        """SynchronousExecutor should implement ExecutorPort."""
        from coreinventory.adapters.executor import SynchronousExecutor
        from coreinventory.core.ports import ExecutorPort

        assert isinstance(SynchronousExecutor(), ExecutorPort)

    def test_runs_immediately(self) -> None:
        """submit() runs in the calling thread and returns a done future."""
        from coreinventory.adapters.executor import SynchronousExecutor

        with SynchronousExecutor() as executor:
            future = executor.submit(threading.current_thread)

        assert future.done()
        assert future.result() is threading.current_thread()

    def test_exception_captured_in_future(self) -> None:
        """Exceptions surface through the future, not from submit()."""
        from coreinventory.adapters.executor import SynchronousExecutor

        def fail() -> None:
            raise RuntimeError("boom")

        future = SynchronousExecutor().submit(fail)

        with pytest.raises(RuntimeError, match="boom"):
            future.result()


@pytest.mark.core
@pytest.mark.tier(1)
class TestThreadPoolExecutorAdapter:
    """Tests for ThreadPoolExecutorAdapter."""

    def test_satisfies_protocol(self) -> None:
        """ThreadPoolExecutorAdapter should implement ExecutorPort."""
        from coreinventory.adapters.executor import ThreadPoolExecutorAdapter
        from coreinventory.core.ports import ExecutorPort

        assert isinstance(ThreadPoolExecutorAdapter(max_workers=1), ExecutorPort)

    def test_runs_in_worker_threads(self) -> None:
        """Work runs on named worker threads."""
        from coreinventory.adapters.executor import ThreadPoolExecutorAdapter

        with ThreadPoolExecutorAdapter(max_workers=2) as executor:
            futures = [
                executor.submit(lambda: threading.current_thread().name)
                for _ in range(4)
            ]
            names = [future.result() for future in futures]

        assert all(name.startswith("coreinventory") for name in names)
