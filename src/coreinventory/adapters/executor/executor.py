"""Executor adapters implementing ExecutorPort."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable


class SynchronousExecutor:
    """Executor that runs each repository immediately in the calling thread.

    Implements ExecutorPort; useful to exercise the executor code path in
    tests while keeping the run deterministic.
    """

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Execute function immediately and return a completed future."""
        future: Future[object] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def __enter__(self) -> SynchronousExecutor:
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        return None


class ThreadPoolExecutorAdapter:
    """Adapter wrapping ThreadPoolExecutor to process repositories in parallel.

    Downloads dominate run time, so threads are enough. Each repository
    still gets its own temporary directory and cache writes are serialized
    by the cache adapter.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        """Initialize thread pool executor adapter.

        Args:
            max_workers: Maximum number of worker threads. None uses default.
        """
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="coreinventory"
        )

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Submit function to the thread pool."""
        return self._executor.submit(fn, *args, **kwargs)

    def __enter__(self) -> ThreadPoolExecutorAdapter:
        self._executor.__enter__()
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        return self._executor.__exit__(
            exc_type, exc_val, exc_tb  # type: ignore[arg-type]
        )
