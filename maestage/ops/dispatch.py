from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


def _collect_in_order(ex: Executor, fn: Callable[[Any], Any], items: list) -> list:
    """Submit every item, gather as they finish, return results in submission order."""
    results: list = [None] * len(items)
    future_map = {ex.submit(fn, item): i for i, item in enumerate(items)}
    try:
        for fut in as_completed(future_map):
            results[future_map[fut]] = fut.result()
    except Exception:
        for fut in future_map:
            fut.cancel()
        raise
    return results


class SerialBackend:
    """Synchronous in-process loading (the default)."""

    parallel = False

    def map(self, fn: Callable[[Any], Any], items: Iterable[Any]) -> list:
        return [fn(item) for item in items]


class ExecutorBackend:
    """
    Load on a caller-owned ``concurrent.futures.Executor``.

    The executor is not shut down here, so a long-lived pool (or a dask
    ``Client.get_executor()``) can be reused across calls.
    """

    parallel = True

    def __init__(self, executor: Executor):
        self.executor = executor

    def map(self, fn: Callable[[Any], Any], items: Iterable[Any]) -> list:
        return _collect_in_order(self.executor, fn, list(items))


class _PoolBackend:
    parallel = True
    _executor_cls: type = ThreadPoolExecutor

    def __init__(self, n_workers: Optional[int] = None):
        self.n_workers = max(1, n_workers or os.cpu_count() or 1)

    def map(self, fn: Callable[[Any], Any], items: Iterable[Any]) -> list:
        items = list(items)
        logger.debug("Loading %d object(s) on %d %s worker(s)",
                     len(items), self.n_workers, type(self).__name__)
        with self._executor_cls(max_workers=self.n_workers) as ex:
            return _collect_in_order(ex, fn, items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_workers={self.n_workers})"


class ThreadPoolBackend(_PoolBackend):
    _executor_cls = ThreadPoolExecutor


class ProcessPoolBackend(_PoolBackend):
    """
    Load in separate processes.

    Notes:
        - The provider and project must be picklable.
        - Worth it only when each experiment takes a while to deserialize.
    """

    _executor_cls = ProcessPoolExecutor


def resolve_backend(name: Optional[str], *, n_workers: Optional[int] = None):
    key = (name or "serial").lower()
    if key == "serial":
        return SerialBackend()
    if key in {"thread", "threads"}:
        return ThreadPoolBackend(n_workers=n_workers)
    if key in {"process", "processes", "multiprocessing"}:
        return ProcessPoolBackend(n_workers=n_workers)
    raise ValueError(f"Unknown load backend: {name}")


__all__ = [
    "SerialBackend",
    "ExecutorBackend",
    "ThreadPoolBackend",
    "ProcessPoolBackend",
    "resolve_backend",
]
