"""Coroutine Schedulers — the shared asynchronous execution context for suspending fetchers.

Invariants:
    - submit() starts the coroutine right away and returns a concurrent.futures.Future
    - BackgroundLoopScheduler runs one asyncio loop on a thread it owns; submission
      is thread-safe, including from the loop thread itself
    - A coroutine that cannot be scheduled is closed, then SchedulerNotRunningError raised
    - shutdown() cancels still-pending tasks, closes the loop, and is idempotent

Design Decisions:
    - Singleton scheduler initialized explicitly (init_scheduler / shutdown_scheduler);
      get_scheduler() initializes lazily from settings if nobody did
    - InlineScheduler: runs the coroutine to completion on the caller's thread
      and hands back a finished Future (scripts, tests, sync-only callers)
"""

import asyncio
import logging
import threading
from collections.abc import Coroutine
from concurrent.futures import Future
from typing import Any

from datafetch.core.errors import SchedulerNotRunningError

logger = logging.getLogger(__name__)


class BackgroundLoopScheduler:
    """An asyncio event loop running on a dedicated daemon thread."""

    def __init__(self, thread_name: str = "datafetch-scheduler"):
        self._thread_name = thread_name
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._loop is not None and self._loop.is_running()

    def start(self) -> "BackgroundLoopScheduler":
        with self._lock:
            if self._loop is not None:
                return self
            loop = asyncio.new_event_loop()
            ready = threading.Event()
            thread = threading.Thread(
                target=self._run_loop, args=(loop, ready),
                name=self._thread_name, daemon=True,
            )
            thread.start()
            ready.wait()
            self._loop, self._thread = loop, thread
        logger.info(f"Scheduler thread '{self._thread_name}' started")
        return self

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        loop = self._loop
        if loop is None or loop.is_closed():
            coro.close()
            raise SchedulerNotRunningError(
                f"Scheduler '{self._thread_name}' is not running",
            )
        return asyncio.run_coroutine_threadsafe(coro, loop)

    def shutdown(self) -> None:
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None:
            return
        if threading.current_thread() is thread:
            raise RuntimeError("Scheduler cannot be shut down from its own thread")
        asyncio.run_coroutine_threadsafe(_cancel_pending(), loop).result()
        loop.call_soon_threadsafe(loop.stop)
        thread.join()
        loop.close()
        logger.info(f"Scheduler thread '{self._thread_name}' stopped")

    def __enter__(self) -> "BackgroundLoopScheduler":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        loop.run_forever()


class InlineScheduler:
    """Runs each coroutine to completion on the calling thread."""

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            coro.close()
            raise SchedulerNotRunningError(
                "InlineScheduler cannot run inside a running event loop",
            )
        future: Future = Future()
        future.set_running_or_notify_cancel()
        try:
            future.set_result(asyncio.run(coro))
        except BaseException as e:
            future.set_exception(e)
            if not isinstance(e, Exception):
                raise
        return future


async def _cancel_pending() -> None:
    current = asyncio.current_task()
    pending = [t for t in asyncio.all_tasks() if t is not current]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    await asyncio.get_running_loop().shutdown_asyncgens()


# Singleton (initialized on startup)
scheduler: BackgroundLoopScheduler | None = None
_scheduler_lock = threading.Lock()


def init_scheduler(thread_name: str = "datafetch-scheduler") -> BackgroundLoopScheduler:
    global scheduler
    with _scheduler_lock:
        if scheduler is None:
            scheduler = BackgroundLoopScheduler(thread_name).start()
        return scheduler


def get_scheduler() -> BackgroundLoopScheduler:
    """Process-wide scheduler; started from settings on first use."""
    if scheduler is None:
        from datafetch.config import get_settings
        return init_scheduler(get_settings().scheduler_thread_name)
    return scheduler


def shutdown_scheduler() -> None:
    global scheduler
    with _scheduler_lock:
        current, scheduler = scheduler, None
    if current is not None:
        current.shutdown()
