"""Boundary Protocols — capabilities the fetcher core is given, never builds.

Invariants:
    - Core NEVER imports an implementation — dependency arrows point inward only
    - ArgumentConverter raises ArgumentConversionError on malformed input
    - CoroutineScheduler.submit() starts the coroutine and returns a
      concurrent.futures.Future; it raises SchedulerNotRunningError when it cannot

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - concurrent.futures.Future as the single async-result contract: usable from
      threads directly and from asyncio via asyncio.wrap_future
"""

from collections.abc import Coroutine
from concurrent.futures import Future
from typing import Any, Protocol


class ArgumentConverter(Protocol):
    """Contract for converting untyped input data to a declared type."""
    def convert(self, value: Any, target_type: Any) -> Any: ...


class CoroutineScheduler(Protocol):
    """Contract for the shared asynchronous execution context."""
    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future: ...
