"""Function Invoker — run a fully-bound function inline or on the shared event loop.

Invariants:
    - BLOCKING functions run on the caller's thread; the value is returned as-is
    - SUSPENDING functions are submitted to a CoroutineScheduler and a
      concurrent.futures.Future is returned immediately
    - The call layer (call_by / call_suspend_by) wraps whatever the function raises
      in InvocationTargetError; both branches unwrap it, so callers only ever see
      the function's own exception
    - The parameter map is only read, never mutated

Design Decisions:
    - Scheduler injected at construction; without one the process-wide scheduler
      from infrastructure is looked up on every suspending call, so a restarted
      scheduler is picked up
    - submit_coroutine is the hook for a different execution context or start
      mode; run_blocking_function never goes through it
"""

import logging
from collections.abc import Coroutine, Mapping
from concurrent.futures import Future
from typing import Any

from datafetch.core.boundary_protocols import CoroutineScheduler
from datafetch.core.domain_types import ParameterKind
from datafetch.core.errors import InvocationTargetError, unwrap_invocation_error
from datafetch.core.parameters import FunctionDescriptor, ParameterDescriptor

logger = logging.getLogger(__name__)


class FunctionInvoker:
    """Executes a FunctionDescriptor with an already-resolved parameter map."""

    def __init__(self, scheduler: CoroutineScheduler | None = None):
        self._scheduler = scheduler

    def invoke(
        self, function: FunctionDescriptor,
        parameter_values: Mapping[ParameterDescriptor, Any],
    ) -> Any:
        """Return the value (blocking) or a pending Future (suspending)."""
        if function.is_suspending:
            return self.run_suspending_function(function, parameter_values)
        return self.run_blocking_function(function, parameter_values)

    # ─── Blocking ────────────────────────────────────────────────

    def run_blocking_function(
        self, function: FunctionDescriptor,
        parameter_values: Mapping[ParameterDescriptor, Any],
    ) -> Any:
        """Call inline. Override to change blocking-path exception handling."""
        try:
            return self.call_by(function, parameter_values)
        except InvocationTargetError as e:
            error = unwrap_invocation_error(e)
        raise error

    # ─── Suspending ──────────────────────────────────────────────

    def run_suspending_function(
        self, function: FunctionDescriptor,
        parameter_values: Mapping[ParameterDescriptor, Any],
        scheduler: CoroutineScheduler | None = None,
    ) -> Future:
        """Schedule the coroutine. Override to change async-path exception handling."""

        async def _run() -> Any:
            try:
                return await self.call_suspend_by(function, parameter_values)
            except InvocationTargetError as e:
                error = unwrap_invocation_error(e)
            raise error

        logger.debug(
            f"Scheduling suspending function '{function.name}'",
            extra={
                "function_name": function.name,
                "execution_kind": function.execution_kind.value,
            },
        )
        return self.submit_coroutine(_run(), scheduler)

    def submit_coroutine(
        self, coro: Coroutine[Any, Any, Any],
        scheduler: CoroutineScheduler | None = None,
    ) -> Future:
        """Hand the coroutine to the execution context; it starts immediately."""
        return (scheduler or self.scheduler).submit(coro)

    @property
    def scheduler(self) -> CoroutineScheduler:
        """Injected scheduler, else the current process-wide one (looked up per call)."""
        if self._scheduler is not None:
            return self._scheduler
        from datafetch.infrastructure.scheduler import get_scheduler
        return get_scheduler()

    # ─── Call layer ──────────────────────────────────────────────

    def call_by(
        self, function: FunctionDescriptor,
        parameter_values: Mapping[ParameterDescriptor, Any],
    ) -> Any:
        args, kwargs = _split_arguments(parameter_values)
        try:
            return function.fn(*args, **kwargs)
        except Exception as e:
            raise InvocationTargetError(function.name) from e

    async def call_suspend_by(
        self, function: FunctionDescriptor,
        parameter_values: Mapping[ParameterDescriptor, Any],
    ) -> Any:
        args, kwargs = _split_arguments(parameter_values)
        try:
            return await function.fn(*args, **kwargs)
        except Exception as e:
            raise InvocationTargetError(function.name) from e


def _split_arguments(
    parameter_values: Mapping[ParameterDescriptor, Any],
) -> tuple[list[Any], dict[str, Any]]:
    """Receiver goes positional, everything else by python parameter name."""
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for param, value in parameter_values.items():
        if param.kind is ParameterKind.RECEIVER:
            args.append(value)
        else:
            kwargs[param.name] = value
    return args, kwargs
