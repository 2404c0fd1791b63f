"""Descriptors — immutable metadata about a data fetcher function and its parameters.

Invariants:
    - ParameterDescriptor is frozen and hashable: it keys the resolved argument map
    - A FunctionDescriptor has at most one RECEIVER parameter, and it is first
    - execution_kind is fixed when the descriptor is built, never re-inspected per call
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from datafetch.core.domain_types import ExecutionKind, ParameterKind


@dataclass(frozen=True)
class ArgumentName:
    """Annotated metadata: read this parameter from a differently named argument.

    Usage: ``def user(self, from_: Annotated[str, ArgumentName("from")])``.
    """
    name: str


@dataclass(frozen=True)
class ParameterDescriptor:
    """Static metadata about one formal parameter."""

    name: str
    declared_type: Any = Any
    kind: ParameterKind = ParameterKind.ORDINARY
    argument_name: str | None = None
    is_list: bool = False
    element_type: Any = Any
    is_nullable: bool = False
    is_optional_input: bool = False
    inner_type: Any = Any
    has_default: bool = False

    @property
    def input_name(self) -> str:
        """Name looked up in the environment arguments."""
        return self.argument_name or self.name

    @property
    def is_required(self) -> bool:
        """Ordinary parameter that must be supplied or have a default."""
        return (
            self.kind is ParameterKind.ORDINARY
            and not self.is_optional_input
            and not self.has_default
        )


@dataclass(frozen=True)
class FunctionDescriptor:
    """A function plus its ordered parameter descriptors and execution kind."""

    fn: Callable[..., Any] = field(compare=False)
    name: str
    parameters: tuple[ParameterDescriptor, ...] = ()
    execution_kind: ExecutionKind = ExecutionKind.BLOCKING

    @property
    def receiver(self) -> ParameterDescriptor | None:
        for param in self.parameters:
            if param.kind is ParameterKind.RECEIVER:
                return param
        return None

    @property
    def is_suspending(self) -> bool:
        return self.execution_kind is ExecutionKind.SUSPENDING
