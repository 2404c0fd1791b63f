"""Fetch Environment — the read interface a data fetcher consumes per request.

Invariants:
    - contains_argument() distinguishes "not supplied" from "supplied as None"
    - The environment is read-only for the fetcher: arguments are never mutated

Design Decisions:
    - Protocol with methods only: runtime_checkable issubclass() works on
      declared parameter types, which is how ENVIRONMENT parameters are detected
    - FetchContext is a marker base class: a parameter whose declared type
      subclasses it receives get_context()
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DataFetchingEnvironment(Protocol):
    """Contract for the request-execution environment of one field."""
    def contains_argument(self, name: str) -> bool: ...
    def get_argument(self, name: str) -> Any: ...
    def get_arguments(self) -> Mapping[str, Any]: ...
    def get_source(self) -> Any: ...
    def get_context(self) -> Any: ...


class FetchContext:
    """Marker base for request context objects injected into data fetchers."""


@dataclass(frozen=True)
class FetchEnvironment:
    """Plain DataFetchingEnvironment built from already-parsed request data."""

    arguments: Mapping[str, Any] = field(default_factory=dict)
    source: Any = None
    context: Any = None
    field_name: str | None = None

    def contains_argument(self, name: str) -> bool:
        return name in self.arguments

    def get_argument(self, name: str) -> Any:
        return self.arguments.get(name)

    def get_arguments(self) -> Mapping[str, Any]:
        return self.arguments

    def get_source(self) -> Any:
        return self.source

    def get_context(self) -> Any:
        return self.context
