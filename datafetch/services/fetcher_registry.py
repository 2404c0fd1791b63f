"""Fetcher Registry — explicit routing from field name to FunctionDataFetcher.

Invariants:
    - Every field->function mapping is registered explicitly (no getattr discovery)
    - Functions are described once at registration; fetch() never re-inspects them
    - Unknown field → UnknownFieldError; registering a field twice → DescriptorError
    - All fetchers share one ArgumentResolver and one FunctionInvoker
"""

import logging
from collections.abc import Callable
from typing import Any

from datafetch.core.describe_function import describe_function
from datafetch.core.environment import DataFetchingEnvironment
from datafetch.core.errors import DescriptorError, ErrorContext, UnknownFieldError
from datafetch.services.argument_resolver import ArgumentResolver
from datafetch.services.function_data_fetcher import (
    FunctionDataFetcher, default_resolver,
)
from datafetch.services.function_invoker import FunctionInvoker

logger = logging.getLogger(__name__)


class FetcherRegistry:
    """Routes field_name -> FunctionDataFetcher."""

    def __init__(
        self,
        resolver: ArgumentResolver | None = None,
        invoker: FunctionInvoker | None = None,
    ):
        self._resolver = resolver or default_resolver()
        self._invoker = invoker or FunctionInvoker()
        self._fetchers: dict[str, FunctionDataFetcher] = {}

    def register(
        self, field_name: str, fn: Callable[..., Any], target: Any = None,
    ) -> FunctionDataFetcher:
        if field_name in self._fetchers:
            raise DescriptorError(
                f"Field '{field_name}' is already registered",
                ErrorContext(field_name=field_name),
            )
        fetcher = FunctionDataFetcher(
            describe_function(fn, name=getattr(fn, "__qualname__", None)),
            target=target,
            resolver=self._resolver,
            invoker=self._invoker,
            field_name=field_name,
        )
        self._fetchers[field_name] = fetcher
        logger.debug(
            f"Registered '{field_name}' -> {fetcher.function.name}",
            extra={
                "field_name": field_name,
                "function_name": fetcher.function.name,
                "execution_kind": fetcher.function.execution_kind.value,
            },
        )
        return fetcher

    def get_fetcher(self, field_name: str) -> FunctionDataFetcher:
        fetcher = self._fetchers.get(field_name)
        if fetcher is None:
            raise UnknownFieldError(field_name)
        return fetcher

    def fetch(self, field_name: str, environment: DataFetchingEnvironment) -> Any:
        """Resolve field_name's fetcher and invoke it against environment."""
        fetcher = self.get_fetcher(field_name)
        logger.debug(f"Fetching '{field_name}'", extra={"field_name": field_name})
        return fetcher.get(environment)

    @property
    def field_names(self) -> list[str]:
        return list(self._fetchers)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._fetchers

    def __len__(self) -> int:
        return len(self._fetchers)
