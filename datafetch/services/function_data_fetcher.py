"""Function Data Fetcher — resolve a field's arguments and invoke its function.

Invariants:
    - Instance = explicit target, else environment.get_source()
    - A function with a receiver and no instance → None, nothing invoked, no error
    - Resolution completes before invocation starts; a resolution failure means
      the function is never called
    - Required ordinary parameters left unresolved → MissingArgumentError
    - Result: plain value (blocking), None, or concurrent.futures.Future (suspending)

Design Decisions:
    - Composition over one class: ArgumentResolver and FunctionInvoker are
      injected and separately overridable
    - Converter defaults come from settings, so a bare FunctionDataFetcher(fn)
      behaves the same as one built by FetcherRegistry
"""

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from datafetch.core.describe_function import describe_function
from datafetch.core.environment import DataFetchingEnvironment
from datafetch.core.errors import (
    ArgumentConversionError, ErrorContext, MissingArgumentError,
)
from datafetch.core.parameters import FunctionDescriptor, ParameterDescriptor
from datafetch.services.argument_resolver import ArgumentResolver
from datafetch.services.function_invoker import FunctionInvoker
from datafetch.services.type_coercer import TypeCoercer

logger = logging.getLogger(__name__)


def default_resolver() -> ArgumentResolver:
    """ArgumentResolver over a PydanticConverter configured from settings."""
    from datafetch.config import get_settings
    from datafetch.infrastructure.pydantic_converter import PydanticConverter

    settings = get_settings()
    converter = PydanticConverter(
        strict=settings.converter_strict,
        from_attributes=settings.converter_from_attributes,
    )
    return ArgumentResolver(TypeCoercer(converter))


class FunctionDataFetcher:
    """Invokes fn on target (or the environment source) with resolved arguments."""

    def __init__(
        self,
        fn: Callable[..., Any] | FunctionDescriptor,
        target: Any = None,
        resolver: ArgumentResolver | None = None,
        invoker: FunctionInvoker | None = None,
        field_name: str | None = None,
    ):
        self.function = fn if isinstance(fn, FunctionDescriptor) else describe_function(fn)
        self.target = target
        self.field_name = field_name
        self._resolver = resolver or default_resolver()
        self._invoker = invoker or FunctionInvoker()

    def get(self, environment: DataFetchingEnvironment) -> Any:
        """Invoke with the configured target."""
        return self.invoke(self.target, environment)

    def invoke(self, target: Any, environment: DataFetchingEnvironment) -> Any:
        instance = target if target is not None else environment.get_source()
        receiver = self.function.receiver
        if receiver is not None and instance is None:
            logger.debug(
                f"No target or source for '{self.function.name}', returning None",
                extra=self._log_extra(),
            )
            return None

        parameter_values = self.get_parameters(environment)
        if receiver is not None:
            parameter_values = MappingProxyType(
                {**parameter_values, receiver: instance},
            )
        self._check_required(parameter_values)
        return self._invoker.invoke(self.function, parameter_values)

    def get_parameters(
        self, environment: DataFetchingEnvironment,
    ) -> Mapping[ParameterDescriptor, Any]:
        try:
            return self._resolver.get_parameters(self.function, environment)
        except ArgumentConversionError as e:
            e.context.function_name = self.function.name
            e.context.field_name = self._field_name(environment)
            logger.warning(
                f"Argument conversion failed for '{self.function.name}': {e.message}",
                extra={
                    **self._log_extra(environment),
                    "parameter_name": e.context.parameter_name,
                    "error_code": e.code,
                },
            )
            raise

    def _check_required(self, parameter_values: Mapping[ParameterDescriptor, Any]) -> None:
        missing = [
            p.input_name for p in self.function.parameters
            if p.is_required and p not in parameter_values
        ]
        if not missing:
            return
        error = MissingArgumentError(
            missing, ErrorContext(function_name=self.function.name, field_name=self.field_name),
        )
        logger.warning(error.message, extra={**self._log_extra(), "error_code": error.code})
        raise error

    def _field_name(self, environment: DataFetchingEnvironment | None = None) -> str | None:
        return self.field_name or getattr(environment, "field_name", None)

    def _log_extra(self, environment: DataFetchingEnvironment | None = None) -> dict:
        return {
            "field_name": self._field_name(environment),
            "function_name": self.function.name,
            "execution_kind": self.function.execution_kind.value,
        }
