"""Argument Resolver — map a function's parameters to values from the environment.

Invariants:
    - Ordinary parameter not supplied and not OptionalInput → omitted from the map
      (never bound to None), so the function's own default applies
    - OptionalInput parameters are always resolved: absence becomes Absent explicitly
    - CONTEXT / ENVIRONMENT parameters bound without conversion
    - RECEIVER parameters skipped here; the data fetcher binds the target
    - Result is a read-only mapping built fresh per call

Design Decisions:
    - Per-parameter hook (map_parameter_to_value) and per-argument hook
      (resolve_argument): a subclass can re-source one parameter and delegate
      the rest to super(); overriding get_parameters replaces the whole strategy
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from datafetch.core.domain_types import ParameterKind
from datafetch.core.environment import DataFetchingEnvironment
from datafetch.core.parameters import FunctionDescriptor, ParameterDescriptor
from datafetch.services.type_coercer import TypeCoercer


class ArgumentResolver:
    """Resolves every parameter of a FunctionDescriptor against an environment."""

    def __init__(self, coercer: TypeCoercer):
        self._coercer = coercer

    def get_parameters(
        self, function: FunctionDescriptor, environment: DataFetchingEnvironment,
    ) -> Mapping[ParameterDescriptor, Any]:
        """Resolve all parameters, skipping the ones that map to nothing."""
        values: dict[ParameterDescriptor, Any] = {}
        for param in function.parameters:
            pair = self.map_parameter_to_value(param, environment)
            if pair is not None:
                values[pair[0]] = pair[1]
        return MappingProxyType(values)

    def map_parameter_to_value(
        self, param: ParameterDescriptor, environment: DataFetchingEnvironment,
    ) -> tuple[ParameterDescriptor, Any] | None:
        if param.kind is ParameterKind.CONTEXT:
            return param, environment.get_context()
        if param.kind is ParameterKind.ENVIRONMENT:
            return param, environment
        if param.kind is ParameterKind.RECEIVER:
            return None
        return self.resolve_argument(param, environment)

    def resolve_argument(
        self, param: ParameterDescriptor, environment: DataFetchingEnvironment,
    ) -> tuple[ParameterDescriptor, Any] | None:
        """Read and coerce an ordinary argument; None means "omit, use the default"."""
        supplied = environment.contains_argument(param.input_name)
        if not supplied and not param.is_optional_input:
            return None
        raw = environment.get_argument(param.input_name) if supplied else None
        return param, self._coercer.coerce(param, raw, supplied)
