"""Function Description — build a FunctionDescriptor from a Python callable.

Invariants:
    - Description happens once per function (at registration), never per call
    - Unannotated parameters are declared as Any
    - *args, **kwargs and positional-only parameters (other than self) are rejected:
      arguments are bound by name
    - A nullable list (list[T] | None) is still a list parameter
    - Context and environment parameters may be declared nullable (Ctx | None)

Design Decisions:
    - inspect.signature + typing.get_type_hints(include_extras=True): string
      annotations resolved, Annotated metadata kept for ArgumentName
    - Receiver detected by position and name (first parameter "self" of a plain
      function); bound methods carry their receiver and describe without one
"""

import inspect
import types
from collections.abc import Callable, Sequence
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from datafetch.core.domain_types import ExecutionKind, ParameterKind
from datafetch.core.environment import DataFetchingEnvironment, FetchContext
from datafetch.core.errors import DescriptorError, ErrorContext
from datafetch.core.optional_input import OptionalInput
from datafetch.core.parameters import (
    ArgumentName, FunctionDescriptor, ParameterDescriptor,
)

_LIST_ORIGINS = (list, Sequence)
_UNION_ORIGINS = (Union, types.UnionType)


def describe_function(fn: Callable[..., Any], name: str | None = None) -> FunctionDescriptor:
    """Describe fn's parameters, receiver and execution kind."""
    fn_name = name or getattr(fn, "__name__", repr(fn))
    try:
        signature = inspect.signature(fn)
        hints = get_type_hints(fn, include_extras=True)
    except (TypeError, ValueError, NameError) as e:
        raise DescriptorError(
            f"Cannot introspect '{fn_name}': {e}",
            ErrorContext(function_name=fn_name),
        ) from e

    parameters = []
    for index, param in enumerate(signature.parameters.values()):
        if index == 0 and _is_receiver(fn, param):
            parameters.append(
                ParameterDescriptor(name=param.name, kind=ParameterKind.RECEIVER),
            )
            continue
        _check_bindable(fn_name, param)
        parameters.append(
            describe_parameter(param, hints.get(param.name, Any)),
        )

    return FunctionDescriptor(
        fn=fn,
        name=fn_name,
        parameters=tuple(parameters),
        execution_kind=_execution_kind(fn),
    )


def describe_parameter(param: inspect.Parameter, annotation: Any) -> ParameterDescriptor:
    """Describe one non-receiver parameter from its annotation."""
    declared_type, argument_name = _strip_annotated(annotation)
    has_default = param.default is not inspect.Parameter.empty

    kind = _special_kind(_unwrap_nullable(declared_type)[0])
    if kind is not None:
        return ParameterDescriptor(
            name=param.name, declared_type=declared_type, kind=kind,
            has_default=has_default,
        )

    if declared_type is OptionalInput or get_origin(declared_type) is OptionalInput:
        inner = get_args(declared_type)
        return ParameterDescriptor(
            name=param.name, declared_type=declared_type,
            argument_name=argument_name, is_optional_input=True,
            inner_type=inner[0] if inner else Any, has_default=has_default,
        )

    list_type, nullable = _unwrap_nullable(declared_type)
    if list_type is list or get_origin(list_type) in _LIST_ORIGINS:
        element = get_args(list_type)
        return ParameterDescriptor(
            name=param.name, declared_type=declared_type,
            argument_name=argument_name, is_list=True,
            element_type=element[0] if element else Any,
            is_nullable=nullable, has_default=has_default,
        )

    return ParameterDescriptor(
        name=param.name, declared_type=declared_type,
        argument_name=argument_name, is_nullable=nullable,
        has_default=has_default,
    )


def _is_receiver(fn: Callable[..., Any], param: inspect.Parameter) -> bool:
    return (
        param.name == "self"
        and not inspect.ismethod(fn)
        and param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        )
    )


def _check_bindable(fn_name: str, param: inspect.Parameter) -> None:
    if param.kind in (
        inspect.Parameter.VAR_POSITIONAL,
        inspect.Parameter.VAR_KEYWORD,
        inspect.Parameter.POSITIONAL_ONLY,
    ):
        raise DescriptorError(
            f"Parameter '{param.name}' of '{fn_name}' cannot be bound by name",
            ErrorContext(function_name=fn_name, parameter_name=param.name),
        )


def _execution_kind(fn: Callable[..., Any]) -> ExecutionKind:
    target = inspect.unwrap(fn)
    if inspect.iscoroutinefunction(target) or inspect.iscoroutinefunction(fn):
        return ExecutionKind.SUSPENDING
    return ExecutionKind.BLOCKING


def _strip_annotated(annotation: Any) -> tuple[Any, str | None]:
    """Split Annotated[T, ...] into T and an ArgumentName override, if any."""
    if get_origin(annotation) is not Annotated:
        return annotation, None
    base, *metadata = get_args(annotation)
    for item in metadata:
        if isinstance(item, ArgumentName):
            return base, item.name
    return base, None


def _unwrap_nullable(annotation: Any) -> tuple[Any, bool]:
    """T | None → (T, True); anything else → (annotation, False)."""
    if get_origin(annotation) not in _UNION_ORIGINS:
        return annotation, False
    members = [a for a in get_args(annotation) if a is not type(None)]
    if len(members) == 1 and len(get_args(annotation)) == 2:
        return members[0], True
    return annotation, False


def _special_kind(declared_type: Any) -> ParameterKind | None:
    """CONTEXT / ENVIRONMENT for marker types, None for ordinary ones."""
    if not inspect.isclass(declared_type) or get_origin(declared_type) is not None:
        return None
    if issubclass(declared_type, FetchContext):
        return ParameterKind.CONTEXT
    if issubclass(declared_type, DataFetchingEnvironment):
        return ParameterKind.ENVIRONMENT
    return None
