"""Pydantic Converter — ArgumentConverter backed by pydantic TypeAdapter.

Invariants:
    - pydantic.ValidationError mapped to ArgumentConversionError (core/errors.py),
      chained with `from` so the original error stays inspectable
    - One TypeAdapter per target type, built on first use and reused

Design Decisions:
    - TypeAdapter over model-only validation: targets are arbitrary annotations
      (scalars, list[T], dataclasses, BaseModel, OptionalInput[T])
    - Lax mode by default: GraphQL-style inputs arrive as JSON-ish dicts and
      scalars; strict mode available through settings
"""

import logging
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from datafetch.core.errors import ArgumentConversionError, ErrorContext

logger = logging.getLogger(__name__)


class PydanticConverter:
    """Converts untyped argument data to declared types with pydantic."""

    def __init__(self, strict: bool = False, from_attributes: bool = True):
        self._strict = strict
        self._from_attributes = from_attributes

    def convert(self, value: Any, target_type: Any) -> Any:
        adapter = _adapter_for(target_type)
        try:
            return adapter.validate_python(
                value, strict=self._strict, from_attributes=self._from_attributes,
            )
        except ValidationError as e:
            logger.debug(f"Conversion to {target_type!r} failed: {e}")
            raise ArgumentConversionError(
                f"Cannot convert argument to {_type_name(target_type)}: "
                f"{e.error_count()} validation error(s)",
                target_type,
                details=e.errors(include_url=False),
                context=ErrorContext(debug_info={"input_type": type(value).__name__}),
            ) from e


def _adapter_for(target_type: Any) -> TypeAdapter:
    try:
        return _cached_adapter(target_type)
    except TypeError:
        # unhashable annotation (e.g. Annotated with dict metadata)
        return _build_adapter(target_type)


@lru_cache(maxsize=512)
def _cached_adapter(target_type: Any) -> TypeAdapter:
    return _build_adapter(target_type)


def _build_adapter(target_type: Any) -> TypeAdapter:
    try:
        return TypeAdapter(target_type)
    except PydanticSchemaGenerationError as e:
        raise ArgumentConversionError(
            f"No conversion available for {_type_name(target_type)}",
            target_type,
        ) from e


def _type_name(target_type: Any) -> str:
    if isinstance(target_type, type):
        return target_type.__name__
    return repr(target_type)
