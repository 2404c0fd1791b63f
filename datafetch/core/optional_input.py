"""OptionalInput — tri-state argument value: Absent, PresentNull, Present(value).

Invariants:
    - Absent != PresentNull != Present(None); equality and hash include the state
    - Absent and PresentNull are singletons per process (absent() / present_null())
    - The distinction survives nesting: an OptionalInput field inside a model
      inside another OptionalInput keeps its own state

Design Decisions:
    - Pydantic core-schema hook on the class: the converter builds nested
      OptionalInput fields itself, a missing field keeps its Absent default
    - Plain class with __slots__ over dataclass: pydantic must see the hook,
      not a dataclass schema
"""

from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from datafetch.core.domain_types import InputState

T = TypeVar("T")


class OptionalInput(Generic[T]):
    """An argument that may be absent, explicitly null, or set to a value."""

    __slots__ = ("_state", "_value")

    def __init__(self, state: InputState, value: T | None = None):
        if state is not InputState.PRESENT and value is not None:
            raise ValueError(f"{state.value} OptionalInput cannot hold a value")
        object.__setattr__(self, "_state", state)
        object.__setattr__(self, "_value", value)

    @classmethod
    def absent(cls) -> "OptionalInput[Any]":
        return ABSENT

    @classmethod
    def present_null(cls) -> "OptionalInput[Any]":
        return PRESENT_NULL

    @classmethod
    def present(cls, value: T) -> "OptionalInput[T]":
        return cls(InputState.PRESENT, value)

    @property
    def state(self) -> InputState:
        return self._state

    @property
    def is_absent(self) -> bool:
        return self._state is InputState.ABSENT

    @property
    def is_null(self) -> bool:
        return self._state is InputState.NULL

    @property
    def is_present(self) -> bool:
        return self._state is InputState.PRESENT

    @property
    def value(self) -> T | None:
        """The wrapped value; None for Absent and PresentNull."""
        return self._value

    def value_or(self, default: T) -> T:
        """The wrapped value when Present, otherwise default."""
        return self._value if self.is_present else default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionalInput):
            return NotImplemented
        return self._state is other._state and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._state, self._value))

    def __repr__(self) -> str:
        if self.is_absent:
            return "Absent"
        if self.is_null:
            return "PresentNull"
        return f"Present(value={self._value!r})"

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("OptionalInput is immutable")

    def __reduce__(self):
        return (OptionalInput, (self._state, self._value))

    # ─── pydantic integration ────────────────────────────────────

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        args = get_args(source_type)
        inner_schema = (
            handler.generate_schema(args[0]) if args else core_schema.any_schema()
        )
        from_raw = core_schema.no_info_after_validator_function(
            _wrap_raw, core_schema.nullable_schema(inner_schema),
        )
        schema = core_schema.json_or_python_schema(
            json_schema=from_raw,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(OptionalInput), from_raw],
                mode="left_to_right",
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                _unwrap_for_dump,
            ),
        )
        # a field left out of the input is Absent, not missing
        return core_schema.with_default_schema(schema, default=ABSENT)


def _wrap_raw(value: Any) -> OptionalInput[Any]:
    """A supplied raw value: None → PresentNull, anything else → Present."""
    if value is None:
        return PRESENT_NULL
    return OptionalInput.present(value)


def _unwrap_for_dump(value: Any) -> Any:
    if isinstance(value, OptionalInput):
        return value.value
    return value


ABSENT: OptionalInput[Any] = OptionalInput(InputState.ABSENT)
PRESENT_NULL: OptionalInput[Any] = OptionalInput(InputState.NULL)
