"""Type Coercer — turn one raw argument value into the value a parameter expects.

Invariants:
    - List parameters convert to list[element_type] in one converter call
      (each element validated against the element type; [] stays [])
    - OptionalInput parameters: not supplied → Absent (no conversion),
      supplied None → PresentNull, otherwise Present(converted)
    - Conversion failures propagate as ArgumentConversionError carrying the parameter name
    - Stateless apart from the injected converter
"""

from typing import Any

from datafetch.core.boundary_protocols import ArgumentConverter
from datafetch.core.errors import ArgumentConversionError
from datafetch.core.optional_input import OptionalInput
from datafetch.core.parameters import ParameterDescriptor


class TypeCoercer:
    """Converts raw environment values according to a ParameterDescriptor."""

    def __init__(self, converter: ArgumentConverter):
        self._converter = converter

    def coerce(self, param: ParameterDescriptor, raw: Any, supplied: bool) -> Any:
        try:
            if param.is_list:
                return self.coerce_list(param, raw)
            if param.is_optional_input:
                return self.coerce_optional(param, raw, supplied)
            return self._converter.convert(raw, param.declared_type)
        except ArgumentConversionError as e:
            e.context.parameter_name = param.input_name
            raise

    def coerce_list(self, param: ParameterDescriptor, raw: Any) -> list | None:
        target = list[param.element_type]
        if param.is_nullable:
            target = target | None
        return self._converter.convert(raw, target)

    def coerce_optional(
        self, param: ParameterDescriptor, raw: Any, supplied: bool,
    ) -> OptionalInput[Any]:
        if not supplied:
            return OptionalInput.absent()
        if raw is None:
            return OptionalInput.present_null()
        return OptionalInput.present(self._converter.convert(raw, param.inner_type))
