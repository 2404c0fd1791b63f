"""Pydantic Converter — tests for TypeAdapter-backed argument conversion.

Tests cover:
    - Lax conversion of scalars, models and lists
    - ValidationError mapped to ArgumentConversionError (chained, with details)
    - Strict mode rejects string-encoded numbers
    - from_attributes builds models from plain objects
    - TypeAdapters reused per target type
"""

import pytest
from pydantic import BaseModel, ValidationError

from datafetch.core.errors import ArgumentConversionError
from datafetch.infrastructure.pydantic_converter import (
    PydanticConverter, _adapter_for,
)


class Address(BaseModel):
    street: str
    zip_code: int


class _AddressRow:
    street = "Main St"
    zip_code = 12345


def test_scalar_lax_conversion(converter):
    assert converter.convert("12", int) == 12
    assert converter.convert(1, float) == 1.0


def test_model_from_dict(converter):
    assert converter.convert({"street": "Main", "zip_code": "1"}, Address) == Address(
        street="Main", zip_code=1,
    )


def test_list_elements_converted(converter):
    assert converter.convert(("1", 2), list[int]) == [1, 2]


def test_failure_mapped_to_conversion_error(converter):
    with pytest.raises(ArgumentConversionError) as exc_info:
        converter.convert({"street": "Main"}, Address)
    error = exc_info.value
    assert isinstance(error.__cause__, ValidationError)
    assert error.target_type is Address
    assert error.details[0]["loc"] == ("zip_code",)
    assert "Address" in error.message


def test_strict_mode_rejects_string_numbers():
    with pytest.raises(ArgumentConversionError):
        PydanticConverter(strict=True).convert("12", int)


def test_from_attributes_reads_objects(converter):
    assert converter.convert(_AddressRow(), Address).zip_code == 12345


def test_from_attributes_can_be_disabled():
    with pytest.raises(ArgumentConversionError):
        PydanticConverter(from_attributes=False).convert(_AddressRow(), Address)


def test_adapter_reused_per_type():
    assert _adapter_for(list[int]) is _adapter_for(list[int])
