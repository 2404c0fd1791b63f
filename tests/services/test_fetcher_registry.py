"""Fetcher Registry — integration tests: optional inputs end to end through registered fields.

Tests cover:
    - Optional scalar / object arguments: not specified, null, value
    - Input objects with optional scalar / object fields
    - Deeply nested optional fields keep independent states
    - Unknown field → UnknownFieldError, duplicate registration → DescriptorError
"""

import pytest

from datafetch.core.environment import FetchEnvironment
from datafetch.core.errors import DescriptorError, UnknownFieldError
from datafetch.services.fetcher_registry import FetcherRegistry

from tests.services.sample_queries import QUERY_FIELDS, OptionalInputQuery


@pytest.fixture
def registry(resolver, invoker):
    reg = FetcherRegistry(resolver=resolver, invoker=invoker)
    query = OptionalInputQuery()
    for field_name, fn in QUERY_FIELDS.items():
        reg.register(field_name, fn, target=query)
    return reg


OPTIONAL_INPUT_CASES = [
    ("optionalScalarInput", {}, "input scalar was not specified"),
    ("optionalScalarInput", {"input": None}, "input scalar value: null"),
    ("optionalScalarInput", {"input": "ABC"}, "input scalar value: ABC"),
    ("optionalObjectInput", {}, "input object was not specified"),
    ("optionalObjectInput", {"input": None}, "input object value: null"),
    (
        "optionalObjectInput", {"input": {"id": 1, "name": "ABC"}},
        "input object value: SimpleArgument(id=1, name='ABC')",
    ),
    (
        "inputWithOptionalScalarValues", {"input": {"required": "ABC"}},
        "argument with optional scalar was not specified",
    ),
    (
        "inputWithOptionalScalarValues", {"input": {"required": "ABC", "optional": None}},
        "argument scalar value: null",
    ),
    (
        "inputWithOptionalScalarValues", {"input": {"required": "ABC", "optional": 1}},
        "argument scalar value: 1",
    ),
    (
        "inputWithOptionalValues", {"input": {"required": "ABC"}},
        "argument with optional object was not specified",
    ),
    (
        "inputWithOptionalValues", {"input": {"required": "ABC", "optional": None}},
        "argument object value: null",
    ),
    (
        "inputWithOptionalValues",
        {"input": {"required": "ABC", "optional": {"id": 1, "name": "XYZ"}}},
        "argument object value: SimpleArgument(id=1, name='XYZ')",
    ),
    (
        "inputWithNestedOptionalValues",
        {"input": {"optional": {"nested_optional_scalar": "ABC", "nested_optional_int": None}}},
        "HasNestedOptionalArguments(optional=Present(value=DeeplyNestedArguments("
        "nested_optional=Absent, nested_optional_scalar=Present(value='ABC'), "
        "nested_optional_int=PresentNull)), optional_scalar=Absent)",
    ),
]


@pytest.mark.parametrize("field_name,arguments,expected", OPTIONAL_INPUT_CASES)
def test_optional_arguments_deserialized(registry, field_name, arguments, expected):
    env = FetchEnvironment(arguments=arguments, field_name=field_name)
    assert registry.fetch(field_name, env) == expected


# ─── registration ────────────────────────────────────────────────

def test_registry_lists_registered_fields(registry):
    assert len(registry) == len(QUERY_FIELDS)
    assert registry.field_names == list(QUERY_FIELDS)
    assert "optionalScalarInput" in registry
    assert "unknown" not in registry


def test_registered_fetcher_is_described_once(registry):
    fetcher = registry.get_fetcher("optionalScalarInput")
    assert fetcher.function.name == "OptionalInputQuery.optional_scalar_input"
    assert fetcher.field_name == "optionalScalarInput"
    assert registry.get_fetcher("optionalScalarInput") is fetcher


def test_unknown_field_raises(registry):
    with pytest.raises(UnknownFieldError) as exc_info:
        registry.fetch("doesNotExist", FetchEnvironment())
    assert exc_info.value.code == "UNKNOWN_FIELD"


def test_duplicate_registration_rejected(registry):
    with pytest.raises(DescriptorError):
        registry.register("optionalScalarInput", OptionalInputQuery.optional_scalar_input)


def test_source_used_when_registered_without_target(resolver, invoker):
    reg = FetcherRegistry(resolver=resolver, invoker=invoker)
    reg.register("optionalScalarInput", OptionalInputQuery.optional_scalar_input)
    env = FetchEnvironment(arguments={"input": "X"}, source=OptionalInputQuery())
    assert reg.fetch("optionalScalarInput", env) == "input scalar value: X"
    assert reg.fetch("optionalScalarInput", FetchEnvironment()) is None
