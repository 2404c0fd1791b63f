"""Function Data Fetcher — tests for the invoke(target, environment) operation.

Tests cover:
    - Receiver bound from explicit target, else environment source
    - No target and no source → None, function never called (fail-closed)
    - Omitted arguments fall back to the function's defaults
    - Required argument missing → MissingArgumentError, function never called
    - Conversion failure propagates, function never called
    - Blocking and suspending functions give the same value for the same input
    - Function errors surface unwrapped on both paths
"""

import logging

import pytest

from datafetch.core.environment import FetchContext, FetchEnvironment
from datafetch.core.errors import ArgumentConversionError, MissingArgumentError
from datafetch.core.optional_input import OptionalInput
from datafetch.services.function_data_fetcher import FunctionDataFetcher


class OrderNotFound(Exception):
    pass


class ShopContext(FetchContext):
    def __init__(self, currency: str):
        self.currency = currency


class Order:
    def __init__(self, order_id: int):
        self.order_id = order_id
        self.calls = 0

    def total(self, discount: int = 0, context: ShopContext = None) -> str:
        self.calls += 1
        return f"{100 - discount} {context.currency if context else 'USD'}"

    async def total_async(self, discount: int = 0, context: ShopContext = None) -> str:
        self.calls += 1
        return f"{100 - discount} {context.currency if context else 'USD'}"

    def line(self, index: int) -> str:
        self.calls += 1
        return f"line-{index}"

    def note(self, text: OptionalInput[str]) -> str:
        return "unchanged" if text.is_absent else f"note={text.value}"

    def missing(self) -> str:
        raise OrderNotFound(str(self.order_id))

    async def missing_async(self) -> str:
        raise OrderNotFound(str(self.order_id))


def top_level_tags(prefix: str, tags: list[str]) -> list[str]:
    return [prefix + t for t in tags]


@pytest.fixture
def fetcher_for(resolver, invoker):
    def _make(fn, target=None):
        return FunctionDataFetcher(fn, target=target, resolver=resolver, invoker=invoker)
    return _make


# ─── receiver binding ────────────────────────────────────────────

def test_receiver_from_explicit_target(fetcher_for):
    order = Order(1)
    assert fetcher_for(Order.total, target=order).get(FetchEnvironment()) == "100 USD"
    assert order.calls == 1


def test_receiver_from_environment_source(fetcher_for):
    order = Order(2)
    result = fetcher_for(Order.total).get(FetchEnvironment(source=order))
    assert result == "100 USD"
    assert order.calls == 1


def test_explicit_target_wins_over_source(fetcher_for):
    target, source = Order(1), Order(2)
    fetcher_for(Order.total).invoke(target, FetchEnvironment(source=source))
    assert (target.calls, source.calls) == (1, 0)


def test_no_target_and_null_source_returns_none(fetcher_for, caplog):
    with caplog.at_level(logging.DEBUG, logger="datafetch"):
        result = fetcher_for(Order.total).get(FetchEnvironment(source=None))
    assert result is None
    assert any("returning None" in r.getMessage() for r in caplog.records)


def test_no_target_skips_resolution(fetcher_for):
    # a malformed argument would fail conversion if resolution happened
    result = fetcher_for(Order.line).get(FetchEnvironment(arguments={"index": "x"}))
    assert result is None


def test_function_without_receiver_needs_no_target(fetcher_for):
    env = FetchEnvironment(arguments={"prefix": "#", "tags": ["a", "b"]})
    assert fetcher_for(top_level_tags).get(env) == ["#a", "#b"]


# ─── arguments ───────────────────────────────────────────────────

def test_omitted_argument_uses_function_default(fetcher_for):
    env = FetchEnvironment(source=Order(1), context=ShopContext("EUR"))
    assert fetcher_for(Order.total).get(env) == "100 EUR"


def test_supplied_argument_is_converted(fetcher_for):
    env = FetchEnvironment(arguments={"discount": "15"}, source=Order(1))
    assert fetcher_for(Order.total).get(env) == "85 USD"


def test_optional_input_absent_reaches_function(fetcher_for):
    assert fetcher_for(Order.note).get(FetchEnvironment(source=Order(1))) == "unchanged"
    env = FetchEnvironment(arguments={"text": None}, source=Order(1))
    assert fetcher_for(Order.note).get(env) == "note=None"


def test_missing_required_argument_raises(fetcher_for):
    order = Order(1)
    with pytest.raises(MissingArgumentError) as exc_info:
        fetcher_for(Order.line).get(FetchEnvironment(source=order))
    assert exc_info.value.parameter_names == ["index"]
    assert exc_info.value.context.function_name == "line"
    assert order.calls == 0


def test_conversion_failure_propagates_without_invoking(fetcher_for):
    order = Order(1)
    env = FetchEnvironment(
        arguments={"index": "first"}, source=order, field_name="orderLine",
    )
    with pytest.raises(ArgumentConversionError) as exc_info:
        fetcher_for(Order.line).get(env)
    assert exc_info.value.context.parameter_name == "index"
    assert exc_info.value.context.field_name == "orderLine"
    assert order.calls == 0


# ─── blocking vs suspending ──────────────────────────────────────

@pytest.mark.parametrize("arguments", [{}, {"discount": 5}, {"discount": "40"}])
def test_suspending_matches_blocking(fetcher_for, arguments):
    env = FetchEnvironment(arguments=arguments, source=Order(1), context=ShopContext("GBP"))
    blocking = fetcher_for(Order.total).get(env)
    future = fetcher_for(Order.total_async).get(env)
    assert future.result(timeout=5) == blocking


def test_blocking_error_surfaces_unwrapped(fetcher_for):
    with pytest.raises(OrderNotFound, match="7"):
        fetcher_for(Order.missing).get(FetchEnvironment(source=Order(7)))


def test_suspending_error_surfaces_unwrapped(fetcher_for):
    future = fetcher_for(Order.missing_async).get(FetchEnvironment(source=Order(8)))
    with pytest.raises(OrderNotFound, match="8"):
        future.result(timeout=5)
