"""Root conftest — shared fixtures for converter, resolver, invoker and scheduler."""

import os

import pytest

# Human-readable logs in test output
os.environ.setdefault("DATAFETCH_LOG_FORMAT", "text")

from datafetch.infrastructure.pydantic_converter import PydanticConverter
from datafetch.infrastructure.scheduler import BackgroundLoopScheduler
from datafetch.services.argument_resolver import ArgumentResolver
from datafetch.services.function_invoker import FunctionInvoker
from datafetch.services.type_coercer import TypeCoercer


@pytest.fixture
def scheduler():
    """A private background loop per test, shut down afterwards."""
    s = BackgroundLoopScheduler("datafetch-test-scheduler").start()
    yield s
    s.shutdown()


@pytest.fixture
def converter():
    return PydanticConverter()


@pytest.fixture
def coercer(converter):
    return TypeCoercer(converter)


@pytest.fixture
def resolver(coercer):
    return ArgumentResolver(coercer)


@pytest.fixture
def invoker(scheduler):
    return FunctionInvoker(scheduler)
