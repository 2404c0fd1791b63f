"""Error Hierarchy — typed, categorized exceptions for binding and invocation failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_graphql_error() produces the {"message", "extensions"} error envelope
    - InvocationTargetError is a call-layer wrapper; callers of a data fetcher
      never observe it (unwrap_invocation_error strips it)
    - A receiver that cannot be bound is not an error: the fetcher returns None

Design Decisions:
    - Single hierarchy with DataFetchError base: callers catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BINDING = "binding"
    DESCRIPTOR = "descriptor"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    field_name: str | None = None
    function_name: str | None = None
    parameter_name: str | None = None
    debug_info: dict[str, Any] | None = None


class DataFetchError(Exception):
    """Base exception for all datafetch errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_graphql_error(self) -> dict:
        """Convert to a GraphQL-style error entry."""
        return {
            "message": self.message,
            "extensions": {
                "code": self.code,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "field_name": self.context.field_name,
                "function_name": self.context.function_name,
                "parameter_name": self.context.parameter_name,
            },
        }


# ─── Binding Errors ─────────────────────────────────────────────

class ArgumentConversionError(DataFetchError):
    """A raw argument value could not be converted to the declared type."""
    def __init__(
        self,
        message: str,
        target_type: Any,
        details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "ARGUMENT_CONVERSION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.target_type = target_type
        self.details = details or []


class MissingArgumentError(DataFetchError):
    """A required argument was not supplied and the function declares no default."""
    def __init__(self, parameter_names: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Missing required argument(s): {', '.join(parameter_names)}",
            "MISSING_ARGUMENT", ErrorCategory.BINDING,
            ErrorSeverity.ERROR, context,
        )
        self.parameter_names = parameter_names


# ─── Registration Errors ────────────────────────────────────────

class DescriptorError(DataFetchError):
    """A function cannot be described or registered as a data fetcher."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_FUNCTION", ErrorCategory.DESCRIPTOR,
            ErrorSeverity.ERROR, context,
        )


class UnknownFieldError(DataFetchError):
    """No data fetcher is registered under the requested field name."""
    def __init__(self, field_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        super().__init__(
            f"Field '{field_name}' has no registered data fetcher",
            "UNKNOWN_FIELD", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx,
        )


# ─── Invocation Errors ──────────────────────────────────────────

class InvocationTargetError(DataFetchError):
    """Call-layer wrapper around an exception raised by the invoked function."""
    def __init__(self, function_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.function_name = function_name
        super().__init__(
            f"Function '{function_name}' raised an exception",
            "INVOCATION_TARGET_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, ctx,
        )


class SchedulerNotRunningError(DataFetchError):
    """A coroutine was submitted to a scheduler that cannot run it."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SCHEDULER_NOT_RUNNING", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )


def unwrap_invocation_error(exc: BaseException) -> BaseException:
    """Return the function's own exception if exc is the call-layer wrapper."""
    if isinstance(exc, InvocationTargetError) and exc.__cause__ is not None:
        return exc.__cause__
    return exc
