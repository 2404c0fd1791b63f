"""Domain Types — enums shared by descriptors, inputs and the invoker.

Invariants:
    - All parameter kinds, execution kinds and input states encoded as Enums
    - str Enums: values appear verbatim in structured log records

Design Decisions:
    - ExecutionKind resolved once per function when its descriptor is built,
      so the invocation path is a single branch
"""

from enum import Enum


class ParameterKind(str, Enum):
    """How a formal parameter receives its value."""
    ORDINARY = "ordinary"          # read from the environment arguments
    CONTEXT = "context"            # bound to environment.get_context()
    ENVIRONMENT = "environment"    # bound to the environment itself
    RECEIVER = "receiver"          # bound to the invocation target (self)


class ExecutionKind(str, Enum):
    """Whether a function runs inline or is scheduled as a coroutine."""
    BLOCKING = "blocking"
    SUSPENDING = "suspending"


class InputState(str, Enum):
    """The three states of an OptionalInput."""
    ABSENT = "absent"
    NULL = "null"
    PRESENT = "present"
