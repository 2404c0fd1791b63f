"""Infrastructure Layer — pydantic conversion, event-loop scheduling, logging.

Invariants:
    - Third-party conversion errors mapped to ArgumentConversionError (core/errors.py)
    - Scheduler lifetime owned explicitly: init_scheduler / shutdown_scheduler
"""
