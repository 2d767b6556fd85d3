"""
todo-store error types.

Every error raised by the store itself derives from StoreError. Errors
raised by the database engine (sqlalchemy.exc.SQLAlchemyError and the
driver exceptions it wraps) are never caught or re-wrapped — they reach
the caller unchanged.

Two kinds matter to callers:

    value-shape   ValueNotOfTypeError — a result value was not the
                  expected kind (Object, Array, String, i64, bool)
    absence       NoResultError and subclasses, PropertyNotFoundError —
                  a row, result or property that was required is missing

None of them are retryable.
"""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base error for store operations."""


class ValueNotOfTypeError(StoreError):
    """A result value was not of the expected kind."""

    def __init__(self, expected: str, value: Any = None):
        self.expected = expected
        self.value    = value
        super().__init__(f"Value not of type '{expected}'")


class PropertyNotFoundError(StoreError, KeyError):
    """A required property was missing from a result object."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Property '{name}' not found")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return self.args[0]


class NoResultError(StoreError):
    """A statement returned nothing where a result was required."""


class RecordNotFoundError(NoResultError):
    """No record exists for the given identifier."""

    def __init__(self, thing: Any):
        self.thing = thing
        super().__init__(f"No record found for '{thing}'")


class FailToCreateError(NoResultError):
    """A create or update statement returned no record."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Fail to create. Cause: {cause}")


class InvalidThingError(StoreError, ValueError):
    """Text could not be parsed as a table:id record identifier."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid record id '{text}'. Expected '<table>:<id>'.")
