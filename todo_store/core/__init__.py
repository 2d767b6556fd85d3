"""
todo-store core types.

    from todo_store.core import (
        # Identifiers
        Thing, thing,
        # Value conversions
        as_object, as_array, as_int, as_bool, as_string, first,
        take, take_val, take_bool,
        # Errors
        StoreError, ValueNotOfTypeError, PropertyNotFoundError,
        NoResultError, RecordNotFoundError, FailToCreateError,
        InvalidThingError,
    )
"""

from todo_store.core.errors import (
    FailToCreateError,
    InvalidThingError,
    NoResultError,
    PropertyNotFoundError,
    RecordNotFoundError,
    StoreError,
    ValueNotOfTypeError,
)
from todo_store.core.thing import Thing, thing
from todo_store.core.values import (
    as_array,
    as_bool,
    as_int,
    as_object,
    as_string,
    first,
    take,
    take_bool,
    take_val,
)

__all__ = [
    # Identifiers
    "Thing", "thing",
    # Value conversions
    "as_object", "as_array", "as_int", "as_bool", "as_string", "first",
    "take", "take_val", "take_bool",
    # Errors
    "StoreError", "ValueNotOfTypeError", "PropertyNotFoundError",
    "NoResultError", "RecordNotFoundError", "FailToCreateError",
    "InvalidThingError",
]
