"""
Conversions from engine result values to plain Python types.

The datastore hands back rows as plain Python values:

    dict          Object
    list          Array
    str           String
    int / float   Number
    bool          True / False
    None          no value

Each as_* helper either returns the value as the requested kind or
raises ValueNotOfTypeError naming the kind it expected. The take*
helpers pull one property out of an object, converting it on the way.

    obj = as_object(first(response.result))
    record_id = take_val(obj, "id", as_string)
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from todo_store.core.errors import PropertyNotFoundError, ValueNotOfTypeError
from todo_store.core.thing import Thing

T = TypeVar("T")


# ─────────────────────────────────────────────────────────────
# Value → type
# ─────────────────────────────────────────────────────────────

def as_object(value: Any) -> dict:
    if isinstance(value, dict):
        return value
    raise ValueNotOfTypeError("Object", value)


def as_array(value: Any) -> list:
    if isinstance(value, list):
        return value
    raise ValueNotOfTypeError("Array", value)


def as_int(value: Any) -> int:
    """Numbers convert to int (floats truncate). bool is not a number here."""
    if isinstance(value, bool):
        raise ValueNotOfTypeError("i64", value)
    if isinstance(value, (int, float)):
        return int(value)
    raise ValueNotOfTypeError("i64", value)


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueNotOfTypeError("bool", value)


def as_string(value: Any) -> str:
    """Strings pass through; record identifiers render as 'table:id'."""
    if isinstance(value, str):
        return value
    if isinstance(value, Thing):
        return str(value)
    raise ValueNotOfTypeError("String", value)


def first(value: Any) -> Any:
    """First element of an array result, or None if it is empty.

    Non-array values are already a single value and come back unchanged.
    """
    if isinstance(value, list):
        return value[0] if value else None
    return value


# ─────────────────────────────────────────────────────────────
# Object property extraction
# ─────────────────────────────────────────────────────────────

def take(obj: dict, key: str, convert: Callable[[Any], T]) -> Optional[T]:
    """Remove `key` from `obj` and convert it. None if the key is absent."""
    if key not in obj:
        return None
    return convert(obj.pop(key))


def take_val(obj: dict, key: str, convert: Callable[[Any], T]) -> T:
    """Like take(), but a missing key is an error."""
    val = take(obj, key, convert)
    if val is None:
        raise PropertyNotFoundError(key)
    return val


def take_bool(obj: dict, key: str) -> bool:
    """Remove `key` and report whether it was exactly True."""
    return obj.pop(key, None) is True
