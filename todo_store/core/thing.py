"""
Record identifiers.

A Thing addresses exactly one record: the table it lives in plus a
unique suffix generated by the engine on insert.

    >>> t = thing("todo:1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed")
    >>> t.table
    'todo'
    >>> str(t)
    'todo:1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed'
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from todo_store.core.errors import InvalidThingError


_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Thing:
    """A table name and a record suffix."""
    table: str
    id:    str

    def __post_init__(self):
        if not _TABLE_RE.match(self.table or "") or not self.id:
            raise InvalidThingError(f"{self.table}:{self.id}")

    @classmethod
    def parse(cls, text: str) -> "Thing":
        """Parse 'table:id'. Only the first colon separates the two parts."""
        if not isinstance(text, str):
            raise InvalidThingError(repr(text))
        table, sep, suffix = text.strip().partition(":")
        if not sep:
            raise InvalidThingError(text)
        try:
            return cls(table, suffix)
        except InvalidThingError:
            raise InvalidThingError(text) from None

    def __str__(self) -> str:
        return f"{self.table}:{self.id}"


def thing(text: str) -> Thing:
    """Shorthand for Thing.parse()."""
    return Thing.parse(text)
