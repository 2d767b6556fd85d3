"""
todo-store — calling an embedded database from async Python.

    from todo_store import TodoStore

    store = await TodoStore.new("memory", ns="test", db="test")
    todo_id = await store.create()
    print(await store.get(todo_id))

See todo_store.demo for the full walkthrough.
"""

from todo_store.core import (
    FailToCreateError,
    InvalidThingError,
    NoResultError,
    PropertyNotFoundError,
    RecordNotFoundError,
    StoreError,
    Thing,
    ValueNotOfTypeError,
    thing,
)
from todo_store.config import StoreConfig
from todo_store.store import Datastore, Response, Session, TodoStore

__version__ = "0.1.0"

__all__ = [
    "TodoStore", "Datastore", "Session", "Response", "StoreConfig",
    "Thing", "thing",
    "StoreError", "ValueNotOfTypeError", "PropertyNotFoundError",
    "NoResultError", "RecordNotFoundError", "FailToCreateError",
    "InvalidThingError",
]
