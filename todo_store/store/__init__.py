"""
todo-store persistence layer.

The store package manages all database access. Nothing outside this
package writes SQL directly.

    from todo_store.store import TodoStore, Datastore, Session

TodoStore is what application code uses. Datastore and Session are the
engine handles it holds — one engine per target, one namespace/database
pair per session.
"""

from todo_store.store.datastore import (
    Datastore,
    Response,
    Session,
    split_statements,
)
from todo_store.store.repo import TodoStore
from todo_store.store.session import (
    create_store_engine,
    create_tables,
    drop_tables,
    resolve_target,
)

__all__ = [
    "TodoStore", "Datastore", "Session", "Response", "split_statements",
    "create_store_engine", "create_tables", "drop_tables",
    "resolve_target",
]
