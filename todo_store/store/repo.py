"""
todo-store repository layer.

TodoStore is the data-access object: one Datastore, one Session, and
five operations that each send a fixed query to the engine and unwrap
the first row of the first statement's result.

    async with await TodoStore.new("memory") as store:
        todo_id = await store.create()           # "todo:<uuid>"
        record  = await store.get(todo_id)        # {"id", "title", "body"}
        await store.update(todo_id)
        await store.delete(todo_id)
        records = await store.get_list()

Errors:
    ValueNotOfTypeError    a result had the wrong shape
    RecordNotFoundError    get() found nothing for the id
    FailToCreateError      create()/update() returned no record
    PropertyNotFoundError  a returned record had no id
    InvalidThingError      the id passed in is not "<table>:<id>"

Engine errors (sqlalchemy.exc.*) propagate unchanged.
"""

from __future__ import annotations

import logging

from todo_store.config import StoreConfig
from todo_store.core.errors import FailToCreateError, RecordNotFoundError
from todo_store.core.thing import thing
from todo_store.core.values import (
    as_array,
    as_object,
    as_string,
    first,
    take_val,
)
from todo_store.store.datastore import Datastore, Response, Session

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────

SQL_CREATE = (
    "INSERT INTO todo (ns, db, id, title, body) "
    "VALUES (:ns, :db, 'todo:' || CAST(gen_random_uuid() AS TEXT), "
    "'Hello, world!', 'Hello, SurrealDB with Rust!') "
    "RETURNING id"
)

SQL_GET = (
    "SELECT id, title, body FROM todo "
    "WHERE ns = :ns AND db = :db AND id = :id"
)

SQL_UPDATE = (
    "UPDATE todo SET body = 'An Updated message!', title = 'Updated!' "
    "WHERE ns = :ns AND db = :db AND id = :th "
    "RETURNING id"
)

SQL_DELETE = "DELETE FROM todo WHERE ns = :ns AND db = :db AND id = :th"

SQL_LIST = "SELECT id, title, body FROM todo WHERE ns = :ns AND db = :db"


def _first_response(responses: list[Response]) -> Response:
    # execute() returns one Response per statement and never an empty list
    return responses[0]


# ─────────────────────────────────────────────────────────────
# Todo Repository
# ─────────────────────────────────────────────────────────────

class TodoStore:
    """Create, read, update, delete and list todo records."""

    def __init__(self, ds: Datastore, ses: Session):
        self.ds  = ds
        self.ses = ses

    @classmethod
    async def new(
        cls,
        target: str | None = None,
        ns: str | None = None,
        db: str | None = None,
    ) -> "TodoStore":
        """Open a datastore and session. Unset arguments come from the environment."""
        config = StoreConfig.from_env(target=target, ns=ns, db=db)
        ds  = await Datastore.new(config.target, echo=config.echo)
        ses = Session.for_db(config.ns, config.db)
        return cls(ds, ses)

    async def create(self) -> str:
        """Insert the sample record. Returns its id."""
        res = await self.ds.execute(SQL_CREATE, self.ses)

        first_val = first(_first_response(res).result)

        if first_val is None:
            raise FailToCreateError("exec_create, nothing returned.")

        obj = as_object(first_val)
        record_id = take_val(obj, "id", as_string)
        logger.debug(f"created {record_id}")
        return record_id

    async def get(self, uid: str) -> dict:
        """Fetch one record as a dict of its fields."""
        th = thing(uid)
        res = await self.ds.execute(SQL_GET, self.ses, {"id": th})

        row = first(_first_response(res).result)
        if row is None:
            raise RecordNotFoundError(th)
        return as_object(row)

    async def update(self, tid: str) -> str:
        """Merge the updated title and body into a record. Returns its id."""
        th = thing(tid)
        res = await self.ds.execute(SQL_UPDATE, self.ses, {"th": th})

        result = first(_first_response(res).result)
        if result is None:
            raise FailToCreateError(f"exec_merge {tid}, nothing returned.")

        obj = as_object(result)
        return take_val(obj, "id", as_string)

    async def delete(self, tid: str) -> str:
        """Delete a record. Returns its id in canonical "table:id" form."""
        th = thing(tid)
        res = await self.ds.execute(SQL_DELETE, self.ses, {"th": th})

        _first_response(res).result   # raises the engine error, if any
        return str(th)

    async def get_list(self) -> list[dict]:
        """Every record in the session's namespace and database."""
        res = await self.ds.execute(SQL_LIST, self.ses)

        array = as_array(_first_response(res).result)
        return [as_object(value) for value in array]

    list_all = get_list

    # ── Lifecycle ─────────────────────────────────────────────

    async def close(self) -> None:
        await self.ds.close()

    async def __aenter__(self) -> "TodoStore":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
