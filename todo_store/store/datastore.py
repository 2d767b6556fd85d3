"""
todo-store datastore.

A thin facade over a SQLAlchemy async engine that executes literal
query text under a Session and returns one Response per statement.

    ds  = await Datastore.new("memory")
    ses = Session.for_db("test", "test")

    responses = await ds.execute(
        "SELECT * FROM todo WHERE ns = :ns AND db = :db AND id = :id",
        ses,
        {"id": thing("todo:abc")},
    )
    rows = responses[0].result      # raises the engine error, if any

Parameters are bound by name (`:name` in the text, `name` in the
mapping). The session's namespace and database are always bound as
`:ns` and `:db`; caller variables cannot override them.

Each statement runs in its own transaction. A failing statement does
not stop the ones after it — its error is held on its Response and
raised when the caller reads Response.result.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import StaticPool

from todo_store.core.thing import Thing
from todo_store.config import get_target
from todo_store.store.session import (
    backend_name,
    create_store_engine,
    create_tables,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Session:
    """Namespace + database context every statement runs under."""
    ns: str
    db: str

    @classmethod
    def for_db(cls, ns: str, db: str) -> "Session":
        return cls(ns=ns, db=db)

    def variables(self) -> dict[str, str]:
        return {"ns": self.ns, "db": self.db}


# ─────────────────────────────────────────────────────────────
# Response
# ─────────────────────────────────────────────────────────────

@dataclass
class Response:
    """Outcome of one statement.

    sql   — the statement text
    time  — wall-clock seconds spent executing it
    """
    sql:   str
    time:  float
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def status(self) -> str:
        return "ERR" if self.error is not None else "OK"

    @property
    def result(self) -> Any:
        """The statement's value. Re-raises the engine error if it failed."""
        if self.error is not None:
            raise self.error
        return self.value


# ─────────────────────────────────────────────────────────────
# Query text helpers
# ─────────────────────────────────────────────────────────────

# Same grammar sqlalchemy.text() uses to find bind parameters
_BIND_RE = re.compile(r"(?<![:\w\\]):(\w+)(?!:)")


def split_statements(sql: str) -> list[str]:
    """Split query text on semicolons that are not inside quotes."""
    statements: list[str] = []
    current: list[str] = []
    quote: str | None = None

    for ch in sql:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            statements.append("".join(current))
            current = []
            continue
        current.append(ch)
    statements.append("".join(current))

    return [s.strip() for s in statements if s.strip()]


def _bind_value(value: Any) -> Any:
    if isinstance(value, Thing):
        return str(value)
    return value


def _bind_params(sql: str, params: Mapping[str, Any]) -> dict[str, Any]:
    """The subset of params the statement actually references."""
    names = set(_BIND_RE.findall(sql))
    return {k: _bind_value(v) for k, v in params.items() if k in names}


# ─────────────────────────────────────────────────────────────
# Datastore
# ─────────────────────────────────────────────────────────────

class Datastore:
    """Executes query text against one engine.

    Build with Datastore.new(target) to resolve the target, create the
    schema and log the backend in one step. The engine is shared by all
    callers; concurrent execute() calls are fine.

    The memory backend has a single shared connection (StaticPool), so
    statements against it are serialized with a lock; otherwise two
    transactions would interleave on that one connection.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._lock: asyncio.Lock | None = None
        if isinstance(engine.sync_engine.pool, StaticPool):
            self._lock = asyncio.Lock()

    @classmethod
    async def new(
        cls,
        target: str | None = None,
        *,
        echo: bool | None = None,
    ) -> "Datastore":
        target = target or get_target()
        engine = create_store_engine(target, echo=echo)
        try:
            await create_tables(engine)
        except Exception:
            await engine.dispose()
            raise
        logger.info(
            f"Datastore opened: {backend_name(str(engine.url))} backend "
            f"({engine.url.render_as_string(hide_password=True)})"
        )
        return cls(engine)

    async def execute(
        self,
        sql: str,
        session: Session,
        vars: Mapping[str, Any] | None = None,
    ) -> list[Response]:
        """Run every statement in `sql`, in order, under `session`.

        Raises ValueError if the text holds no statement. Engine errors
        are carried on the returned Responses, never raised here.
        """
        statements = split_statements(sql)
        if not statements:
            raise ValueError("Query text contains no statement.")

        params = dict(vars or {})
        params.update(session.variables())

        return [await self._run(stmt, params) for stmt in statements]

    async def _run(self, sql: str, params: Mapping[str, Any]) -> Response:
        bound = _bind_params(sql, params)
        logger.debug(f"execute: {sql} {bound}")

        started = time.perf_counter()
        try:
            async with self._lock or nullcontext():
                async with self.engine.begin() as conn:
                    result = await conn.execute(text(sql), bound)
                    if result.returns_rows:
                        value = [dict(row) for row in result.mappings().all()]
                    else:
                        value = []
        except SQLAlchemyError as exc:
            elapsed = time.perf_counter() - started
            logger.warning(f"Statement failed after {elapsed:.4f}s: {sql} — {exc}")
            return Response(sql=sql, time=elapsed, error=exc)

        return Response(sql=sql, time=time.perf_counter() - started, value=value)

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Datastore closed.")

    async def __aenter__(self) -> "Datastore":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
