"""
todo-store engine management.

Turns a connection target string into a SQLAlchemy async engine.
Three backends:

    memory                       volatile, in-process (SQLite :memory:)
    file://path/to/todo.db       on-disk SQLite file
    postgresql://user@host/db    networked cluster (asyncpg)

A full async SQLAlchemy URL (sqlite+aiosqlite://..., postgresql+asyncpg://...)
is also accepted and used as is.

Configuration is via environment variables or an explicit target:

    TODO_STORE_TARGET=file://./data/todo.db
    TODO_STORE_ECHO=1                         # log every SQL statement
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from todo_store.config import get_echo, get_target
from todo_store.store.models import Base

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Target helpers
# ─────────────────────────────────────────────────────────────

MEMORY_URL = "sqlite+aiosqlite://"

_ASYNC_PREFIXES = ("sqlite+aiosqlite://", "postgresql+asyncpg://")


def resolve_target(target: str) -> str:
    """Map a connection target to an async SQLAlchemy URL.

    Raises ValueError for anything that is not one of the three backends.
    """
    target = target.strip()

    if target in ("memory", "mem://"):
        return MEMORY_URL

    if target.startswith("file://"):
        path = target[len("file://"):]
        if not path:
            raise ValueError("file:// target needs a path, e.g. file://./todo.db")
        return f"sqlite+aiosqlite:///{path}"

    for scheme in ("postgresql://", "postgres://"):
        if target.startswith(scheme):
            return "postgresql+asyncpg://" + target[len(scheme):]

    if target.startswith(_ASYNC_PREFIXES):
        return target

    raise ValueError(
        f"Unknown connection target '{target}'. Expected 'memory', "
        f"'file://<path>' or 'postgresql://...'."
    )


def backend_name(url: str) -> str:
    """Short label for logging: memory, file or cluster."""
    if url == MEMORY_URL or url.endswith(":memory:"):
        return "memory"
    if url.startswith("sqlite"):
        return "file"
    return "cluster"


# ─────────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────────

def _random_uuid() -> str:
    return str(uuid.uuid4())


def _register_sqlite_functions(dbapi_conn, connection_record) -> None:
    # PostgreSQL ships gen_random_uuid(); SQLite needs it registered.
    dbapi_conn.create_function("gen_random_uuid", 0, _random_uuid)


def create_store_engine(
    target: str | None = None,
    *,
    echo: bool | None = None,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> AsyncEngine:
    """Build an async engine for a connection target.

    Args:
        target:       Connection target. Defaults to TODO_STORE_TARGET.
        echo:         Log all SQL statements. Defaults to TODO_STORE_ECHO.
        pool_size:    Connection pool size (cluster backend only).
        max_overflow: Extra connections beyond pool_size (cluster backend only).
    """
    url = resolve_target(target or get_target())
    if echo is None:
        echo = get_echo()

    logger.debug(f"Creating engine for {backend_name(url)} backend")

    if url.startswith("sqlite"):
        if backend_name(url) == "memory":
            # One shared connection, otherwise each checkout gets an empty db
            engine = create_async_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            db_path = Path(url.split(":///", 1)[1])
            db_path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_async_engine(url, echo=echo)
        event.listen(engine.sync_engine, "connect", _register_sqlite_functions)
    else:
        engine = create_async_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
        )

    return engine


# ─────────────────────────────────────────────────────────────
# Schema management
# ─────────────────────────────────────────────────────────────

async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables if they don't exist. Safe to run on every open."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all tables. Destructive — use only in tests."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
