"""
Tests for the datastore facade: target resolution, configuration,
statement splitting and execution against a real in-memory SQLite engine.

Run with: pytest tests/test_datastore.py -v
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from todo_store.config import StoreConfig
from todo_store.core import thing
import todo_store.store.datastore as datastore_module
from todo_store.store.datastore import (
    Datastore, Response, Session, _bind_params, split_statements,
)
from todo_store.store.session import backend_name, resolve_target


# ─────────────────────────────────────────────────────────────
# Targets
# ─────────────────────────────────────────────────────────────

class TestResolveTarget:
    def test_memory(self):
        assert resolve_target("memory") == "sqlite+aiosqlite://"

    def test_file_relative(self):
        assert resolve_target("file://./data/todo.db") == "sqlite+aiosqlite:///./data/todo.db"

    def test_file_absolute(self):
        assert resolve_target("file:///var/lib/todo.db") == "sqlite+aiosqlite:////var/lib/todo.db"

    def test_file_without_path_raises(self):
        with pytest.raises(ValueError):
            resolve_target("file://")

    def test_postgres(self):
        assert resolve_target("postgresql://u:p@db:5432/todo") == "postgresql+asyncpg://u:p@db:5432/todo"
        assert resolve_target("postgres://db/todo") == "postgresql+asyncpg://db/todo"

    def test_async_url_passthrough(self):
        url = "postgresql+asyncpg://db/todo"
        assert resolve_target(url) == url

    def test_unknown_raises(self):
        with pytest.raises(ValueError):
            resolve_target("mysql://db/todo")

    def test_backend_name(self):
        assert backend_name(resolve_target("memory")) == "memory"
        assert backend_name(resolve_target("file://x.db")) == "file"
        assert backend_name(resolve_target("postgresql://db/x")) == "cluster"


# ─────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────

class TestStoreConfig:
    def test_defaults(self, monkeypatch):
        for var in ("TODO_STORE_TARGET", "TODO_STORE_NS", "TODO_STORE_DB", "TODO_STORE_ECHO"):
            monkeypatch.delenv(var, raising=False)
        cfg = StoreConfig.from_env()
        assert cfg.target == "memory"
        assert (cfg.ns, cfg.db) == ("test", "test")
        assert cfg.echo is False

    def test_env(self, monkeypatch):
        monkeypatch.setenv("TODO_STORE_TARGET", "file://./todo.db")
        monkeypatch.setenv("TODO_STORE_NS", "acme")
        monkeypatch.setenv("TODO_STORE_DB", "prod")
        monkeypatch.setenv("TODO_STORE_ECHO", "true")
        cfg = StoreConfig.from_env()
        assert cfg.target == "file://./todo.db"
        assert (cfg.ns, cfg.db) == ("acme", "prod")
        assert cfg.echo is True

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("TODO_STORE_NS", "acme")
        cfg = StoreConfig.from_env(ns="other", db=None)
        assert cfg.ns == "other"

    def test_unknown_target_rejected(self):
        with pytest.raises(ValidationError):
            StoreConfig(target="ftp://nowhere")

    def test_empty_namespace_rejected(self):
        with pytest.raises(ValidationError):
            StoreConfig(ns="")


# ─────────────────────────────────────────────────────────────
# Statement splitting
# ─────────────────────────────────────────────────────────────

class TestSplitStatements:
    def test_single(self):
        assert split_statements("SELECT 1") == ["SELECT 1"]

    def test_multiple(self):
        assert split_statements("SELECT 1; SELECT 2;") == ["SELECT 1", "SELECT 2"]

    def test_semicolon_in_literal(self):
        sql = "UPDATE todo SET body = 'a; b'; SELECT 1"
        assert split_statements(sql) == ["UPDATE todo SET body = 'a; b'", "SELECT 1"]

    def test_escaped_quote(self):
        sql = "SELECT 'it''s; fine'"
        assert split_statements(sql) == [sql]

    def test_blank(self):
        assert split_statements("  ;  ; ") == []


# ─────────────────────────────────────────────────────────────
# Response
# ─────────────────────────────────────────────────────────────

class TestResponse:
    def test_ok(self):
        r = Response(sql="SELECT 1", time=0.0, value=[{"one": 1}])
        assert r.status == "OK"
        assert r.result == [{"one": 1}]

    def test_err_reraises(self):
        err = RuntimeError("boom")
        r = Response(sql="SELECT 1", time=0.0, error=err)
        assert r.status == "ERR"
        with pytest.raises(RuntimeError):
            r.result


# ─────────────────────────────────────────────────────────────
# Execution
# ─────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def ds():
    datastore = await Datastore.new("memory", echo=False)
    yield datastore
    await datastore.close()


@pytest.mark.asyncio
class TestExecute:

    async def test_session_variables_bound(self, ds):
        ses = Session.for_db("acme", "prod")
        res = await ds.execute("SELECT :ns AS ns, :db AS db", ses)
        assert res[0].result == [{"ns": "acme", "db": "prod"}]

    async def test_session_wins_over_vars(self, ds):
        ses = Session.for_db("acme", "prod")
        res = await ds.execute("SELECT :ns AS ns", ses, {"ns": "intruder"})
        assert res[0].result == [{"ns": "acme"}]

    async def test_named_vars(self, ds):
        ses = Session.for_db("test", "test")
        res = await ds.execute("SELECT :a AS a, :b AS b", ses, {"b": 2, "a": 1})
        assert res[0].result == [{"a": 1, "b": 2}]

    async def test_thing_bound_as_text(self, ds):
        ses = Session.for_db("test", "test")
        res = await ds.execute("SELECT :id AS id", ses, {"id": thing("todo:abc")})
        assert res[0].result == [{"id": "todo:abc"}]

    async def test_one_response_per_statement(self, ds):
        ses = Session.for_db("test", "test")
        res = await ds.execute("SELECT 1 AS one; SELECT 2 AS two", ses)
        assert [r.result for r in res] == [[{"one": 1}], [{"two": 2}]]

    async def test_non_row_statement_is_empty_array(self, ds):
        ses = Session.for_db("test", "test")
        res = await ds.execute("DELETE FROM todo WHERE ns = :ns AND db = :db", ses)
        assert res[0].status == "OK"
        assert res[0].result == []

    async def test_failed_statement_does_not_stop_the_rest(self, ds):
        ses = Session.for_db("test", "test")
        res = await ds.execute("SELECT * FROM no_such_table; SELECT 1 AS one", ses)
        assert res[0].status == "ERR"
        with pytest.raises(OperationalError):
            res[0].result
        assert res[1].result == [{"one": 1}]

    async def test_generated_ids_unique(self, ds):
        ses = Session.for_db("test", "test")
        res = await ds.execute("SELECT gen_random_uuid() AS a, gen_random_uuid() AS b", ses)
        row = res[0].result[0]
        assert row["a"] != row["b"]
        assert len(row["a"]) == 36

    async def test_empty_query_raises(self, ds):
        with pytest.raises(ValueError):
            await ds.execute("  ;  ", Session.for_db("test", "test"))

    async def test_timing_recorded(self, ds):
        res = await ds.execute("SELECT 1", Session.for_db("test", "test"))
        assert res[0].time >= 0


# ─────────────────────────────────────────────────────────────
# Bind parameter discovery
# ─────────────────────────────────────────────────────────────

class TestBindParams:
    def test_only_referenced_names(self):
        assert _bind_params("SELECT :a", {"a": 1, "b": 2}) == {"a": 1}

    def test_name_starting_with_digit(self):
        assert _bind_params("SELECT :1st AS v", {"1st": 1}) == {"1st": 1}

    def test_postgres_cast_is_not_a_bind(self):
        assert _bind_params("SELECT id::text FROM todo WHERE id = :id",
                            {"id": "todo:x", "text": "no"}) == {"id": "todo:x"}

    def test_thing_sent_as_text(self):
        assert _bind_params("SELECT :th", {"th": thing("todo:x")}) == {"th": "todo:x"}


# ─────────────────────────────────────────────────────────────
# Lifecycle
# ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
class TestLifecycle:

    async def test_memory_backend_serializes_statements(self, tmp_path):
        memory = await Datastore.new("memory")
        on_disk = await Datastore.new(f"file://{tmp_path / 'todo.db'}")
        try:
            assert memory._lock is not None
            assert on_disk._lock is None
        finally:
            await memory.close()
            await on_disk.close()

    async def test_engine_disposed_when_schema_fails(self, monkeypatch):
        engine = MagicMock()
        engine.dispose = AsyncMock()
        monkeypatch.setattr(datastore_module, "create_store_engine", lambda target, echo=None: engine)
        monkeypatch.setattr(datastore_module, "create_tables",
                            AsyncMock(side_effect=OperationalError("CREATE TABLE", {}, Exception("unreachable"))))

        with pytest.raises(OperationalError):
            await Datastore.new("memory")
        engine.dispose.assert_awaited_once()
