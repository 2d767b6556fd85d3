"""
todo-store configuration.

All settings come from environment variables, with defaults that give a
working in-memory store:

    TODO_STORE_TARGET     connection target (default: memory)
    TODO_STORE_NS         namespace        (default: test)
    TODO_STORE_DB         database         (default: test)
    TODO_STORE_ECHO       log all SQL when 1/true
    TODO_STORE_LOG_LEVEL  logging level for the demo (default: INFO)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator


DEFAULT_TARGET = "memory"
DEFAULT_NS     = "test"
DEFAULT_DB     = "test"


def get_target() -> str:
    """Return the connection target from env or default."""
    return os.environ.get("TODO_STORE_TARGET", DEFAULT_TARGET)


def get_echo() -> bool:
    return os.environ.get("TODO_STORE_ECHO", "").lower() in ("1", "true", "yes")


def get_log_level() -> str:
    return os.environ.get("TODO_STORE_LOG_LEVEL", "INFO").upper()


class StoreConfig(BaseModel):
    """Where to connect and which namespace/database to scope statements to."""
    target: str  = Field(default=DEFAULT_TARGET, description="memory, file://<path> or postgresql://...")
    ns:     str  = Field(default=DEFAULT_NS, min_length=1, description="Namespace")
    db:     str  = Field(default=DEFAULT_DB, min_length=1, description="Database name")
    echo:   bool = Field(default=False, description="Log every SQL statement")

    @field_validator("target")
    @classmethod
    def _known_target(cls, v: str) -> str:
        from todo_store.store.session import resolve_target
        resolve_target(v)   # raises ValueError for unknown targets
        return v

    @classmethod
    def from_env(cls, **overrides) -> "StoreConfig":
        """Read the environment, then apply any non-None overrides."""
        values = {
            "target": get_target(),
            "ns":     os.environ.get("TODO_STORE_NS", DEFAULT_NS),
            "db":     os.environ.get("TODO_STORE_DB", DEFAULT_DB),
            "echo":   get_echo(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
