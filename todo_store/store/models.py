"""
todo-store database schema.

Table design:

  1. Record ids are full identifiers ("todo:<uuid>") generated by the
     engine at insert time. The suffix comes from gen_random_uuid() —
     native on PostgreSQL, registered as a SQL function on SQLite
     connections by store.session.

  2. Every row carries the namespace and database of the session that
     wrote it. Statements filter on both, so sessions with different
     ns/db pairs never see each other's records.

  3. No migrations. The table is created on first open if it does not
     exist (store.session.create_tables).

Schema overview:

  todo    — ns, db, id, title, body
"""

from __future__ import annotations

from sqlalchemy import Column, Index, PrimaryKeyConstraint, String, Text
from sqlalchemy.orm import DeclarativeBase


# ─────────────────────────────────────────────────────────────
# Base
# ─────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


# ─────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────

class DBTodo(Base):
    """A todo record.

    ns, db — session scope the record belongs to.
    id     — "todo:<uuid>". Stable for the lifetime of the record.
    title, body — free text. Either may be NULL.
    """
    __tablename__ = "todo"

    ns    = Column(String(128), nullable=False)
    db    = Column(String(128), nullable=False)
    id    = Column(String(256), nullable=False)
    title = Column(Text)
    body  = Column(Text)

    __table_args__ = (
        PrimaryKeyConstraint("ns", "db", "id", name="pk_todo"),
        Index("ix_todo_scope", "ns", "db"),
    )

    def __repr__(self) -> str:
        return f"<DBTodo {self.id!r} ns={self.ns!r} db={self.db!r}>"
