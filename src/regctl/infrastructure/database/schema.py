"""SQLAlchemy Core table definitions for the SQLite backend.

Two tables mirror the snapshot: ``register_counters`` (one row per
``"<CLASSIFICATION>:<year>"`` key) and ``letters`` (one row per record,
``position`` preserving newest-first ledger order).
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

register_counters = Table(
    "register_counters",
    metadata,
    Column("key", Text, primary_key=True),
    Column("last_value", Integer, nullable=False, default=0),
    CheckConstraint("last_value >= 0", name="ck_register_counters_non_negative"),
)

letters = Table(
    "letters",
    metadata,
    Column("id", Text, primary_key=True),
    Column("position", Integer, nullable=False),
    Column("classification", Text, nullable=False),
    Column("letter_date", Text, nullable=False),
    Column("year", Integer, nullable=False),
    Column("register_no", Integer, nullable=False),
    Column("register_display", Text, nullable=False),
    Column("subject", Text, nullable=False),
    Column("party", Text, nullable=False, default=""),
    Column("status", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

Index("ix_letters_position", letters.c.position)
Index("ix_letters_series", letters.c.classification, letters.c.year, letters.c.register_no)

LETTER_FIELDS: tuple[str, ...] = tuple(c.name for c in letters.columns if c.name != "position")
