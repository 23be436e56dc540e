"""SQLAlchemy table metadata for the logbook document store."""

from __future__ import annotations

from sqlalchemy import JSON, Column, Enum, Index, Integer, MetaData, String, Table

from guild_logbook.domain.types import EntityKind

metadata = MetaData()

entity_document_table = Table(
    "entity_document",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", Enum(EntityKind, native_enum=False, length=32), nullable=False),
    Column("entity_id", String, nullable=False),
    Column("position", Integer, nullable=False),
    Column("body", JSON, nullable=False),
    Index("ix_entity_document_kind_entity_id", "kind", "entity_id"),
)

app_option_table = Table(
    "app_option",
    metadata,
    Column("key", String, primary_key=True),
    Column("value", JSON, nullable=True),
)

