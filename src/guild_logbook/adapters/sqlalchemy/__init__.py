"""SQLAlchemy adapter package for the Guild Logbook."""

from __future__ import annotations

from .mappings import app_option_table, entity_document_table, metadata
from .repositories import SqlAlchemyEntityDocumentRepository, SqlAlchemyOptionRepository
from .store import SqlAlchemyCollectionStore
from .unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyCollectionStore",
    "SqlAlchemyEntityDocumentRepository",
    "SqlAlchemyOptionRepository",
    "SqlAlchemyUnitOfWork",
    "app_option_table",
    "entity_document_table",
    "metadata",
    "shutdown",
    "startup",
]
