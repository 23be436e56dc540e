"""Ports implemented by adapters and driving collaborators."""

from __future__ import annotations

from .persistence import CollectionStore, EntityDocumentRepository, OptionRepository
from .review import ReviewMerge
from .unit_of_work import LogbookRepositories, UnitOfWork

__all__ = [
    "CollectionStore",
    "EntityDocumentRepository",
    "LogbookRepositories",
    "OptionRepository",
    "ReviewMerge",
    "UnitOfWork",
]
