"""JSON document adapter for the roster collections."""

from __future__ import annotations

from .schema import LogbookDocument
from .store import DocumentFormatError, JsonFileCollectionStore

__all__ = ["DocumentFormatError", "JsonFileCollectionStore", "LogbookDocument"]
