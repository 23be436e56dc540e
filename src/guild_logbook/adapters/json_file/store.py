"""Collection store backed by a single JSON document on disk."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import TYPE_CHECKING, Any, cast

from pydantic import ValidationError

from guild_logbook.adapters.json_file.schema import LogbookDocument
from guild_logbook.domain.types import EntityKind, identity_of

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from guild_logbook.domain.types import Collection, Entity

log = logging.getLogger(__name__)


class DocumentFormatError(ValueError):
    """Raised when the logbook file exists but does not hold a logbook document."""


class JsonFileCollectionStore:
    """Read and rewrite the whole logbook document for every operation.

    A missing file reads as an empty logbook. Writes go to a temporary file that
    replaces the document, so readers never observe a partial write.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load_collection(self, kind: EntityKind) -> Collection:
        document = self._read()
        return list(_entities(document, kind))

    def save_collection(self, kind: EntityKind, entities: Sequence[Entity]) -> bool:
        document = self._read()
        _set_entities(document, kind, [dict(entity) for entity in entities])
        return self._write(document)

    def delete_entity(self, kind: EntityKind, entity_id: str) -> bool:
        document = self._read()
        entities = _entities(document, kind)
        remaining = [entity for entity in entities if identity_of(entity) != entity_id]
        if len(remaining) == len(entities):
            return False
        _set_entities(document, kind, remaining)
        return self._write(document)

    def load_options(self) -> dict[str, Any]:
        return dict(self._read().dropdown_options)

    def save_options(self, options: Mapping[str, Any]) -> bool:
        document = self._read()
        document.dropdown_options = dict(options)
        return self._write(document)

    def _read(self) -> LogbookDocument:
        if not self.path.exists():
            return LogbookDocument()
        try:
            return LogbookDocument.model_validate_json(self.path.read_bytes())
        except ValidationError as exc:
            raise DocumentFormatError(f"Invalid logbook document at {self.path}") from exc

    def _write(self, document: LogbookDocument) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(document.to_json())
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError:
            log.exception("Failed to write logbook document %s", self.path)
            return False
        return True


def _entities(document: LogbookDocument, kind: EntityKind) -> list[dict[str, Any]]:
    if kind is EntityKind.CHARACTERS:
        return document.characters
    return document.artifacts


def _set_entities(
    document: LogbookDocument, kind: EntityKind, entities: list[dict[str, Any]]
) -> None:
    if kind is EntityKind.CHARACTERS:
        document.characters = entities
    else:
        document.artifacts = entities


if TYPE_CHECKING:
    from guild_logbook.domain.ports import CollectionStore

    _store_check: CollectionStore = JsonFileCollectionStore(cast("Path", object()))
