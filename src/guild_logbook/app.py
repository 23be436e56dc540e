"""Application orchestration entry points."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from guild_logbook.adapters.json_file import JsonFileCollectionStore
from guild_logbook.adapters.sqlalchemy import SqlAlchemyCollectionStore
from guild_logbook.adapters.sqlalchemy.unit_of_work import is_started, startup
from guild_logbook.config import StoreBackend, get_database_config, get_store_config
from guild_logbook.domain.data_integration import (
    ImportMode,
    delete_entity,
    export_roster,
    import_roster,
    prepare_import,
)

if TYPE_CHECKING:
    from pathlib import Path

    from guild_logbook.config import StoreConfig
    from guild_logbook.domain.data_integration import ImportPreview, ImportResult
    from guild_logbook.domain.ports import CollectionStore, ReviewMerge
    from guild_logbook.domain.types import EntityKind


log = getLogger(__name__)


class ImportFileError(ValueError):
    """Raised when an import file cannot be read or is not valid JSON."""


def build_store(config: StoreConfig | None = None) -> CollectionStore:
    """Return the collection store selected by configuration."""

    effective = config or get_store_config()
    if effective.backend is StoreBackend.SQL:
        database = effective.database or get_database_config()
        if not is_started():
            startup(database_uri=database.uri)
        log.debug("Using SQL store at %s", database.uri)
        return SqlAlchemyCollectionStore()
    log.debug("Using JSON store at %s", effective.json_path)
    return JsonFileCollectionStore(effective.json_path)


def read_import_file(path: Path) -> object:
    """Parse an import file into a raw JSON value."""

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ImportFileError(f"Cannot read import file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ImportFileError(f"Error parsing JSON file {path}: {exc}") from exc


def preview_import_file(
    path: Path,
    *,
    store: CollectionStore | None = None,
    mode: ImportMode = ImportMode.MERGE,
) -> ImportPreview:
    """Diff an import file against the stored roster without writing anything."""

    effective_store = store or build_store()
    return prepare_import(read_import_file(path), store=effective_store, mode=mode)


def import_roster_file(
    path: Path,
    *,
    review: ReviewMerge,
    store: CollectionStore | None = None,
    mode: ImportMode = ImportMode.MERGE,
) -> ImportResult:
    """Import a roster export file, asking ``review`` before anything is saved."""

    effective_store = store or build_store()
    log.info("Starting %s import from %s", mode, path)
    result = import_roster(read_import_file(path), store=effective_store, review=review, mode=mode)
    log.info("Finished import from %s: applied=%s", path, result.applied)
    return result


def export_roster_file(
    path: Path,
    *,
    store: CollectionStore | None = None,
    character_id: str | None = None,
) -> Path:
    """Write the roster (or a single character) to ``path`` as JSON."""

    effective_store = store or build_store()
    document = export_roster(store=effective_store, character_id=character_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    log.info("Exported roster to %s", path)
    return path


def delete_roster_entity(
    kind: EntityKind,
    entity_id: str,
    *,
    store: CollectionStore | None = None,
) -> bool:
    """Delete one entity from the configured store."""

    effective_store = store or build_store()
    return delete_entity(store=effective_store, kind=kind, entity_id=entity_id)
