"""Application services for importing, exporting and deleting roster entities.

An import runs in two steps so a reviewer can sit between them:
``prepare_import`` validates the payload, snapshots the stored collections and
diffs them; ``commit_import`` merges (or replaces) and persists. ``import_roster``
chains both around a ``ReviewMerge`` callback.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, cast

from guild_logbook.domain.reconciliation import (
    compute_differences,
    generate_merge_report,
    is_single_character_payload,
    merge_collections,
    normalize_import_payload,
    validate_import,
)
from guild_logbook.domain.reconciliation.validation import (
    DROPDOWN_OPTIONS_KEY,
    SINGLE_CHARACTER_KEY,
)
from guild_logbook.domain.types import EntityKind, as_collection, identity_of

if TYPE_CHECKING:
    from collections.abc import Sequence

    from guild_logbook.domain.ports import CollectionStore, ReviewMerge
    from guild_logbook.domain.reconciliation import DifferenceSet, MergeReport
    from guild_logbook.domain.types import Collection

log = logging.getLogger(__name__)


class ImportMode(StrEnum):
    """How imported collections are combined with the stored ones."""

    MERGE = "merge"
    REPLACE = "replace"


class ImportValidationError(ValueError):
    """Raised when an import payload fails structural validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = tuple(errors)
        super().__init__("Invalid import payload: " + "; ".join(self.errors))


class PersistenceError(RuntimeError):
    """Raised when the store rejects a save.

    ``collections`` keeps every computed collection of the failed commit so the
    caller can retry the save without recomputing the merge.
    """

    def __init__(self, target: str, collections: Mapping[EntityKind, Collection]) -> None:
        self.target = target
        self.collections = dict(collections)
        super().__init__(f"Failed to save {target}")


class EntityNotFoundError(LookupError):
    """Raised when an entity id is not present in the store."""


@dataclass(slots=True, kw_only=True)
class KindChanges:
    """Snapshot and diff for one collection kind."""

    kind: EntityKind
    current: Collection
    imported: Collection
    differences: DifferenceSet
    report: MergeReport


@dataclass(slots=True, kw_only=True)
class ImportPreview:
    mode: ImportMode
    changes: dict[EntityKind, KindChanges] = field(default_factory=dict[EntityKind, KindChanges])
    options: dict[str, Any] | None = None

    @property
    def reports(self) -> dict[EntityKind, MergeReport]:
        return {kind: change.report for kind, change in self.changes.items()}


@dataclass(slots=True, kw_only=True)
class ImportResult:
    """Outcome of an import; ``collections`` holds what was saved per kind."""

    applied: bool
    reports: dict[EntityKind, MergeReport]
    collections: dict[EntityKind, Collection] = field(
        default_factory=dict[EntityKind, "Collection"]
    )


def prepare_import(
    payload: object,
    *,
    store: CollectionStore,
    mode: ImportMode = ImportMode.MERGE,
) -> ImportPreview:
    """Validate ``payload`` and diff it against the stored collections."""

    if mode is ImportMode.REPLACE and is_single_character_payload(payload):
        log.info("Single-character import always merges; ignoring %s mode", mode)
        mode = ImportMode.MERGE

    normalized = normalize_import_payload(payload)
    validation = validate_import(normalized)
    if not validation.is_valid:
        log.warning("Rejected import payload: %s", "; ".join(validation.errors))
        raise ImportValidationError(validation.errors)

    data = cast("Mapping[str, Any]", normalized)
    preview = ImportPreview(mode=mode)
    for kind in EntityKind:
        raw = data.get(kind.value)
        imported = as_collection(raw)
        if not _reconciles(kind, raw=raw, imported=imported, mode=mode):
            log.debug("Skipping %s: nothing to reconcile", kind)
            continue
        current = store.load_collection(kind)
        differences = compute_differences(current, imported)
        preview.changes[kind] = KindChanges(
            kind=kind,
            current=current,
            imported=imported,
            differences=differences,
            report=generate_merge_report(differences),
        )

    options = data.get(DROPDOWN_OPTIONS_KEY)
    if mode is ImportMode.REPLACE and isinstance(options, Mapping):
        preview.options = dict(cast("Mapping[str, Any]", options))

    for kind, change in preview.changes.items():
        summary = change.report.summary
        log.info(
            "Prepared %s import of %s: added=%s, modified=%s, unchanged=%s, removed=%s",
            mode,
            kind,
            summary.added,
            summary.modified,
            summary.unchanged,
            summary.removed,
        )
    return preview


def commit_import(preview: ImportPreview, *, store: CollectionStore) -> ImportResult:
    """Compute the resulting collections from ``preview`` and persist them."""

    collections: dict[EntityKind, Collection] = {}
    for kind, change in preview.changes.items():
        if preview.mode is ImportMode.MERGE:
            collections[kind] = merge_collections(change.current, change.imported)
        else:
            collections[kind] = list(change.imported)

    for kind, collection in collections.items():
        if not store.save_collection(kind, collection):
            log.error("Store rejected %s (%s entities)", kind, len(collection))
            raise PersistenceError(str(kind), collections)

    if preview.options is not None and not store.save_options(preview.options):
        log.error("Store rejected dropdown options")
        raise PersistenceError(DROPDOWN_OPTIONS_KEY, collections)

    log.info(
        "Committed %s import: %s",
        preview.mode,
        ", ".join(f"{kind}={len(collection)}" for kind, collection in collections.items()),
    )
    return ImportResult(applied=True, reports=preview.reports, collections=collections)


def import_roster(
    payload: object,
    *,
    store: CollectionStore,
    review: ReviewMerge,
    mode: ImportMode = ImportMode.MERGE,
) -> ImportResult:
    """Validate, diff, ask ``review`` for approval, then merge and persist."""

    preview = prepare_import(payload, store=store, mode=mode)
    if not review(preview.reports):
        log.info("Import cancelled during review")
        return ImportResult(applied=False, reports=preview.reports)
    return commit_import(preview, store=store)


def export_roster(
    *,
    store: CollectionStore,
    character_id: str | None = None,
) -> dict[str, Any]:
    """Build an export document for the whole roster or a single character."""

    characters = store.load_collection(EntityKind.CHARACTERS)
    if character_id is not None:
        for character in characters:
            if identity_of(character) == character_id:
                return {SINGLE_CHARACTER_KEY: dict(character)}
        raise EntityNotFoundError(f"Unknown character id: {character_id}")

    return {
        EntityKind.CHARACTERS.value: [dict(entity) for entity in characters],
        EntityKind.ARTIFACTS.value: [
            dict(entity) for entity in store.load_collection(EntityKind.ARTIFACTS)
        ],
        DROPDOWN_OPTIONS_KEY: store.load_options(),
    }


def delete_entity(*, store: CollectionStore, kind: EntityKind, entity_id: str) -> bool:
    """Delete one entity directly from the store; the only deletion path."""

    deleted = store.delete_entity(kind, entity_id)
    if deleted:
        log.info("Deleted %s entity %s", kind, entity_id)
    else:
        log.warning("Could not delete %s entity %s", kind, entity_id)
    return deleted


def _reconciles(
    kind: EntityKind,
    *,
    raw: object,
    imported: Collection,
    mode: ImportMode,
) -> bool:
    if kind is EntityKind.CHARACTERS:
        return True
    if mode is ImportMode.REPLACE:
        return raw is not None
    return bool(imported)
