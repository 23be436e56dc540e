"""Diff engine: classify an imported collection against the current roster.

Both collections are indexed by id once, so classification is linear in the
combined size. Partitions keep the iteration order of their source collection
(``imported`` for added/modified/unchanged, ``current`` for removed).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from guild_logbook.domain.types import as_collection, identity_of, index_by_id

from .contracts import MISSING, DifferenceSet, FieldChange, ModifiedEntity
from .equality import deep_equal

if TYPE_CHECKING:
    from guild_logbook.domain.types import Entity

log = logging.getLogger(__name__)


def compute_differences(current: object = None, imported: object = None) -> DifferenceSet:
    """Compute added/removed/modified/unchanged partitions between two collections.

    Missing or malformed collections are treated as empty. Neither input is mutated.
    An id repeated within the import is classified once, by its first occurrence.
    """

    current_entities = as_collection(current)
    imported_entities = as_collection(imported)
    current_index = index_by_id(current_entities)
    imported_index = index_by_id(imported_entities)

    differences = DifferenceSet()

    for imported_entity in imported_entities:
        key = identity_of(imported_entity)
        if imported_index[key] is not imported_entity:
            continue
        if key not in current_index:
            differences.added.append(imported_entity)
            continue
        current_entity = current_index[key]
        if deep_equal(current_entity, imported_entity):
            differences.unchanged.append(imported_entity)
            continue
        differences.modified.append(
            ModifiedEntity(
                id=key,
                current=current_entity,
                imported=imported_entity,
                changes=find_field_changes(current_entity, imported_entity),
            )
        )

    for current_entity in current_entities:
        if identity_of(current_entity) not in imported_index:
            differences.removed.append(current_entity)

    log.debug(
        "Computed differences: added=%s, modified=%s, unchanged=%s, removed=%s",
        len(differences.added),
        len(differences.modified),
        len(differences.unchanged),
        len(differences.removed),
    )
    return differences


def find_field_changes(current: Entity, imported: Entity) -> tuple[FieldChange, ...]:
    """List top-level fields whose values differ between two versions of an entity.

    Fields are visited in the current entity's key order followed by keys only the
    imported entity carries. Nested mappings and sequences are compared whole.
    """

    keys = list(current)
    keys.extend(key for key in imported if key not in current)

    changes: list[FieldChange] = []
    for key in keys:
        before = current.get(key, MISSING)
        after = imported.get(key, MISSING)
        if before is MISSING or after is MISSING:
            if before is not after:
                changes.append(FieldChange(field=key, before=before, after=after))
            continue
        if not deep_equal(before, after):
            changes.append(FieldChange(field=key, before=before, after=after))
    return tuple(changes)
