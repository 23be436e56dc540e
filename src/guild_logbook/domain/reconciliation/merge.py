"""Merge engine: fold an imported collection into the current roster.

Policy: add new entities, replace modified ones in place, keep everything else.
Entities missing from the import are never dropped, so re-importing a partial
export leaves the rest of the roster intact. Deletion only happens through an
explicit delete against the store.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from guild_logbook.domain.types import Collection, as_collection, identity_of

from .diff import compute_differences

log = logging.getLogger(__name__)


def merge_collections(current: object = None, imported: object = None) -> Collection:
    """Return a new collection with additions appended and modifications applied."""

    current_entities = as_collection(current)
    differences = compute_differences(current_entities, imported)

    merged: Collection = list(current_entities)
    positions: dict[Any, int] = {}
    for position, entity in enumerate(merged):
        positions.setdefault(identity_of(entity), position)

    for record in differences.modified:
        merged[positions[record.id]] = record.imported

    merged.extend(differences.added)

    log.debug(
        "Merged collection: size=%s, added=%s, replaced=%s, retained_absent=%s",
        len(merged),
        len(differences.added),
        len(differences.modified),
        len(differences.removed),
    )
    return merged


def deep_merge(current: Mapping[str, Any], imported: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``imported`` onto ``current``.

    ``None`` values in ``imported`` leave the current value in place, nested
    mappings merge key by key and every other value (sequences included) replaces
    the current one wholesale. Neither argument is mutated.
    """

    result: dict[str, Any] = dict(current)
    for key, value in imported.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            existing = result.get(key)
            base: Mapping[str, Any] = existing if isinstance(existing, Mapping) else {}  # pyright: ignore[reportUnknownVariableType]
            result[key] = deep_merge(base, value)  # pyright: ignore[reportUnknownArgumentType]
        else:
            result[key] = value
    return result
