"""Shared domain types for roster entities and collections.

Entities are schema-less documents: the only fields the reconciliation code
reads are ``id`` (identity) and ``name`` (display). Everything else is passed
through untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping, Sequence
from enum import StrEnum
from typing import Any

log = logging.getLogger(__name__)

type Entity = Mapping[str, Any]
type Collection = list[Entity]

ID_FIELD = "id"
NAME_FIELD = "name"


class EntityKind(StrEnum):
    """Roster collections that can be imported, exported and persisted."""

    CHARACTERS = "characters"
    ARTIFACTS = "artifacts"


def identity_of(entity: Entity) -> Any:
    return entity.get(ID_FIELD)


def is_valid_identity(value: object) -> bool:
    """Return whether ``value`` can serve as an entity id (a JSON string or number)."""

    return isinstance(value, str | int | float) and not isinstance(value, bool)


def entity_name(entity: Entity | None, default: str = "") -> str:
    """Return a display name for ``entity``, falling back to ``default``."""

    if entity is None:
        return default
    name = entity.get(NAME_FIELD)
    if name is None or name == "":
        return default
    return str(name)


def is_sequence(value: object) -> bool:
    """Return whether ``value`` is an array-like collection (not text or a mapping)."""

    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


def as_collection(value: object) -> Collection:
    """Coerce ``value`` into a list of entity mappings.

    ``None`` and non-sequence values become an empty collection; items that are
    not mappings, or whose id cannot be used as a lookup key, are dropped. Both
    cases are logged rather than raised.
    """

    if value is None:
        return []
    if not is_sequence(value):
        log.warning("Expected a sequence of entities, got %s; using empty", type(value).__name__)
        return []
    entities: Collection = []
    for index, item in enumerate(value):  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
        if not isinstance(item, Mapping):
            log.warning("Skipping non-mapping entity at index %s", index)
            continue
        if not isinstance(identity_of(item), Hashable):  # pyright: ignore[reportUnknownArgumentType]
            log.warning("Skipping entity at index %s with unusable id", index)
            continue
        entities.append(item)  # pyright: ignore[reportUnknownArgumentType]
    return entities


def index_by_id(entities: Sequence[Entity]) -> dict[Any, Entity]:
    """Map ids to entities; the first occurrence of a duplicate id wins."""

    index: dict[Any, Entity] = {}
    for entity in entities:
        key = identity_of(entity)
        if key in index:
            log.warning("Duplicate entity id %r; keeping first occurrence", key)
            continue
        index[key] = entity
    return index
