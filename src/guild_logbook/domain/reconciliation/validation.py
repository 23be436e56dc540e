"""Structural checks for import payloads before any diff or merge runs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from guild_logbook.domain.types import (
    ID_FIELD,
    NAME_FIELD,
    EntityKind,
    is_sequence,
    is_valid_identity,
)

from .contracts import ImportValidationResult

SINGLE_CHARACTER_KEY = "character"
DROPDOWN_OPTIONS_KEY = "dropdownOptions"


def validate_import(payload: object) -> ImportValidationResult:
    """Check that ``payload`` carries a usable roster.

    Every problem is collected; validation does not stop at the first error.
    """

    errors: list[str] = []
    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}  # pyright: ignore[reportUnknownVariableType]

    characters = data.get(EntityKind.CHARACTERS.value)
    if characters is None or not is_sequence(characters):
        errors.append('Missing or invalid "characters" array')
    else:
        for index, character in enumerate(characters):
            record: Mapping[str, Any] = character if isinstance(character, Mapping) else {}  # pyright: ignore[reportUnknownVariableType]
            identity = record.get(ID_FIELD)
            if not identity:
                errors.append(f'Character at index {index} missing required "id" field')
            elif not is_valid_identity(identity):
                errors.append(f'Character at index {index} has invalid "id" field')
            if not record.get(NAME_FIELD):
                errors.append(f'Character at index {index} missing required "name" field')

    artifacts = data.get(EntityKind.ARTIFACTS.value)
    if artifacts is not None and not is_sequence(artifacts):
        errors.append('Invalid "artifacts" array format')

    return ImportValidationResult(errors=tuple(errors))


def is_single_character_payload(payload: object) -> bool:
    """Return whether ``payload`` uses the ``{"character": {...}}`` shorthand."""

    return (
        isinstance(payload, Mapping)
        and SINGLE_CHARACTER_KEY in payload
        and EntityKind.CHARACTERS.value not in payload
    )


def normalize_import_payload(payload: object) -> object:
    """Expand the single-character shorthand ``{"character": {...}}``.

    Payloads with a ``characters`` key, or anything that is not a mapping, are
    returned unchanged so validation can report on them.
    """

    if not is_single_character_payload(payload):
        return payload
    data = cast("Mapping[str, Any]", payload)
    return {
        EntityKind.CHARACTERS.value: [data[SINGLE_CHARACTER_KEY]],
        EntityKind.ARTIFACTS.value: [],
    }
