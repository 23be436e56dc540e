from __future__ import annotations

import pytest

from guild_logbook.domain.reconciliation import normalize_import_payload, validate_import


def test_empty_payload_is_missing_characters() -> None:
    result = validate_import({})

    assert not result.is_valid
    assert result.errors == ('Missing or invalid "characters" array',)


def test_character_without_id_reports_index() -> None:
    result = validate_import({"characters": [{"name": "X"}]})

    assert not result.is_valid
    assert result.errors == ('Character at index 0 missing required "id" field',)


def test_collects_every_error() -> None:
    result = validate_import(
        {
            "characters": [{"id": "c1", "name": "Ari"}, {}, {"id": "", "name": "Bo"}],
            "artifacts": "nope",
        }
    )

    assert result.errors == (
        'Character at index 1 missing required "id" field',
        'Character at index 1 missing required "name" field',
        'Character at index 2 missing required "id" field',
        'Invalid "artifacts" array format',
    )


@pytest.mark.parametrize("characters", [None, "abc", {"id": "c1"}, 3])
def test_non_sequence_characters_skip_item_checks(characters: object) -> None:
    result = validate_import({"characters": characters})

    assert result.errors == ('Missing or invalid "characters" array',)


@pytest.mark.parametrize("payload", [None, [], "characters"])
def test_non_mapping_payload_is_invalid(payload: object) -> None:
    assert not validate_import(payload).is_valid


def test_non_mapping_character_is_missing_both_fields() -> None:
    result = validate_import({"characters": ["Ari"]})

    assert result.errors == (
        'Character at index 0 missing required "id" field',
        'Character at index 0 missing required "name" field',
    )


def test_absent_artifacts_are_valid() -> None:
    result = validate_import({"characters": [{"id": "c1", "name": "Ari"}]})

    assert result.is_valid
    assert result.errors == ()


def test_empty_roster_is_valid() -> None:
    assert validate_import({"characters": [], "artifacts": []}).is_valid


def test_single_character_shorthand_is_expanded() -> None:
    payload = {"character": {"id": "c1", "name": "Ari"}}

    normalized = normalize_import_payload(payload)

    assert normalized == {"characters": [{"id": "c1", "name": "Ari"}], "artifacts": []}
    assert validate_import(normalized).is_valid


def test_full_payload_is_left_alone() -> None:
    payload = {"characters": [], "character": {"id": "c1"}}

    assert normalize_import_payload(payload) is payload


def test_non_mapping_payload_is_left_alone() -> None:
    assert normalize_import_payload(None) is None


@pytest.mark.parametrize("identity", [["x"], {"a": 1}, True])
def test_non_scalar_id_is_invalid(identity: object) -> None:
    result = validate_import({"characters": [{"id": identity, "name": "A"}]})

    assert result.errors == ('Character at index 0 has invalid "id" field',)


@pytest.mark.parametrize("identity", ["char_001", 7, 7.5])
def test_string_and_numeric_ids_are_valid(identity: object) -> None:
    assert validate_import({"characters": [{"id": identity, "name": "A"}]}).is_valid
