from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from guild_logbook.domain.data_integration import (
    EntityNotFoundError,
    ImportMode,
    ImportValidationError,
    PersistenceError,
    commit_import,
    delete_entity,
    export_roster,
    import_roster,
    prepare_import,
)
from guild_logbook.domain.types import EntityKind
from tests.helpers.stores import InMemoryCollectionStore

if TYPE_CHECKING:
    from collections.abc import Mapping

    from guild_logbook.domain.reconciliation import MergeReport


def _store(
    roster: list[dict[str, Any]], artifacts: list[dict[str, Any]] | None = None
) -> InMemoryCollectionStore:
    return InMemoryCollectionStore(
        collections={
            EntityKind.CHARACTERS: list(roster),
            EntityKind.ARTIFACTS: list(artifacts or []),
        },
        options={"race": ["Elf", "Dwarf"]},
    )


def _approve(_reports: Mapping[EntityKind, MergeReport]) -> bool:
    return True


def _decline(_reports: Mapping[EntityKind, MergeReport]) -> bool:
    return False


def test_import_merges_and_persists(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)
    payload = {
        "characters": [{**roster[0], "level": 4}, {"id": "char_010", "name": "Dee"}],
    }

    result = import_roster(payload, store=store, review=_approve)

    assert result.applied
    characters = store.collections[EntityKind.CHARACTERS]
    assert [entity["id"] for entity in characters] == [
        "char_001",
        "char_002",
        "char_003",
        "char_010",
    ]
    assert characters[0]["level"] == 4
    assert result.reports[EntityKind.CHARACTERS].summary.removed == 2
    assert result.collections[EntityKind.CHARACTERS] == characters


def test_declined_review_saves_nothing(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)
    seen: list[Mapping[EntityKind, MergeReport]] = []

    def review(reports: Mapping[EntityKind, MergeReport]) -> bool:
        seen.append(reports)
        return _decline(reports)

    result = import_roster(
        {"characters": [{"id": "char_010", "name": "Dee"}]}, store=store, review=review
    )

    assert not result.applied
    assert store.saves == []
    assert result.collections == {}
    assert seen[0][EntityKind.CHARACTERS].summary.added == 1


def test_invalid_payload_is_rejected_before_diffing(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)

    with pytest.raises(ImportValidationError) as excinfo:
        import_roster({"characters": [{"name": "X"}]}, store=store, review=_approve)

    assert excinfo.value.errors == ('Character at index 0 missing required "id" field',)
    assert store.saves == []


def test_single_character_shorthand_is_merged(roster: list[dict[str, Any]]) -> None:
    store = _store(roster, artifacts=[{"id": "art_1", "name": "Lamp"}])

    preview = prepare_import({"character": {**roster[2], "level": 10}}, store=store)

    assert set(preview.changes) == {EntityKind.CHARACTERS}
    report = preview.reports[EntityKind.CHARACTERS]
    assert report.summary.modified == 1
    assert report.summary.removed == 2

    commit_import(preview, store=store)

    assert len(store.collections[EntityKind.CHARACTERS]) == 3
    assert store.collections[EntityKind.CHARACTERS][2]["level"] == 10
    assert store.collections[EntityKind.ARTIFACTS] == [{"id": "art_1", "name": "Lamp"}]


def test_single_character_shorthand_is_validated(roster: list[dict[str, Any]]) -> None:
    with pytest.raises(ImportValidationError):
        prepare_import({"character": {"name": "No Id"}}, store=_store(roster))


def test_artifacts_merge_only_when_imported(roster: list[dict[str, Any]]) -> None:
    artifacts = [{"id": "art_1", "name": "Lamp"}]
    store = _store(roster, artifacts=artifacts)

    preview = prepare_import({"characters": roster, "artifacts": []}, store=store)
    assert EntityKind.ARTIFACTS not in preview.changes

    preview = prepare_import(
        {"characters": roster, "artifacts": [{"id": "art_2", "name": "Rope"}]}, store=store
    )
    result = commit_import(preview, store=store)

    assert result.collections[EntityKind.ARTIFACTS] == [
        {"id": "art_1", "name": "Lamp"},
        {"id": "art_2", "name": "Rope"},
    ]


def test_replace_mode_overwrites_collections(roster: list[dict[str, Any]]) -> None:
    store = _store(roster, artifacts=[{"id": "art_1", "name": "Lamp"}])
    payload = {
        "characters": [{"id": "char_010", "name": "Dee"}],
        "artifacts": [],
        "dropdownOptions": {"race": ["Gnome"]},
    }

    result = import_roster(payload, store=store, review=_approve, mode=ImportMode.REPLACE)

    assert result.applied
    assert store.collections[EntityKind.CHARACTERS] == [{"id": "char_010", "name": "Dee"}]
    assert store.collections[EntityKind.ARTIFACTS] == []
    assert store.options == {"race": ["Gnome"]}
    assert result.reports[EntityKind.CHARACTERS].summary.removed == 3


def test_replace_mode_keeps_artifacts_when_absent(roster: list[dict[str, Any]]) -> None:
    store = _store(roster, artifacts=[{"id": "art_1", "name": "Lamp"}])

    import_roster(
        {"characters": roster[:1]}, store=store, review=_approve, mode=ImportMode.REPLACE
    )

    assert store.collections[EntityKind.ARTIFACTS] == [{"id": "art_1", "name": "Lamp"}]
    assert store.options == {"race": ["Elf", "Dwarf"]}


def test_merge_mode_ignores_imported_options(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)

    import_roster(
        {"characters": roster, "dropdownOptions": {"race": []}}, store=store, review=_approve
    )

    assert store.options == {"race": ["Elf", "Dwarf"]}


def test_failed_save_keeps_computed_collections(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)
    store.fail_saves_for.add(EntityKind.CHARACTERS)
    preview = prepare_import({"characters": [{"id": "char_010", "name": "Dee"}]}, store=store)

    with pytest.raises(PersistenceError) as excinfo:
        commit_import(preview, store=store)

    merged = excinfo.value.collections[EntityKind.CHARACTERS]
    assert [entity["id"] for entity in merged][-1] == "char_010"

    store.fail_saves_for.clear()
    assert store.save_collection(EntityKind.CHARACTERS, merged)
    assert store.collections[EntityKind.CHARACTERS] == merged


def test_failed_option_save_raises(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)
    store.fail_option_saves = True

    with pytest.raises(PersistenceError) as excinfo:
        import_roster(
            {"characters": roster, "dropdownOptions": {"race": []}},
            store=store,
            review=_approve,
            mode=ImportMode.REPLACE,
        )

    assert excinfo.value.target == "dropdownOptions"


def test_export_full_roster(roster: list[dict[str, Any]]) -> None:
    store = _store(roster, artifacts=[{"id": "art_1", "name": "Lamp"}])

    document = export_roster(store=store)

    assert document == {
        "characters": roster,
        "artifacts": [{"id": "art_1", "name": "Lamp"}],
        "dropdownOptions": {"race": ["Elf", "Dwarf"]},
    }


def test_export_single_character(roster: list[dict[str, Any]]) -> None:
    document = export_roster(store=_store(roster), character_id="char_002")

    assert document == {"character": roster[1]}


def test_export_unknown_character(roster: list[dict[str, Any]]) -> None:
    with pytest.raises(EntityNotFoundError):
        export_roster(store=_store(roster), character_id="missing")


def test_exported_single_character_round_trips(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)
    document = export_roster(store=store, character_id="char_001")

    preview = prepare_import(document, store=store)

    assert preview.reports[EntityKind.CHARACTERS].summary.unchanged == 1


def test_delete_entity_is_explicit(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)

    assert delete_entity(store=store, kind=EntityKind.CHARACTERS, entity_id="char_002")
    assert not delete_entity(store=store, kind=EntityKind.CHARACTERS, entity_id="char_002")
    assert [entity["id"] for entity in store.collections[EntityKind.CHARACTERS]] == [
        "char_001",
        "char_003",
    ]


def test_single_character_in_replace_mode_is_merged(roster: list[dict[str, Any]]) -> None:
    artifacts = [{"id": "art_1", "name": "Lamp"}]
    store = _store(roster, artifacts=artifacts)

    result = import_roster(
        {"character": {"id": "char_010", "name": "Dee"}},
        store=store,
        review=_approve,
        mode=ImportMode.REPLACE,
    )

    assert result.applied
    assert set(result.reports) == {EntityKind.CHARACTERS}
    assert store.collections[EntityKind.CHARACTERS] == [*roster, {"id": "char_010", "name": "Dee"}]
    assert store.collections[EntityKind.ARTIFACTS] == artifacts
    assert store.saves == [EntityKind.CHARACTERS]


def test_single_character_preview_reports_merge_mode(roster: list[dict[str, Any]]) -> None:
    preview = prepare_import(
        {"character": roster[0]}, store=_store(roster), mode=ImportMode.REPLACE
    )

    assert preview.mode is ImportMode.MERGE
    assert preview.options is None


def test_unusable_character_id_is_rejected(roster: list[dict[str, Any]]) -> None:
    store = _store(roster)

    with pytest.raises(ImportValidationError) as excinfo:
        import_roster(
            {"characters": [{"id": ["x"], "name": "A"}]}, store=store, review=_approve
        )

    assert excinfo.value.errors == ('Character at index 0 has invalid "id" field',)
    assert store.saves == []


def test_artifacts_with_unusable_ids_are_skipped(roster: list[dict[str, Any]]) -> None:
    store = _store(roster, artifacts=[{"id": "art_1", "name": "Lamp"}])

    preview = prepare_import(
        {
            "characters": roster,
            "artifacts": [{"id": {"nested": 1}, "name": "Odd"}, {"id": "art_2", "name": "Rope"}],
        },
        store=store,
    )
    result = commit_import(preview, store=store)

    assert result.collections[EntityKind.ARTIFACTS] == [
        {"id": "art_1", "name": "Lamp"},
        {"id": "art_2", "name": "Rope"},
    ]
