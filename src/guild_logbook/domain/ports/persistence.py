"""Ports for persisting roster collections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from guild_logbook.domain.types import Collection, Entity, EntityKind


@runtime_checkable
class CollectionStore(Protocol):
    """Load and save whole collections of one kind.

    Save and delete operations report failure by returning ``False`` instead of
    raising, so callers can keep a computed collection and retry.
    """

    def load_collection(self, kind: EntityKind) -> Collection: ...

    def save_collection(self, kind: EntityKind, entities: Sequence[Entity]) -> bool: ...

    def delete_entity(self, kind: EntityKind, entity_id: str) -> bool: ...

    def load_options(self) -> dict[str, Any]: ...

    def save_options(self, options: Mapping[str, Any]) -> bool: ...


@runtime_checkable
class EntityDocumentRepository(Protocol):
    """Document-level access to stored entities, used inside a unit of work."""

    def find_all(self, kind: EntityKind) -> Collection: ...

    def replace_all(self, kind: EntityKind, entities: Sequence[Entity]) -> None: ...

    def delete(self, kind: EntityKind, entity_id: str) -> bool: ...


@runtime_checkable
class OptionRepository(Protocol):
    """Key/value storage for application options such as dropdown choices."""

    def get(self, key: str) -> Any: ...

    def put(self, key: str, value: Any) -> None: ...
