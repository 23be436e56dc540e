"""Collection store backed by the SQLAlchemy document tables."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from guild_logbook.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from guild_logbook.domain.ports.unit_of_work import UnitOfWork
    from guild_logbook.domain.types import Collection, Entity, EntityKind

UnitOfWorkFactory = Callable[[], "UnitOfWork"]

DROPDOWN_OPTIONS_OPTION = "dropdownOptions"

log = logging.getLogger(__name__)


class SqlAlchemyCollectionStore:
    """Run each store operation in its own unit of work.

    Saving a collection replaces every row of that kind in one transaction.
    """

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory | None = None) -> None:
        self._uow_factory: UnitOfWorkFactory = unit_of_work_factory or SqlAlchemyUnitOfWork

    def load_collection(self, kind: EntityKind) -> Collection:
        with self._uow_factory() as uow:
            return uow.repositories.documents.find_all(kind)

    def save_collection(self, kind: EntityKind, entities: Sequence[Entity]) -> bool:
        try:
            with self._uow_factory() as uow:
                uow.repositories.documents.replace_all(kind, entities)
                uow.commit()
        except SQLAlchemyError:
            log.exception("Failed to save %s collection", kind)
            return False
        log.debug("Saved %s %s entities", len(entities), kind)
        return True

    def delete_entity(self, kind: EntityKind, entity_id: str) -> bool:
        try:
            with self._uow_factory() as uow:
                deleted = uow.repositories.documents.delete(kind, entity_id)
                uow.commit()
        except SQLAlchemyError:
            log.exception("Failed to delete %s entity %s", kind, entity_id)
            return False
        return deleted

    def load_options(self) -> dict[str, Any]:
        with self._uow_factory() as uow:
            value = uow.repositories.options.get(DROPDOWN_OPTIONS_OPTION)
        return dict(value) if isinstance(value, dict) else {}

    def save_options(self, options: Mapping[str, Any]) -> bool:
        try:
            with self._uow_factory() as uow:
                uow.repositories.options.put(DROPDOWN_OPTIONS_OPTION, dict(options))
                uow.commit()
        except SQLAlchemyError:
            log.exception("Failed to save dropdown options")
            return False
        return True


if TYPE_CHECKING:
    from guild_logbook.domain.ports import CollectionStore

    _store_check: CollectionStore = SqlAlchemyCollectionStore()
