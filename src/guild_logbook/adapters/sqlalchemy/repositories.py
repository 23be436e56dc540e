"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, select

from guild_logbook.adapters.sqlalchemy.mappings import app_option_table, entity_document_table
from guild_logbook.domain.types import identity_of

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session

    from guild_logbook.domain.types import Collection, Entity, EntityKind


class SqlAlchemyEntityDocumentRepository:
    """Store each entity as one JSON row, ordered by ``position`` within its kind."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all(self, kind: EntityKind) -> Collection:
        stmt = (
            select(entity_document_table.c.body)
            .where(entity_document_table.c.kind == kind)
            .order_by(entity_document_table.c.position)
        )
        return [dict(body) for body in self.session.execute(stmt).scalars()]

    def replace_all(self, kind: EntityKind, entities: Sequence[Entity]) -> None:
        self.session.execute(
            delete(entity_document_table).where(entity_document_table.c.kind == kind)
        )
        if not entities:
            return
        rows = [
            {
                "kind": kind,
                "entity_id": _stringify_id(identity_of(entity)),
                "position": position,
                "body": dict(entity),
            }
            for position, entity in enumerate(entities)
        ]
        self.session.execute(entity_document_table.insert(), rows)

    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        stmt = (
            delete(entity_document_table)
            .where(entity_document_table.c.kind == kind)
            .where(entity_document_table.c.entity_id == entity_id)
        )
        result = self.session.execute(stmt)
        return cast(int, result.rowcount) > 0  # pyright: ignore[reportAttributeAccessIssue]


class SqlAlchemyOptionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> Any:
        stmt = select(app_option_table.c.value).where(app_option_table.c.key == key)
        return self.session.execute(stmt).scalar_one_or_none()

    def put(self, key: str, value: Any) -> None:
        self.session.execute(delete(app_option_table).where(app_option_table.c.key == key))
        self.session.execute(app_option_table.insert().values(key=key, value=value))


def _stringify_id(value: object) -> str:
    return "" if value is None else str(value)


if TYPE_CHECKING:
    from guild_logbook.domain.ports.persistence import (
        EntityDocumentRepository,
        OptionRepository,
    )

    _session_stub = cast("Session", object())
    _documents_check: EntityDocumentRepository = SqlAlchemyEntityDocumentRepository(_session_stub)
    _options_check: OptionRepository = SqlAlchemyOptionRepository(_session_stub)
