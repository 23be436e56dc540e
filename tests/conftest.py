from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from guild_logbook.adapters.sqlalchemy.migrations import upgrade_head
from guild_logbook.adapters.sqlalchemy.unit_of_work import shutdown, startup

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_started(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def roster() -> list[dict[str, Any]]:
    return [
        {"id": "char_001", "name": "Ari", "level": 3, "tags": ["scout"]},
        {"id": "char_002", "name": "Bo", "level": 1, "stats": {"str": 4, "dex": 7}},
        {"id": "char_003", "name": "Cyd", "level": 9},
    ]
