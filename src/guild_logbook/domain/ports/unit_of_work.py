"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from guild_logbook.domain.ports.persistence import EntityDocumentRepository, OptionRepository


@dataclass(slots=True)
class LogbookRepositories:
    """Repositories managed together by one unit of work."""

    documents: EntityDocumentRepository
    options: OptionRepository


@runtime_checkable
class UnitOfWork(Protocol):
    """Transaction boundary around the logbook repositories."""

    @property
    def repositories(self) -> LogbookRepositories: ...

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
