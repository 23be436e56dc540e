"""Port for the human confirmation step between diff and merge."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from guild_logbook.domain.reconciliation import MergeReport
    from guild_logbook.domain.types import EntityKind


class ReviewMerge(Protocol):
    """Show merge reports to a reviewer and return whether to proceed."""

    def __call__(self, reports: Mapping[EntityKind, MergeReport]) -> bool: ...
