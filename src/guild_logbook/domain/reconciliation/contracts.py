"""Value types exchanged between the diff, merge, report and validation stages.

This module intentionally holds only:
- the difference set produced by the diff engine
- the merge report derived from it
- the import validation result
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from guild_logbook.domain.types import Entity


class _Missing:
    """Marker for a field that is absent on one side of a comparison."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


@dataclass(frozen=True, slots=True)
class FieldChange:
    """One top-level field whose value differs between two versions of an entity.

    ``before``/``after`` hold the whole field value; nested values are not diffed.
    A field that only exists on one side carries ``MISSING`` on the other.
    """

    field: str
    before: Any
    after: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "from": None if self.before is MISSING else self.before,
            "to": None if self.after is MISSING else self.after,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ModifiedEntity:
    """Entity present in both collections with at least one differing field."""

    id: Any
    current: Entity
    imported: Entity
    changes: tuple[FieldChange, ...] = ()


@dataclass(slots=True, kw_only=True)
class DifferenceSet:
    """Classification of an imported collection against the current one."""

    added: list[Entity] = field(default_factory=list["Entity"])
    removed: list[Entity] = field(default_factory=list["Entity"])
    modified: list[ModifiedEntity] = field(default_factory=list[ModifiedEntity])
    unchanged: list[Entity] = field(default_factory=list["Entity"])

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.modified)


@dataclass(frozen=True, slots=True)
class ReportSummary:
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0


@dataclass(frozen=True, slots=True)
class ReportEntry:
    id: Any
    name: str


@dataclass(frozen=True, slots=True)
class ModifiedReportEntry:
    id: Any
    name: str
    changes: tuple[FieldChange, ...] = ()


@dataclass(frozen=True, slots=True)
class ReportDetails:
    added: tuple[ReportEntry, ...] = ()
    removed: tuple[ReportEntry, ...] = ()
    modified: tuple[ModifiedReportEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class MergeReport:
    """Read-only summary of a difference set for human review."""

    summary: ReportSummary = field(default_factory=ReportSummary)
    details: ReportDetails = field(default_factory=ReportDetails)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "added": self.summary.added,
                "removed": self.summary.removed,
                "modified": self.summary.modified,
                "unchanged": self.summary.unchanged,
            },
            "details": {
                "added": [{"id": e.id, "name": e.name} for e in self.details.added],
                "removed": [{"id": e.id, "name": e.name} for e in self.details.removed],
                "modified": [
                    {
                        "id": e.id,
                        "name": e.name,
                        "changes": [change.to_dict() for change in e.changes],
                    }
                    for e in self.details.modified
                ],
            },
        }


@dataclass(frozen=True, slots=True)
class ImportValidationResult:
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors
