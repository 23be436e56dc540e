"""Turn a difference set into a merge report for review."""

from __future__ import annotations

from typing import TYPE_CHECKING

from guild_logbook.domain.types import entity_name, identity_of

from .contracts import (
    MergeReport,
    ModifiedReportEntry,
    ReportDetails,
    ReportEntry,
    ReportSummary,
)

if TYPE_CHECKING:
    from guild_logbook.domain.types import Entity

    from .contracts import DifferenceSet, ModifiedEntity


def generate_merge_report(differences: DifferenceSet) -> MergeReport:
    summary = ReportSummary(
        added=len(differences.added),
        removed=len(differences.removed),
        modified=len(differences.modified),
        unchanged=len(differences.unchanged),
    )
    details = ReportDetails(
        added=tuple(_entry(entity) for entity in differences.added),
        removed=tuple(_entry(entity) for entity in differences.removed),
        modified=tuple(_modified_entry(record) for record in differences.modified),
    )
    return MergeReport(summary=summary, details=details)


def _entry(entity: Entity) -> ReportEntry:
    return ReportEntry(id=identity_of(entity), name=entity_name(entity))


def _modified_entry(record: ModifiedEntity) -> ModifiedReportEntry:
    name = entity_name(record.imported) or entity_name(record.current)
    return ModifiedReportEntry(id=record.id, name=name, changes=record.changes)
