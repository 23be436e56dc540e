"""Reconciliation core for merging imported roster exports into the live roster.

Layered flow:
1) validate and normalize the import payload
2) diff imported collections against the current ones
3) summarise the differences as a merge report for review
4) merge additions and modifications, never dropping absent entities
"""

from __future__ import annotations

from .contracts import (
    MISSING,
    DifferenceSet,
    FieldChange,
    ImportValidationResult,
    MergeReport,
    ModifiedEntity,
    ModifiedReportEntry,
    ReportDetails,
    ReportEntry,
    ReportSummary,
)
from .diff import compute_differences, find_field_changes
from .equality import deep_equal
from .merge import deep_merge, merge_collections
from .report import generate_merge_report
from .validation import is_single_character_payload, normalize_import_payload, validate_import

__all__ = [
    "MISSING",
    "DifferenceSet",
    "FieldChange",
    "ImportValidationResult",
    "MergeReport",
    "ModifiedEntity",
    "ModifiedReportEntry",
    "ReportDetails",
    "ReportEntry",
    "ReportSummary",
    "compute_differences",
    "deep_equal",
    "deep_merge",
    "find_field_changes",
    "generate_merge_report",
    "is_single_character_payload",
    "merge_collections",
    "normalize_import_payload",
    "validate_import",
]
