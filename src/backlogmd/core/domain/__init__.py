"""
Domain - Entities of the issue cache.
"""

from .entities import (
    ExportRecord,
    ExportResult,
    IssueDetail,
    IssueSummary,
    Project,
    SetupState,
    utc_now,
)


__all__ = [
    "ExportRecord",
    "ExportResult",
    "IssueDetail",
    "IssueSummary",
    "Project",
    "SetupState",
    "utc_now",
]
