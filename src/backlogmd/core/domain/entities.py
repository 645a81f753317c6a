"""
Domain entities - Records fetched from the tracker and kept in the local cache.

All records serialize to lower-camel-case dictionaries for the command
boundary. Timestamps are RFC 3339 strings in UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def utc_now() -> str:
    """Current time as an RFC 3339 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Project:
    """A tracker project. Identity is ``id``."""

    id: int
    key: str
    name: str
    synced_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "projectKey": self.key,
            "name": self.name,
            "syncedAt": self.synced_at,
        }


@dataclass(frozen=True)
class IssueSummary:
    """
    Lightweight issue record used by search results.

    Remote search and local fallback search produce the same shape.
    """

    issue_key: str
    summary: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "issueKey": self.issue_key,
            "summary": self.summary,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class IssueDetail:
    """
    Full issue record.

    ``description_md`` is derived from ``description_raw`` when the issue is
    fetched and is always stored next to it.
    """

    issue_key: str
    summary: str
    description_raw: str
    description_md: str
    updated_at: str
    synced_at: str

    def to_summary(self) -> IssueSummary:
        return IssueSummary(
            issue_key=self.issue_key,
            summary=self.summary,
            updated_at=self.updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "issueKey": self.issue_key,
            "summary": self.summary,
            "descriptionRaw": self.description_raw,
            "descriptionMd": self.description_md,
            "updatedAt": self.updated_at,
            "syncedAt": self.synced_at,
        }


@dataclass(frozen=True)
class ExportRecord:
    """Append-only record of a markdown export. ``id`` is assigned by the store."""

    id: int
    issue_key: str
    export_path: str
    exported_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "issueKey": self.issue_key,
            "exportPath": self.export_path,
            "exportedAt": self.exported_at,
        }


@dataclass(frozen=True)
class SetupState:
    """What the setup screen needs to know."""

    space_url: str | None
    has_api_key: bool
    export_dir: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "spaceUrl": self.space_url,
            "hasApiKey": self.has_api_key,
            "exportDir": self.export_dir,
        }


@dataclass(frozen=True)
class ExportResult:
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path}
