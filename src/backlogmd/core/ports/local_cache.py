"""
Local Cache Port - Abstract interface for the on-disk issue cache.

Implementations:
- SQLiteLocalCache: SQLite database in the user data directory

Each method is an atomic unit of its own; no transaction spans several calls.
"""

from abc import ABC, abstractmethod

from backlogmd.core.domain.entities import ExportRecord, IssueDetail, IssueSummary, Project


class LocalCachePort(ABC):
    """Record store used as write-through target and read-only fallback."""

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    @abstractmethod
    def upsert_projects(self, projects: list[Project]) -> None:
        """Insert or replace projects by ``id``."""
        ...

    @abstractmethod
    def list_projects(self) -> list[Project]:
        """All cached projects ordered by project key."""
        ...

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    @abstractmethod
    def upsert_issue_detail(self, detail: IssueDetail) -> None:
        """Insert or replace an issue by ``issue_key``."""
        ...

    @abstractmethod
    def upsert_issue_summary(self, summary: IssueSummary) -> None:
        """Insert or update an issue summary, keeping any cached description."""
        ...

    @abstractmethod
    def search_issue_summaries(self, keyword: str) -> list[IssueSummary]:
        """Substring match on key or summary, most recently updated first."""
        ...

    @abstractmethod
    def get_issue_detail(self, issue_key: str) -> IssueDetail | None:
        """Exact lookup by key; ``None`` when the issue is not cached."""
        ...

    # -------------------------------------------------------------------------
    # Export history
    # -------------------------------------------------------------------------

    @abstractmethod
    def insert_export_record(self, issue_key: str, export_path: str) -> ExportRecord:
        """Append an export record; the store assigns ``id`` and timestamp."""
        ...

    @abstractmethod
    def list_export_records(self, limit: int) -> list[ExportRecord]:
        """
        Most recent export records first.

        Raises:
            ValidationError: If ``limit`` is not positive
        """
        ...

    @abstractmethod
    def clear_export_records(self) -> None:
        """Delete the whole export history."""
        ...


class SettingsStorePort(ABC):
    """Persistent application settings kept next to the cache."""

    @abstractmethod
    def save_space_url(self, space_url: str) -> None: ...

    @abstractmethod
    def load_space_url(self) -> str | None: ...

    @abstractmethod
    def clear_space_url(self) -> None: ...

    @abstractmethod
    def save_export_dir(self, export_dir: str) -> None: ...

    @abstractmethod
    def load_export_dir(self) -> str | None: ...

    @abstractmethod
    def clear_export_dir(self) -> None: ...

    @abstractmethod
    def save_api_key_configured_marker(self, configured: bool) -> None: ...

    @abstractmethod
    def load_api_key_configured_marker(self) -> bool: ...

    @abstractmethod
    def clear_api_key_configured_marker(self) -> None: ...
