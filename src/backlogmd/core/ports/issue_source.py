"""
Issue Source Port - Abstract interface for the remote issue tracker.

Implementations:
- BacklogIssueSource: Backlog REST API v2
"""

from abc import ABC, abstractmethod

from backlogmd.core.domain.entities import IssueDetail, IssueSummary, Project


class IssueSourcePort(ABC):
    """
    Read-only access to a remote issue tracker.

    Failures surface as ``TrackerError`` subclasses; implementations never
    return partial or default data in place of an error.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name (e.g., 'Backlog')."""
        ...

    @abstractmethod
    def verify_connection(self) -> None:
        """
        Check that the base URL and credential are accepted.

        Raises:
            TrackerError: If the identity check fails
        """
        ...

    @abstractmethod
    def fetch_projects(self) -> list[Project]:
        """Fetch every project visible to the credential."""
        ...

    @abstractmethod
    def fetch_issue_by_key(self, issue_key: str) -> IssueDetail:
        """
        Fetch one issue with its description converted to markdown.

        Args:
            issue_key: Issue key (e.g., "PROJ-123")
        """
        ...

    @abstractmethod
    def search_issues_by_keyword(self, keyword: str) -> list[IssueSummary]:
        """
        Search issues by free-text keyword.

        Args:
            keyword: Search text; surrounding whitespace is ignored
        """
        ...
