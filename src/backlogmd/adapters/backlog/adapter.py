"""
Backlog Adapter - Implements IssueSourcePort for the Backlog REST API v2.

Builds request URLs, delegates transport to RetryingHttpClient and maps
Backlog payloads into domain entities. Descriptions are converted to
Markdown at fetch time.

Backlog REST API documentation:
https://developer.nulab.com/docs/backlog/
"""

import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from backlogmd.adapters.formatters.markdown import MarkdownFormatter
from backlogmd.core.domain.entities import IssueDetail, IssueSummary, Project, utc_now
from backlogmd.core.exceptions import UnclassifiedError, ValidationError
from backlogmd.core.outcome import Outcome, to_error
from backlogmd.core.ports.issue_source import IssueSourcePort

from .client import RetryingHttpClient


class BacklogIssueSource(IssueSourcePort):
    """
    Backlog implementation of the IssueSourcePort.

    The API key travels as the ``apiKey`` query parameter on every call.
    """

    API_PREFIX = "/api/v2"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        client: RetryingHttpClient | None = None,
        formatter: MarkdownFormatter | None = None,
        clock: Callable[[], str] = utc_now,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Space URL (e.g., https://example.backlog.com)
            api_key: Backlog API key
            client: Optional preconfigured HTTP client
            formatter: Optional custom Markdown formatter
            clock: Source of ``synced_at`` timestamps

        Raises:
            ValidationError: If base URL or API key is blank
        """
        normalized_url = (base_url or "").strip()
        normalized_key = (api_key or "").strip()

        if not normalized_url:
            raise ValidationError("space URL is required")
        if not normalized_key:
            raise ValidationError("API key is required")

        self.base_url = normalized_url.rstrip("/")
        self._api_key = normalized_key
        self._client = client or RetryingHttpClient()
        self.formatter = formatter or MarkdownFormatter()
        self._clock = clock
        self.logger = logging.getLogger("BacklogIssueSource")

    # -------------------------------------------------------------------------
    # IssueSourcePort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Backlog"

    def verify_connection(self) -> None:
        # Single attempt so that setup fails fast on bad credentials
        outcome = self._client.request_once(self.url_with_key("/users/myself"))
        if not outcome.is_success:
            raise to_error(outcome)
        self.logger.info(f"Verified connection to {self.base_url}")

    def fetch_projects(self) -> list[Project]:
        payload = self._get_json("/projects")
        if not isinstance(payload, list):
            raise UnclassifiedError("unknown error: expected a list of projects")

        synced_at = self._clock()
        try:
            projects = [
                Project(
                    id=int(_field(item, "id")),
                    key=str(_field(item, "projectKey", "project_key")),
                    name=str(_field(item, "name")),
                    synced_at=synced_at,
                )
                for item in payload
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise UnclassifiedError("unknown error: malformed project payload", cause=e) from e

        self.logger.info(f"Fetched {len(projects)} projects")
        return projects

    def fetch_issue_by_key(self, issue_key: str) -> IssueDetail:
        key = issue_key.strip()
        payload = self._get_json(f"/issues/{quote(key, safe='')}", issue_key=key)
        if not isinstance(payload, dict):
            raise UnclassifiedError("unknown error: expected an issue object", issue_key=key)

        try:
            raw = _field(payload, "description", default=None) or ""
            detail = IssueDetail(
                issue_key=str(_field(payload, "issueKey", "issue_key")),
                summary=str(_field(payload, "summary")),
                description_raw=raw,
                description_md=self.formatter.to_markdown(raw),
                updated_at=str(_field(payload, "updated", "updatedAt", "updated_at")),
                synced_at=self._clock(),
            )
        except (KeyError, TypeError) as e:
            raise UnclassifiedError(
                "unknown error: malformed issue payload", issue_key=key, cause=e
            ) from e

        self.logger.debug(f"Fetched issue {detail.issue_key}")
        return detail

    def search_issues_by_keyword(self, keyword: str) -> list[IssueSummary]:
        query = quote(keyword.strip(), safe="")
        payload = self._get_json(f"/issues?keyword={query}")
        if not isinstance(payload, list):
            raise UnclassifiedError("unknown error: expected a list of issues")

        try:
            results = [
                IssueSummary(
                    issue_key=str(_field(item, "issueKey", "issue_key")),
                    summary=str(_field(item, "summary")),
                    updated_at=str(_field(item, "updated", "updatedAt", "updated_at")),
                )
                for item in payload
            ]
        except (KeyError, TypeError) as e:
            raise UnclassifiedError("unknown error: malformed issue payload", cause=e) from e

        self.logger.info(f"Keyword search returned {len(results)} issues")
        return results

    # -------------------------------------------------------------------------
    # URL Building
    # -------------------------------------------------------------------------

    def url_with_key(self, path: str) -> str:
        """Full URL for an API path with the ``apiKey`` parameter appended."""
        connector = "&" if "?" in path else "?"
        encoded_key = quote(self._api_key, safe="")
        return f"{self.base_url}{self.API_PREFIX}{path}{connector}apiKey={encoded_key}"

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _get_json(self, path: str, issue_key: str | None = None) -> Any:
        outcome: Outcome = self._client.request(self.url_with_key(path))
        if not outcome.is_success:
            raise to_error(outcome, issue_key=issue_key)

        body = getattr(outcome, "body", "")
        try:
            return json.loads(body)
        except ValueError as e:
            raise UnclassifiedError(
                "unknown error: response body is not valid JSON", issue_key=issue_key, cause=e
            ) from e


_MISSING = object()


def _field(payload: Any, *names: str, default: Any = _MISSING) -> Any:
    """Read the first present field among ``names`` (camelCase or snake_case)."""
    for name in names:
        if name in payload:
            return payload[name]
    if default is _MISSING:
        raise KeyError(names[0])
    return default
