"""
Tests for BacklogIssueSource.

Tests cover:
- Constructor validation and URL building
- Payload mapping for projects, issues and keyword search
- Outcome to error mapping
- Malformed responses
"""

import json
from unittest.mock import MagicMock

import pytest

from backlogmd.adapters.backlog import BacklogIssueSource, RetryingHttpClient
from backlogmd.core.exceptions import (
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ResourceNotFoundError,
    UnclassifiedError,
    ValidationError,
)
from backlogmd.core.outcome import AuthInvalid, NotFound, RateLimited, ServerError, Success


NOW = "2024-05-01T12:00:00+00:00"


def ok(payload) -> Success:
    return Success(body=json.dumps(payload))


@pytest.fixture
def client() -> MagicMock:
    return MagicMock(spec=RetryingHttpClient)


@pytest.fixture
def source(client) -> BacklogIssueSource:
    return BacklogIssueSource(
        "https://example.backlog.com/", "secret", client=client, clock=lambda: NOW
    )


# =============================================================================
# Construction and URLs
# =============================================================================


class TestConstruction:
    """Tests for constructor validation and URL building."""

    @pytest.mark.parametrize("base_url", ["", "   ", None])
    def test_blank_base_url_rejected(self, client, base_url):
        with pytest.raises(ValidationError, match="space URL"):
            BacklogIssueSource(base_url, "secret", client=client)

    @pytest.mark.parametrize("api_key", ["", "  \t"])
    def test_blank_api_key_rejected(self, client, api_key):
        with pytest.raises(ValidationError, match="API key"):
            BacklogIssueSource("https://example.backlog.com", api_key, client=client)

    def test_trailing_slash_removed(self, source):
        assert source.base_url == "https://example.backlog.com"

    def test_url_without_query(self, source):
        assert (
            source.url_with_key("/projects")
            == "https://example.backlog.com/api/v2/projects?apiKey=secret"
        )

    def test_url_with_existing_query(self, source):
        assert source.url_with_key("/issues?keyword=x").endswith("/issues?keyword=x&apiKey=secret")

    def test_api_key_is_encoded(self, client):
        source = BacklogIssueSource("https://example.backlog.com", "a+b/c", client=client)
        assert source.url_with_key("/projects").endswith("apiKey=a%2Bb%2Fc")

    def test_name(self, source):
        assert source.name == "Backlog"


# =============================================================================
# Operations
# =============================================================================


class TestVerifyConnection:
    """Tests for verify_connection()."""

    def test_single_attempt(self, source, client):
        client.request_once.return_value = ok({"id": 1, "name": "me"})

        source.verify_connection()

        client.request_once.assert_called_once()
        assert "/api/v2/users/myself?apiKey=secret" in client.request_once.call_args.args[0]
        client.request.assert_not_called()

    def test_invalid_key(self, source, client):
        client.request_once.return_value = AuthInvalid()

        with pytest.raises(AuthenticationError):
            source.verify_connection()


class TestFetchProjects:
    """Tests for fetch_projects()."""

    def test_maps_projects(self, source, client):
        client.request.return_value = ok(
            [
                {"id": 1, "projectKey": "APP", "name": "Mobile App", "archived": False},
                {"id": 2, "projectKey": "WEB", "name": "Website"},
            ]
        )

        projects = source.fetch_projects()

        assert [p.key for p in projects] == ["APP", "WEB"]
        assert projects[0].id == 1
        assert all(p.synced_at == NOW for p in projects)

    def test_non_list_payload(self, source, client):
        client.request.return_value = ok({"projects": []})

        with pytest.raises(UnclassifiedError):
            source.fetch_projects()

    def test_missing_field(self, source, client):
        client.request.return_value = ok([{"id": 1, "name": "No key"}])

        with pytest.raises(UnclassifiedError, match="malformed"):
            source.fetch_projects()

    def test_invalid_json(self, source, client):
        client.request.return_value = Success(body="<html>")

        with pytest.raises(UnclassifiedError, match="JSON"):
            source.fetch_projects()


class TestFetchIssueByKey:
    """Tests for fetch_issue_by_key()."""

    def test_maps_issue_and_converts_description(self, source, client):
        client.request.return_value = ok(
            {
                "issueKey": "PROJ-1",
                "summary": "Crash",
                "description": "h1. Title\n* step",
                "updated": "2024-04-30T09:00:00Z",
            }
        )

        detail = source.fetch_issue_by_key(" PROJ-1 ")

        assert detail.issue_key == "PROJ-1"
        assert detail.description_raw == "h1. Title\n* step"
        assert detail.description_md == "# Title\n- step"
        assert detail.updated_at == "2024-04-30T09:00:00Z"
        assert detail.synced_at == NOW
        assert "/api/v2/issues/PROJ-1?apiKey=" in client.request.call_args.args[0]

    def test_null_description_becomes_empty(self, source, client):
        client.request.return_value = ok(
            {"issueKey": "PROJ-2", "summary": "s", "description": None, "updated": "u"}
        )

        detail = source.fetch_issue_by_key("PROJ-2")

        assert detail.description_raw == ""
        assert detail.description_md == ""

    def test_key_is_path_encoded(self, source, client):
        client.request.return_value = NotFound()

        with pytest.raises(ResourceNotFoundError):
            source.fetch_issue_by_key("A/B")

        assert "/issues/A%2FB?" in client.request.call_args.args[0]

    def test_not_found_carries_issue_key(self, source, client):
        client.request.return_value = NotFound()

        with pytest.raises(ResourceNotFoundError) as exc_info:
            source.fetch_issue_by_key("PROJ-404")

        assert exc_info.value.issue_key == "PROJ-404"

    def test_server_error_is_network_error(self, source, client):
        client.request.return_value = ServerError(detail="server error: 503")

        with pytest.raises(NetworkError):
            source.fetch_issue_by_key("PROJ-1")


class TestSearchIssuesByKeyword:
    """Tests for search_issues_by_keyword()."""

    def test_maps_results(self, source, client):
        client.request.return_value = ok(
            [
                {"issueKey": "PROJ-1", "summary": "Login", "updated": "2024-04-30T09:00:00Z"},
                {"issueKey": "PROJ-2", "summary": "Logout", "updated": "2024-04-29T09:00:00Z"},
            ]
        )

        results = source.search_issues_by_keyword("log")

        assert [r.issue_key for r in results] == ["PROJ-1", "PROJ-2"]

    def test_keyword_is_trimmed_and_encoded(self, source, client):
        client.request.return_value = ok([])

        source.search_issues_by_keyword("  login page  ")

        assert "/issues?keyword=login%20page&apiKey=secret" in client.request.call_args.args[0]

    def test_rate_limit_surfaces(self, source, client):
        client.request.return_value = RateLimited()

        with pytest.raises(RateLimitError):
            source.search_issues_by_keyword("x")
