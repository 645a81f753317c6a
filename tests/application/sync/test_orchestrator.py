"""
Tests for SyncOrchestrator.

Tests cover:
- SUCCESS: remote data returned and written through to the cache
- FALLBACK_HIT: network and rate limit errors served from the cache
- FALLBACK_MISS: the original remote error re-raised
- Errors that never fall back (auth, forbidden, not found, unknown)
- Key lookup fallback is exact, keyword fallback is a substring search
"""

from unittest.mock import MagicMock

import pytest

from backlogmd.application.sync import OperationState, SyncOrchestrator
from backlogmd.core.domain import IssueDetail, IssueSummary, Project
from backlogmd.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ResourceNotFoundError,
    StorageError,
    UnclassifiedError,
    ValidationError,
)


@pytest.fixture
def orchestrator(mock_source, sqlite_cache) -> SyncOrchestrator:
    return SyncOrchestrator(mock_source, sqlite_cache)


NON_FALLBACK_ERRORS = [
    AuthenticationError("authentication failed"),
    AccessDeniedError("permission denied"),
    ResourceNotFoundError("not found"),
    UnclassifiedError("unknown error: unexpected status: 418"),
]


# =============================================================================
# Issue detail
# =============================================================================


class TestFetchIssueDetail:
    """Tests for fetch_issue_detail_result()."""

    def test_success_writes_cache(self, orchestrator, mock_source, sqlite_cache, sample_detail):
        mock_source.fetch_issue_by_key.return_value = sample_detail

        result = orchestrator.fetch_issue_detail_result(" PROJ-1 ")

        assert result.state == OperationState.SUCCESS
        assert result.value == sample_detail
        assert not result.from_cache
        assert result.remote_error is None
        mock_source.fetch_issue_by_key.assert_called_once_with("PROJ-1")
        assert sqlite_cache.get_issue_detail("PROJ-1") == sample_detail

    @pytest.mark.parametrize(
        "error", [NetworkError("network error: timed out"), RateLimitError("rate limited")]
    )
    def test_eligible_error_with_cache_is_hit(
        self, orchestrator, mock_source, sqlite_cache, sample_detail, error
    ):
        sqlite_cache.upsert_issue_detail(sample_detail)
        mock_source.fetch_issue_by_key.side_effect = error

        result = orchestrator.fetch_issue_detail_result("PROJ-1")

        assert result.state == OperationState.FALLBACK_HIT
        assert result.from_cache
        assert result.value == sample_detail
        assert result.remote_error is error

    def test_eligible_error_without_cache_reraises_same_error(self, orchestrator, mock_source):
        error = NetworkError("network error: server error: 503")
        mock_source.fetch_issue_by_key.side_effect = error

        with pytest.raises(NetworkError) as exc_info:
            orchestrator.fetch_issue_detail("PROJ-1")

        assert exc_info.value is error

    @pytest.mark.parametrize("error", NON_FALLBACK_ERRORS, ids=lambda e: type(e).__name__)
    def test_non_eligible_errors_skip_cache(
        self, orchestrator, mock_source, sample_detail, error
    ):
        cache = MagicMock()
        cache.get_issue_detail.return_value = sample_detail
        mock_source.fetch_issue_by_key.side_effect = error

        with pytest.raises(type(error)):
            SyncOrchestrator(mock_source, cache).fetch_issue_detail("PROJ-1")

        cache.get_issue_detail.assert_not_called()

    def test_auth_error_never_served_from_cache(
        self, orchestrator, mock_source, sqlite_cache, sample_detail
    ):
        sqlite_cache.upsert_issue_detail(sample_detail)
        mock_source.fetch_issue_by_key.side_effect = AuthenticationError("authentication failed")

        with pytest.raises(AuthenticationError):
            orchestrator.fetch_issue_detail("PROJ-1")

    def test_cache_write_failure_propagates(self, mock_source, sample_detail):
        cache = MagicMock()
        cache.upsert_issue_detail.side_effect = StorageError("cache operation failed")
        mock_source.fetch_issue_by_key.return_value = sample_detail

        with pytest.raises(StorageError):
            SyncOrchestrator(mock_source, cache).fetch_issue_detail("PROJ-1")

    def test_blank_key_rejected(self, orchestrator, mock_source):
        with pytest.raises(ValidationError, match="issue key is required"):
            orchestrator.fetch_issue_detail("   ")

        mock_source.fetch_issue_by_key.assert_not_called()


# =============================================================================
# Search by key
# =============================================================================


class TestSearchByKey:
    """Tests for search_by_key_result()."""

    def test_success_returns_one_summary_and_caches_detail(
        self, orchestrator, mock_source, sqlite_cache, sample_detail
    ):
        mock_source.fetch_issue_by_key.return_value = sample_detail

        results = orchestrator.search_by_key("PROJ-1")

        assert results == [sample_detail.to_summary()]
        assert sqlite_cache.get_issue_detail("PROJ-1") == sample_detail

    def test_fallback_is_exact_match(self, orchestrator, mock_source, sqlite_cache):
        sqlite_cache.upsert_issue_summary(IssueSummary("PROJ-10", "Ten", "2024-01-10"))
        sqlite_cache.upsert_issue_summary(IssueSummary("PROJ-1", "One", "2024-01-01"))
        mock_source.fetch_issue_by_key.side_effect = NetworkError("network error: timed out")

        result = orchestrator.search_by_key_result("PROJ-1")

        assert result.state == OperationState.FALLBACK_HIT
        assert [s.issue_key for s in result.value] == ["PROJ-1"]

    def test_fallback_does_not_match_prefix(self, orchestrator, mock_source, sqlite_cache):
        sqlite_cache.upsert_issue_summary(IssueSummary("PROJ-10", "Ten", "2024-01-10"))
        error = RateLimitError("rate limited")
        mock_source.fetch_issue_by_key.side_effect = error

        with pytest.raises(RateLimitError) as exc_info:
            orchestrator.search_by_key("PROJ-1")

        assert exc_info.value is error


# =============================================================================
# Search by keyword
# =============================================================================


class TestSearchByKeyword:
    """Tests for search_by_keyword_result()."""

    def test_success_caches_summaries(
        self, orchestrator, mock_source, sqlite_cache, sample_summaries
    ):
        mock_source.search_issues_by_keyword.return_value = sample_summaries

        results = orchestrator.search_by_keyword("  log ")

        assert results == sample_summaries
        mock_source.search_issues_by_keyword.assert_called_once_with("log")
        assert len(sqlite_cache.search_issue_summaries("PROJ")) == 2

    def test_fallback_substring_search(
        self, orchestrator, mock_source, sqlite_cache, sample_summaries
    ):
        for summary in sample_summaries:
            sqlite_cache.upsert_issue_summary(summary)
        mock_source.search_issues_by_keyword.side_effect = NetworkError("network error: x")

        result = orchestrator.search_by_keyword_result("Logout")

        assert result.state == OperationState.FALLBACK_HIT
        assert [s.issue_key for s in result.value] == ["PROJ-2"]

    def test_empty_fallback_is_miss(self, orchestrator, mock_source):
        error = NetworkError("network error: x")
        mock_source.search_issues_by_keyword.side_effect = error

        with pytest.raises(NetworkError) as exc_info:
            orchestrator.search_by_keyword("nothing cached")

        assert exc_info.value is error

    def test_empty_remote_result_is_success(self, orchestrator, mock_source):
        mock_source.search_issues_by_keyword.return_value = []

        result = orchestrator.search_by_keyword_result("zzz")

        assert result.state == OperationState.SUCCESS
        assert result.value == []

    def test_blank_keyword_rejected(self, orchestrator, mock_source):
        with pytest.raises(ValidationError, match="keyword is required"):
            orchestrator.search_by_keyword(" ")

        mock_source.search_issues_by_keyword.assert_not_called()


# =============================================================================
# Projects and the generic state machine
# =============================================================================


class TestSyncProjects:
    """Tests for sync_projects()."""

    def test_returns_cached_list(self, orchestrator, mock_source, sample_projects):
        mock_source.fetch_projects.return_value = sample_projects

        projects = orchestrator.sync_projects()

        assert [p.key for p in projects] == ["APP", "WEB"]

    def test_no_fallback(self, orchestrator, mock_source, sqlite_cache):
        sqlite_cache.upsert_projects([Project(1, "APP", "App", "t")])
        mock_source.fetch_projects.side_effect = NetworkError("network error: x")

        with pytest.raises(NetworkError):
            orchestrator.sync_projects()


class TestRunOnlineFirst:
    """Tests for the generic state machine."""

    def test_persist_not_called_on_fallback(self, orchestrator):
        persist = MagicMock()

        def remote():
            raise NetworkError("network error: x")

        result = orchestrator.run_online_first("op", remote, persist, lambda: "cached")

        assert result.value == "cached"
        persist.assert_not_called()

    def test_fallback_read_failure_propagates(self, orchestrator):
        def remote():
            raise NetworkError("network error: x")

        def fallback():
            raise StorageError("cache operation failed")

        with pytest.raises(StorageError):
            orchestrator.run_online_first("op", remote, None, fallback)

    def test_fallback_value_is_detail(self, orchestrator):
        detail = IssueDetail("A-1", "s", "", "", "u", "t")

        def remote():
            raise RateLimitError("rate limited")

        result = orchestrator.run_online_first("op", remote, None, lambda: detail)

        assert result.value is detail
