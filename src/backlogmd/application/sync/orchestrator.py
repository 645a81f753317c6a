"""
Sync Orchestrator - Online-first reads with local cache fallback.

Every orchestrated read goes through the same state machine:

    REMOTE ──success──────────────▶ SUCCESS        (cache written, data returned)
       │
       └─network / rate limit──▶ FALLBACK_LOOKUP
                                     ├─cached──▶ FALLBACK_HIT   (cached data returned)
                                     └─nothing─▶ FALLBACK_MISS  (remote error re-raised)

Any other remote failure (auth, forbidden, not found, validation) is raised
as-is. The cache is never consulted for those.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from backlogmd.core.domain.entities import IssueDetail, IssueSummary, Project
from backlogmd.core.exceptions import FALLBACK_ELIGIBLE_ERRORS, TrackerError, ValidationError
from backlogmd.core.ports.issue_source import IssueSourcePort
from backlogmd.core.ports.local_cache import LocalCachePort


T = TypeVar("T")


class OperationState(Enum):
    """States of one orchestrated read."""

    REMOTE = "remote"
    SUCCESS = "success"
    FALLBACK_LOOKUP = "fallback_lookup"
    FALLBACK_HIT = "fallback_hit"
    FALLBACK_MISS = "fallback_miss"


@dataclass(frozen=True)
class SyncResult(Generic[T]):
    """
    Data returned by an orchestrated read and the state it ended in.

    ``remote_error`` is set on FALLBACK_HIT so callers can tell the user
    they are looking at cached data.
    """

    value: T
    state: OperationState
    remote_error: TrackerError | None = None

    @property
    def from_cache(self) -> bool:
        return self.state == OperationState.FALLBACK_HIT


class SyncOrchestrator:
    """
    Coordinates the remote source and the local cache.

    Successful remote reads are written through to the cache before they
    are returned. A failed cache write after a successful fetch is raised,
    not hidden.
    """

    def __init__(self, source: IssueSourcePort, cache: LocalCachePort):
        self.source = source
        self.cache = cache
        self.logger = logging.getLogger("SyncOrchestrator")

    # -------------------------------------------------------------------------
    # Orchestrated reads
    # -------------------------------------------------------------------------

    def fetch_issue_detail(self, issue_key: str) -> IssueDetail:
        return self.fetch_issue_detail_result(issue_key).value

    def fetch_issue_detail_result(self, issue_key: str) -> SyncResult[IssueDetail]:
        key = _require_key(issue_key)

        def fallback() -> IssueDetail | None:
            return self.cache.get_issue_detail(key)

        return self.run_online_first(
            operation=f"fetch_issue_detail({key})",
            remote=lambda: self.source.fetch_issue_by_key(key),
            persist=self.cache.upsert_issue_detail,
            fallback=fallback,
        )

    def search_by_key(self, issue_key: str) -> list[IssueSummary]:
        return self.search_by_key_result(issue_key).value

    def search_by_key_result(self, issue_key: str) -> SyncResult[list[IssueSummary]]:
        key = _require_key(issue_key)

        def remote() -> list[IssueSummary]:
            detail = self.source.fetch_issue_by_key(key)
            self.cache.upsert_issue_detail(detail)
            return [detail.to_summary()]

        def fallback() -> list[IssueSummary] | None:
            # Exact key, never a substring match
            detail = self.cache.get_issue_detail(key)
            return [detail.to_summary()] if detail is not None else None

        return self.run_online_first(
            operation=f"search_by_key({key})",
            remote=remote,
            persist=None,
            fallback=fallback,
        )

    def search_by_keyword(self, keyword: str) -> list[IssueSummary]:
        return self.search_by_keyword_result(keyword).value

    def search_by_keyword_result(self, keyword: str) -> SyncResult[list[IssueSummary]]:
        query = keyword.strip()
        if not query:
            raise ValidationError("keyword is required")

        def persist(results: list[IssueSummary]) -> None:
            for item in results:
                self.cache.upsert_issue_summary(item)

        def fallback() -> list[IssueSummary] | None:
            return self.cache.search_issue_summaries(query) or None

        return self.run_online_first(
            operation=f"search_by_keyword({query!r})",
            remote=lambda: self.source.search_issues_by_keyword(query),
            persist=persist,
            fallback=fallback,
        )

    # -------------------------------------------------------------------------
    # Plain sync (no fallback)
    # -------------------------------------------------------------------------

    def sync_projects(self) -> list[Project]:
        """Fetch projects, write them to the cache and return the cached list."""
        projects = self.source.fetch_projects()
        self.cache.upsert_projects(projects)
        self.logger.info(f"Synced {len(projects)} projects from {self.source.name}")
        return self.cache.list_projects()

    # -------------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------------

    def run_online_first(
        self,
        operation: str,
        remote: Callable[[], T],
        persist: Callable[[T], None] | None,
        fallback: Callable[[], T | None],
    ) -> SyncResult[T]:
        """
        Run one read through the online-first state machine.

        Args:
            operation: Label used in log messages
            remote: Fetches from the tracker; raises TrackerError on failure
            persist: Writes a successful result to the cache
            fallback: Reads from the cache; ``None`` means nothing cached

        Raises:
            TrackerError: Non-eligible remote errors, or the original
                remote error on a fallback miss
            StorageError: If the cache write or the cache read fails
        """
        self.logger.debug(f"{operation}: {OperationState.REMOTE.value}")
        try:
            value = remote()
        except FALLBACK_ELIGIBLE_ERRORS as e:
            return self._fall_back(operation, fallback, e)

        if persist is not None:
            persist(value)
        self.logger.debug(f"{operation}: {OperationState.SUCCESS.value}")
        return SyncResult(value=value, state=OperationState.SUCCESS)

    def _fall_back(
        self,
        operation: str,
        fallback: Callable[[], T | None],
        remote_error: TrackerError,
    ) -> SyncResult[T]:
        self.logger.warning(
            f"{operation}: remote failed ({remote_error.code}), "
            f"{OperationState.FALLBACK_LOOKUP.value}"
        )
        cached = fallback()

        if cached is None:
            self.logger.warning(f"{operation}: {OperationState.FALLBACK_MISS.value}")
            raise remote_error

        self.logger.info(f"{operation}: {OperationState.FALLBACK_HIT.value}, serving cached data")
        return SyncResult(
            value=cached,
            state=OperationState.FALLBACK_HIT,
            remote_error=remote_error,
        )


def _require_key(issue_key: str) -> str:
    key = issue_key.strip()
    if not key:
        raise ValidationError("issue key is required")
    return key
