"""
Shared pytest fixtures for the backlogmd test suite.

Fixture Categories:
- Domain: Sample projects, issues and summaries
- Adapters: SQLite cache, in-memory credential store, mocked issue source
- Application: Credential cache, commands wired to test doubles
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from backlogmd.adapters.cache import SQLiteLocalCache
from backlogmd.application.commands import BacklogCommands
from backlogmd.application.credentials import CredentialCache
from backlogmd.core.domain import IssueDetail, IssueSummary, Project
from backlogmd.core.exceptions import CredentialStoreError
from backlogmd.core.ports import CredentialStorePort, IssueSourcePort


FIXED_NOW = "2024-05-01T12:00:00+00:00"


class InMemoryCredentialStore(CredentialStorePort):
    """Credential store double that counts loads."""

    def __init__(self, secret: str | None = None, fail: bool = False):
        self.secret = secret
        self.fail = fail
        self.load_calls = 0

    @property
    def name(self) -> str:
        return "Memory"

    def save(self, secret: str) -> None:
        if self.fail:
            raise CredentialStoreError("store unavailable")
        self.secret = secret.strip()

    def load(self) -> str | None:
        self.load_calls += 1
        if self.fail:
            raise CredentialStoreError("store unavailable")
        if self.secret is None or not self.secret.strip():
            return None
        return self.secret.strip()

    def delete(self) -> None:
        if self.fail:
            raise CredentialStoreError("store unavailable")
        self.secret = None


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def sample_projects() -> list[Project]:
    return [
        Project(id=2, key="WEB", name="Website", synced_at=FIXED_NOW),
        Project(id=1, key="APP", name="Mobile App", synced_at=FIXED_NOW),
    ]


@pytest.fixture
def sample_detail() -> IssueDetail:
    """Issue PROJ-1 with wiki markup already converted."""
    return IssueDetail(
        issue_key="PROJ-1",
        summary="Login page crashes",
        description_raw="h2. Steps\n* open {{ /login }}",
        description_md="## Steps\n- open `/login`",
        updated_at="2024-04-30T09:00:00Z",
        synced_at=FIXED_NOW,
    )


@pytest.fixture
def sample_summaries() -> list[IssueSummary]:
    return [
        IssueSummary(issue_key="PROJ-1", summary="Login page crashes", updated_at="2024-04-30T09:00:00Z"),
        IssueSummary(issue_key="PROJ-2", summary="Logout button", updated_at="2024-04-29T09:00:00Z"),
    ]


# =============================================================================
# Adapter Fixtures
# =============================================================================


@pytest.fixture
def sqlite_cache(tmp_path: Path) -> SQLiteLocalCache:
    """Fresh SQLite cache in a temporary directory."""
    cache = SQLiteLocalCache(db_path=tmp_path / "data" / "app.db", clock=lambda: FIXED_NOW)
    yield cache
    cache.close()


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore(secret="stored-key")


@pytest.fixture
def memory_store_class() -> type[InMemoryCredentialStore]:
    """The in-memory store class, for tests that need their own instances."""
    return InMemoryCredentialStore


@pytest.fixture
def mock_source() -> MagicMock:
    """Issue source double; configure return values or side effects per test."""
    source = MagicMock(spec=IssueSourcePort)
    source.name = "MockBacklog"
    return source


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def credential_cache() -> CredentialCache:
    return CredentialCache()


@pytest.fixture
def commands(
    sqlite_cache: SQLiteLocalCache,
    credential_store: InMemoryCredentialStore,
    credential_cache: CredentialCache,
    mock_source: MagicMock,
) -> BacklogCommands:
    """Commands wired to the SQLite cache and a mocked issue source."""
    sqlite_cache.save_space_url("https://example.backlog.com")
    factory = MagicMock(return_value=mock_source)
    commands = BacklogCommands(
        sqlite_cache,
        sqlite_cache,
        credential_store,
        credential_cache=credential_cache,
        source_factory=factory,
    )
    yield commands
    commands.close()
