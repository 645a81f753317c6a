"""
Backlog Commands - The command surface used by the CLI and other shells.

Every method returns a CommandResponse and never raises. Methods are safe
to call from several worker threads at once: the credential cache is
lock-guarded and every cache call is its own transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from backlogmd.adapters.backlog.adapter import BacklogIssueSource
from backlogmd.adapters.backlog.client import RetryingHttpClient
from backlogmd.application.credentials import CredentialCache
from backlogmd.application.export import validate_issue_key, write_markdown_export
from backlogmd.application.sync.orchestrator import SyncOrchestrator
from backlogmd.core.domain.entities import (
    ExportRecord,
    ExportResult,
    IssueDetail,
    IssueSummary,
    Project,
    SetupState,
)
from backlogmd.core.exceptions import CredentialStoreError, StorageError, ValidationError
from backlogmd.core.ports.credential_store import CredentialStorePort
from backlogmd.core.ports.issue_source import IssueSourcePort
from backlogmd.core.ports.local_cache import LocalCachePort, SettingsStorePort

from .envelope import CommandResponse, run_command


SourceFactory = Callable[[str, str], IssueSourcePort]

COMMAND_NAMES = (
    "setup_save",
    "setup_load",
    "projects_sync",
    "issues_search_by_key",
    "issues_search_by_keyword",
    "issue_get_detail",
    "issue_export_markdown",
    "exports_list",
    "exports_clear",
    "set_export_dir",
    "auth_reset",
)


class BacklogCommands:
    """
    Commands for setup, sync, search, export and export history.

    Example:
        >>> cache = SQLiteLocalCache(db_path=config.database_path)
        >>> commands = BacklogCommands(cache, cache, KeyringCredentialStore())
        >>> response = commands.issue_get_detail("PROJ-1")
        >>> response.ok, response.data["summary"]
    """

    def __init__(
        self,
        cache: LocalCachePort,
        settings: SettingsStorePort,
        credential_store: CredentialStorePort,
        credential_cache: CredentialCache | None = None,
        source_factory: SourceFactory | None = None,
        http_client: RetryingHttpClient | None = None,
    ):
        """
        Initialize the command surface.

        Args:
            cache: Local issue cache
            settings: Settings store (usually the same SQLite cache)
            credential_store: Where the API key is persisted
            credential_cache: Shared in-process API key cache
            source_factory: Builds an issue source from (space URL, API key)
            http_client: HTTP client shared by sources from the default factory
        """
        self.cache = cache
        self.settings = settings
        self.credential_store = credential_store
        self.credential_cache = credential_cache or CredentialCache()
        self._http_client = http_client or RetryingHttpClient()
        self._source_factory = source_factory or self._default_source_factory
        self.logger = logging.getLogger("BacklogCommands")

    def _default_source_factory(self, space_url: str, api_key: str) -> IssueSourcePort:
        return BacklogIssueSource(space_url, api_key, client=self._http_client)

    def close(self) -> None:
        self._http_client.close()

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def setup_save(self, space_url: str, api_key: str) -> CommandResponse:
        def action() -> None:
            source = self._source_factory(space_url, api_key)
            source.verify_connection()

            trimmed_key = api_key.strip()
            self.credential_store.save(trimmed_key)
            self.credential_cache.set(trimmed_key)
            self.settings.save_space_url(space_url.strip())
            self.settings.save_api_key_configured_marker(True)
            self.logger.info(f"Saved setup for {space_url.strip()}")

        return run_command("setup_save", action)

    def setup_load(self) -> CommandResponse:
        def action() -> SetupState:
            marker = self.settings.load_api_key_configured_marker()
            try:
                has_api_key = self.credential_store.load() is not None or marker
            except CredentialStoreError as e:
                self.logger.warning(f"Credential store unavailable, using marker: {e}")
                has_api_key = marker

            return SetupState(
                space_url=self.settings.load_space_url(),
                has_api_key=has_api_key,
                export_dir=self.settings.load_export_dir(),
            )

        return run_command("setup_load", action)

    # -------------------------------------------------------------------------
    # Sync and search
    # -------------------------------------------------------------------------

    def projects_sync(self) -> CommandResponse:
        def action() -> list[Project]:
            return self._orchestrator().sync_projects()

        return run_command("projects_sync", action)

    def issues_search_by_key(self, issue_key: str) -> CommandResponse:
        def action() -> list[IssueSummary]:
            return self._orchestrator().search_by_key(issue_key)

        return run_command("issues_search_by_key", action)

    def issues_search_by_keyword(self, keyword: str) -> CommandResponse:
        def action() -> list[IssueSummary]:
            if not keyword.strip():
                raise ValidationError("keyword is required")
            return self._orchestrator().search_by_keyword(keyword)

        return run_command("issues_search_by_keyword", action)

    def issue_get_detail(self, issue_key: str) -> CommandResponse:
        def action() -> IssueDetail:
            return self._orchestrator().fetch_issue_detail(issue_key)

        return run_command("issue_get_detail", action)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def issue_export_markdown(
        self,
        issue_key: str,
        target_dir: str,
        overwrite: bool = False,
    ) -> CommandResponse:
        def action() -> ExportResult:
            key = validate_issue_key(issue_key)
            if not target_dir.strip():
                raise ValidationError("target directory is required")

            detail = self._orchestrator().fetch_issue_detail(key)
            path = write_markdown_export(
                Path(target_dir.strip()).expanduser(),
                key,
                detail.description_md,
                overwrite=overwrite,
            )
            self.cache.insert_export_record(key, str(path))
            return ExportResult(path=str(path))

        return run_command("issue_export_markdown", action)

    def exports_list(self, limit: int = 50) -> CommandResponse:
        def action() -> list[ExportRecord]:
            return self.cache.list_export_records(limit)

        return run_command("exports_list", action)

    def exports_clear(self) -> CommandResponse:
        return run_command("exports_clear", self.cache.clear_export_records)

    def set_export_dir(self, export_dir: str) -> CommandResponse:
        def action() -> None:
            trimmed = export_dir.strip()
            if not trimmed:
                raise ValidationError("export directory is required")
            try:
                Path(trimmed).expanduser().mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"cannot create export directory {trimmed}", cause=e) from e
            self.settings.save_export_dir(trimmed)

        return run_command("set_export_dir", action)

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    def auth_reset(self) -> CommandResponse:
        def action() -> None:
            self.credential_store.delete()
            self.credential_cache.clear()
            self.settings.clear_api_key_configured_marker()
            self.settings.clear_space_url()
            self.settings.clear_export_dir()
            self.logger.info("Reset stored credentials and settings")

        return run_command("auth_reset", action)

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _source(self) -> IssueSourcePort:
        space_url = (self.settings.load_space_url() or "").strip()
        if not space_url:
            raise ValidationError("Space URL is not configured")

        api_key = self.credential_cache.resolve(self.credential_store)
        return self._source_factory(space_url, api_key)

    def _orchestrator(self) -> SyncOrchestrator:
        return SyncOrchestrator(self._source(), self.cache)
