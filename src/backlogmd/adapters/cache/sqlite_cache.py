"""
SQLite Cache - Local issue cache and settings store.

A single SQLite file holds four tables:

    app_settings  key/value settings (space URL, export dir, key marker)
    projects      cached projects, keyed by id
    issues        cached issues, keyed by issue key
    exports       append-only export history

Every public method runs in its own transaction. The connection is shared
between threads and guarded by a lock.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from backlogmd.core.domain.entities import (
    ExportRecord,
    IssueDetail,
    IssueSummary,
    Project,
    utc_now,
)
from backlogmd.core.exceptions import StorageError, ValidationError
from backlogmd.core.ports.local_cache import LocalCachePort, SettingsStorePort


logger = logging.getLogger("SQLiteLocalCache")


SCHEMA = """
CREATE TABLE IF NOT EXISTS app_settings (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS projects (
    id          INTEGER PRIMARY KEY,
    project_key TEXT NOT NULL,
    name        TEXT NOT NULL,
    synced_at   TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS issues (
    issue_key       TEXT PRIMARY KEY,
    summary         TEXT NOT NULL,
    description_raw TEXT,
    description_md  TEXT,
    updated_at      TEXT NOT NULL,
    synced_at       TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS exports (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    issue_key   TEXT NOT NULL,
    export_path TEXT NOT NULL,
    exported_at TEXT NOT NULL
);
"""

# Setting keys
SPACE_URL_KEY = "space_url"
EXPORT_DIR_KEY = "export_dir"
API_KEY_MARKER_KEY = "api_key_configured"

_TRUTHY_MARKERS = ("1", "true", "yes")


def escape_like(keyword: str) -> str:
    """Escape LIKE wildcards so the keyword matches literally."""
    return keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteLocalCache(LocalCachePort, SettingsStorePort):
    """
    SQLite implementation of the local cache and the settings store.

    Example:
        >>> cache = SQLiteLocalCache(db_path=Path("~/.local/share/backlogmd/app.db"))
        >>> cache.upsert_projects(projects)
        >>> cache.list_projects()
    """

    def __init__(
        self,
        db_path: Path | str,
        clock: Callable[[], str] = utc_now,
    ):
        """
        Open (and create if needed) the cache database.

        Args:
            db_path: Path to the SQLite file, or ``":memory:"``
            clock: Source of ``synced_at`` and ``exported_at`` timestamps

        Raises:
            StorageError: If the database cannot be opened
        """
        self.db_path = str(db_path)
        self._clock = clock
        self._lock = threading.Lock()

        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"failed to open cache at {self.db_path}", cause=e) from e

        logger.debug(f"Opened cache at {self.db_path}")

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                raise StorageError("cache operation failed", cause=e) from e

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> SQLiteLocalCache:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    def upsert_projects(self, projects: list[Project]) -> None:
        with self._transaction() as conn:
            conn.executemany(
                """INSERT INTO projects (id, project_key, name, synced_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       project_key = excluded.project_key,
                       name = excluded.name,
                       synced_at = excluded.synced_at""",
                [(p.id, p.key, p.name, p.synced_at) for p in projects],
            )
        logger.debug(f"Upserted {len(projects)} projects")

    def list_projects(self) -> list[Project]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT id, project_key, name, synced_at FROM projects ORDER BY project_key ASC"
            ).fetchall()
        return [
            Project(
                id=row["id"],
                key=row["project_key"],
                name=row["name"],
                synced_at=row["synced_at"],
            )
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    def upsert_issue_detail(self, detail: IssueDetail) -> None:
        with self._transaction() as conn:
            conn.execute(
                """INSERT INTO issues
                       (issue_key, summary, description_raw, description_md, updated_at, synced_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(issue_key) DO UPDATE SET
                       summary = excluded.summary,
                       description_raw = excluded.description_raw,
                       description_md = excluded.description_md,
                       updated_at = excluded.updated_at,
                       synced_at = excluded.synced_at""",
                (
                    detail.issue_key,
                    detail.summary,
                    detail.description_raw,
                    detail.description_md,
                    detail.updated_at,
                    detail.synced_at,
                ),
            )

    def upsert_issue_summary(self, summary: IssueSummary) -> None:
        # Descriptions stay untouched on conflict
        with self._transaction() as conn:
            conn.execute(
                """INSERT INTO issues (issue_key, summary, updated_at, synced_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(issue_key) DO UPDATE SET
                       summary = excluded.summary,
                       updated_at = excluded.updated_at,
                       synced_at = excluded.synced_at""",
                (summary.issue_key, summary.summary, summary.updated_at, self._clock()),
            )

    def search_issue_summaries(self, keyword: str) -> list[IssueSummary]:
        pattern = f"%{escape_like(keyword)}%"
        with self._transaction() as conn:
            rows = conn.execute(
                """SELECT issue_key, summary, updated_at
                   FROM issues
                   WHERE issue_key LIKE ? ESCAPE '\\' OR summary LIKE ? ESCAPE '\\'
                   ORDER BY updated_at DESC""",
                (pattern, pattern),
            ).fetchall()
        return [
            IssueSummary(
                issue_key=row["issue_key"],
                summary=row["summary"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]

    def get_issue_detail(self, issue_key: str) -> IssueDetail | None:
        with self._transaction() as conn:
            row = conn.execute(
                """SELECT issue_key, summary,
                          COALESCE(description_raw, '') AS description_raw,
                          COALESCE(description_md, '') AS description_md,
                          updated_at, synced_at
                   FROM issues WHERE issue_key = ?""",
                (issue_key,),
            ).fetchone()

        if row is None:
            return None
        return IssueDetail(
            issue_key=row["issue_key"],
            summary=row["summary"],
            description_raw=row["description_raw"],
            description_md=row["description_md"],
            updated_at=row["updated_at"],
            synced_at=row["synced_at"],
        )

    # -------------------------------------------------------------------------
    # Export history
    # -------------------------------------------------------------------------

    def insert_export_record(self, issue_key: str, export_path: str) -> ExportRecord:
        exported_at = self._clock()
        with self._transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO exports (issue_key, export_path, exported_at) VALUES (?, ?, ?)",
                (issue_key, export_path, exported_at),
            )
            record_id = cursor.lastrowid
        return ExportRecord(
            id=int(record_id or 0),
            issue_key=issue_key,
            export_path=export_path,
            exported_at=exported_at,
        )

    def list_export_records(self, limit: int) -> list[ExportRecord]:
        if limit <= 0:
            raise ValidationError("limit must be > 0")

        with self._transaction() as conn:
            rows = conn.execute(
                """SELECT id, issue_key, export_path, exported_at
                   FROM exports
                   ORDER BY exported_at DESC, id DESC
                   LIMIT ?""",
                (limit,),
            ).fetchall()
        return [
            ExportRecord(
                id=row["id"],
                issue_key=row["issue_key"],
                export_path=row["export_path"],
                exported_at=row["exported_at"],
            )
            for row in rows
        ]

    def clear_export_records(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM exports")
        logger.info("Cleared export history")

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def _save_setting(self, key: str, value: str) -> None:
        with self._transaction() as conn:
            conn.execute(
                """INSERT INTO app_settings (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                (key, value),
            )

    def _load_setting(self, key: str) -> str | None:
        with self._transaction() as conn:
            row = conn.execute("SELECT value FROM app_settings WHERE key = ?", (key,)).fetchone()
        return None if row is None else row["value"]

    def _clear_setting(self, key: str) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM app_settings WHERE key = ?", (key,))

    def save_space_url(self, space_url: str) -> None:
        self._save_setting(SPACE_URL_KEY, space_url)

    def load_space_url(self) -> str | None:
        return self._load_setting(SPACE_URL_KEY)

    def clear_space_url(self) -> None:
        self._clear_setting(SPACE_URL_KEY)

    def save_export_dir(self, export_dir: str) -> None:
        self._save_setting(EXPORT_DIR_KEY, export_dir)

    def load_export_dir(self) -> str | None:
        return self._load_setting(EXPORT_DIR_KEY)

    def clear_export_dir(self) -> None:
        self._clear_setting(EXPORT_DIR_KEY)

    def save_api_key_configured_marker(self, configured: bool) -> None:
        self._save_setting(API_KEY_MARKER_KEY, "1" if configured else "0")

    def load_api_key_configured_marker(self) -> bool:
        return self._load_setting(API_KEY_MARKER_KEY) in _TRUTHY_MARKERS

    def clear_api_key_configured_marker(self) -> None:
        self._clear_setting(API_KEY_MARKER_KEY)
