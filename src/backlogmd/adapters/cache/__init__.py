"""
Cache Module - Local persistence for synced tracker data.

Provides the SQLite-backed cache used as write-through target after
successful remote fetches and as read-only fallback when the tracker is
unreachable. The same database also keeps application settings.

Example:
    >>> from backlogmd.adapters.cache import SQLiteLocalCache
    >>>
    >>> cache = SQLiteLocalCache(db_path="app.db")
    >>> cache.get_issue_detail("PROJ-1")
"""

from .sqlite_cache import SQLiteLocalCache, escape_like


__all__ = ["SQLiteLocalCache", "escape_like"]
