"""
backlogmd - Fetch Backlog issues, cache them locally and export them as Markdown.

Reads go online first; when the tracker is unreachable or rate limiting,
cached data is served instead.
"""

__version__ = "0.1.0"
