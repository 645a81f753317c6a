"""
Markdown export - Write an issue description to a ``.md`` file.

Without overwrite, an existing ``KEY.md`` is kept and the next free name
is used: ``KEY(1).md`` ... ``KEY(9999).md``, then ``KEY(overflow).md``.
"""

import logging
from pathlib import Path

from backlogmd.core.exceptions import StorageError, ValidationError


logger = logging.getLogger("MarkdownExport")

MAX_EXPORT_SUFFIX = 9_999
OVERFLOW_SUFFIX = "overflow"


def validate_issue_key(issue_key: str) -> str:
    """Trimmed key, safe to use as a file name."""
    key = issue_key.strip()
    if not key:
        raise ValidationError("issue key is required")
    if "/" in key or "\\" in key or key in (".", ".."):
        raise ValidationError(f"invalid issue key for a file name: {key!r}")
    return key


def next_available_export_path(target_dir: Path, issue_key: str) -> Path:
    base = target_dir / f"{issue_key}.md"
    if not base.exists():
        return base

    for i in range(1, MAX_EXPORT_SUFFIX + 1):
        candidate = target_dir / f"{issue_key}({i}).md"
        if not candidate.exists():
            return candidate

    return target_dir / f"{issue_key}({OVERFLOW_SUFFIX}).md"


def write_markdown_export(
    target_dir: Path,
    issue_key: str,
    content: str,
    overwrite: bool = False,
) -> Path:
    """
    Write ``content`` for ``issue_key`` into ``target_dir``.

    Args:
        target_dir: Export directory, created if missing
        issue_key: Issue key used as the file name
        content: Markdown text, written as UTF-8
        overwrite: Replace ``KEY.md`` instead of picking a free name

    Returns:
        Path of the written file

    Raises:
        ValidationError: If the key cannot be used as a file name
        StorageError: If the directory or file cannot be written
    """
    key = validate_issue_key(issue_key)

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{key}.md" if overwrite else next_available_export_path(target_dir, key)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise StorageError(f"failed to write export for {key}", cause=e) from e

    logger.info(f"Exported {key} to {path}")
    return path
