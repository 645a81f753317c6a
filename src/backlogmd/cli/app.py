"""
CLI App - Main entry point for the backlogmd command line tool.
"""

import argparse
import getpass
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from backlogmd import __version__
from backlogmd.adapters.backlog import RetryingHttpClient
from backlogmd.adapters.cache import SQLiteLocalCache
from backlogmd.adapters.config import EnvironmentConfigProvider
from backlogmd.adapters.credentials import create_credential_store
from backlogmd.application.commands import BacklogCommands, CommandDispatcher, CommandResponse
from backlogmd.core.exceptions import BacklogMdError, StorageError
from backlogmd.core.ports.config_provider import AppConfig

from .exit_codes import ExitCode
from .logging import setup_logging
from .output import Console


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for backlogmd.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="backlogmd",
        description="Fetch Backlog issues, cache them locally and export them as Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Verify and save the space URL and API key
  backlogmd setup --space-url https://example.backlog.com

  # Sync projects and look up an issue
  backlogmd projects
  backlogmd show PROJ-123

  # Search (falls back to the local cache when offline)
  backlogmd search "login page"

  # Export an issue description to Markdown
  backlogmd export PROJ-123 --dir ./docs

  # Machine-readable output
  backlogmd --json history --limit 10
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--json", action="store_true", help="Print command responses as JSON")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress informational output")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--config", type=Path, help="Path to a backlogmd.yaml config file")
    parser.add_argument("--data-dir", help="Directory for the local cache database")
    parser.add_argument("--db-path", help="Explicit path of the cache database")
    parser.add_argument(
        "--credential-backend",
        choices=["keyring", "environment"],
        help="Where the API key is stored (default: keyring)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument("--log-format", choices=["text", "json"], help="Log output format")
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    setup = subparsers.add_parser("setup", help="Verify and save space URL and API key")
    setup.add_argument("--space-url", required=True, help="Backlog space URL")
    setup.add_argument("--api-key", help="Backlog API key (prompted for when omitted)")

    subparsers.add_parser("status", help="Show the saved setup")
    subparsers.add_parser("projects", help="Sync and list projects")

    search_key = subparsers.add_parser("search-key", help="Look up an issue by key")
    search_key.add_argument("issue_key")

    search = subparsers.add_parser("search", help="Search issues by keyword")
    search.add_argument("keyword")

    show = subparsers.add_parser("show", help="Show an issue with its Markdown description")
    show.add_argument("issue_key")

    export = subparsers.add_parser("export", help="Export an issue description to a .md file")
    export.add_argument("issue_key")
    export.add_argument("--dir", help="Target directory (default: saved export dir or cwd)")
    export.add_argument("--overwrite", action="store_true", help="Replace KEY.md if it exists")

    history = subparsers.add_parser("history", help="List recent exports")
    history.add_argument("--limit", type=int, default=20, help="Maximum records (default: 20)")

    subparsers.add_parser("clear-history", help="Delete the export history")

    export_dir = subparsers.add_parser("set-export-dir", help="Save the default export directory")
    export_dir.add_argument("export_dir")

    subparsers.add_parser("reset", help="Delete the stored API key and saved settings")

    return parser


# =============================================================================
# Command invocation
# =============================================================================


def build_invocation(args: argparse.Namespace, commands: BacklogCommands) -> tuple[str, tuple]:
    """Translate parsed arguments into a command name and its arguments."""
    command = args.command

    if command == "setup":
        api_key = args.api_key if args.api_key is not None else getpass.getpass("Backlog API key: ")
        return "setup_save", (args.space_url, api_key)
    if command == "status":
        return "setup_load", ()
    if command == "projects":
        return "projects_sync", ()
    if command == "search-key":
        return "issues_search_by_key", (args.issue_key,)
    if command == "search":
        return "issues_search_by_keyword", (args.keyword,)
    if command == "show":
        return "issue_get_detail", (args.issue_key,)
    if command == "export":
        target_dir = args.dir or commands.settings.load_export_dir() or str(Path.cwd())
        return "issue_export_markdown", (args.issue_key, target_dir, args.overwrite)
    if command == "history":
        return "exports_list", (args.limit,)
    if command == "clear-history":
        return "exports_clear", ()
    if command == "set-export-dir":
        return "set_export_dir", (args.export_dir,)
    if command == "reset":
        return "auth_reset", ()

    raise ValueError(f"Unknown command: {command}")


# =============================================================================
# Text rendering
# =============================================================================


def _render_setup(console: Console, data: dict[str, Any]) -> None:
    console.section("Setup")
    console.item(f"Space URL:  {data['spaceUrl'] or '(not set)'}")
    console.item(f"API key:    {'configured' if data['hasApiKey'] else 'not configured'}")
    console.item(f"Export dir: {data['exportDir'] or '(not set)'}")


def _render_projects(console: Console, data: list[dict[str, Any]]) -> None:
    console.section(f"Projects ({len(data)})")
    console.table(
        ["Key", "Name", "Synced"],
        [[p["projectKey"], p["name"], p["syncedAt"]] for p in data],
    )


def _render_summaries(console: Console, data: list[dict[str, Any]]) -> None:
    console.section(f"Issues ({len(data)})")
    console.table(
        ["Key", "Summary", "Updated"],
        [[i["issueKey"], i["summary"], i["updatedAt"]] for i in data],
    )


def _render_detail(console: Console, data: dict[str, Any]) -> None:
    console.section(f"{data['issueKey']}: {data['summary']}")
    console.detail(f"updated {data['updatedAt']}, synced {data['syncedAt']}")
    console.print()
    console.print(data["descriptionMd"], force=True)


def _render_history(console: Console, data: list[dict[str, Any]]) -> None:
    console.section(f"Exports ({len(data)})")
    console.table(
        ["Issue", "Path", "Exported"],
        [[e["issueKey"], e["exportPath"], e["exportedAt"]] for e in data],
    )


RENDERERS: dict[str, Callable[[Console, Any], None]] = {
    "setup_save": lambda console, _: console.success("Connection verified, setup saved"),
    "setup_load": _render_setup,
    "projects_sync": _render_projects,
    "issues_search_by_key": _render_summaries,
    "issues_search_by_keyword": _render_summaries,
    "issue_get_detail": _render_detail,
    "issue_export_markdown": lambda console, data: console.success(f"Exported to {data['path']}"),
    "exports_list": _render_history,
    "exports_clear": lambda console, _: console.success("Export history cleared"),
    "set_export_dir": lambda console, _: console.success("Export directory saved"),
    "auth_reset": lambda console, _: console.success("Credentials and settings reset"),
}


def render(console: Console, command: str, response: CommandResponse) -> int:
    """Print ``response`` and return the process exit code."""
    if console.json_mode or not response.ok:
        console.response(response)
    else:
        RENDERERS[command](console, response.data)

    if response.error is not None:
        return ExitCode.from_error_code(response.error.code)
    return ExitCode.SUCCESS if response.ok else ExitCode.ERROR


# =============================================================================
# Entry points
# =============================================================================


def load_config(args: argparse.Namespace) -> tuple[AppConfig | None, list[str]]:
    provider = EnvironmentConfigProvider(
        config_file=args.config,
        cli_overrides={
            "data_dir": args.data_dir,
            "db_path": args.db_path,
            "credential_backend": args.credential_backend,
            "log_level": args.log_level,
            "log_format": args.log_format,
            "log_file": args.log_file,
        },
    )
    errors = provider.validate()
    if errors:
        return None, errors
    return provider.load(), []


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the backlogmd CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console(color=not args.no_color, quiet=args.quiet, json_mode=args.json)

    config, errors = load_config(args)
    if config is None:
        for error in errors:
            console.error(error)
        return ExitCode.CONFIG_ERROR

    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        static_fields={"service": "backlogmd", "version": __version__},
    )
    logger = logging.getLogger("backlogmd")

    try:
        cache = SQLiteLocalCache(db_path=config.database_path)
    except StorageError as e:
        console.error(str(e))
        return ExitCode.STORAGE_ERROR

    http_client = RetryingHttpClient(
        connect_timeout=config.http.connect_timeout,
        total_timeout=config.http.total_timeout,
    )
    commands = BacklogCommands(
        cache,
        cache,
        create_credential_store(config.credential_backend),
        http_client=http_client,
    )

    try:
        name, command_args = build_invocation(args, commands)
        logger.debug(f"Running {name}")
        with CommandDispatcher(commands, max_workers=1) as dispatcher:
            response = dispatcher.call(name, *command_args)
        return render(console, name, response)
    except BacklogMdError as e:
        console.response(CommandResponse.failure(e))
        return ExitCode.from_error_code(e.code)
    except KeyboardInterrupt:
        console.error("Interrupted")
        return ExitCode.SIGINT
    finally:
        commands.close()
        cache.close()


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
