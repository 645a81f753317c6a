"""
Output - Console output formatting.

Provides pretty-printed output with colors, and a JSON mode that prints
command responses verbatim for scripting.
"""

import json
import sys
from typing import Any

from backlogmd.application.commands import CommandResponse


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


class Symbols:
    """Unicode symbols for terminal output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO = "ℹ"


class Console:
    """
    Console output helper with colors and formatting.

    Attributes:
        color: Whether to use ANSI color codes.
        quiet: Whether to suppress everything but errors and results.
        json_mode: Whether to print responses as JSON for programmatic use.
    """

    def __init__(self, color: bool = True, quiet: bool = False, json_mode: bool = False):
        """
        Initialize the console output helper.

        Args:
            color: Enable colored output. Automatically disabled if stdout is not a TTY.
            quiet: Suppress informational output.
            json_mode: Output JSON instead of text.
        """
        self.json_mode = json_mode
        self.color = color and sys.stdout.isatty() and not json_mode
        self.quiet = quiet or json_mode

    def _c(self, text: str, *codes: str) -> str:
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "", force: bool = False) -> None:
        if self.quiet and not force:
            return
        print(text)

    def section(self, text: str) -> None:
        if self.quiet:
            return
        self.print()
        self.print(self._c(f"{Symbols.ARROW} {text}", Colors.BOLD, Colors.BLUE))

    def success(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        """Print an error message. Always prints, even in quiet mode."""
        print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED), file=sys.stderr)

    def warning(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def detail(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"    {text}", Colors.DIM))

    def item(self, text: str) -> None:
        if self.quiet:
            return
        self.print(f"    {Symbols.DOT} {text}")

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """
        Print a formatted table with headers.

        Column widths are computed from the content.
        """
        if self.quiet:
            return
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = "  " + "  ".join(
            self._c(h.ljust(widths[i]), Colors.BOLD) for i, h in enumerate(headers)
        )
        self.print(header_line)
        self.print("  " + "  ".join("-" * w for w in widths))

        for row in rows:
            self.print("  " + "  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))

    def json(self, payload: Any) -> None:
        """Print ``payload`` as indented JSON, regardless of quiet mode."""
        print(json.dumps(payload, indent=2, ensure_ascii=False))

    def response(self, response: CommandResponse) -> None:
        """Print a command response: JSON in json mode, an error line otherwise."""
        if self.json_mode:
            self.json(response.to_dict())
            return
        if response.error is not None:
            hint = " (retry later)" if response.error.recoverable else ""
            self.error(f"[{response.error.code}] {response.error.message}{hint}")
