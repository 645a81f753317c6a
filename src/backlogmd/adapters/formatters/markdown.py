"""
Markdown Formatter - Backlog wiki syntax to Markdown.

Converts issue descriptions written in Backlog wiki notation into Markdown
before they are cached or exported. This is a best-effort set of textual
substitutions, not a parser: rules run in order, each one on the output of
the previous one.

Supported:
- Headings: ``h1.`` / ``h2.`` / ``h3.`` at line start
- Bullets: ``*`` at line start
- Inline code: ``{{ code }}``

Flattened (markup removed, text kept):
- Bracket links ``[[text]]``
- ``{color:...}`` / ``{color}`` spans
- ``{quote}`` markers
- Stray ``{{`` / ``}}`` left over from unbalanced inline code
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ConversionRule:
    """A single ordered substitution."""

    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _rule(name: str, pattern: str, replacement: str, flags: int = 0) -> ConversionRule:
    return ConversionRule(name=name, pattern=re.compile(pattern, flags), replacement=replacement)


HEADING_RULES: tuple[ConversionRule, ...] = (
    _rule("heading-1", r"^h1\.[ \t]+", "# ", re.MULTILINE),
    _rule("heading-2", r"^h2\.[ \t]+", "## ", re.MULTILINE),
    _rule("heading-3", r"^h3\.[ \t]+", "### ", re.MULTILINE),
)

LIST_RULES: tuple[ConversionRule, ...] = (_rule("bullet", r"^\*[ \t]+", "- ", re.MULTILINE),)

INLINE_RULES: tuple[ConversionRule, ...] = (
    _rule("inline-code", r"\{\{\s*(.*?)\s*\}\}", r"`\1`"),
)

# Fallback flattening for wiki decorations with no Markdown counterpart
FLATTEN_RULES: tuple[ConversionRule, ...] = (
    _rule("bracket-link", r"\[\[(.*?)\]\]", r"\1"),
    _rule("color-open", r"\{color:[^}]*\}", ""),
    _rule("color-close", r"\{color\}", ""),
    _rule("quote", r"\{quote\}", ""),
    _rule("stray-code-open", r"\{\{", ""),
    _rule("stray-code-close", r"\}\}", ""),
)

DEFAULT_RULES: tuple[ConversionRule, ...] = HEADING_RULES + LIST_RULES + INLINE_RULES + FLATTEN_RULES


class MarkdownFormatter:
    """
    Backlog wiki to Markdown converter.

    Deterministic and side-effect free. Never raises on malformed input.
    """

    def __init__(self, rules: tuple[ConversionRule, ...] = DEFAULT_RULES):
        self.rules = rules

    @property
    def name(self) -> str:
        return "Markdown"

    def to_markdown(self, raw: str) -> str:
        """Convert Backlog wiki text to Markdown."""
        out = raw
        for rule in self.rules:
            out = rule.apply(out)
        return out

    def has_markup(self, text: str) -> bool:
        """Check whether any conversion rule would still change ``text``."""
        return any(rule.pattern.search(text) for rule in self.rules)


_default_formatter = MarkdownFormatter()


def to_markdown(raw: str) -> str:
    """Convert with the default rule set."""
    return _default_formatter.to_markdown(raw)
