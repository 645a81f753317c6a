"""
Formatters - Convert tracker markup to other text formats.
"""

from .markdown import ConversionRule, MarkdownFormatter, to_markdown


__all__ = ["ConversionRule", "MarkdownFormatter", "to_markdown"]
