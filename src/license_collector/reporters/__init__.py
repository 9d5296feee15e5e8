"""Output reporters for the license inventory.

This module provides reporters for rendering the validated inventory to
JSON (the default) or a Markdown attribution document.
"""

from license_collector.reporters.base import BaseReporter
from license_collector.reporters.json import JsonReporter
from license_collector.reporters.markdown import MarkdownReporter

__all__ = ["BaseReporter", "JsonReporter", "MarkdownReporter", "get_reporter"]


def get_reporter(format_name: str) -> BaseReporter:
    """Return a reporter for an output format.

    Args:
        format_name: "json" or "markdown".

    Raises:
        ValueError: If the format is not supported.
    """
    if format_name == "json":
        return JsonReporter()
    if format_name == "markdown":
        return MarkdownReporter()
    raise ValueError(f"Unsupported output format '{format_name}'")
