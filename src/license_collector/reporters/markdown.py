"""Markdown reporter for generating license attribution files.

This module provides a reporter that renders the license inventory as a
Markdown attribution document, with the full license text of every
package, using Jinja2 templates.
"""

from datetime import datetime
from importlib.resources import files
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, Template

from license_collector.models import LicensedPackageData
from license_collector.reporters.base import BaseReporter


class MarkdownReporter(BaseReporter):
    """Reporter that generates Markdown license attribution files.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the default bundled template.
        """
        if template_path:
            env = Environment(
                loader=FileSystemLoader(template_path.parent),
                autoescape=False,
                keep_trailing_newline=True,
            )
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    def _load_default_template(self) -> Template:
        """Load the default bundled Jinja2 template.

        Returns:
            The default template loaded from package resources.
        """
        template_content = (
            files("license_collector.templates")
            .joinpath("licenses.md.j2")
            .read_text(encoding="utf-8")
        )
        # License texts are emitted verbatim; escaping would mangle e-mail addresses
        env = Environment(autoescape=False, keep_trailing_newline=True)
        return env.from_string(template_content)

    def render(self, packages: list[LicensedPackageData]) -> str:
        """Render the inventory to Markdown format.

        Args:
            packages: Validated inventory entries.

        Returns:
            Rendered Markdown document as a string.
        """
        return self.template.render(
            packages=packages,
            generated_at=datetime.now(),
        )

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_extension(self) -> str:
        return ".md"
