"""Base interface for output reporters.

Reporters generate the license inventory artifact (JSON, Markdown, etc.)
from validated package data.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from license_collector.models import LicensedPackageData


class BaseReporter(ABC):
    """Abstract base class for output reporters."""

    @abstractmethod
    def render(self, packages: list[LicensedPackageData]) -> str:
        """Render the inventory to formatted output.

        Args:
            packages: Validated inventory entries.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, packages: list[LicensedPackageData], output_path: Path) -> None:
        """Render and write output to a file.

        Args:
            packages: Validated inventory entries.
            output_path: Path to write the output file. Missing parent
                directories are created.
        """
        content = self.render(packages)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            Format name like "json" or "markdown".
        """
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Return the default file extension for this format.

        Returns:
            Extension like ".json" or ".md".
        """
        ...
