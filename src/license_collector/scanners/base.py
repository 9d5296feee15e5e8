"""Base interface for dependency report scanners.

Scanners turn the output of a dependency discovery tool into package
records. Walking the dependency tree itself is left to that tool.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from license_collector.models import PackageRecord


class BaseScanner(ABC):
    """Abstract base class for dependency report scanners.

    Attributes:
        source_path: Path to the report being scanned.
        base_path: Directory relative license file paths resolve against.
            Defaults to the directory holding the report.
    """

    def __init__(
        self,
        source_path: Optional[Path] = None,
        base_path: Optional[Path] = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            source_path: Path to the dependency report.
            base_path: Root of the checked project. If not provided, the
                directory of ``source_path`` is used.
        """
        self.source_path = source_path
        if base_path is None and source_path is not None:
            base_path = source_path.parent
        self.base_path = base_path

    @abstractmethod
    def scan(self) -> list[PackageRecord]:
        """Scan the report and build package records.

        Returns:
            Package records in report order.

        Raises:
            FileNotFoundError: If the report does not exist.
            ValueError: If the report format is invalid.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if this scanner can process the file, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name for this scanner's source type."""
        ...
