"""Dependency report scanners.

This module provides scanners for reading the package list produced by a
dependency discovery tool.
"""

from pathlib import Path
from typing import Optional

from license_collector.scanners.base import BaseScanner
from license_collector.scanners.checker import CheckerReportScanner

__all__ = [
    "BaseScanner",
    "CheckerReportScanner",
    "get_scanner",
]

# Registry of available scanners in priority order
_SCANNERS: list[type[BaseScanner]] = [
    CheckerReportScanner,
]


def get_scanner(path: Path, base_path: Optional[Path] = None) -> BaseScanner:
    """Get the appropriate scanner for a given report path.

    Args:
        path: Path to the dependency report.
        base_path: Root of the checked project, for relative license paths.

    Returns:
        Scanner instance configured for the given file.

    Raises:
        ValueError: If no scanner can handle the given file.
    """
    for scanner_cls in _SCANNERS:
        if scanner_cls.can_handle(path):
            return scanner_cls(path, base_path=base_path)

    raise ValueError(
        f"No scanner available for '{path.name}'. "
        f"Supported files: license-checker JSON reports (*.json)"
    )
