"""Scanner for license-checker style JSON reports.

The report maps ``name@version`` keys to package information::

    {
        "lodash@4.17.21": {
            "licenses": "MIT",
            "repository": "https://github.com/lodash/lodash",
            "publisher": "John-David Dalton",
            "licenseFile": "node_modules/lodash/LICENSE"
        },
        "left-pad@1.3.0": {
            "licenses": ["WTFPL", "MIT"],
            "licenseFile": "node_modules/left-pad/README.md"
        }
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from license_collector.models import LicenseEvidence, PackageRecord, normalize_licenses
from license_collector.scanners.base import BaseScanner

logger = logging.getLogger(__name__)


def split_package_key(key: str) -> tuple[str, str]:
    """Split a ``name@version`` key, keeping the ``@`` of scoped names.

    Args:
        key: Key like "lodash@4.17.21" or "@types/node@20.1.0".

    Returns:
        Tuple of (name, version).

    Raises:
        ValueError: If the key has no version part.
    """
    name, sep, version = key.rpartition("@")
    if not sep or not name or not version:
        raise ValueError(f"Invalid package key '{key}', expected name@version")
    return name, version


class CheckerReportScanner(BaseScanner):
    """Scanner for JSON dependency reports keyed by ``name@version``.

    Packages marked ``"private": true`` are skipped. License texts are read
    from ``licenseFile`` unless the report already embeds ``licenseText``.
    """

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True for ``.json`` files.
        """
        return path.suffix == ".json"

    @property
    def source_name(self) -> str:
        return "license-checker JSON"

    def scan(self) -> list[PackageRecord]:
        """Scan the report and build package records.

        Returns:
            Package records in report order.

        Raises:
            FileNotFoundError: If the report does not exist.
            ValueError: If the report is not valid JSON or is not an object
                of package entries.
        """
        if self.source_path is None:
            raise ValueError("source_path must be set before calling scan()")

        if not self.source_path.exists():
            raise FileNotFoundError(f"Dependency report not found: {self.source_path}")

        try:
            with open(self.source_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.source_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(
                f"Expected an object of packages in {self.source_path}, "
                f"got {type(data).__name__}"
            )

        records: list[PackageRecord] = []
        for key, info in data.items():
            if not isinstance(info, dict):
                raise ValueError(f"Invalid entry for '{key}' in {self.source_path}")
            if info.get("private"):
                logger.debug("Skipping private package %s", key)
                continue
            records.append(self._build_record(key, info))

        return records

    def _build_record(self, key: str, info: dict[str, Any]) -> PackageRecord:
        if info.get("name") and info.get("version"):
            name, version = str(info["name"]), str(info["version"])
        else:
            name, version = split_package_key(key)

        license_file = self._resolve_license_file(info.get("licenseFile"))
        if license_file is None:
            evidence = LicenseEvidence.none()
        else:
            evidence = LicenseEvidence.local_file(str(license_file))

        license_text = info.get("licenseText")
        if license_text is None:
            license_text = self._read_license_text(key, license_file)

        return PackageRecord(
            name=name,
            version=version,
            licenses=normalize_licenses(info.get("licenses")),
            description=info.get("description"),
            repository=info.get("repository"),
            url=info.get("url"),
            publisher=info.get("publisher"),
            evidence=evidence,
            license_text=license_text,
        )

    def _resolve_license_file(self, value: Optional[str]) -> Optional[Path]:
        if not value:
            return None
        path = Path(value)
        if not path.is_absolute() and self.base_path is not None:
            path = self.base_path / path
        return path

    def _read_license_text(self, key: str, path: Optional[Path]) -> str:
        if path is None:
            return ""
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            # Left to the resolvers; an override file may still supply the text
            logger.warning("Cannot read license file of %s: %s", key, e)
            return ""
