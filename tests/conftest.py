"""Pytest configuration and fixtures."""

import json
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest

from license_collector.fetch import FetchCache
from license_collector.models import LicenseEvidence, PackageRecord

MIT_TEXT = "MIT License\n\nCopyright (c) Example Authors\n"


@pytest.fixture
async def fetch_cache() -> AsyncGenerator[FetchCache, None]:
    """Return a FetchCache with a short timeout, closed after the test."""
    cache = FetchCache(timeout=5)
    yield cache
    await cache.close()


@pytest.fixture
def local_record(tmp_path: Path) -> PackageRecord:
    """Return a record whose license file is a dedicated LICENSE file."""
    license_file = tmp_path / "node_modules" / "lodash" / "LICENSE"
    license_file.parent.mkdir(parents=True)
    license_file.write_text(MIT_TEXT)
    return PackageRecord(
        name="lodash",
        version="4.17.21",
        licenses=["MIT"],
        repository="https://github.com/lodash/lodash",
        evidence=LicenseEvidence.local_file(str(license_file)),
        license_text=MIT_TEXT,
    )


@pytest.fixture
def readme_record() -> PackageRecord:
    """Return a record whose only license evidence is a README."""
    return PackageRecord(
        name="left-pad",
        version="1.3.0",
        licenses=["WTFPL"],
        repository="https://github.com/stevemao/left-pad",
        evidence=LicenseEvidence.local_file("/project/node_modules/left-pad/README.md"),
        license_text="# left-pad\n\nLicense: WTFPL",
    )


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a license-checker report into tmp_path.

    Entries may carry a ``files`` mapping of relative path -> content that
    is created on disk before the report is written.
    """

    def _write(entries: dict[str, dict[str, Any]], name: str = "licenses-report.json") -> Path:
        report: dict[str, dict[str, Any]] = {}
        for key, entry in entries.items():
            entry = dict(entry)
            for rel_path, content in entry.pop("files", {}).items():
                path = tmp_path / rel_path
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)
            report[key] = entry
        report_path = tmp_path / name
        report_path.write_text(json.dumps(report))
        return report_path

    return _write
