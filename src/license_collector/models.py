"""Core data models for license_collector.

This module defines the data structures that flow through the license
collection pipeline: package records as discovered, the evidence telling
where a license text came from, HTTP fetch results, and the final inventory
entries.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, Optional, Union
from urllib.parse import urlparse

UNLICENSED = "UNLICENSED"

DEFAULT_PACKAGE_ERROR = "package was declared in errorOnPackageNames option"

_README_PATTERN = re.compile(r"^README(|\.txt|\.md|\.markdown)$", re.IGNORECASE)


def is_readme_file(location: Optional[str]) -> bool:
    """Check whether a path or URL names a README-shaped file.

    Args:
        location: File path or URL. May be None.

    Returns:
        True if the basename is README, README.txt, README.md or
        README.markdown (case-insensitive), False otherwise.
    """
    if not location:
        return False
    if "://" in location:
        location = urlparse(location).path
    return bool(_README_PATTERN.match(PurePath(location).name))


def normalize_licenses(value: Union[str, list[str], None]) -> list[str]:
    """Normalize a declared license value to a list of identifiers.

    Discovery reports carry either a single string or a list of strings.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(item) for item in value if item]


class EvidenceKind(str, Enum):
    """Where a package's license text was obtained from."""

    LOCAL_FILE = "localFile"
    OVERRIDE_FILE = "overrideFile"
    REMOTE_FILE = "remoteFile"
    NONE = "none"


@dataclass(frozen=True)
class LicenseEvidence:
    """Tagged reference to the origin of a license text.

    Attributes:
        kind: The evidence tag.
        location: Path for local and override files, URL for remote files,
            None when there is no evidence.
    """

    kind: EvidenceKind
    location: Optional[str] = None

    @classmethod
    def none(cls) -> "LicenseEvidence":
        return cls(EvidenceKind.NONE)

    @classmethod
    def local_file(cls, path: str) -> "LicenseEvidence":
        return cls(EvidenceKind.LOCAL_FILE, path)

    @classmethod
    def override_file(cls, path: str) -> "LicenseEvidence":
        return cls(EvidenceKind.OVERRIDE_FILE, path)

    @classmethod
    def remote_file(cls, url: str) -> "LicenseEvidence":
        return cls(EvidenceKind.REMOTE_FILE, url)

    @property
    def is_readme(self) -> bool:
        """True if this evidence is a locally discovered README-shaped file."""
        return self.kind is EvidenceKind.LOCAL_FILE and is_readme_file(self.location)

    def __str__(self) -> str:
        if self.location is None:
            return self.kind.value
        return f"{self.kind.value}({self.location})"


@dataclass
class PackageRecord:
    """A dependency moving through the resolution pipeline.

    Attributes:
        name: Package name (e.g., "lodash" or "@types/node").
        version: Exact version string (e.g., "4.17.21").
        licenses: Declared license identifiers, in declaration order.
        description: Optional package description.
        repository: Optional source repository URL.
        url: Optional homepage URL.
        publisher: Optional publisher name.
        evidence: Where ``license_text`` came from.
        license_text: The license text, empty until resolved.
    """

    name: str
    version: str
    licenses: list[str] = field(default_factory=list)
    description: Optional[str] = None
    repository: Optional[str] = None
    url: Optional[str] = None
    publisher: Optional[str] = None
    evidence: LicenseEvidence = field(default_factory=LicenseEvidence.none)
    license_text: str = ""

    @property
    def key(self) -> str:
        """Return the unique ``name@version`` key."""
        return f"{self.name}@{self.version}"

    @property
    def is_unlicensed(self) -> bool:
        """True if the package declares itself UNLICENSED."""
        return any(lic.upper() == UNLICENSED for lic in self.licenses)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching one URL.

    Attributes:
        url: The requested URL.
        ok: True if the server answered with a 2xx status.
        status: HTTP status code, None if no response was received.
        body: Response body decoded as text, empty unless ok.
    """

    url: str
    ok: bool
    status: Optional[int] = None
    body: str = ""


@dataclass(frozen=True)
class ErrorOnPackage:
    """A package name that fails the run when present and not excluded."""

    name: str
    error: str = DEFAULT_PACKAGE_ERROR


@dataclass
class LicensedPackageData:
    """An entry of the final license inventory."""

    name: str
    version: str
    licenses: list[str]
    license_text: str
    description: Optional[str] = None
    repository: Optional[str] = None
    url: Optional[str] = None
    publisher: Optional[str] = None

    @classmethod
    def from_record(cls, record: PackageRecord) -> "LicensedPackageData":
        return cls(
            name=record.name,
            version=record.version,
            licenses=list(record.licenses),
            license_text=record.license_text,
            description=record.description,
            repository=record.repository,
            url=record.url,
            publisher=record.publisher,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, omitting absent optional fields."""
        data: dict[str, Any] = {"name": self.name, "version": self.version}
        for key in ("description", "repository", "url", "publisher"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["licenses"] = list(self.licenses)
        data["licenseText"] = self.license_text
        return data


class FailureKind(str, Enum):
    """Category of a failed collection run."""

    DISCOVERY = "discovery"
    DISALLOWED_PACKAGE = "disallowedPackage"
    UNLICENSED = "unlicensed"
    README_LICENSE = "readmeLicense"


@dataclass
class ValidationFailure:
    """A hard failure with every offending package itemized.

    Attributes:
        kind: Which check failed.
        message: One-line headline for the failure.
        problems: One line per offending package (or the discovery error).
    """

    kind: FailureKind
    message: str
    problems: list[str] = field(default_factory=list)


@dataclass
class CollectionResult:
    """Result of a collection run: an inventory or a failure, never both."""

    records: list[PackageRecord] = field(default_factory=list)
    inventory: list[LicensedPackageData] = field(default_factory=list)
    failure: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None
