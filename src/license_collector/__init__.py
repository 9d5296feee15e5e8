"""License Collector - dependency license inventory and compliance gate.

This package resolves a trustworthy license text for every third-party
dependency of a project and writes a machine-readable license inventory,
failing when licensing cannot be established cleanly.
"""

__version__ = "0.1.0"

from license_collector.config import CollectOptions
from license_collector.models import (
    CollectionResult,
    ErrorOnPackage,
    LicensedPackageData,
    LicenseEvidence,
    PackageRecord,
)
from license_collector.pipeline import collect_licenses

__all__ = [
    "__version__",
    "CollectOptions",
    "CollectionResult",
    "ErrorOnPackage",
    "LicenseEvidence",
    "LicensedPackageData",
    "PackageRecord",
    "collect_licenses",
]
