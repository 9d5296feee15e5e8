"""Validation gate between license resolution and the final inventory.

Every check reports all offending packages at once. The first failing
check stops the gate, so later checks only run on a run that passed the
earlier ones.
"""

import logging
from collections.abc import Callable
from typing import Optional

from license_collector.models import (
    CollectionResult,
    ErrorOnPackage,
    FailureKind,
    LicensedPackageData,
    PackageRecord,
    ValidationFailure,
)

logger = logging.getLogger(__name__)


def describe_record(record: PackageRecord) -> str:
    """Return a one-line description of a package for diagnostics."""
    licenses = ", ".join(record.licenses) or "(none)"
    repository = record.repository or "(no repository)"
    return f"{record.key} [{licenses}] {repository}"


class ValidationGate:
    """Turns resolved records into an inventory or a single failure.

    Attributes:
        error_on_packages: Package name -> error message for packages that
            must not be present.
    """

    def __init__(self, error_on_packages: Optional[list[ErrorOnPackage]] = None) -> None:
        self.error_on_packages = {
            entry.name: entry.error for entry in (error_on_packages or [])
        }

    def check_disallowed(self, records: list[PackageRecord]) -> Optional[ValidationFailure]:
        """Fail on packages listed in errorOnPackageNames."""
        problems = [
            f"{record.key}: {self.error_on_packages[record.name]}"
            for record in records
            if record.name in self.error_on_packages
        ]
        if not problems:
            return None
        return ValidationFailure(
            kind=FailureKind.DISALLOWED_PACKAGE,
            message="Errors on some packages",
            problems=problems,
        )

    def check_unlicensed(self, records: list[PackageRecord]) -> Optional[ValidationFailure]:
        """Fail on packages declaring the UNLICENSED license."""
        problems = [describe_record(record) for record in records if record.is_unlicensed]
        if not problems:
            return None
        return ValidationFailure(
            kind=FailureKind.UNLICENSED,
            message="Cannot use unlicensed packages",
            problems=problems,
        )

    def check_readme_evidence(
        self, records: list[PackageRecord]
    ) -> Optional[ValidationFailure]:
        """Fail on packages whose license text still comes from a README."""
        problems = [
            describe_record(record) for record in records if record.evidence.is_readme
        ]
        if not problems:
            return None
        return ValidationFailure(
            kind=FailureKind.README_LICENSE,
            message=(
                "Cannot use license texts from README files, "
                "as their content is error-prone"
            ),
            problems=problems,
        )

    def validate(self, records: list[PackageRecord]) -> CollectionResult:
        """Run every check in order.

        Args:
            records: Resolved records in discovery order.

        Returns:
            A CollectionResult with the inventory, or with the failure of
            the first failing check and an empty inventory.
        """
        checks: list[Callable[[list[PackageRecord]], Optional[ValidationFailure]]] = [
            self.check_disallowed,
            self.check_unlicensed,
            self.check_readme_evidence,
        ]
        for check in checks:
            failure = check(records)
            if failure is not None:
                logger.error(
                    "%s (%d package(s)): %s",
                    failure.message,
                    len(failure.problems),
                    "; ".join(failure.problems),
                )
                return CollectionResult(records=records, failure=failure)

        inventory = [LicensedPackageData.from_record(record) for record in records]
        return CollectionResult(records=records, inventory=inventory)
