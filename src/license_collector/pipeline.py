"""License collection pipeline.

Wires discovery, exclusion filtering, license resolution and validation
together. The pipeline never exits the process; it returns a
CollectionResult and leaves the exit code to the caller.
"""

import logging
from typing import Optional

from license_collector.config import CollectOptions
from license_collector.fetch import FetchCache
from license_collector.models import (
    CollectionResult,
    FailureKind,
    PackageRecord,
    ValidationFailure,
)
from license_collector.resolvers import LicenseResolver
from license_collector.scanners import get_scanner
from license_collector.validation import ValidationGate

logger = logging.getLogger(__name__)


def discover_packages(options: CollectOptions) -> list[PackageRecord]:
    """Read the package records of the dependency report.

    Args:
        options: Normalized options.

    Returns:
        Package records in report order.

    Raises:
        FileNotFoundError: If the report does not exist.
        ValueError: If the report cannot be read.
    """
    scanner = get_scanner(
        options.dependency_report_path, base_path=options.package_to_check_path
    )
    logger.debug("Using scanner: %s", scanner.source_name)
    return scanner.scan()


def apply_exclusions(
    records: list[PackageRecord],
    excluded_packages: list[str],
    excluded_licenses: list[str],
) -> list[PackageRecord]:
    """Drop excluded packages before resolution.

    A package is dropped when its ``name@version`` is listed, or when every
    license it declares is an excluded license identifier.

    Args:
        records: Discovered records.
        excluded_packages: ``name@version`` keys to drop.
        excluded_licenses: License identifiers to drop.

    Returns:
        Remaining records in their original order.
    """
    packages = set(excluded_packages)
    licenses = set(excluded_licenses)

    kept: list[PackageRecord] = []
    for record in records:
        if record.key in packages:
            logger.debug("Excluding package %s", record.key)
            continue
        if record.licenses and all(lic in licenses for lic in record.licenses):
            logger.debug(
                "Excluding package %s with license %s",
                record.key,
                ", ".join(record.licenses),
            )
            continue
        kept.append(record)
    return kept


async def collect_licenses(
    options: CollectOptions,
    fetch_cache: Optional[FetchCache] = None,
) -> CollectionResult:
    """Collect and validate the license texts of all dependencies.

    Args:
        options: Options of the run. Normalized here if not already.
        fetch_cache: Optional fetch client to use for remote lookups. If not
            provided, a FetchCache is created for this run and closed after.

    Returns:
        CollectionResult holding the inventory, or the failure that stopped
        the run.
    """
    options = options.normalized()

    try:
        discovered = discover_packages(options)
    except (OSError, ValueError) as e:
        logger.error("Failed to find licenses: %s", e)
        return CollectionResult(
            failure=ValidationFailure(
                kind=FailureKind.DISCOVERY,
                message="Failed to find licenses",
                problems=[str(e)],
            )
        )

    records = apply_exclusions(
        discovered, options.excluded_packages, options.excluded_spdx_licenses
    )
    logger.info(
        "Discovered %d packages, %d after exclusions", len(discovered), len(records)
    )

    owns_cache = fetch_cache is None
    cache = (
        fetch_cache if fetch_cache is not None else FetchCache(timeout=options.fetch_timeout)
    )
    try:
        resolver = LicenseResolver(cache, overrides_dir=options.license_overrides_path)
        resolved = await resolver.resolve_batch(records)
    finally:
        if owns_cache:
            await cache.close()

    gate = ValidationGate(options.error_on_package_names)
    return gate.validate(resolved)
