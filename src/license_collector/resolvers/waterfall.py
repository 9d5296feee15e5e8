"""Waterfall resolver orchestrating the license resolution strategies.

This module implements the per-package strategy chain: a local override
file always wins, a non-README license file found with the package is
accepted as-is, and a README-only package falls back to fetching a license
file from its repository.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from license_collector.fetch import CandidateRacer, FetchCache
from license_collector.models import PackageRecord
from license_collector.resolvers.base import BaseResolver
from license_collector.resolvers.local import LocalFileResolver
from license_collector.resolvers.override import OverrideResolver
from license_collector.resolvers.remote import RemoteLicenseResolver

logger = logging.getLogger(__name__)


class LicenseResolver:
    """Resolves license texts with a fixed-precedence strategy chain.

    Resolution strategy:
    1. Override: ``<overrides_dir>/<name>@<version>.txt`` if readable
    2. LocalFile: the discovered license file unless it is a README
    3. Remote: a LICENSE file from the GitHub repository at the version tag

    A package no strategy can resolve is returned unchanged, still carrying
    its README evidence, so validation can report it.

    Attributes:
        override_resolver: Resolver for local override files.
        local_resolver: Resolver accepting discovered license files.
        remote_resolver: Resolver fetching remote license files.
    """

    def __init__(
        self,
        fetch_cache: FetchCache,
        overrides_dir: Optional[Path] = None,
        override_resolver: Optional[OverrideResolver] = None,
        local_resolver: Optional[LocalFileResolver] = None,
        remote_resolver: Optional[RemoteLicenseResolver] = None,
    ) -> None:
        """Initialize LicenseResolver with optional custom resolvers.

        Args:
            fetch_cache: Fetch client shared by every remote lookup of the run.
            overrides_dir: Optional directory of license override files.
            override_resolver: Optional custom OverrideResolver. If not
                provided, creates one for ``overrides_dir``.
            local_resolver: Optional custom LocalFileResolver.
            remote_resolver: Optional custom RemoteLicenseResolver. If not
                provided, creates one racing candidates through ``fetch_cache``.
        """
        self.fetch_cache = fetch_cache
        self.override_resolver = override_resolver or OverrideResolver(overrides_dir)
        self.local_resolver = local_resolver or LocalFileResolver()
        self.remote_resolver = remote_resolver or RemoteLicenseResolver(
            CandidateRacer(fetch_cache)
        )

        self.resolvers: list[BaseResolver] = sorted(
            [self.override_resolver, self.local_resolver, self.remote_resolver],
            key=lambda r: r.priority,
        )

    async def resolve(self, record: PackageRecord) -> PackageRecord:
        """Resolve one package by trying each strategy in priority order.

        Args:
            record: Package record to resolve.

        Returns:
            The record produced by the first strategy that claims it, or the
            input record when none does.
        """
        logger.debug("Starting license resolution for %s", record.key)

        for resolver in self.resolvers:
            resolved = await resolver.resolve(record)
            if resolved is not None:
                logger.debug(
                    "%s resolved %s with evidence %s",
                    resolver.name,
                    record.key,
                    resolved.evidence,
                )
                return resolved

        logger.warning(
            "Could not resolve a license file for %s, keeping %s",
            record.key,
            record.evidence,
        )
        return record

    async def resolve_batch(self, records: list[PackageRecord]) -> list[PackageRecord]:
        """Resolve multiple packages concurrently.

        Uses asyncio.gather so network lookups of different packages overlap,
        with exception handling so one failure does not stop the others.

        Args:
            records: Package records to resolve.

        Returns:
            Resolved records in input order. A record whose resolution raised
            is returned unchanged.
        """
        logger.info("Starting batch resolution of %d packages", len(records))

        results = await asyncio.gather(
            *(self.resolve(record) for record in records), return_exceptions=True
        )

        resolved: list[PackageRecord] = []
        for record, result in zip(records, results):
            if isinstance(result, BaseException):
                logger.error("Exception resolving %s: %s", record.key, result)
                resolved.append(record)
            else:
                resolved.append(result)

        changed = sum(1 for before, after in zip(records, resolved) if before is not after)
        logger.info(
            "Batch resolution complete: %d/%d packages took an override or remote license, "
            "%d distinct URLs requested",
            changed,
            len(records),
            len(self.fetch_cache),
        )
        return resolved
