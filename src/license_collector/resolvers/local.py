"""Resolver accepting the license file discovered alongside the package."""

import logging
from typing import Optional

from license_collector.models import EvidenceKind, PackageRecord
from license_collector.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)


class LocalFileResolver(BaseResolver):
    """Accept the discovered license file unless it is a README.

    README files often embed the license among unrelated prose, so their
    content is not trusted and such packages are left to later resolvers.
    """

    @property
    def name(self) -> str:
        return "LocalFile"

    @property
    def priority(self) -> int:
        return 50

    async def resolve(self, record: PackageRecord) -> Optional[PackageRecord]:
        if record.evidence.is_readme:
            logger.debug(
                "License file of %s is a README: %s",
                record.key,
                record.evidence.location,
            )
            return None

        if record.evidence.kind is EvidenceKind.NONE:
            logger.debug("No license file found for %s", record.key)
        return record
