"""Remote license resolver.

Fetches a dedicated license file from the package's GitHub repository, at
the tag matching the package version, for packages whose only local license
evidence is a README.
"""

import logging
from dataclasses import replace
from typing import Optional

import aiohttp

from license_collector.fetch import CandidateRacer, response_ok
from license_collector.models import LicenseEvidence, PackageRecord
from license_collector.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)

GITHUB_PREFIX = "https://github.com/"

# Tried in this order; earlier names take precedence
LICENSE_FILE_NAMES = ("LICENSE", "LICENSE.md", "LICENSE.txt")


def is_supported_repository(repository: Optional[str]) -> bool:
    """Check whether remote license lookup supports a repository URL.

    Args:
        repository: Repository URL from the package metadata.

    Returns:
        True for ``https://github.com/`` URLs, False otherwise.
    """
    return bool(repository) and repository.startswith(GITHUB_PREFIX)


def candidate_urls(repository: str, version: str) -> list[str]:
    """Build the raw-content URLs of the conventional license files.

    Args:
        repository: GitHub repository URL.
        version: Exact package version, used as the git ref.

    Returns:
        Candidate URLs in order of preference.
    """
    base = repository.rstrip("/")
    if base.endswith(".git"):
        base = base[:-4]
    return [f"{base}/raw/{version}/{file_name}" for file_name in LICENSE_FILE_NAMES]


class RemoteLicenseResolver(BaseResolver):
    """Resolver replacing README license evidence with a remote LICENSE file.

    Attributes:
        racer: CandidateRacer used to fetch the candidate URLs.
    """

    def __init__(self, racer: CandidateRacer) -> None:
        self.racer = racer

    @property
    def name(self) -> str:
        return "Remote"

    @property
    def priority(self) -> int:
        return 80

    async def resolve(self, record: PackageRecord) -> Optional[PackageRecord]:
        """Fetch a license file for a package whose license file is a README.

        Args:
            record: Package record to resolve.

        Returns:
            Record with ``remoteFile`` evidence and the fetched text, or None
            if the record does not need remote lookup or none was found.
        """
        if not record.evidence.is_readme:
            return None

        if not is_supported_repository(record.repository):
            logger.warning(
                "Cannot find remote license for %s due to unknown repository host: %s",
                record.key,
                record.repository,
            )
            return None

        urls = candidate_urls(record.repository, record.version)
        try:
            result = await self.racer.first_matching(urls, response_ok)
        except aiohttp.ClientError as e:
            logger.warning(
                "Failed to fetch remote LICENSE file for %s due to error: %s",
                record.key,
                e,
            )
            return None

        if result is None:
            logger.warning(
                "Failed to fetch remote LICENSE file for %s, none of %s gave an OK response",
                record.key,
                ", ".join(LICENSE_FILE_NAMES),
            )
            return None

        logger.info("Found remote license for %s: %s", record.key, result.url)
        return replace(
            record,
            evidence=LicenseEvidence.remote_file(result.url),
            license_text=result.body,
        )
