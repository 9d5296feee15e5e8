"""Base interface for license resolvers.

Resolvers are the strategies that establish a trustworthy license text for
a package: a local override file, the license file found next to the
package, or a license file fetched from the package's repository.
"""

from abc import ABC, abstractmethod
from typing import Optional

from license_collector.models import PackageRecord


class BaseResolver(ABC):
    """Abstract base class for license resolution strategies.

    A resolver either claims a package, returning the resolved record, or
    declines it by returning None so the next strategy can try.
    """

    @abstractmethod
    async def resolve(self, record: PackageRecord) -> Optional[PackageRecord]:
        """Resolve the license text of a package.

        Args:
            record: Package record to resolve. Not modified.

        Returns:
            The resolved record, or None if this strategy does not apply
            or could not resolve the package.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the resolver name for logging/debugging.

        Returns:
            Name like "Override", "LocalFile", "Remote", etc.
        """
        ...

    @property
    def priority(self) -> int:
        """Return resolver priority for waterfall ordering.

        Lower numbers are tried first. Default is 100.

        Returns:
            Priority value.
        """
        return 100

