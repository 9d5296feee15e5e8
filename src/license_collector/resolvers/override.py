"""Local override resolver.

Override files let a project supply the license text for a package whose
own distribution does not carry a usable one. The file for a package is
named after the exact ``name@version`` so a new release of the package is
always reevaluated.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from license_collector.models import LicenseEvidence, PackageRecord
from license_collector.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)


class OverrideResolver(BaseResolver):
    """Resolver reading ``<overrides_dir>/<name>@<version>.txt``.

    Always wins when the file exists and is readable.

    Attributes:
        overrides_dir: Directory holding the override files, or None to
            disable overrides.
    """

    def __init__(self, overrides_dir: Optional[Path] = None) -> None:
        self.overrides_dir = overrides_dir

    @property
    def name(self) -> str:
        return "Override"

    @property
    def priority(self) -> int:
        return 10

    def override_path(self, record: PackageRecord) -> Optional[Path]:
        """Return the override file path for a package, if overrides are enabled."""
        if self.overrides_dir is None:
            return None
        return self.overrides_dir / f"{record.key}.txt"

    async def resolve(self, record: PackageRecord) -> Optional[PackageRecord]:
        path = self.override_path(record)
        if path is None:
            return None

        try:
            path = path.resolve(strict=True)
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            # Missing or unreadable override file
            return None

        logger.info("Using license override for %s: %s", record.key, path)
        return replace(
            record,
            evidence=LicenseEvidence.override_file(str(path)),
            license_text=text,
        )
