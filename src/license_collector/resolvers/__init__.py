"""License resolvers establishing the license text of each package.

This module provides the override, local file and remote fallback
strategies, and the waterfall resolver chaining them.
"""

from license_collector.resolvers.base import BaseResolver
from license_collector.resolvers.local import LocalFileResolver
from license_collector.resolvers.override import OverrideResolver
from license_collector.resolvers.remote import RemoteLicenseResolver
from license_collector.resolvers.waterfall import LicenseResolver

__all__ = [
    "BaseResolver",
    "LicenseResolver",
    "LocalFileResolver",
    "OverrideResolver",
    "RemoteLicenseResolver",
]
