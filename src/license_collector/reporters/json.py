"""JSON reporter writing the license inventory array."""

import json

from license_collector.models import LicensedPackageData
from license_collector.reporters.base import BaseReporter


class JsonReporter(BaseReporter):
    """Reporter emitting the inventory as a JSON array.

    Each element holds ``name``, ``version``, the optional ``description``,
    ``repository``, ``url`` and ``publisher``, ``licenses`` and
    ``licenseText``.
    """

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(self, packages: list[LicensedPackageData]) -> str:
        return json.dumps(
            [package.to_dict() for package in packages],
            indent=self.indent,
            ensure_ascii=False,
        )

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def default_extension(self) -> str:
        return ".json"
