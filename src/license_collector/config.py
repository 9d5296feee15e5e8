"""Configuration for a license collection run.

Options can be given programmatically, through a camelCase mapping (the
shape used in JSON and TOML config files), or on the command line.
"""

import json
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from license_collector.models import DEFAULT_PACKAGE_ERROR, ErrorOnPackage

DEFAULT_OUTPUT_FILE = "licenses.json"
DEFAULT_REPORT_FILE = "licenses-report.json"
DEFAULT_FETCH_TIMEOUT = 30.0
OUTPUT_FORMATS = ("json", "markdown")

# Config file key -> CollectOptions attribute
_OPTION_KEYS = {
    "licenseOverridesPath": "license_overrides_path",
    "packageToCheckPath": "package_to_check_path",
    "outputFilePath": "output_file_path",
    "excludedPackages": "excluded_packages",
    "excludedSPDXLicenses": "excluded_spdx_licenses",
    "errorOnPackageNames": "error_on_package_names",
    "dependencyReportPath": "dependency_report_path",
    "fetchTimeout": "fetch_timeout",
    "outputFormat": "output_format",
}

_PATH_OPTIONS = {
    "license_overrides_path",
    "package_to_check_path",
    "output_file_path",
    "dependency_report_path",
}


@dataclass
class CollectOptions:
    """Options for :func:`license_collector.pipeline.collect_licenses`.

    Attributes:
        license_overrides_path: Directory of ``name@version.txt`` files whose
            contents replace a package's license text. Useful when a package
            embeds its license in a README instead of a LICENSE file.
        package_to_check_path: Root of the project being checked. Relative
            license file paths in the dependency report resolve against it.
        output_file_path: Where to write the inventory.
        excluded_packages: ``name@version`` entries removed before resolution.
        excluded_spdx_licenses: License identifiers removed before resolution.
        error_on_package_names: Package names that fail the run unless
            excluded through ``excluded_packages``.
        dependency_report_path: The discovery report to read. Defaults to
            ``licenses-report.json`` inside ``package_to_check_path``.
        fetch_timeout: Per-request timeout in seconds for remote fallback.
        output_format: "json" or "markdown".
    """

    license_overrides_path: Optional[Path] = None
    package_to_check_path: Optional[Path] = None
    output_file_path: Optional[Path] = None
    excluded_packages: list[str] = field(default_factory=list)
    excluded_spdx_licenses: list[str] = field(default_factory=list)
    error_on_package_names: list[ErrorOnPackage] = field(default_factory=list)
    dependency_report_path: Optional[Path] = None
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    output_format: str = "json"

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "CollectOptions":
        """Build options from a camelCase mapping.

        Args:
            data: Mapping using the option names of the config file format.

        Returns:
            A new CollectOptions instance.

        Raises:
            ValueError: If the mapping contains unknown keys or bad values.
        """
        unknown = sorted(set(data) - set(_OPTION_KEYS))
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            attr = _OPTION_KEYS[key]
            if value is None:
                continue
            if attr in _PATH_OPTIONS:
                kwargs[attr] = Path(value)
            elif attr == "error_on_package_names":
                kwargs[attr] = [_parse_error_on_package(entry) for entry in value]
            elif attr == "fetch_timeout":
                kwargs[attr] = float(value)
            elif attr in ("excluded_packages", "excluded_spdx_licenses"):
                if not isinstance(value, list):
                    raise ValueError(f"Option '{key}' must be a list of strings")
                kwargs[attr] = [str(item) for item in value]
            else:
                kwargs[attr] = value

        options = cls(**kwargs)
        options.validate()
        return options

    def validate(self) -> None:
        """Check option values.

        Raises:
            ValueError: If an option has an invalid value.
        """
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format '{self.output_format}'. "
                f"Supported formats: {', '.join(OUTPUT_FORMATS)}"
            )
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")

    def merged(self, **overrides: Any) -> "CollectOptions":
        """Return a copy with every non-empty override applied.

        None values and empty lists leave the current value untouched, so
        command-line flags that were not given do not clear config-file values.
        """
        known = {f.name for f in fields(self)}
        changes = {
            key: value
            for key, value in overrides.items()
            if key in known and value is not None and value != []
        }
        return replace(self, **changes)

    def normalized(self, cwd: Optional[Path] = None) -> "CollectOptions":
        """Return a copy with every path made absolute and defaults filled in.

        Args:
            cwd: Directory relative paths resolve against. Defaults to the
                process working directory.
        """
        base = (cwd or Path.cwd()).resolve()

        def _absolute(path: Path) -> Path:
            return path if path.is_absolute() else (base / path).resolve()

        package_path = (
            _absolute(self.package_to_check_path) if self.package_to_check_path else base
        )
        return replace(
            self,
            package_to_check_path=package_path,
            output_file_path=(
                _absolute(self.output_file_path)
                if self.output_file_path
                else base / DEFAULT_OUTPUT_FILE
            ),
            license_overrides_path=(
                _absolute(self.license_overrides_path)
                if self.license_overrides_path
                else None
            ),
            dependency_report_path=(
                _absolute(self.dependency_report_path)
                if self.dependency_report_path
                else package_path / DEFAULT_REPORT_FILE
            ),
        )


def _parse_error_on_package(entry: Any) -> ErrorOnPackage:
    if isinstance(entry, str):
        return ErrorOnPackage(name=entry)
    if isinstance(entry, dict) and "name" in entry:
        return ErrorOnPackage(
            name=entry["name"], error=entry.get("error") or DEFAULT_PACKAGE_ERROR
        )
    raise ValueError(f"Invalid errorOnPackageNames entry: {entry!r}")


def parse_error_on_flag(value: str) -> ErrorOnPackage:
    """Parse a ``NAME[:MESSAGE]`` command-line value.

    Scoped names start with ``@`` and never contain ``:``, so the first
    colon separates the name from the message.
    """
    name, sep, message = value.partition(":")
    name = name.strip()
    if not name:
        raise ValueError(f"Invalid package name in '{value}'")
    message = message.strip()
    return ErrorOnPackage(name=name, error=message if sep and message else DEFAULT_PACKAGE_ERROR)


def load_options(path: Path) -> CollectOptions:
    """Load options from a TOML or JSON config file.

    TOML files may hold the options at the top level or under a
    ``[tool.license-collector]`` table, so they can live in pyproject.toml.

    Args:
        path: Path to a ``.toml`` or ``.json`` file.

    Returns:
        The loaded options (not yet normalized).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or holds invalid options.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix == ".toml":
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e
        data = data.get("tool", {}).get("license-collector", data)
    elif path.suffix == ".json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        raise ValueError(
            f"Unsupported config file '{path.name}'. Supported: .toml, .json"
        )

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a table of options")

    options = CollectOptions.from_mapping(data)
    # Relative paths in a config file are relative to the file itself
    base = path.parent.resolve()
    return replace(
        options,
        **{
            attr: base / getattr(options, attr)
            for attr in _PATH_OPTIONS
            if getattr(options, attr) is not None
            and not getattr(options, attr).is_absolute()
        },
    )
