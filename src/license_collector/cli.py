"""Command-line interface for license_collector.

Provides the entry point that collects the license texts of a project's
dependencies, validates them and writes the license inventory. This is the
only place that decides the process exit code.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from license_collector.config import (
    CollectOptions,
    load_options,
    parse_error_on_flag,
)
from license_collector.models import CollectionResult
from license_collector.pipeline import collect_licenses
from license_collector.reporters import get_reporter

app = typer.Typer(
    name="license-collector",
    help="Collect and validate the license texts of third-party dependencies.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("license_collector")


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("license_collector").setLevel(level)


def _build_options(
    config: Optional[Path],
    **overrides,
) -> CollectOptions:
    """Combine config file values with command-line overrides.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the configuration is invalid.
    """
    options = load_options(config) if config else CollectOptions()
    options = options.merged(**overrides)
    options.validate()
    return options.normalized()


def _print_options(options: CollectOptions) -> None:
    console.print(f"Checking packages in package: {options.package_to_check_path}")
    console.print(f"Reading dependency report: {options.dependency_report_path}")
    if options.license_overrides_path:
        console.print(f"Using license overrides from: {options.license_overrides_path}")
    else:
        console.print("Using no license overrides.")
    console.print(f"Excluding packages: {options.excluded_packages}")
    console.print(f"Excluding licenses: {options.excluded_spdx_licenses}")
    console.print(
        "Error on non-excluded package names: "
        f"{[entry.name for entry in options.error_on_package_names]}"
    )
    console.print(f"Resulting {options.output_format} will be written to: {options.output_file_path}")
    console.print()


def _print_inventory(result: CollectionResult) -> None:
    table = Table(title="Found licenses")
    table.add_column("Package")
    table.add_column("Repository")
    table.add_column("Licenses")
    table.add_column("Source")

    for record in result.records:
        table.add_row(
            record.key,
            record.repository or "",
            ", ".join(record.licenses),
            record.evidence.kind.value,
        )
    console.print(table)


async def _run_collect(options: CollectOptions) -> int:
    """Async implementation of the collect command."""
    _print_options(options)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Resolving licenses...", total=None)
        result = await collect_licenses(options)
        progress.update(task, completed=True)

    if result.failure is not None:
        failure = result.failure
        err_console.print(f"[red]Error:[/red] {failure.message}:")
        for problem in failure.problems:
            err_console.print(f"  - {problem}")
        return 1

    if not result.inventory:
        console.print("[yellow]No packages found in dependency report[/yellow]")

    _print_inventory(result)

    reporter = get_reporter(options.output_format)
    try:
        reporter.write(result.inventory, options.output_file_path)
    except OSError as e:
        err_console.print(f"[red]Error writing output:[/red] {e}")
        return 1

    console.print(f"[green]Written to:[/green] {options.output_file_path}")
    return 0


@app.callback()
def main() -> None:
    """Collect and validate the license texts of third-party dependencies."""


@app.command()
def collect(
    scan: Annotated[
        Optional[Path],
        typer.Option(
            "--scan",
            "-s",
            help="Dependency report (license-checker JSON). "
            "Defaults to licenses-report.json in the package path.",
        ),
    ] = None,
    package_path: Annotated[
        Optional[Path],
        typer.Option(
            "--package-path",
            "-p",
            help="Root of the project to check (default: current directory)",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file path (default: ./licenses.json)",
        ),
    ] = None,
    overrides: Annotated[
        Optional[Path],
        typer.Option(
            "--overrides",
            help="Directory of name@version.txt license override files",
        ),
    ] = None,
    exclude_package: Annotated[
        Optional[list[str]],
        typer.Option(
            "--exclude-package",
            help="name@version to exclude (repeatable)",
        ),
    ] = None,
    exclude_license: Annotated[
        Optional[list[str]],
        typer.Option(
            "--exclude-license",
            help="SPDX license ID to exclude (repeatable)",
        ),
    ] = None,
    error_on: Annotated[
        Optional[list[str]],
        typer.Option(
            "--error-on",
            help="Fail if package NAME is present, as NAME[:MESSAGE] (repeatable)",
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="TOML or JSON file with collection options",
            exists=True,
            readable=True,
        ),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            "-f",
            help="Output format: json or markdown",
        ),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option(
            "--timeout",
            help="Timeout in seconds for each remote license request",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Collect license texts and write the license inventory.

    Exit codes:
        0 - Inventory written
        1 - Discovery failed, a package failed validation, or an error occurred
    """
    _setup_logging(verbose)

    try:
        options = _build_options(
            config,
            dependency_report_path=scan,
            package_to_check_path=package_path,
            output_file_path=output,
            license_overrides_path=overrides,
            excluded_packages=exclude_package,
            excluded_spdx_licenses=exclude_license,
            error_on_package_names=(
                [parse_error_on_flag(value) for value in error_on] if error_on else None
            ),
            output_format=output_format,
            fetch_timeout=timeout,
        )
    except (OSError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    exit_code = asyncio.run(_run_collect(options))
    raise typer.Exit(code=exit_code)


if __name__ == "__main__":
    app()
