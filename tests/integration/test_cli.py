import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from license_collector.cli import app
from license_collector.models import (
    CollectionResult,
    FailureKind,
    LicensedPackageData,
    PackageRecord,
    ValidationFailure,
)

runner = CliRunner()


@pytest.fixture
def report(write_report: Callable[..., Path]) -> Path:
    return write_report(
        {
            "test-package@1.0.0": {
                "licenses": "MIT",
                "repository": "https://github.com/owner/test-package",
                "licenseFile": "node_modules/test-package/LICENSE",
                "files": {"node_modules/test-package/LICENSE": "MIT License"},
            }
        }
    )


def test_collect_command_writes_inventory(tmp_path: Path, report: Path) -> None:
    """Test the collect command end to end with a local license file."""
    output_file = tmp_path / "licenses.json"

    result = runner.invoke(
        app,
        [
            "collect",
            "--scan", str(report),
            "--package-path", str(tmp_path),
            "--output", str(output_file),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Written to:" in result.output
    data = json.loads(output_file.read_text())
    assert data == [
        {
            "name": "test-package",
            "version": "1.0.0",
            "repository": "https://github.com/owner/test-package",
            "licenses": ["MIT"],
            "licenseText": "MIT License",
        }
    ]


def test_collect_command_markdown(tmp_path: Path, report: Path) -> None:
    output_file = tmp_path / "THIRD_PARTY.md"

    result = runner.invoke(
        app,
        [
            "collect",
            "--scan", str(report),
            "--package-path", str(tmp_path),
            "--output", str(output_file),
            "--format", "markdown",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "## test-package@1.0.0" in output_file.read_text()


def test_collect_command_unlicensed_fails(
    tmp_path: Path, write_report: Callable[..., Path]
) -> None:
    """Test that a validation failure exits non-zero and writes nothing."""
    report = write_report({"b@2.0": {"licenses": "UNLICENSED"}})
    output_file = tmp_path / "licenses.json"

    result = runner.invoke(
        app, ["collect", "--scan", str(report), "--output", str(output_file)]
    )

    assert result.exit_code == 1
    assert "Cannot use unlicensed packages" in result.output
    assert "b@2.0" in result.output
    assert not output_file.exists()


def test_collect_command_error_on_package(tmp_path: Path, report: Path) -> None:
    output_file = tmp_path / "licenses.json"

    result = runner.invoke(
        app,
        [
            "collect",
            "--scan", str(report),
            "--package-path", str(tmp_path),
            "--output", str(output_file),
            "--error-on", "test-package:not allowed here",
        ],
    )

    assert result.exit_code == 1
    assert "test-package@1.0.0: not allowed here" in result.output
    assert not output_file.exists()


def test_collect_command_exclude_package(tmp_path: Path, report: Path) -> None:
    output_file = tmp_path / "licenses.json"

    result = runner.invoke(
        app,
        [
            "collect",
            "--scan", str(report),
            "--package-path", str(tmp_path),
            "--output", str(output_file),
            "--error-on", "test-package",
            "--exclude-package", "test-package@1.0.0",
        ],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(output_file.read_text()) == []


def test_collect_command_missing_report(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["collect", "--scan", str(tmp_path / "missing.json")]
    )

    assert result.exit_code == 1
    assert "Failed to find licenses" in result.output


def test_collect_command_config_file(tmp_path: Path, report: Path) -> None:
    config = tmp_path / "license-collector.json"
    config.write_text(
        json.dumps(
            {
                "packageToCheckPath": ".",
                "dependencyReportPath": report.name,
                "outputFilePath": "out/licenses.json",
                "errorOnPackageNames": [{"name": "test-package", "error": "from config"}],
            }
        )
    )

    result = runner.invoke(app, ["collect", "--config", str(config)])

    assert result.exit_code == 1
    assert "test-package@1.0.0: from config" in result.output


def test_collect_command_invalid_format(tmp_path: Path, report: Path) -> None:
    result = runner.invoke(
        app, ["collect", "--scan", str(report), "--format", "html"]
    )

    assert result.exit_code == 1
    assert "Unsupported output format" in result.output


@pytest.fixture
def mock_collect_licenses(mocker):
    """Mock the collect_licenses pipeline with a README failure."""
    result = CollectionResult(
        records=[PackageRecord(name="pkg", version="1.0.0")],
        failure=ValidationFailure(
            kind=FailureKind.README_LICENSE,
            message="Cannot use license texts from README files",
            problems=["pkg@1.0.0 [MIT] https://gitlab.com/group/pkg"],
        ),
    )
    return mocker.patch("license_collector.cli.collect_licenses", return_value=result)


def test_collect_command_reports_every_problem(
    tmp_path: Path, mock_collect_licenses
) -> None:
    result = runner.invoke(
        app, ["collect", "--scan", str(tmp_path / "report.json")]
    )

    assert result.exit_code == 1
    assert "Cannot use license texts from README files" in result.output
    assert "pkg@1.0.0" in result.output
    mock_collect_licenses.assert_called_once()


def test_collect_command_writes_mocked_inventory(tmp_path: Path, mocker) -> None:
    output_file = tmp_path / "licenses.json"
    mocker.patch(
        "license_collector.cli.collect_licenses",
        return_value=CollectionResult(
            inventory=[
                LicensedPackageData(
                    name="pkg", version="1.0.0", licenses=["MIT"], license_text="MIT"
                )
            ]
        ),
    )

    result = runner.invoke(
        app, ["collect", "--scan", str(tmp_path / "report.json"), "--output", str(output_file)]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(output_file.read_text())[0]["name"] == "pkg"
