"""Tests for the validation gate."""

import pytest

from license_collector.models import (
    ErrorOnPackage,
    FailureKind,
    LicenseEvidence,
    PackageRecord,
)
from license_collector.validation import ValidationGate, describe_record


def _record(name: str, license_id: str = "MIT", license_file: str = "LICENSE") -> PackageRecord:
    return PackageRecord(
        name=name,
        version="1.0.0",
        licenses=[license_id],
        repository=f"https://github.com/owner/{name}",
        evidence=LicenseEvidence.local_file(f"/node_modules/{name}/{license_file}"),
        license_text=f"{license_id} text",
    )


class TestValidationGate:
    """Test suite for ValidationGate."""

    def test_clean_records_produce_inventory_in_order(self) -> None:
        records = [_record("b"), _record("a"), _record("c")]

        result = ValidationGate().validate(records)

        assert result.ok
        assert result.failure is None
        assert [p.name for p in result.inventory] == ["b", "a", "c"]
        assert result.inventory[0].license_text == "MIT text"

    def test_disallowed_package(self) -> None:
        gate = ValidationGate(
            [ErrorOnPackage(name="fontawesome", error="embeds license in stylesheets")]
        )

        result = gate.validate([_record("fontawesome"), _record("lodash")])

        assert not result.ok
        assert result.failure.kind is FailureKind.DISALLOWED_PACKAGE
        assert result.failure.problems == [
            "fontawesome@1.0.0: embeds license in stylesheets"
        ]
        assert result.inventory == []

    def test_disallowed_package_default_message(self) -> None:
        gate = ValidationGate([ErrorOnPackage(name="lodash")])

        failure = gate.check_disallowed([_record("lodash")])

        assert failure is not None
        assert failure.problems == [
            "lodash@1.0.0: package was declared in errorOnPackageNames option"
        ]

    def test_unlicensed_packages_all_reported(self) -> None:
        records = [_record("a", "UNLICENSED"), _record("b"), _record("c", "UNLICENSED")]

        result = ValidationGate().validate(records)

        assert result.failure.kind is FailureKind.UNLICENSED
        assert len(result.failure.problems) == 2
        assert result.failure.problems[0].startswith("a@1.0.0")
        assert result.failure.problems[1].startswith("c@1.0.0")

    def test_readme_evidence_fails(self) -> None:
        records = [_record("a", license_file="README.md"), _record("b")]

        result = ValidationGate().validate(records)

        assert result.failure.kind is FailureKind.README_LICENSE
        assert result.failure.problems == [describe_record(records[0])]
        assert result.inventory == []

    def test_remote_evidence_passes(self) -> None:
        record = _record("a", license_file="README.md")
        record.evidence = LicenseEvidence.remote_file(
            "https://github.com/owner/a/raw/1.0.0/LICENSE"
        )

        assert ValidationGate().validate([record]).ok

    def test_earlier_check_stops_later_checks(self) -> None:
        """Test that a disallowed package hides unlicensed and README failures."""
        gate = ValidationGate([ErrorOnPackage(name="a")])
        records = [
            _record("a"),
            _record("b", "UNLICENSED"),
            _record("c", license_file="README"),
        ]

        result = gate.validate(records)

        assert result.failure.kind is FailureKind.DISALLOWED_PACKAGE
        assert len(result.failure.problems) == 1

    def test_unlicensed_checked_before_readme(self) -> None:
        records = [_record("b", "UNLICENSED"), _record("c", license_file="README")]

        result = ValidationGate().validate(records)

        assert result.failure.kind is FailureKind.UNLICENSED

    def test_empty_records(self) -> None:
        result = ValidationGate().validate([])
        assert result.ok
        assert result.inventory == []

    @pytest.mark.parametrize(
        "check", ["check_disallowed", "check_unlicensed", "check_readme_evidence"]
    )
    def test_checks_pass_clean_records(self, check: str) -> None:
        assert getattr(ValidationGate(), check)([_record("a")]) is None


def test_describe_record() -> None:
    record = _record("a")
    record.licenses = ["MIT", "Apache-2.0"]
    assert describe_record(record) == "a@1.0.0 [MIT, Apache-2.0] https://github.com/owner/a"
