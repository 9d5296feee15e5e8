"""Tests for the license override resolver."""

from pathlib import Path

import pytest

from license_collector.models import EvidenceKind, PackageRecord
from license_collector.resolvers.override import OverrideResolver


@pytest.fixture
def overrides_dir(tmp_path: Path) -> Path:
    path = tmp_path / "overrides"
    path.mkdir()
    return path


class TestOverrideResolver:
    """Test suite for OverrideResolver."""

    def test_resolver_name_and_priority(self) -> None:
        resolver = OverrideResolver()
        assert resolver.name == "Override"
        assert resolver.priority == 10

    @pytest.mark.asyncio
    async def test_override_replaces_text(
        self, overrides_dir: Path, readme_record: PackageRecord
    ) -> None:
        """Test that an override file becomes the license text."""
        override = overrides_dir / "left-pad@1.3.0.txt"
        override.write_text("DO WHAT THE F*CK YOU WANT TO PUBLIC LICENSE")

        result = await OverrideResolver(overrides_dir).resolve(readme_record)

        assert result is not None
        assert result.license_text == "DO WHAT THE F*CK YOU WANT TO PUBLIC LICENSE"
        assert result.evidence.kind is EvidenceKind.OVERRIDE_FILE
        assert result.evidence.location == str(override.resolve())
        # The input record is left untouched
        assert readme_record.evidence.kind is EvidenceKind.LOCAL_FILE

    @pytest.mark.asyncio
    async def test_override_requires_exact_version(
        self, overrides_dir: Path, readme_record: PackageRecord
    ) -> None:
        """Test that an override for another version is ignored."""
        (overrides_dir / "left-pad@1.2.0.txt").write_text("old license")

        assert await OverrideResolver(overrides_dir).resolve(readme_record) is None

    @pytest.mark.asyncio
    async def test_scoped_package_override(self, overrides_dir: Path) -> None:
        """Test that scoped names resolve into a scope subdirectory."""
        scope_dir = overrides_dir / "@types"
        scope_dir.mkdir()
        (scope_dir / "node@20.1.0.txt").write_text("MIT License")
        record = PackageRecord(name="@types/node", version="20.1.0", licenses=["MIT"])

        result = await OverrideResolver(overrides_dir).resolve(record)

        assert result is not None
        assert result.license_text == "MIT License"

    @pytest.mark.asyncio
    async def test_missing_override(
        self, overrides_dir: Path, readme_record: PackageRecord
    ) -> None:
        assert await OverrideResolver(overrides_dir).resolve(readme_record) is None

    @pytest.mark.asyncio
    async def test_overrides_disabled(self, readme_record: PackageRecord) -> None:
        resolver = OverrideResolver(None)
        assert resolver.override_path(readme_record) is None
        assert await resolver.resolve(readme_record) is None

    @pytest.mark.asyncio
    async def test_override_directory_named_like_file_is_ignored(
        self, overrides_dir: Path, readme_record: PackageRecord
    ) -> None:
        """Test that an unreadable override path is treated as absent."""
        (overrides_dir / "left-pad@1.3.0.txt").mkdir()

        assert await OverrideResolver(overrides_dir).resolve(readme_record) is None
