"""Tests for configuration and result models."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from docs_sync.models import Source, SourceResult, SourcesConfig, SyncResult


class TestSource:
    """Test Source validation."""

    def test_folder_normalized(self):
        source = Source(url="https://example.org/a.zip", folder="v7\\reference/")
        assert source.folder == "v7/reference"

    def test_root_folder(self, tmp_path):
        source = Source(url="https://example.org/a.zip")
        assert source.folder == ""
        assert source.target(tmp_path) == tmp_path

    def test_target_subfolder(self, tmp_path):
        source = Source(url="https://example.org/a.zip", folder="v7")
        assert source.target(tmp_path) == tmp_path / "v7"

    @pytest.mark.parametrize("folder", ["/etc", "../outside", "a/../../b", "C:/docs"])
    def test_folder_must_stay_inside_root(self, folder):
        with pytest.raises(ValidationError):
            Source(url="https://example.org/a.zip", folder=folder)

    def test_url_required(self):
        with pytest.raises(ValidationError):
            Source(url="  ")

    def test_immutable(self):
        source = Source(url="https://example.org/a.zip")
        with pytest.raises(ValidationError):
            source.folder = "other"

    def test_for_github_repo(self):
        source = Source.for_github_repo("https://github.com/umbraco/UmbracoDocs/")
        assert source.url == "https://github.com/umbraco/UmbracoDocs/zipball/master"
        assert source.folder == ""

    def test_for_github_repo_into_folder(self):
        source = Source.for_github_repo("https://github.com/acme/docs", branch="v8", folder="acme/")
        assert source.url == "https://github.com/acme/docs/zipball/v8"
        assert source.folder == "acme"


class TestSourcesConfig:
    """Test whitelist parsing."""

    def test_comma_separated_branches(self):
        config = SourcesConfig(allowed_branches="master, v8 ,,")
        assert config.allowed_branches == {"master", "v8"}

    def test_list_branches(self):
        config = SourcesConfig(allowed_branches=["master", " v7 "])
        assert config.allowed_branches == {"master", "v7"}

    def test_missing_branches(self):
        assert SourcesConfig().allowed_branches == set()
        assert SourcesConfig(allowed_branches=None).allowed_branches == set()


class TestSyncResult:
    """Test result helpers."""

    def test_summary_counts(self):
        source = Source(url="https://example.org/a.zip")
        result = SyncResult(
            results=[
                SourceResult(source=source, status="synced", sitemap_path=Path("x")),
                SourceResult(source=source, status="rejected", branch="dev"),
                SourceResult(source=source, status="failed", error="boom"),
            ],
            index_rebuilt=True,
        )

        assert len(result.synced) == 1
        assert len(result.rejected) == 1
        assert len(result.failed) == 1
        assert result.summary().startswith("Synced 1/3 sources (1 rejected, 1 failed), index rebuilt")
