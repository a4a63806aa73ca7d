"""Tests for branch extraction and whitelist validation."""
import logging

import pytest

from docs_sync.exceptions import ExtractionError, ValidationRejected
from docs_sync.sync.branch import BranchValidator, read_top_level_entry

from .helpers import make_archive


class TestExtractBranch:
    """Test branch name extraction from archive entries."""

    def test_strips_separator_and_prefix(self):
        validator = BranchValidator()
        assert validator.extract_branch("UmbracoDocs-master/") == "master"

    def test_keeps_dashes_inside_branch(self):
        validator = BranchValidator()
        assert validator.extract_branch("UmbracoDocs-release-8.1/") == "release-8.1"

    def test_backslash_separator(self):
        validator = BranchValidator()
        assert validator.extract_branch("UmbracoDocs-v8\\") == "v8"

    def test_custom_prefix(self):
        validator = BranchValidator(repository_prefix="MyDocs-")
        assert validator.extract_branch("MyDocs-main/") == "main"

    def test_entry_without_prefix(self):
        validator = BranchValidator()
        assert validator.extract_branch("main/") == "main"


class TestWhitelist:
    """Test whitelist matching."""

    def test_case_insensitive_match(self):
        validator = BranchValidator()
        assert validator.is_whitelisted("Master", {"master"})
        assert validator.is_whitelisted("master", {"MASTER", "v8"})

    def test_exact_match_only(self):
        validator = BranchValidator()
        assert not validator.is_whitelisted("master-old", {"master"})
        assert not validator.is_whitelisted("mast", {"master"})

    @pytest.mark.parametrize("whitelist", [None, set(), []])
    def test_empty_whitelist_fails_closed(self, whitelist):
        validator = BranchValidator()
        assert not validator.is_whitelisted("master", whitelist)

    def test_validate_returns_branch(self):
        validator = BranchValidator()
        assert validator.validate("UmbracoDocs-v8/", {"master", "v8"}) == "v8"

    def test_validate_rejects_and_warns(self, caplog):
        validator = BranchValidator()

        with caplog.at_level(logging.WARNING, logger="docs_sync.sync.branch"):
            with pytest.raises(ValidationRejected) as exc_info:
                validator.validate("UmbracoDocs-experimental/", {"master"})

        assert exc_info.value.branch == "experimental"
        assert "experimental" in caplog.text


class TestReadTopLevelEntry:
    """Test reading the archive's first entry."""

    def test_first_entry(self, tmp_path):
        archive = make_archive(tmp_path / "a.zip", files={"index.md": "# Hi"})
        assert read_top_level_entry(archive) == "UmbracoDocs-master/"

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"this is not a zip file")

        with pytest.raises(ExtractionError):
            read_top_level_entry(archive)

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ExtractionError):
            read_top_level_entry(tmp_path / "missing.zip")

    def test_empty_archive(self, tmp_path):
        import zipfile

        archive = tmp_path / "empty.zip"
        with zipfile.ZipFile(archive, "w"):
            pass

        with pytest.raises(ExtractionError, match="empty"):
            read_top_level_entry(archive)
