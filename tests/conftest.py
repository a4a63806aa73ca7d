"""Shared fixtures for docs-sync tests."""
import pytest

from docs_sync.config import DocsSyncConfig


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays."""
    calls = []

    def sleep(seconds):
        calls.append(seconds)

    sleep.calls = calls
    return sleep


@pytest.fixture
def docs_config(tmp_path):
    """Config rooted in a temporary directory, with no retry delay."""
    return DocsSyncConfig(
        root_folder=tmp_path / "Documentation",
        config_path=tmp_path / "config" / "githubpull.json",
        archive_dir=tmp_path / "archives",
        delete_delay=0.0,
        docs_host="docs.example.org",
    )
