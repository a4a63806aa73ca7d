"""Helpers for building test archives and fake collaborators."""
import shutil
import zipfile
from pathlib import Path
from typing import Dict, Optional

from docs_sync.exceptions import DownloadError


def make_archive(
    path: Path,
    top_level: str = "UmbracoDocs-master",
    files: Optional[Dict[str, str]] = None,
    directories: tuple = (),
) -> Path:
    """
    Build a GitHub-style zip: every member under one top-level directory.

    Args:
        path: Where to write the zip
        top_level: Name of the top-level directory entry
        files: Relative file path -> content
        directories: Extra (possibly empty) directories to include
    """
    files = files or {}
    path.parent.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(f"{top_level}/", "")
        for directory in directories:
            archive.writestr(f"{top_level}/{directory.strip('/')}/", "")
        for name, content in files.items():
            archive.writestr(f"{top_level}/{name}", content)

    return path


class FakeFetcher:
    """Stands in for ArchiveFetcher by copying prepared archives."""

    def __init__(self, archives: Dict[str, Path]):
        self.archives = archives
        self.fetched = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

    def fetch(self, url: str, destination: Path) -> Path:
        self.fetched.append((url, destination))
        if url not in self.archives:
            raise DownloadError(f"HTTP 404 downloading {url}")

        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self.archives[url], destination)
        return destination


