"""Branch extraction and whitelist check for downloaded archives."""
import logging
import zipfile
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import ExtractionError, ValidationRejected

logger = logging.getLogger(__name__)

DEFAULT_REPOSITORY_PREFIX = "UmbracoDocs-"


def read_top_level_entry(archive_path: Path) -> str:
    """
    Name of the first entry in a zip archive.

    GitHub archives put everything under one directory such as
    ``UmbracoDocs-master/``; that entry comes first.

    Raises:
        ExtractionError: If the archive is unreadable or empty
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            names = archive.namelist()
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Cannot read archive {archive_path}: {e}") from e

    if not names:
        raise ExtractionError(f"Archive {archive_path} is empty")

    return names[0]


class BranchValidator:
    """Gate that keeps unreviewed branches out of the live documentation tree."""

    def __init__(self, repository_prefix: str = DEFAULT_REPOSITORY_PREFIX):
        self.repository_prefix = repository_prefix

    def extract_branch(self, entry_name: str) -> str:
        """
        Branch name from an archive's top-level entry.

        ``UmbracoDocs-master/`` -> ``master``
        """
        name = entry_name.replace("/", "").replace("\\", "")
        if self.repository_prefix and name.startswith(self.repository_prefix):
            name = name[len(self.repository_prefix):]
        return name

    def is_whitelisted(self, branch: str, whitelist: Optional[Iterable[str]]) -> bool:
        """Case-insensitive exact match; an empty whitelist allows nothing."""
        if not whitelist:
            return False

        wanted = branch.casefold()
        return any(allowed.strip().casefold() == wanted for allowed in whitelist)

    def validate(self, entry_name: str, whitelist: Optional[Iterable[str]]) -> str:
        """
        Check the branch embedded in an archive entry name.

        Returns:
            The branch name

        Raises:
            ValidationRejected: If the branch is not whitelisted
        """
        branch = self.extract_branch(entry_name)

        if not self.is_whitelisted(branch, whitelist):
            logger.warning(
                f"The branch {branch} is not allowed, will not process documentation any further"
            )
            raise ValidationRejected(branch)

        return branch
