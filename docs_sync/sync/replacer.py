"""Full replacement of a target folder with the contents of an archive."""
import logging
import shutil
import time
import uuid
import zipfile
from pathlib import Path
from typing import Callable, List, Optional

from ..exceptions import ExtractionError
from ..models import ReplaceResult
from ..retry import DEFAULT_ATTEMPTS, DEFAULT_DELAY, retry_call
from .branch import read_top_level_entry

logger = logging.getLogger(__name__)


class TreeReplacer:
    """
    Replaces a folder's content with a freshly extracted archive.

    The archive is extracted next to the old content, stale siblings are
    removed, and only then is the extracted content promoted from a staging
    directory. A crash part way through leaves the old tree, the new tree, or an
    orphaned extraction or staging directory that the next run removes, never a
    mix of old and new top-level entries.
    """

    def __init__(
        self,
        attempts: int = DEFAULT_ATTEMPTS,
        delay: float = DEFAULT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize tree replacer.

        Args:
            attempts: Tries for each delete/move before giving up
            delay: Seconds between tries
            sleep: Sleep function (tests pass a no-op)
        """
        self.attempts = attempts
        self.delay = delay
        self._sleep = sleep

    def replace(self, archive_path: Path, root: Path, folder: str = "") -> ReplaceResult:
        """
        Replace ``root / folder`` with the archive's content.

        Args:
            archive_path: Downloaded zip archive
            root: Documentation root
            folder: Target folder relative to the root

        Returns:
            ReplaceResult listing removed and promoted paths

        Raises:
            ExtractionError: Corrupt/unsafe archive or extraction failure
            FilesystemError: A delete or move kept failing
        """
        target = Path(root) / folder if folder else Path(root)
        target.mkdir(parents=True, exist_ok=True)

        entry = read_top_level_entry(archive_path)
        top_level = entry.replace("\\", "/").split("/")[0]
        if not top_level:
            raise ExtractionError(f"Archive {archive_path} has no top-level directory")

        extraction_root = target / top_level
        result = ReplaceResult(target=target, extraction_root=extraction_root)

        # Left over from an interrupted run; extraction would trip over it
        if extraction_root.exists():
            logger.info(f"Removing leftover extraction root {extraction_root}")
            self._remove(extraction_root)

        self._extract(archive_path, target, top_level)

        if not extraction_root.is_dir():
            raise ExtractionError(
                f"Archive {archive_path} did not produce directory {top_level}"
            )

        result.removed = self._remove_stale(target, keep=extraction_root)
        staging = self._stage(extraction_root, target)
        result.promoted = self._promote(staging, target)

        self._remove(staging)

        logger.info(
            f"Replaced {target}: {len(result.removed)} stale entries removed, "
            f"{len(result.promoted)} entries promoted"
        )
        return result

    def _extract(self, archive_path: Path, target: Path, top_level: str) -> None:
        """
        Extract every member into the target.

        All members are checked before anything is written: each must sit
        under ``top_level/`` and resolve inside the target.
        """
        resolved_target = target.resolve()
        prefix = f"{top_level}/"

        try:
            with zipfile.ZipFile(archive_path) as archive:
                for member in archive.namelist():
                    if not member.replace("\\", "/").startswith(prefix):
                        raise ExtractionError(
                            f"Archive member {member!r} is outside top-level directory {top_level!r}"
                        )
                    destination = (resolved_target / member).resolve()
                    if destination != resolved_target and resolved_target not in destination.parents:
                        raise ExtractionError(
                            f"Archive member {member!r} would extract outside {target}"
                        )
                archive.extractall(target)
        except (zipfile.BadZipFile, OSError) as e:
            raise ExtractionError(f"Cannot extract {archive_path}: {e}") from e

        logger.debug(f"Extracted {archive_path} into {target}")

    def _remove_stale(self, target: Path, keep: Path) -> List[Path]:
        """
        Remove child directories except ``keep`` and loose markdown files.

        A symlink to a directory counts as a stale directory; the link is
        removed, never its target.
        """
        removed = []

        for child in sorted(target.iterdir()):
            if child.is_symlink() and child.is_dir():
                self._remove(child)
                removed.append(child)
            elif child.is_dir():
                if child.name == keep.name:
                    continue
                self._remove(child)
                removed.append(child)
            elif child.is_file() and child.suffix.lower() == ".md":
                self._remove(child)
                removed.append(child)

        return removed

    def _stage(self, extraction_root: Path, target: Path) -> Path:
        """Rename the extraction root so no promoted child can collide with it."""
        staging = target / f".{extraction_root.name}-{uuid.uuid4().hex[:8]}"
        retry_call(
            lambda: shutil.move(str(extraction_root), str(staging)),
            attempts=self.attempts,
            delay=self.delay,
            description=f"Move {extraction_root} -> {staging}",
            sleep=self._sleep,
        )
        return staging

    def _promote(self, staging: Path, target: Path) -> List[Path]:
        """Move every child of the staging directory into the target."""
        promoted = []

        for child in sorted(staging.iterdir()):
            destination = target / child.name
            if destination.exists() or destination.is_symlink():
                self._remove(destination)

            retry_call(
                lambda child=child, destination=destination: shutil.move(str(child), str(destination)),
                attempts=self.attempts,
                delay=self.delay,
                description=f"Move {child} -> {destination}",
                sleep=self._sleep,
            )
            promoted.append(destination)

        return promoted

    def _remove(self, path: Path) -> None:
        delete_path(path, attempts=self.attempts, delay=self.delay, sleep=self._sleep)


def _delete(path: Path) -> None:
    # A previous attempt may have removed part (or all) of a tree
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def delete_path(
    path: Path,
    attempts: int = DEFAULT_ATTEMPTS,
    delay: float = DEFAULT_DELAY,
    sleep: Optional[Callable[[float], None]] = None,
) -> None:
    """Delete a file or directory tree with bounded retry."""
    path = Path(path)
    retry_call(
        lambda: _delete(path),
        attempts=attempts,
        delay=delay,
        description=f"Delete {path}",
        sleep=sleep or time.sleep,
    )
