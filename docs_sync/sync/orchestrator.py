"""Sequential sync of all configured documentation sources."""
import logging
import time
from pathlib import Path, PurePosixPath
from typing import List, Optional

from ..config import DocsSyncConfig
from ..events import CREATE, DELETE, FINISH, UPDATE, SyncEvents
from ..exceptions import DocsSyncError, IndexSignalError, ValidationRejected
from ..index_signal import IndexRebuilder, create_index_rebuilder
from ..models import (
    CreateEvent,
    DeleteEvent,
    FinishEvent,
    Source,
    SourceResult,
    SourcesConfig,
    SyncResult,
    UpdateEvent,
)
from .branch import BranchValidator, read_top_level_entry
from .fetcher import ArchiveFetcher
from .replacer import TreeReplacer, delete_path
from .sitemap import SitemapBuilder
from .sources import SourceSetManager

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Fetches, validates, replaces and indexes each source in turn."""

    def __init__(
        self,
        config: Optional[DocsSyncConfig] = None,
        sources_config: Optional[SourcesConfig] = None,
        fetcher: Optional[ArchiveFetcher] = None,
        validator: Optional[BranchValidator] = None,
        replacer: Optional[TreeReplacer] = None,
        sitemap_builder: Optional[SitemapBuilder] = None,
        index_rebuilder: Optional[IndexRebuilder] = None,
        events: Optional[SyncEvents] = None,
    ):
        """
        Initialize sync orchestrator.

        Args:
            config: Sync configuration
            sources_config: Sources and whitelist (loaded from config_path if omitted)
            fetcher: Archive fetcher
            validator: Branch validator
            replacer: Tree replacer
            sitemap_builder: Sitemap builder
            index_rebuilder: Downstream search index signal
            events: Notification subscribers
        """
        self.config = config or DocsSyncConfig()
        self._sources_config = sources_config

        self.fetcher = fetcher or ArchiveFetcher(self.config)
        self.validator = validator or BranchValidator(self.config.repository_prefix)
        self.replacer = replacer or TreeReplacer(
            attempts=self.config.delete_attempts,
            delay=self.config.delete_delay,
        )
        self.sitemap_builder = sitemap_builder or SitemapBuilder(
            url_template=self.config.sitemap_url_template(),
            filename=self.config.sitemap_filename,
        )
        self.index_rebuilder = index_rebuilder or create_index_rebuilder(
            self.config.index_rebuild_url
        )
        self.events = events or SyncEvents()

    @property
    def root(self) -> Path:
        return Path(self.config.root_folder)

    @property
    def sources_config(self) -> SourcesConfig:
        if self._sources_config is None:
            self._sources_config = SourceSetManager(self.config.config_path).load()
        return self._sources_config

    def run(self, sources: Optional[List[Source]] = None) -> SyncResult:
        """
        Sync every source, then rebuild the search index and fire 'finish'.

        A failure in one source is logged and recorded; the remaining sources
        are still processed.

        Args:
            sources: Sources to sync (defaults to the configured ones)

        Returns:
            SyncResult with one SourceResult per source
        """
        start_time = time.time()
        sources = list(self.sources_config.sources if sources is None else sources)

        logger.info(f"Started documentation sync: {len(sources)} sources into {self.root}")
        self._warn_overlapping(sources)

        result = SyncResult()

        with self.fetcher:
            for source in sources:
                logger.info(f"Loading: {source.url} to {source.target(self.root)}")
                result.results.append(self._process_safely(source))

        if result.synced:
            result.index_rebuilt = self._rebuild_index()

        result.duration_seconds = time.time() - start_time
        logger.info(result.summary())

        self.events.fire(FINISH, FinishEvent(result=result))
        return result

    def process(self, source: Source) -> SourceResult:
        """
        Sync a single source.

        Raises:
            DownloadError, ExtractionError, FilesystemError, SerializationError:
                Fatal for this source
        """
        start_time = time.time()
        target = source.target(self.root)
        archive_path = self.config.archive_path(source.folder)
        created = not target.exists()

        self.fetcher.fetch(source.url, archive_path)

        try:
            entry = read_top_level_entry(archive_path)
            try:
                branch = self.validator.validate(entry, self.sources_config.allowed_branches)
            except ValidationRejected as e:
                return SourceResult(
                    source=source,
                    status="rejected",
                    branch=e.branch,
                    error=str(e),
                    duration_seconds=time.time() - start_time,
                )

            if created:
                self.events.fire(CREATE, CreateEvent(source=source, target=target))

            replaced = self.replacer.replace(archive_path, self.root, source.folder)

            if replaced.removed:
                self.events.fire(
                    DELETE,
                    DeleteEvent(source=source, target=target, removed=replaced.removed),
                )
            self.events.fire(
                UPDATE,
                UpdateEvent(source=source, target=target, branch=branch, promoted=replaced.promoted),
            )
        finally:
            self._discard_archive(archive_path)

        sitemap_path = self.sitemap_builder.rebuild(target)

        return SourceResult(
            source=source,
            status="synced",
            branch=branch,
            sitemap_path=sitemap_path,
            duration_seconds=time.time() - start_time,
        )

    def _process_safely(self, source: Source) -> SourceResult:
        try:
            return self.process(source)
        except DocsSyncError as e:
            logger.error(f"Sync of {source.url} into '{source.folder}' failed: {e}")
            return SourceResult(source=source, status="failed", error=str(e))

    def _rebuild_index(self) -> bool:
        try:
            self.index_rebuilder.rebuild(self.config.index_name)
            return True
        except IndexSignalError as e:
            logger.error(f"Search index rebuild failed: {e}")
            return False

    def _discard_archive(self, archive_path: Path) -> None:
        try:
            delete_path(
                archive_path,
                attempts=self.config.delete_attempts,
                delay=self.config.delete_delay,
            )
        except DocsSyncError as e:
            logger.warning(f"Could not remove archive {archive_path}: {e}")

    def _warn_overlapping(self, sources: List[Source]) -> None:
        """Log sources whose target folders overlap; the later one wins."""
        folders = [PurePosixPath(source.folder) for source in sources]

        for i, first in enumerate(folders):
            for second in folders[i + 1:]:
                if first == second or first in second.parents or second in first.parents:
                    logger.warning(
                        f"Sources target overlapping folders '{first}' and '{second}'; "
                        f"the later source wins"
                    )


def ensure_synced(
    force_overwrite: bool = False,
    config: Optional[DocsSyncConfig] = None,
    orchestrator: Optional[SyncOrchestrator] = None,
) -> Optional[SyncResult]:
    """
    Make sure the documentation exists locally.

    The root sitemap marks a completed sync; when it is present nothing
    happens unless ``force_overwrite`` is set.

    Returns:
        SyncResult of the run, or None when skipped
    """
    if orchestrator is None:
        orchestrator = SyncOrchestrator(config or DocsSyncConfig.from_env())
    config = orchestrator.config

    root = Path(config.root_folder)
    sitemap = root / config.sitemap_filename

    if not force_overwrite and sitemap.exists():
        logger.info(f"Documentation already synced ({sitemap} exists), skipping")
        return None

    root.mkdir(parents=True, exist_ok=True)
    return orchestrator.run()
