"""
Documentation sync pipeline.

Per configured source: download the archive, check its branch against the
whitelist, replace the target folder with the archive content and rebuild the
folder's sitemap. After all sources the search index is asked to rebuild.

Features:
- HTTPS archive download (TLS 1.2+)
- Branch whitelist gate (fail closed)
- Full folder replacement with bounded-retry deletes
- Deterministically ordered sitemap.js navigation index
- CLI interface
"""
from .branch import BranchValidator, read_top_level_entry
from .fetcher import ArchiveFetcher
from .replacer import TreeReplacer, delete_path
from .sitemap import SitemapBuilder, get_sort, load_sitemap, SORT_RANKS, DEFAULT_SORT
from .sources import SourceSetManager
from .orchestrator import SyncOrchestrator, ensure_synced

__all__ = [
    "ArchiveFetcher",
    "BranchValidator",
    "read_top_level_entry",
    "TreeReplacer",
    "delete_path",
    "SitemapBuilder",
    "get_sort",
    "load_sitemap",
    "SORT_RANKS",
    "DEFAULT_SORT",
    "SourceSetManager",
    "SyncOrchestrator",
    "ensure_synced",
]
