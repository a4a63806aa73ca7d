"""Documentation Sync Package."""

__version__ = "1.0.0"

from .config import DocsSyncConfig
from .events import SyncEvents
from .exceptions import (
    DocsSyncError,
    ConfigError,
    DownloadError,
    ValidationRejected,
    ExtractionError,
    FilesystemError,
    SerializationError,
    IndexSignalError,
)
from .models import (
    Source,
    SourcesConfig,
    SiteMapItem,
    SourceResult,
    SyncResult,
)

__all__ = [
    "DocsSyncConfig",
    "SyncEvents",
    "DocsSyncError",
    "ConfigError",
    "DownloadError",
    "ValidationRejected",
    "ExtractionError",
    "FilesystemError",
    "SerializationError",
    "IndexSignalError",
    "Source",
    "SourcesConfig",
    "SiteMapItem",
    "SourceResult",
    "SyncResult",
]
