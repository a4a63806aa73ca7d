"""Error taxonomy for the documentation sync pipeline."""


class DocsSyncError(Exception):
    """Base class for all sync errors."""


class ConfigError(DocsSyncError):
    """Sources/whitelist configuration is missing or malformed."""


class DownloadError(DocsSyncError):
    """Archive could not be fetched or written to disk."""


class ValidationRejected(DocsSyncError):
    """Archive branch is not whitelisted. A deliberate skip, not a failure."""

    def __init__(self, branch: str):
        super().__init__(f"Branch '{branch}' is not in the allowed branches")
        self.branch = branch


class ExtractionError(DocsSyncError):
    """Archive is corrupt, unreadable or unsafe to extract."""


class FilesystemError(DocsSyncError):
    """Delete or move still failing after all retry attempts."""


class SerializationError(DocsSyncError):
    """Sitemap could not be written or read back."""


class IndexSignalError(DocsSyncError):
    """Downstream search index refused or missed the rebuild request."""
