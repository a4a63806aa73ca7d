"""Configuration for the documentation sync."""
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
import tempfile


class DocsSyncConfig(BaseSettings):
    """Documentation sync configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DOCS_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Local tree
    root_folder: Path = Field(
        default=Path("Documentation"),
        description="Root folder the documentation sources are synced into"
    )
    config_path: Path = Field(
        default=Path("config") / "githubpull.json",
        description="Sources and allowed branches configuration file"
    )
    sitemap_filename: str = Field(
        default="sitemap.js",
        description="Name of the persisted sitemap in each synced folder"
    )
    archive_filename: str = Field(
        default="archive.zip",
        description="Name of the transient downloaded archive"
    )
    archive_dir: Optional[Path] = Field(
        default=None,
        description="Where archives are downloaded (system temp dir if unset)"
    )

    # Sitemap
    docs_host: str = Field(
        default="our.umbraco.org",
        description="Host used to derive sitemap item URLs"
    )

    # Branch validation
    repository_prefix: str = Field(
        default="UmbracoDocs-",
        description="Prefix stripped from the archive entry to get the branch"
    )

    # Search index
    index_name: str = Field(
        default="documentationIndexer",
        description="Name of the search index rebuilt after a sync"
    )
    index_rebuild_url: Optional[str] = Field(
        default=None,
        description="Base URL of the search indexer (log only when unset)"
    )

    # HTTP
    request_timeout: float = Field(
        default=60.0,
        description="Archive download timeout in seconds"
    )
    user_agent: str = Field(
        default="docs-sync/1.0 (Python)",
        description="User agent for HTTP requests"
    )

    # Filesystem retry
    delete_attempts: int = Field(
        default=5,
        description="Attempts for deletes/moves blocked by file locks"
    )
    delete_delay: float = Field(
        default=1.0,
        description="Seconds between delete/move attempts"
    )

    verbose: bool = Field(
        default=False,
        description="Enable verbose logging"
    )

    @field_validator("archive_dir", "index_rebuild_url", mode="before")
    @classmethod
    def _empty_as_unset(cls, value):
        return None if value == "" else value

    @classmethod
    def from_env(cls) -> "DocsSyncConfig":
        """
        Load config from DOCS_SYNC_* environment variables.

        Variables missing from the environment are read from a .env file in
        the working directory, then fall back to the field defaults.
        """
        return cls()

    def archive_path(self, folder: str) -> Path:
        """Download location for a source's archive, kept outside the synced tree."""
        base = self.archive_dir or Path(tempfile.gettempdir()) / "docs-sync"
        slug = folder.strip("/").replace("/", "-") or "root"
        return Path(base) / f"{slug}-{self.archive_filename}"

    def sitemap_url_template(self) -> str:
        """URL template for sitemap items, with a ``{path}`` placeholder."""
        return f"https://{self.docs_host}/documentation{{path}}/?altTemplate=Lesson"
