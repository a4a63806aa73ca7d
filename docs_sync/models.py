"""Pydantic models for the documentation sync."""
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import List, Optional, Set, Literal, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Configuration models
# =============================================================================

class Source(BaseModel):
    """One remote archive synced into one folder under the root."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        ...,
        description="URL of the zip archive (e.g. a GitHub zipball)"
    )
    folder: str = Field(
        default="",
        description="Target folder relative to the root ('' = the root itself)"
    )

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Source url must not be empty")
        return value

    @field_validator("folder")
    @classmethod
    def _check_folder(cls, value: str) -> str:
        folder = value.strip().replace("\\", "/").strip("/")
        if value.strip().startswith(("/", "\\")) or ":" in folder:
            raise ValueError(f"Source folder must be relative: {value!r}")
        if ".." in PurePosixPath(folder).parts:
            raise ValueError(f"Source folder must stay inside the root: {value!r}")
        return folder

    @classmethod
    def for_github_repo(cls, repo_url: str, branch: str = "master", folder: str = "") -> "Source":
        """Source for a project's own documentation repository (root by default)."""
        return cls(url=f"{repo_url.rstrip('/')}/zipball/{branch}", folder=folder)

    def target(self, root: Path) -> Path:
        """Absolute target directory of this source under ``root``."""
        return Path(root) / self.folder if self.folder else Path(root)


class SourcesConfig(BaseModel):
    """Ordered sources plus the branch whitelist."""

    sources: List[Source] = Field(
        default_factory=list,
        description="Sources processed in order"
    )
    allowed_branches: Set[str] = Field(
        default_factory=set,
        description="Branch names allowed to overwrite local content"
    )

    @field_validator("allowed_branches", mode="before")
    @classmethod
    def _parse_branches(cls, value: Any) -> Any:
        if value is None:
            return set()
        if isinstance(value, str):
            value = value.split(",")
        return {str(branch).strip() for branch in value if str(branch).strip()}


# =============================================================================
# Sitemap
# =============================================================================

class SiteMapItem(BaseModel):
    """A directory in the navigation tree of a synced folder."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    level: int
    sort: int
    has_children: bool = Field(default=False, alias="hasChildren")
    directories: List["SiteMapItem"] = Field(default_factory=list)
    url: str = ""

    def walk(self):
        """Yield this item and all descendants, depth first."""
        yield self
        for child in self.directories:
            yield from child.walk()


SiteMapItem.model_rebuild()


# =============================================================================
# Results
# =============================================================================

class ReplaceResult(BaseModel):
    """What a tree replacement changed on disk."""

    target: Path
    extraction_root: Path
    removed: List[Path] = Field(default_factory=list)
    promoted: List[Path] = Field(default_factory=list)


class SourceResult(BaseModel):
    """Outcome of processing one source."""

    source: Source
    status: Literal["synced", "rejected", "failed"]
    branch: Optional[str] = None
    error: Optional[str] = None
    sitemap_path: Optional[Path] = None
    duration_seconds: float = 0.0


class SyncResult(BaseModel):
    """Outcome of a full run over all sources."""

    results: List[SourceResult] = Field(default_factory=list)
    index_rebuilt: bool = False
    started_at: datetime = Field(default_factory=_utcnow)
    duration_seconds: float = 0.0

    @property
    def synced(self) -> List[SourceResult]:
        return [r for r in self.results if r.status == "synced"]

    @property
    def rejected(self) -> List[SourceResult]:
        return [r for r in self.results if r.status == "rejected"]

    @property
    def failed(self) -> List[SourceResult]:
        return [r for r in self.results if r.status == "failed"]

    def summary(self) -> str:
        """Generate a summary string."""
        return (
            f"Synced {len(self.synced)}/{len(self.results)} sources "
            f"({len(self.rejected)} rejected, {len(self.failed)} failed), "
            f"index {'rebuilt' if self.index_rebuilt else 'not rebuilt'} "
            f"in {self.duration_seconds:.1f}s"
        )


# =============================================================================
# Notification payloads
# =============================================================================

class UpdateEvent(BaseModel):
    """Fired after a folder's content was replaced."""

    source: Source
    target: Path
    branch: str
    promoted: List[Path] = Field(default_factory=list)


class CreateEvent(BaseModel):
    """Fired when a source's target folder was created by this run."""

    source: Source
    target: Path


class DeleteEvent(BaseModel):
    """Fired after stale entries were removed from a target folder."""

    source: Source
    target: Path
    removed: List[Path] = Field(default_factory=list)


class FinishEvent(BaseModel):
    """Fired once after all sources were processed."""

    result: SyncResult
