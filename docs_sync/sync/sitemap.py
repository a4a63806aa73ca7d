"""Navigation sitemap over a synced documentation folder."""
import json
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from pydantic import ValidationError

from ..exceptions import SerializationError
from ..models import SiteMapItem

logger = logging.getLogger(__name__)

SITEMAP_FILENAME = "sitemap.js"
DEFAULT_SORT = 100
EXCLUDED_DIRECTORY = "images"
DEFAULT_URL_TEMPLATE = "https://our.umbraco.org/documentation{path}/?altTemplate=Lesson"


def _ranked(level: int, names: List[str], start: int = 0) -> Dict[Tuple[int, str], int]:
    return {(level, name): rank for rank, name in enumerate(names, start)}


# =============================================================================
# Sort ranks: (level, lowercase directory name) -> rank
# =============================================================================

SORT_RANKS: Dict[Tuple[int, str], int] = {
    # Level 1: documentation sections
    **_ranked(1, [
        "getting-started", "implementation", "extending", "reference",
        "tutorials", "add-ons", "umbraco-cloud",
    ]),

    # Level 2: Getting Started
    **_ranked(2, ["setup", "backoffice", "data", "design", "code"]),
    # Level 2: Implementation
    **_ranked(2, [
        "default-routing", "custom-routing", "controllers", "data-persistence", "rest-api",
    ]),
    # Level 2: Extending
    **_ranked(2, [
        "dashboards", "section-trees", "property-editors", "macro-parameter-editors",
        "healthcheck", "language-files",
    ]),
    # Level 2: Reference
    **_ranked(2, [
        "config", "templating", "querying", "routing", "searching", "events",
        "management", "plugins", "cache", "packaging", "security", "common-pitfalls",
    ]),
    # Level 2: Tutorials
    **_ranked(2, [
        "creating-basic-site", "creating-a-custom-dashboard", "creating-a-property-editor",
        "multilanguage-setup", "starter-kit",
    ]),
    # Level 2: Add ons
    **_ranked(2, ["umbracoforms", "umbracocourier"]),
    # Level 2: Umbraco Cloud
    **_ranked(2, [
        "getting-started", "set-up", "deployment", "databases", "upgrades",
        "troubleshooting", "frequently-asked-questions",
    ]),

    # Level 3: Getting Started
    **_ranked(3, ["requirements", "install", "upgrading", "server-setup"]),
    **_ranked(3, ["sections", "property-editors", "login"]),
    **_ranked(3, [
        "defining-content", "creating-media", "members", "data-types", "scheduled-publishing",
    ]),
    **_ranked(3, ["templates", "rendering-content", "rendering-media", "stylesheets-javascript"]),
    **_ranked(3, ["umbraco-services", "subscribing-to-events", "creating-forms"]),
    # Level 3: Implementation - Default Routing
    **_ranked(3, ["inbound-pipeline", "controller-selection", "execute-request"]),
    # Level 3: Reference
    **_ranked(3, [
        "webconfig", "404handlers", "applications", "embeddedmedia", "examineindex",
        "examinesettings", "filesystemproviders", "baserestextensions", "tinymceconfig",
        "trees", "umbracosettings", "dashboard", "healthchecks",
    ]),
    **_ranked(3, ["mvc", "masterpages", "macros", "modelsbuilder"]),
    **_ranked(3, ["ipublishedcontent", "dynamicpublishedcontent", "umbracohelper", "membershiphelper"]),
    **_ranked(3, ["authorized", "request-pipeline", "webapi", "iisrewriterules", "url-tracking"]),
    # Level 3: Add ons
    **_ranked(3, ["installation", "editor", "developer"]),
    **_ranked(3, ["architechture"], start=1),
    # Level 3: Umbraco Cloud
    **_ranked(3, [
        "project-overview", "environments", "the-umbraco-cloud-portal", "baselines",
        "migrate-existing-site",
    ]),
    **_ranked(3, [
        "working-locally", "visual-studio", "working-with-visual-studio", "working-with-uaas-cli",
        "project-settings", "team-members", "media", "smtp-settings", "manage-domains",
        "config-transforms", "power-tools",
    ]),
    **_ranked(3, [
        "local-to-cloud", "cloud-to-cloud", "content-transfer", "restoring-content",
        "deployment-webhook",
    ]),
    **_ranked(3, [
        "content-deploy-schema", "content-deploy-error", "structure-error",
        "duplicate-dictionary-items", "moving-from-courier-to-deploy", "minor-upgrades",
        "plugins-known-issues",
    ]),
}


def get_sort(name: str, level: int) -> int:
    """Sort rank of a directory at a level; unranked names get DEFAULT_SORT."""
    return SORT_RANKS.get((level, name.lower()), DEFAULT_SORT)


def list_subdirectories(directory: Path) -> List[Path]:
    """Subdirectories in enumeration order (case-folded name order)."""
    with os.scandir(directory) as entries:
        names = [entry.name for entry in entries if entry.is_dir()]
    return [directory / name for name in sorted(names, key=lambda n: (n.casefold(), n))]


class SitemapBuilder:
    """Builds and persists the ordered directory tree of a synced folder."""

    def __init__(
        self,
        url_template: str = DEFAULT_URL_TEMPLATE,
        filename: str = SITEMAP_FILENAME,
        lister: Callable[[Path], List[Path]] = list_subdirectories,
        sort_key: Callable[[str, int], int] = get_sort,
    ):
        """
        Initialize sitemap builder.

        Args:
            url_template: Item URL template with a ``{path}`` placeholder
            filename: Sitemap file written at the folder root
            lister: Returns a directory's subdirectories in enumeration order
            sort_key: Rank lookup for (name, level)
        """
        self.url_template = url_template
        self.filename = filename
        self._lister = lister
        self._sort_key = sort_key

    def build(self, folder: Path) -> SiteMapItem:
        """Walk ``folder`` and return the root SiteMapItem (level 0)."""
        folder = Path(folder)
        return self._visit(folder, folder, 0)

    def _visit(self, directory: Path, root: Path, level: int) -> SiteMapItem:
        subdirectories = self._lister(directory)

        relative = directory.relative_to(root)
        path = "" if relative == Path(".") else "/" + relative.as_posix()

        children = [
            self._visit(child, root, level + 1)
            for child in subdirectories
            if child.name != EXCLUDED_DIRECTORY
        ]

        return SiteMapItem(
            name=directory.name.replace("-", " "),
            path=path,
            level=level,
            sort=self._sort_key(directory.name, level),
            # Counted before the images filter: an images-only folder still reports children
            has_children=bool(subdirectories),
            # sorted() is stable, so equal ranks keep enumeration order
            directories=sorted(children, key=lambda item: item.sort),
            url=self.url_template.format(path=path),
        )

    def serialize(self, item: SiteMapItem) -> str:
        """Indented JSON for a sitemap tree."""
        return json.dumps(item.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)

    def write(self, item: SiteMapItem, folder: Path) -> Path:
        """
        Persist a sitemap at the folder root.

        Raises:
            SerializationError: If the tree cannot be serialized or written
        """
        path = Path(folder) / self.filename

        try:
            content = self.serialize(item)
            path.write_text(content, encoding="utf-8")
        except (TypeError, ValueError, OSError) as e:
            raise SerializationError(f"Cannot write sitemap {path}: {e}") from e

        logger.info(f"Wrote sitemap {path}")
        return path

    def rebuild(self, folder: Path) -> Path:
        """Build and write the sitemap for a folder."""
        return self.write(self.build(folder), folder)


def load_sitemap(folder: Path, filename: str = SITEMAP_FILENAME) -> SiteMapItem:
    """
    Read a persisted sitemap back into a SiteMapItem tree.

    Raises:
        SerializationError: If the file is missing or malformed
    """
    path = Path(folder) / filename

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return SiteMapItem.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        raise SerializationError(f"Cannot read sitemap {path}: {e}") from e
