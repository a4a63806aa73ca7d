"""Loading of sync sources and allowed branches."""
import json
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Set

from pydantic import ValidationError

from ..exceptions import ConfigError
from ..models import Source, SourcesConfig

logger = logging.getLogger(__name__)


class SourceSetManager:
    """
    Loads the sources and branch whitelist for a sync run.

    Two formats are understood:

    JSON::

        {
            "sources": [{"url": "https://.../zipball/master", "folder": ""}],
            "allowed_branches": "master,v8"
        }

    Legacy XML (``githubpull.config``)::

        <configuration>
          <sources><add url="..." folder="" /></sources>
          <allowedBranches>master,v8</allowedBranches>
        </configuration>
    """

    def __init__(self, config_path: Path):
        """
        Initialize source set manager.

        Args:
            config_path: Path to a JSON or XML configuration file
        """
        self.config_path = Path(config_path)
        self._config: Optional[SourcesConfig] = None

    def load(self) -> SourcesConfig:
        """
        Load (or reload) the configuration file.

        Raises:
            ConfigError: If the file is missing or malformed
        """
        if not self.config_path.exists():
            raise ConfigError(f"Sync configuration not found: {self.config_path}")

        if self.config_path.suffix.lower() == ".json":
            config = self._load_json(self.config_path)
        else:
            config = self._load_xml(self.config_path)

        self._config = config
        logger.info(
            f"Loaded {len(config.sources)} sources and "
            f"{len(config.allowed_branches)} allowed branches from {self.config_path}"
        )
        return config

    @property
    def config(self) -> SourcesConfig:
        if self._config is None:
            self.load()
        return self._config

    def get_sources(self) -> List[Source]:
        return list(self.config.sources)

    def get_allowed_branches(self) -> Set[str]:
        return set(self.config.allowed_branches)

    def get_info(self) -> Dict:
        """Summary of the configuration for display."""
        config = self.config
        return {
            "config_path": str(self.config_path),
            "sources": [
                {"url": source.url, "folder": source.folder or "(root)"}
                for source in config.sources
            ],
            "allowed_branches": sorted(config.allowed_branches),
        }

    def _load_json(self, path: Path) -> SourcesConfig:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return SourcesConfig(**data)
        except (OSError, ValueError, TypeError) as e:
            raise ConfigError(f"Invalid sync configuration {path}: {e}") from e

    def _load_xml(self, path: Path) -> SourcesConfig:
        try:
            tree = ET.parse(path)
        except (OSError, ET.ParseError) as e:
            raise ConfigError(f"Invalid sync configuration {path}: {e}") from e

        document = tree.getroot()

        sources = []
        for node in document.iter("add"):
            url = node.get("url")
            if url is None:
                logger.warning(f"Skipping <add> without url in {path}")
                continue
            try:
                sources.append(Source(url=url, folder=node.get("folder", "")))
            except ValidationError as e:
                raise ConfigError(f"Invalid source in {path}: {e}") from e

        # Only the first allowedBranches element counts
        branches_node = next(document.iter("allowedBranches"), None)
        branches = branches_node.text if branches_node is not None else None

        return SourcesConfig(sources=sources, allowed_branches=branches or "")
