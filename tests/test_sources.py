"""Tests for loading sources and allowed branches."""
import json

import pytest

from docs_sync.exceptions import ConfigError
from docs_sync.models import Source
from docs_sync.sync.sources import SourceSetManager

LEGACY_XML = """<?xml version="1.0"?>
<configuration>
  <sources>
    <add url="https://github.com/umbraco/UmbracoDocs/archive/master.zip" folder="" />
    <add url="https://github.com/umbraco/UmbracoDocs/archive/v7.zip" folder="v7" />
  </sources>
  <allowedBranches>master,v7</allowedBranches>
</configuration>
"""


class TestSourceSetManager:
    """Test SourceSetManager loading."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "githubpull.json"
        path.write_text(json.dumps({
            "sources": [
                {"url": "https://example.org/master.zip", "folder": ""},
                {"url": "https://example.org/v8.zip", "folder": "v8"},
            ],
            "allowed_branches": "master, v8",
        }))

        config = SourceSetManager(path).load()

        assert config.sources == [
            Source(url="https://example.org/master.zip", folder=""),
            Source(url="https://example.org/v8.zip", folder="v8"),
        ]
        assert config.allowed_branches == {"master", "v8"}

    def test_load_json_branch_list(self, tmp_path):
        path = tmp_path / "githubpull.json"
        path.write_text(json.dumps({"sources": [], "allowed_branches": ["master"]}))

        assert SourceSetManager(path).get_allowed_branches() == {"master"}

    def test_load_legacy_xml(self, tmp_path):
        path = tmp_path / "githubpull.config"
        path.write_text(LEGACY_XML)

        manager = SourceSetManager(path)

        assert [s.folder for s in manager.get_sources()] == ["", "v7"]
        assert manager.get_allowed_branches() == {"master", "v7"}

    def test_xml_without_allowed_branches(self, tmp_path):
        path = tmp_path / "githubpull.config"
        path.write_text('<configuration><sources><add url="https://example.org/a.zip" folder="" /></sources></configuration>')

        config = SourceSetManager(path).load()

        assert len(config.sources) == 1
        assert config.allowed_branches == set()

    def test_xml_empty_allowed_branches(self, tmp_path):
        path = tmp_path / "githubpull.config"
        path.write_text("<configuration><sources /><allowedBranches>  </allowedBranches></configuration>")

        assert SourceSetManager(path).load().allowed_branches == set()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            SourceSetManager(tmp_path / "missing.json").load()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "githubpull.json"
        path.write_text("{\"sources\": [")

        with pytest.raises(ConfigError):
            SourceSetManager(path).load()

    def test_invalid_source_folder(self, tmp_path):
        path = tmp_path / "githubpull.json"
        path.write_text(json.dumps({"sources": [{"url": "https://example.org/a.zip", "folder": "../up"}]}))

        with pytest.raises(ConfigError):
            SourceSetManager(path).load()

    def test_malformed_xml(self, tmp_path):
        path = tmp_path / "githubpull.config"
        path.write_text("<configuration><sources>")

        with pytest.raises(ConfigError):
            SourceSetManager(path).load()

    def test_get_info(self, tmp_path):
        path = tmp_path / "githubpull.config"
        path.write_text(LEGACY_XML)

        info = SourceSetManager(path).get_info()

        assert info["allowed_branches"] == ["master", "v7"]
        assert info["sources"][0]["folder"] == "(root)"
        assert info["sources"][1] == {
            "url": "https://github.com/umbraco/UmbracoDocs/archive/v7.zip",
            "folder": "v7",
        }
