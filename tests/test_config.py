"""Tests for crawl configuration loading."""

import json

import pytest

from docscheck.config import CrawlConfig, build_seed_urls, load_config_file
from docscheck.constants import DEFAULT_SEED_PATHS
from docscheck.exceptions import ConfigError


@pytest.fixture
def clean_env(monkeypatch):
    for field_name in CrawlConfig.model_fields:
        monkeypatch.delenv(f"DOCSCHECK_{field_name.upper()}", raising=False)
    return monkeypatch


class TestCrawlConfig:
    """Test cases for CrawlConfig."""

    def test_defaults(self):
        config = CrawlConfig()
        assert config.max_depth == 5
        assert config.max_pages == 100
        assert config.include_external is False
        assert config.timeout == 30000
        assert config.concurrency == 3
        assert config.headless is True
        assert config.wait_until == "networkidle"

    def test_is_frozen(self):
        """Test configuration cannot be changed after creation."""
        config = CrawlConfig()
        with pytest.raises(ValueError):
            config.max_pages = 10

    @pytest.mark.parametrize("values", [
        {"max_pages": 0},
        {"max_depth": -1},
        {"concurrency": 0},
        {"timeout": 10},
        {"wait_until": "never"},
        {"unknown": 1},
    ])
    def test_invalid_values_rejected(self, values):
        with pytest.raises(ValueError):
            CrawlConfig(**values)

    def test_from_env(self, clean_env):
        """Test DOCSCHECK_ variables are read and coerced."""
        clean_env.setenv("DOCSCHECK_MAX_PAGES", "250")
        clean_env.setenv("DOCSCHECK_INCLUDE_EXTERNAL", "true")

        config = CrawlConfig.from_env()

        assert config.max_pages == 250
        assert config.include_external is True
        assert config.max_depth == 5

    def test_from_env_invalid(self, clean_env):
        clean_env.setenv("DOCSCHECK_CONCURRENCY", "lots")

        with pytest.raises(ConfigError, match="environment"):
            CrawlConfig.from_env()

    def test_from_yaml_file(self, tmp_path):
        """Test settings under a crawl section are loaded."""
        path = tmp_path / "docscheck.yaml"
        path.write_text("crawl:\n  max_depth: 2\n  concurrency: 1\n")

        config = CrawlConfig.from_file(str(path))

        assert config.max_depth == 2
        assert config.concurrency == 1

    def test_from_json_file_top_level(self, tmp_path):
        """Test settings at the top level of a JSON file are loaded."""
        path = tmp_path / "docscheck.json"
        path.write_text(json.dumps({"max_pages": 7, "headless": False}))

        config = CrawlConfig.from_file(str(path))

        assert config.max_pages == 7
        assert config.headless is False

    def test_from_file_rejects_unknown_key(self, tmp_path):
        """Test a misspelt setting is reported, not ignored."""
        path = tmp_path / "docscheck.yaml"
        path.write_text("crawl:\n  max_page: 10\n")

        with pytest.raises(ConfigError, match="max_page"):
            CrawlConfig.from_file(str(path))

    def test_from_file_crawl_section_not_mapping(self, tmp_path):
        """Test a scalar crawl section raises ConfigError."""
        path = tmp_path / "docscheck.yaml"
        path.write_text("crawl: 5\n")

        with pytest.raises(ConfigError, match="must be a mapping"):
            CrawlConfig.from_file(str(path))

    def test_from_file_empty_crawl_section(self, tmp_path):
        path = tmp_path / "docscheck.yaml"
        path.write_text("crawl:\n")

        assert CrawlConfig.from_file(str(path)) == CrawlConfig()

    def test_from_file_invalid_value(self, tmp_path):
        path = tmp_path / "docscheck.yaml"
        path.write_text("max_pages: 0\n")

        with pytest.raises(ConfigError, match="Invalid crawl settings"):
            CrawlConfig.from_file(str(path))

    def test_to_dict(self):
        assert CrawlConfig(max_pages=3).to_dict()["max_pages"] == 3


class TestLoadConfigFile:
    """Test cases for load_config_file."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config_file(str(tmp_path / "nope.yaml"))

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Cannot parse"):
            load_config_file(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config_file(str(path))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config_file(str(path)) == {}


class TestBuildSeedUrls:
    """Test cases for build_seed_urls."""

    def test_default_paths(self):
        seeds = build_seed_urls("http://localhost:3000")

        assert seeds[0] == "http://localhost:3000"
        assert seeds[1] == "http://localhost:3000/docs"
        assert len(seeds) == len(DEFAULT_SEED_PATHS) + 1

    def test_custom_paths(self):
        """Test paths are appended to the base without doubled slashes."""
        seeds = build_seed_urls("http://localhost:3000/", ["/a", "b"])

        assert seeds == [
            "http://localhost:3000/",
            "http://localhost:3000/a",
            "http://localhost:3000/b",
        ]

    def test_no_paths(self):
        assert build_seed_urls("http://localhost:3000", []) == ["http://localhost:3000"]
