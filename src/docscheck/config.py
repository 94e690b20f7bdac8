from dotenv import load_dotenv
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional
import json
import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from docscheck.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CONCURRENCY,
    DEFAULT_CONTENT_DIR,
    DEFAULT_DOCS_DIR,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PAGES,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_REPORT_FILE,
    DEFAULT_SEED_PATHS,
    DEFAULT_SIDEBAR_FILE,
    DEFAULT_WAIT_UNTIL,
)
from docscheck.exceptions import ConfigError

load_dotenv()  # Loads variables from .env file


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    BASE_URL = os.getenv("DOCSCHECK_BASE_URL", DEFAULT_BASE_URL)
    CONTENT_DIR = os.getenv("DOCSCHECK_CONTENT_DIR", DEFAULT_CONTENT_DIR)
    REPORT_FILE = os.getenv("DOCSCHECK_REPORT_FILE", DEFAULT_REPORT_FILE)
    DOCS_DIR = os.getenv("DOCSCHECK_DOCS_DIR", DEFAULT_DOCS_DIR)
    SIDEBAR_FILE = os.getenv("DOCSCHECK_SIDEBAR_FILE", DEFAULT_SIDEBAR_FILE)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


class CrawlConfig(BaseModel):
    """
    Configuration for a site crawl.

    Instances are immutable. To apply overrides, build a new instance from
    ``model_dump()`` so the new values are validated too.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        description="Stop descending beyond this link depth",
        ge=0,
    )

    max_pages: int = Field(
        default=DEFAULT_MAX_PAGES,
        description="Hard cap on distinct visited URLs",
        ge=1,
    )

    include_external: bool = Field(
        default=False,
        description="Follow links whose host differs from the seed host",
    )

    timeout: int = Field(
        default=DEFAULT_NAVIGATION_TIMEOUT_MS,
        description="Per-navigation timeout in milliseconds",
        ge=1000,
        le=300000,
    )

    concurrency: int = Field(
        default=DEFAULT_CONCURRENCY,
        description="Number of browser tabs in the pool",
        ge=1,
        le=32,
    )

    headless: bool = Field(
        default=True,
        description="Run the browser without a visible window",
    )

    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default=DEFAULT_WAIT_UNTIL,
        description="When to consider navigation complete",
    )

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """Load crawl configuration from environment variables.

        Environment variables should be prefixed with DOCSCHECK_
        e.g., DOCSCHECK_MAX_PAGES=250

        Returns:
            CrawlConfig with values from environment

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        values: Dict[str, Any] = {}
        prefix = "DOCSCHECK_"

        for field_name in cls.model_fields:
            env_value = os.getenv(f"{prefix}{field_name.upper()}")
            if env_value is not None:
                values[field_name] = env_value

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid crawl settings in environment: {e}") from e

    @classmethod
    def from_file(cls, path: str) -> "CrawlConfig":
        """Load crawl configuration from a YAML or JSON file.

        The settings may sit at the top level or under a ``crawl`` key.
        Unknown keys are rejected, so a misspelt setting is reported.

        Args:
            path: Path to the configuration file

        Returns:
            CrawlConfig with values from file

        Raises:
            ConfigError: If the file is missing, unparseable or invalid
        """
        data = load_config_file(path)
        crawl_config = data.get("crawl", data)
        if crawl_config is None:
            crawl_config = {}
        if not isinstance(crawl_config, dict):
            raise ConfigError(f"The crawl section of {path} must be a mapping")

        try:
            return cls.model_validate(crawl_config)
        except ValidationError as e:
            raise ConfigError(f"Invalid crawl settings in {path}: {e}") from e

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return self.model_dump()


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML or JSON configuration file into a dictionary.

    Args:
        path: Path to the file; ``.json`` files are parsed as JSON,
            anything else as YAML

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigError: If the file cannot be read or does not hold a mapping
    """
    file_path = Path(path)

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if file_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def build_seed_urls(base_url: str, paths: Optional[List[str]] = None) -> List[str]:
    """Build the seed list: the base URL followed by each path appended to it.

    Args:
        base_url: Root of the locally served site
        paths: Extra paths; defaults to DEFAULT_SEED_PATHS

    Returns:
        Absolute seed URLs in push order
    """
    if paths is None:
        paths = DEFAULT_SEED_PATHS

    base = base_url.rstrip("/")
    seeds = [base_url]
    for path in paths:
        if not path.startswith("/"):
            path = f"/{path}"
        seeds.append(f"{base}{path}")
    return seeds
