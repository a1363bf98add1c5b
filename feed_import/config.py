"""Configuration management for the CLI release feed import."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class FetchConfig:
    """Configuration for downloading the releases feed."""

    feed_url: str
    timeout: float = 30.0
    user_agent: str = "CLI-Feed-Import/1.0 (GitHub releases importer)"


@dataclass
class OutputConfig:
    """Filesystem locations written by an import run."""

    content_dir: Path
    data_dir: Path
    cache_dir: Path
    latest_release_filename: str = "latest.json"
    cache_filename: str = "cli-releases-import.json"
    content_extension: str = "md"

    @property
    def latest_release_path(self) -> Path:
        return self.data_dir / self.latest_release_filename

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / self.cache_filename


@dataclass
class ContentStoreConfig:
    """Identifiers for the content store client used by the site."""

    project_id: str = ""
    dataset: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.project_id and self.dataset)


class Config:
    """Main configuration manager."""

    DEFAULT_FEED_URL = "https://github.com/netlify/cli/releases.atom"
    DEFAULT_CONTENT_DIR = "src/content/feed"
    DEFAULT_DATA_DIR = "src/data/cli"
    DEFAULT_CACHE_DIR = "tmp"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.feed_url = os.getenv("CLI_RELEASES_FEED_URL", self.DEFAULT_FEED_URL)
        self.request_timeout = self._parse_timeout(
            os.getenv("FEED_REQUEST_TIMEOUT", "30")
        )
        self.base_dir = Path(os.getenv("IMPORT_BASE_DIR", "."))
        self.content_dir = os.getenv("FEED_CONTENT_DIR", self.DEFAULT_CONTENT_DIR)
        self.data_dir = os.getenv("CLI_DATA_DIR", self.DEFAULT_DATA_DIR)
        self.cache_dir = os.getenv("IMPORT_CACHE_DIR", self.DEFAULT_CACHE_DIR)
        self.sanity_project_id = os.getenv("SANITY_PROJECT_ID", "")
        self.sanity_dataset = os.getenv("SANITY_DATASET", "")

    @staticmethod
    def _parse_timeout(value: str) -> float:
        try:
            timeout = float(value)
        except ValueError as e:
            raise ValueError(f"Invalid FEED_REQUEST_TIMEOUT value: {value!r}") from e
        if timeout <= 0:
            raise ValueError(f"FEED_REQUEST_TIMEOUT must be positive, got {value!r}")
        return timeout

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.base_dir / candidate

    def get_fetch_config(self) -> FetchConfig:
        """Get feed download configuration."""
        return FetchConfig(feed_url=self.feed_url, timeout=self.request_timeout)

    def get_output_config(self) -> OutputConfig:
        """Get output paths, resolved against the base directory."""
        return OutputConfig(
            content_dir=self._resolve(self.content_dir),
            data_dir=self._resolve(self.data_dir),
            cache_dir=self._resolve(self.cache_dir),
        )

    def get_content_store_config(self) -> ContentStoreConfig:
        """Get content store identifiers."""
        return ContentStoreConfig(
            project_id=self.sanity_project_id,
            dataset=self.sanity_dataset,
        )
