"""Filesystem output for imported feed items."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from .config import OutputConfig
from .logging_config import create_execution_logger
from .models import FeedItem, LatestRelease

FRONT_MATTER_DELIMITER = "---"


class FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that writes datetimes as UTC ISO-8601 with milliseconds."""


def represent_datetime(dumper: yaml.SafeDumper, data: datetime) -> yaml.Node:
    if data.tzinfo is not None:
        data = data.astimezone(UTC)
    value = f"{data.strftime('%Y-%m-%dT%H:%M:%S')}.{data.microsecond // 1000:03d}Z"
    return dumper.represent_scalar("tag:yaml.org,2002:timestamp", value)


FrontMatterDumper.add_representer(datetime, represent_datetime)


def render_front_matter(data: dict[str, Any], body: str = "") -> str:
    """Render a markdown document with a YAML front matter block."""
    front_matter = yaml.dump(
        data,
        Dumper=FrontMatterDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"{FRONT_MATTER_DELIMITER}\n{front_matter}{FRONT_MATTER_DELIMITER}\n{body}"


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"


class ContentWriter:
    """Writes feed items, the latest release pointer and the raw cache."""

    def __init__(self, output_config: OutputConfig, execution_id: str | None = None):
        self.output_config = output_config
        self.logger = create_execution_logger("writer", execution_id)

    def _write(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def write_feed_items(self, items: list[FeedItem]) -> list[Path]:
        """Write one front matter file per item, named by its slug.

        Existing files with the same slug are overwritten.
        """
        written = []
        for item in items:
            filename = f"{item.slug}.{self.output_config.content_extension}"
            path = self._write(
                self.output_config.content_dir / filename,
                render_front_matter(item.to_front_matter()),
            )
            written.append(path)
            self.logger.log_item_processing(item.slug, "written")

        self.logger.info(
            f"Wrote {len(written)} feed items to {self.output_config.content_dir}",
            path=self.output_config.content_dir,
            items_count=len(written),
        )
        return written

    def write_latest_release(self, release: LatestRelease) -> Path:
        path = self._write(
            self.output_config.latest_release_path, render_json(release.to_dict())
        )
        self.logger.info(
            f"Wrote latest CLI release {release.version} to {path}",
            path=path,
            version=release.version,
        )
        return path

    def write_raw_cache(self, raw_entries: list[dict[str, Any]]) -> Path:
        """Cache the untransformed feed entries for debugging feed changes."""
        path = self._write(self.output_config.cache_path, render_json(raw_entries))
        self.logger.info(f"Wrote raw CLI releases to {path}", path=path)
        return path
