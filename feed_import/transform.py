"""Transforms raw CLI release feed entries into content feed items."""

import re
from typing import Any

from .logging_config import create_execution_logger
from .models import FeedItem, LatestRelease, TransformResult
from .rss import parse_publish_date
from .validation import validate_feed_item

# Simplified from the semver.org suggested regex: only MAJOR.MINOR.0 releases.
MINOR_RELEASE_PATTERN = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.0$")

FEED_PREVIEW_IMAGE = "/images/feed-preview.svg"
CLI_TAG = "cli"


def extract_release_tag(link: str) -> str:
    """Return the final path segment of a release link."""
    return link.rstrip("/").split("/")[-1]


def extract_version_tag(link: str) -> str:
    """Return the version of a release link, without a leading 'v'."""
    tag = extract_release_tag(link)
    if tag[:1] in ("v", "V"):
        return tag[1:]
    return tag


def is_minor_release(version: str) -> bool:
    return bool(MINOR_RELEASE_PATTERN.match(version))


def build_slug(date, version: str) -> str:
    if date is None:
        return ""
    return f"{date.strftime('%Y-%m-%d')}-{CLI_TAG}-{version.replace('.', '-')}"


def build_title(title: str, link: str) -> str:
    """Replace titles that are just the version tag with a readable one."""
    version = extract_version_tag(link)
    if title in (version, extract_release_tag(link)):
        return f"CLI Release: {version}"
    return title


def double_newlines(text: str) -> str:
    """Turn every line break into a paragraph break for the markdown renderer."""
    return text.replace("\n", "\n\n")


def build_feed_item(entry: dict[str, Any]) -> FeedItem:
    """Map one raw feed entry onto a FeedItem without validating it."""
    link = entry.get("link") or ""
    version = extract_version_tag(link)
    date = parse_publish_date(entry.get("pubDate") or entry.get("isoDate"))

    return FeedItem(
        title=build_title(entry.get("title") or "", link),
        source_url=link,
        excerpt=double_newlines(entry.get("contentSnippet") or ""),
        date=date,
        image_url=FEED_PREVIEW_IMAGE,
        slug=build_slug(date, version),
        tags=[CLI_TAG],
    )


def transform_cli_releases(
    raw_entries: list[dict[str, Any]], execution_id: str | None = None
) -> TransformResult:
    """Transform raw release entries into validated feed items.

    Entries whose version is not a MAJOR.MINOR.0 release are skipped. The
    first item that fails validation stops the batch and is returned as the
    result's failure; no items are returned alongside it.

    Args:
        raw_entries: Raw feed entries in feed order
        execution_id: Execution ID for logging context

    Returns:
        TransformResult with the items in feed order
    """
    logger = create_execution_logger("transformer", execution_id)
    items: list[FeedItem] = []
    skipped = 0

    for entry in raw_entries:
        version = extract_version_tag(entry.get("link") or "")
        if not is_minor_release(version):
            skipped += 1
            logger.debug(f"Skipping release {version!r}", version=version)
            continue

        result = validate_feed_item(build_feed_item(entry))
        if not result.valid:
            logger.error(result.message, field=result.field)
            return TransformResult(items=[], failure=result, skipped=skipped)

        items.append(result.item)
        logger.log_item_processing(result.item.slug, "transformed")

    logger.info(
        f"Transformed {len(items)} releases, skipped {skipped}",
        items_count=len(items),
        skipped_count=skipped,
    )
    return TransformResult(items=items, skipped=skipped)


def get_latest_cli_release(raw_entries: list[dict[str, Any]]) -> LatestRelease:
    """Build the latest release pointer from the first (newest) raw entry.

    Raises:
        IndexError: If the feed has no entries
    """
    latest = raw_entries[0]
    link = latest["link"]
    return LatestRelease(version=extract_version_tag(link), source_url=link)
