"""Data models for the CLI release feed import."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class FeedItem:
    """Represents a single CLI release imported into the content feed."""

    title: str
    source_url: str
    excerpt: str
    date: datetime | None
    image_url: str
    slug: str
    tags: list[str] | None = None

    def to_front_matter(self) -> dict[str, Any]:
        """Front matter fields in the order the site expects (slug excluded)."""
        data: dict[str, Any] = {
            "title": self.title,
            "sourceUrl": self.source_url,
            "excerpt": self.excerpt,
            "date": self.date,
            "imageUrl": self.image_url,
        }
        if self.tags is not None:
            data["tags"] = list(self.tags)
        return data

    def to_dict(self) -> dict[str, Any]:
        """Full record including the slug, used for diagnostics."""
        return {"slug": self.slug, **self.to_front_matter()}


@dataclass
class LatestRelease:
    """Version and release URL of the newest feed entry."""

    version: str
    source_url: str

    def to_dict(self) -> dict[str, str]:
        return {"version": self.version, "sourceUrl": self.source_url}


@dataclass
class ValidationResult:
    """Outcome of checking a FeedItem for required fields."""

    valid: bool
    item: FeedItem | None = None
    field: str | None = None
    message: str | None = None

    def raise_for_failure(self) -> None:
        """Raise FeedItemValidationError if this result is a failure."""
        if not self.valid:
            raise FeedItemValidationError(self)


@dataclass
class TransformResult:
    """Feed items built from a raw feed, or the validation failure that stopped it."""

    items: list[FeedItem] = field(default_factory=list)
    failure: ValidationResult | None = None
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.failure is None


class FeedParseError(ValueError):
    """Raised when a feed body cannot be parsed into entries."""


class FeedItemValidationError(ValueError):
    """Raised when a feed item is missing a required field."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.message)
        self.result = result
