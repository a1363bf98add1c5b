"""Required-field validation for imported feed items."""

import json

from .models import FeedItem, ValidationResult

# Checked in this order; the first missing field is reported.
REQUIRED_FIELDS = [
    ("title", "title"),
    ("slug", "slug"),
    ("sourceUrl", "source_url"),
    ("excerpt", "excerpt"),
    ("date", "date"),
    ("imageUrl", "image_url"),
]


def validate_feed_item(item: FeedItem) -> ValidationResult:
    """Check that every required field of a feed item is present.

    A malformed record would break the site build downstream, so the first
    missing field fails the item.

    Args:
        item: Candidate feed item

    Returns:
        A valid result carrying the unchanged item, or an invalid result
        naming the missing field with the item's JSON in the message
    """
    for field_name, attribute in REQUIRED_FIELDS:
        if not getattr(item, attribute, None):
            serialized = json.dumps(item.to_dict(), default=str, ensure_ascii=False)
            return ValidationResult(
                valid=False,
                item=item,
                field=field_name,
                message=f"Missing {field_name} for feed item: {serialized}",
            )

    return ValidationResult(valid=True, item=item)
