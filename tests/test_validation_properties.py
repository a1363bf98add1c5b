"""Property-based tests for feed item validation."""

from datetime import UTC, datetime

from hypothesis import given
from hypothesis import strategies as st

from feed_import.models import FeedItem
from feed_import.validation import REQUIRED_FIELDS, validate_feed_item

non_empty_text = st.text(min_size=1, max_size=60)

feed_items = st.builds(
    FeedItem,
    title=non_empty_text,
    source_url=non_empty_text,
    excerpt=non_empty_text,
    date=st.datetimes(
        min_value=datetime(2000, 1, 1), max_value=datetime(2100, 1, 1), timezones=st.just(UTC)
    ),
    image_url=non_empty_text,
    slug=non_empty_text,
    tags=st.one_of(st.none(), st.just(["cli"])),
)


class TestValidationProperties:
    """Property-based tests for validate_feed_item."""

    @given(feed_items)
    def test_complete_items_are_valid(self, item):
        result = validate_feed_item(item)

        assert result.valid
        assert result.item is item

    @given(feed_items, st.sampled_from(REQUIRED_FIELDS))
    def test_any_missing_field_is_rejected_deterministically(self, item, required):
        """For any single missing field, that field is reported every time."""
        field_name, attribute = required
        setattr(item, attribute, None if attribute == "date" else "")

        first = validate_feed_item(item)
        second = validate_feed_item(item)

        assert not first.valid
        assert first.field == field_name
        assert first == second
