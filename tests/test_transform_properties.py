"""Property-based tests for the CLI release transformer."""

from datetime import date

from hypothesis import given
from hypothesis import strategies as st

from feed_import.transform import double_newlines, transform_cli_releases

RELEASES_URL = "https://github.com/netlify/cli/releases/tag"

version_numbers = st.integers(min_value=0, max_value=999)
release_dates = st.dates(min_value=date(2015, 1, 1), max_value=date(2035, 12, 31))


def raw_entry(version, pub_date, title="Release notes"):
    return {
        "title": title,
        "link": f"{RELEASES_URL}/v{version}",
        "pubDate": pub_date.isoformat(),
        "contentSnippet": "Changes",
    }


class TestTransformProperties:
    """Property-based tests for transform_cli_releases."""

    @given(version_numbers, version_numbers, release_dates)
    def test_dot_zero_releases_are_imported_with_slug(self, major, minor, released):
        """For all MAJOR.MINOR.0 versions the slug is <date>-cli-<dashed version>."""
        result = transform_cli_releases([raw_entry(f"{major}.{minor}.0", released)])

        assert result.ok
        assert len(result.items) == 1
        assert result.items[0].slug == f"{released.isoformat()}-cli-{major}-{minor}-0"

    @given(
        version_numbers,
        version_numbers,
        st.integers(min_value=1, max_value=999),
        release_dates,
    )
    def test_patch_releases_are_excluded(self, major, minor, patch, released):
        """For all versions with a non-zero patch number nothing is imported."""
        result = transform_cli_releases(
            [raw_entry(f"{major}.{minor}.{patch}", released)]
        )

        assert result.ok
        assert result.items == []
        assert result.skipped == 1

    @given(version_numbers, version_numbers, release_dates)
    def test_bare_version_titles_are_replaced(self, major, minor, released):
        version = f"{major}.{minor}.0"

        result = transform_cli_releases([raw_entry(version, released, title=version)])

        assert result.items[0].title == f"CLI Release: {version}"

    @given(
        st.text(min_size=1, max_size=50).filter(
            lambda x: x.strip() and x not in ("v", "V")
        ),
        version_numbers,
        version_numbers,
        release_dates,
    )
    def test_other_titles_are_kept(self, title, major, minor, released):
        version = f"{major}.{minor}.0"
        if title in (version, f"v{version}"):
            return

        result = transform_cli_releases([raw_entry(version, released, title=title)])

        assert result.items[0].title == title

    @given(st.text(max_size=200))
    def test_every_newline_is_doubled_once(self, text):
        doubled = double_newlines(text)

        assert doubled.count("\n") == 2 * text.count("\n")
        assert doubled.replace("\n", "") == text.replace("\n", "")
