"""Unit tests for the import run controller."""

import json
import os
from unittest.mock import Mock, patch

import pytest
import requests
import yaml

from feed_import.config import Config
from feed_import.import_feeds import ImportReport, RunState, main, run_import

RELEASES_URL = "https://github.com/netlify/cli/releases/tag"

RAW_RELEASES = [
    {
        "link": f"{RELEASES_URL}/v7.2.0",
        "title": "7.2.0",
        "pubDate": "2023-05-01",
        "contentSnippet": "Fixed bug\nAdded feature",
    },
    {
        "link": f"{RELEASES_URL}/v7.2.0-beta.1",
        "title": "beta",
        "pubDate": "2023-05-02",
        "contentSnippet": "wip",
    },
]


@pytest.fixture
def config(tmp_path):
    with patch.dict(os.environ, {"IMPORT_BASE_DIR": str(tmp_path)}, clear=True):
        yield Config()


@pytest.fixture
def fetcher():
    with patch("feed_import.import_feeds.FeedFetcher") as fetcher_class:
        instance = Mock()
        fetcher_class.return_value = instance
        yield instance


class TestRunImportUnit:
    """Unit tests for run_import."""

    def test_end_to_end_import(self, config, fetcher, tmp_path):
        fetcher.fetch_releases.return_value = RAW_RELEASES

        report = run_import(config, execution_id="import_test")

        assert report.state is RunState.DONE
        assert report.exit_code == 0
        assert report.error is None
        fetcher.fetch_releases.assert_called_once_with(
            "https://github.com/netlify/cli/releases.atom"
        )

        content_dir = tmp_path / "src" / "content" / "feed"
        assert [p.name for p in content_dir.iterdir()] == ["2023-05-01-cli-7-2-0.md"]
        _, front_matter, body = (
            (content_dir / "2023-05-01-cli-7-2-0.md").read_text(encoding="utf-8").split("---\n", 2)
        )
        data = yaml.safe_load(front_matter)
        assert data["title"] == "CLI Release: 7.2.0"
        assert data["excerpt"] == "Fixed bug\n\nAdded feature"
        assert data["tags"] == ["cli"]
        assert body == ""

        latest = json.loads((tmp_path / "src" / "data" / "cli" / "latest.json").read_text())
        assert latest == {
            "version": "7.2.0-beta.1",
            "sourceUrl": f"{RELEASES_URL}/v7.2.0-beta.1",
        }

        cache = json.loads((tmp_path / "tmp" / "cli-releases-import.json").read_text())
        assert cache == RAW_RELEASES

        assert report.metrics == {
            "entries_found": 2,
            "items_imported": 1,
            "items_skipped": 1,
            "files_written": 3,
        }

    def test_fetch_failure_fails_the_run(self, config, fetcher, tmp_path):
        fetcher.fetch_releases.side_effect = requests.ConnectionError("unreachable")

        report = run_import(config)

        assert report.state is RunState.FAILED
        assert report.failed_state is RunState.FETCHING
        assert report.exit_code == 1
        assert "unreachable" in report.error
        assert list(tmp_path.iterdir()) == []

    def test_validation_failure_writes_nothing(self, config, fetcher, tmp_path):
        invalid = dict(RAW_RELEASES[0], contentSnippet="")
        fetcher.fetch_releases.return_value = [invalid]

        report = run_import(config)

        assert report.state is RunState.FAILED
        assert report.failed_state is RunState.TRANSFORMING
        assert report.error.startswith("Missing excerpt for feed item: ")
        assert list(tmp_path.iterdir()) == []

    def test_empty_feed_fails_the_run(self, config, fetcher, tmp_path):
        fetcher.fetch_releases.return_value = []

        report = run_import(config)

        assert report.state is RunState.FAILED
        assert report.failed_state is RunState.TRANSFORMING
        assert report.error.startswith("IndexError")
        assert list(tmp_path.iterdir()) == []

    def test_filesystem_failure_fails_the_run(self, config, fetcher):
        fetcher.fetch_releases.return_value = RAW_RELEASES

        with patch(
            "feed_import.import_feeds.ContentWriter.write_feed_items",
            side_effect=PermissionError("read-only filesystem"),
        ):
            report = run_import(config)

        assert report.state is RunState.FAILED
        assert report.failed_state is RunState.WRITING
        assert report.exit_code == 1

    def test_rerun_with_same_feed_is_identical(self, config, fetcher, tmp_path):
        fetcher.fetch_releases.return_value = RAW_RELEASES
        item_path = tmp_path / "src" / "content" / "feed" / "2023-05-01-cli-7-2-0.md"

        run_import(config)
        first = item_path.read_bytes()
        run_import(config)

        assert item_path.read_bytes() == first

    def test_invalid_environment_fails_the_run(self, fetcher):
        with patch.dict(os.environ, {"FEED_REQUEST_TIMEOUT": "never"}, clear=True):
            report = run_import()

        assert report.state is RunState.FAILED
        assert "FEED_REQUEST_TIMEOUT" in report.error
        fetcher.fetch_releases.assert_not_called()


class TestMainUnit:
    @pytest.mark.parametrize(
        "state,expected",
        [(RunState.DONE, 0), (RunState.FAILED, 1)],
    )
    def test_exit_code_follows_run_state(self, state, expected):
        report = ImportReport(execution_id="import_test", state=state)

        with (
            patch("feed_import.import_feeds.setup_structured_logging") as setup_logging,
            patch("feed_import.import_feeds.run_import", return_value=report),
        ):
            assert main() == expected

        setup_logging.assert_called_once()
