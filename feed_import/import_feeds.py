"""Entry point that imports CLI releases into the content feed."""

import os
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .config import Config
from .logging_config import create_execution_logger, setup_structured_logging
from .models import LatestRelease
from .rss import FeedFetcher
from .transform import get_latest_cli_release, transform_cli_releases
from .writer import ContentWriter


class RunState(Enum):
    FETCHING = "fetching"
    TRANSFORMING = "transforming"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ImportReport:
    """Summary of one import run."""

    execution_id: str
    state: RunState = RunState.FETCHING
    metrics: dict[str, Any] = field(
        default_factory=lambda: {
            "entries_found": 0,
            "items_imported": 0,
            "items_skipped": 0,
            "files_written": 0,
        }
    )
    latest_release: LatestRelease | None = None
    error: str | None = None
    failed_state: RunState | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


def run_import(config: Config | None = None, execution_id: str | None = None) -> ImportReport:
    """
    Fetch the releases feed, transform it and write the content files.

    Every failure ends the run: nothing is retried, and a validation failure
    stops before any file is written.

    Args:
        config: Configuration, read from the environment when omitted
        execution_id: Execution ID for logging context

    Returns:
        ImportReport whose state is DONE or FAILED
    """
    if not execution_id:
        execution_id = f"import_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)
    report = ImportReport(execution_id=execution_id)

    main_logger.log_execution_start()

    try:
        if config is None:
            config = Config()
        fetch_config = config.get_fetch_config()
        output_config = config.get_output_config()
        content_store = config.get_content_store_config()
        main_logger.info(
            "Configuration initialized",
            feed_url=fetch_config.feed_url,
            content_store_configured=content_store.configured,
        )

        report.state = RunState.FETCHING
        fetcher = FeedFetcher(
            timeout=fetch_config.timeout,
            user_agent=fetch_config.user_agent,
            execution_id=execution_id,
        )
        raw_entries = fetcher.fetch_releases(fetch_config.feed_url)
        report.metrics["entries_found"] = len(raw_entries)

        report.state = RunState.TRANSFORMING
        result = transform_cli_releases(raw_entries, execution_id=execution_id)
        report.metrics["items_skipped"] = result.skipped
        if not result.ok:
            report.failed_state = report.state
            report.state = RunState.FAILED
            report.error = result.failure.message
            main_logger.error(report.error, field=result.failure.field)
            main_logger.log_execution_end(success=False, metrics=report.metrics)
            return report
        report.metrics["items_imported"] = len(result.items)
        report.latest_release = get_latest_cli_release(raw_entries)

        report.state = RunState.WRITING
        writer = ContentWriter(output_config, execution_id=execution_id)
        written = writer.write_feed_items(result.items)
        writer.write_latest_release(report.latest_release)
        writer.write_raw_cache(raw_entries)
        report.metrics["files_written"] = len(written) + 2

        report.state = RunState.DONE
        main_logger.info(
            f"Wrote {len(written)} feed items to {output_config.content_dir}",
            path=output_config.content_dir,
        )
        main_logger.log_metrics(report.metrics)
        main_logger.log_execution_end(success=True, metrics=report.metrics)

    except Exception as e:
        report.failed_state = report.state
        report.state = RunState.FAILED
        report.error = f"{type(e).__name__}: {e}"
        main_logger.error(
            f"Import failed while {report.failed_state.value}: {report.error}",
            error=str(e),
            error_type=type(e).__name__,
        )
        main_logger.log_execution_end(success=False, metrics=report.metrics)

    return report


def main() -> int:
    """Run an import with environment configuration and return the exit code."""
    setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))
    return run_import().exit_code


if __name__ == "__main__":
    sys.exit(main())
