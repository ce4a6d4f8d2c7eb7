"""Command-line entry point for the IBBI tracker."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from ibbi_tracker.config import AppConfig, ConfigurationError, EnvironmentConfig, load_config
from ibbi_tracker.domain.models import RecordKind
from ibbi_tracker.logging import get_logger
from ibbi_tracker.logging.config import configure_logging
from ibbi_tracker.persistence import LastRunMarker, PersistenceError, RecordStore
from ibbi_tracker.pipeline import DailyUpdatePipeline
from ibbi_tracker.scrapers.exceptions import ScraperError
from ibbi_tracker.scrapers.fetcher import Fetcher
from ibbi_tracker.scrapers.service import IBBIScraper
from ibbi_tracker.sheets import SpreadsheetExportClient

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ibbi-tracker",
        description="IBBI tracker - daily scrape of insolvency assignments and announcements",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml, else built-in defaults)",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Output directory (overrides config and IBBI_DATA_DIR)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--manual-run",
        action="store_true",
        help="Clear the last-run marker and run the update now",
    )
    mode.add_argument("--stats", action="store_true", help="Print run and record statistics as JSON")
    mode.add_argument(
        "--show",
        choices=[kind.value for kind in RecordKind],
        metavar="KIND",
        help="Print the persisted records of KIND as JSON",
    )
    mode.add_argument(
        "--sheet",
        action="store_true",
        help="Read assignments from the published spreadsheet export and print them as JSON",
    )
    mode.add_argument("--init", action="store_true", help="Create header-only data files and exit")
    return parser


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str], data_dir_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and apply command-line overrides.

    Priority: CLI > environment > config file > defaults.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)
    if log_level_override:
        app_config.logging.level = log_level_override
    if data_dir_override:
        app_config.storage.data_dir = data_dir_override
    return app_config, env_config


def build_pipeline(app_config: AppConfig, fetcher: Optional[Fetcher] = None) -> DailyUpdatePipeline:
    """Wire the scraper, store and run marker for one configuration."""
    fetcher = fetcher or Fetcher.from_config(app_config.http)
    data_dir = app_config.storage.data_dir
    return DailyUpdatePipeline(
        scraper=IBBIScraper.from_config(app_config, fetcher=fetcher),
        store=RecordStore(data_dir, origin=app_config.site.origin),
        marker=LastRunMarker.in_directory(data_dir),
    )


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code: 0 when the requested action succeeded or a run was
        skipped, 1 on failure or configuration error.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level, args.data_dir)
        configure_logging(
            level=app_config.logging.level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
            log_file=app_config.logging.file,
            # JSON payloads own stdout in these modes
            stream=sys.stderr if (args.show or args.stats or args.sheet) else None,
        )
        logger.info(
            "IBBI tracker starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "data_dir": app_config.storage.data_dir,
            },
        )

        if args.init:
            created = RecordStore(app_config.storage.data_dir, origin=app_config.site.origin).initialize()
            logger.info(
                f"Initialized {len(created)} data files",
                extra={"event": "store.initialized", "created": [str(path) for path in created]},
            )
            return 0

        if args.show:
            store = RecordStore(app_config.storage.data_dir, origin=app_config.site.origin)
            records = store.read_batch(RecordKind(args.show))
            _print_json([record.model_dump() for record in records])
            return 0

        if args.sheet:
            if not app_config.sheet.export_url:
                raise ConfigurationError(
                    "No spreadsheet export URL configured",
                    suggestions=["Set sheet.export_url in config.yaml or GOOGLE_SHEET_CSV_URL in .env"],
                )
            client = SpreadsheetExportClient(
                Fetcher.from_config(app_config.http),
                app_config.sheet.export_url,
                origin=app_config.site.origin,
            )
            _print_json([record.model_dump() for record in client.read()])
            return 0

        pipeline = build_pipeline(app_config)

        if args.stats:
            _print_json(pipeline.statistics().to_dict())
            return 0

        outcome = pipeline.run_manual() if args.manual_run else pipeline.run_daily()
        logger.info(
            f"Run {outcome.status.value}",
            extra={
                "event": "service.stopping",
                "status": outcome.status.value,
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0 if outcome.success else 1

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except (PersistenceError, ScraperError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Command failed: {e}",
            extra={"event": "service.command.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
