from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from hotspot_survey.lib.config import AppConfig, app_config
from hotspot_survey.lib.examiner import collect_stats
from hotspot_survey.lib.filenames import FilenameDecodeError
from hotspot_survey.lib.filters import FilterSpecError, parse_filters
from hotspot_survey.lib.logging_utils import configure_console_logging, setup_debug_logging
from hotspot_survey.lib.records import RecordDecodeError, read_records, write_records
from hotspot_survey.lib.report import build_annotation_set, build_summary, print_report


logger = logging.getLogger("hotspots.main")

CONFIG_ENV_VAR = "HOTSPOT_SURVEY_CONFIG"

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_DECODE_ERROR = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate and summarize survey hotspot records against their image filenames."
    )
    parser.add_argument("csv_path", type=Path, help="Hotspot CSV to examine.")
    parser.add_argument(
        "--filter",
        dest="filters",
        default=None,
        help="Only keep rows matching field1=value1,field2=value2 (exact string match).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML configuration file (default: ${CONFIG_ENV_VAR} when set).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the filtered records to this CSV file.",
    )
    parser.add_argument(
        "--annotations",
        type=Path,
        default=None,
        help="Write per-image bounding boxes to this JSON file.",
    )
    parser.add_argument(
        "--summary-json",
        type=Path,
        default=None,
        help="Write the statistics summary to this JSON file.",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory that receives logs/debug.log.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to the console.",
    )
    return parser.parse_args(argv)


def load_configuration(config_path: Optional[Path]) -> AppConfig:
    if config_path is None:
        override = os.getenv(CONFIG_ENV_VAR)
        if not override:
            return AppConfig()
        config_path = Path(override)
    return app_config(config_path)


def _write_json(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")
    logger.info("Wrote %s", path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_console_logging(args.verbose)

    try:
        config = load_configuration(args.config).survey
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Failed to load configuration: %s", exc)
        return EXIT_IO_ERROR

    log_dir = args.log_dir or config.log_dir
    if log_dir is not None:
        setup_debug_logging(log_dir)

    filter_spec = args.filters if args.filters is not None else config.filters
    try:
        filters = parse_filters(filter_spec)
        records = read_records(args.csv_path, filters)
        stats = collect_stats(records, thermal_margin=config.thermal_margin)
    except (FilenameDecodeError, RecordDecodeError, FilterSpecError) as exc:
        logger.error("Input cannot be summarized: %s", exc)
        return EXIT_DECODE_ERROR
    except OSError as exc:
        logger.error("Failed to read %s: %s", args.csv_path, exc)
        return EXIT_IO_ERROR

    print_report(stats)

    try:
        if args.output is not None:
            write_records(args.output, records)
        if args.annotations is not None:
            _write_json(args.annotations, build_annotation_set(stats).model_dump_json(indent=2))
        if args.summary_json is not None:
            _write_json(args.summary_json, build_summary(stats).model_dump_json(indent=2))
    except RecordDecodeError as exc:
        logger.error("Cannot encode records: %s", exc)
        return EXIT_DECODE_ERROR
    except OSError as exc:
        logger.error("Failed to write output: %s", exc)
        return EXIT_IO_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
