"""Parsers, accumulators and codecs for survey hotspot records."""

from .examiner import collect_stats, examine_record
from .filenames import FilenameDecodeError, FilenameInfo, parse_filename
from .filters import FilterSpecError, matches_all, parse_filters
from .records import RecordDecodeError, read_records, write_records
from .stats import BoundingBox, ImageEntry, ImageFileStats, RecordStats, update_image_file_stats
from .timestamps import parse_timestamp, to_epoch_ms

__all__ = [
    "BoundingBox",
    "FilenameDecodeError",
    "FilenameInfo",
    "FilterSpecError",
    "ImageEntry",
    "ImageFileStats",
    "RecordDecodeError",
    "RecordStats",
    "collect_stats",
    "examine_record",
    "matches_all",
    "parse_filename",
    "parse_filters",
    "parse_timestamp",
    "read_records",
    "to_epoch_ms",
    "update_image_file_stats",
    "write_records",
]
