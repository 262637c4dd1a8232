from __future__ import annotations

import csv
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, TextIO, Tuple

from .filters import RecordFilter, matches_all


logger = logging.getLogger("hotspots.records")


RECORD_FIELDS = (
    "hotspot_id",
    "timestamp",
    "filt_thermal16",
    "filt_thermal8",
    "filt_color",
    "x_pos",
    "y_pos",
    "thumb_left",
    "thumb_top",
    "thumb_right",
    "thumb_bottom",
    "hotspot_type",
    "species_id",
)

NUMERIC_FIELDS = frozenset(
    {
        "x_pos",
        "y_pos",
        "thumb_left",
        "thumb_top",
        "thumb_right",
        "thumb_bottom",
    }
)


class RecordDecodeError(ValueError):
    """Raised when a hotspot CSV cannot be decoded into records."""


def record_int(record: Mapping[str, str], field: str) -> int:
    raw = record.get(field)
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise RecordDecodeError(
            f"Hotspot {record.get('hotspot_id')!r}: field '{field}' is not an integer: {raw!r}"
        ) from exc


def _decode_rows(
    csv_file: TextIO,
    csv_path: Path,
    filters: Optional[Sequence[RecordFilter]],
) -> Tuple[List[Dict[str, str]], int]:
    reader = csv.DictReader(csv_file)
    missing = [name for name in RECORD_FIELDS if name not in (reader.fieldnames or ())]
    if missing:
        raise RecordDecodeError(
            f"{csv_path} is missing required columns: {', '.join(missing)}"
        )

    records: List[Dict[str, str]] = []
    total = 0
    for row in reader:
        total += 1
        if any(row.get(name) is None for name in RECORD_FIELDS):
            raise RecordDecodeError(
                f"{csv_path} line {reader.line_num}: expected {len(RECORD_FIELDS)} fields"
            )
        if filters and not matches_all(row, filters):
            continue
        records.append(row)
    return records, total


def read_records(
    path: Path | str,
    filters: Optional[Sequence[RecordFilter]] = None,
) -> List[Dict[str, str]]:
    """
    Decode a header-first hotspot CSV and keep the rows accepted by ``filters``.

    Text that is not UTF-8 or not well-formed CSV raises RecordDecodeError.
    """
    csv_path = Path(path)
    with csv_path.open("r", encoding="utf-8", newline="") as csv_file:
        try:
            records, total = _decode_rows(csv_file, csv_path, filters)
        except (UnicodeDecodeError, csv.Error) as exc:
            raise RecordDecodeError(f"{csv_path} is not a readable hotspot CSV: {exc}") from exc

    logger.info("Read %s of %s records from %s", len(records), total, csv_path)
    return records


def _encode_row(record: Mapping[str, str]) -> List[object]:
    return [
        record_int(record, name) if name in NUMERIC_FIELDS else record.get(name, "")
        for name in RECORD_FIELDS
    ]


def write_header(writer: TextIO) -> None:
    csv.writer(writer, quoting=csv.QUOTE_ALL, lineterminator=os.linesep).writerow(RECORD_FIELDS)


def write_record(writer: TextIO, record: Mapping[str, str]) -> None:
    """Write one row with text fields quoted and numeric fields bare."""
    csv.writer(
        writer, quoting=csv.QUOTE_NONNUMERIC, lineterminator=os.linesep
    ).writerow(_encode_row(record))


def write_records(path: Path | str, records: Iterable[Mapping[str, str]]) -> int:
    """
    Write ``records`` to ``path`` as a whole file or not at all.

    Every row is encoded before anything is written, and the file is moved
    into place only once it is complete.
    """
    csv_path = Path(path)
    rows = [_encode_row(record) for record in records]

    csv_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = csv_path.with_name(f"{csv_path.name}.partial")
    try:
        with partial_path.open("w", encoding="utf-8", newline="") as csv_file:
            write_header(csv_file)
            csv.writer(
                csv_file, quoting=csv.QUOTE_NONNUMERIC, lineterminator=os.linesep
            ).writerows(rows)
        partial_path.replace(csv_path)
    except OSError:
        partial_path.unlink(missing_ok=True)
        raise

    logger.info("Wrote %s records to %s", len(rows), csv_path)
    return len(rows)
