from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .timestamps import TIMESTAMP_SUFFIX, parse_timestamp


FILENAME_FIELD_COUNT = 6
CENTURY_PREFIX = "20"

_BIT_DEPTHS = {
    "16BIT": 16,
    "8": 8,
}


class FilenameDecodeError(ValueError):
    """Raised when an image filename does not have the survey naming structure."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Cannot decode image filename '{filename}': {reason}")
        self.filename = filename
        self.reason = reason


@dataclass(frozen=True)
class FilenameInfo:
    """Metadata encoded in a survey image filename."""

    survey: str
    flight: str
    cam_pos: str
    timestamp: Optional[datetime]
    cam_type: str
    bit_depth: int


def parse_filename(filename: str) -> FilenameInfo:
    """
    Decode 'SURVEY_FLIGHT_CAMPOS_YYMMDD_HHMMSS.mmm_CAMTYPE-BITDEPTH.ext'.

    The embedded timestamp is None when its date/time fragments are malformed;
    a filename that does not split into six fields raises FilenameDecodeError.
    """
    fields = filename.split("_")
    if len(fields) != FILENAME_FIELD_COUNT:
        raise FilenameDecodeError(
            filename,
            f"expected {FILENAME_FIELD_COUNT} '_' separated fields, found {len(fields)}",
        )

    survey, flight, cam_pos, date_part, time_part, kind_part = fields
    kind, _, _extension = kind_part.partition(".")
    kind_fields = kind.split("-")
    cam_type = kind_fields[0]
    depth = kind_fields[1] if len(kind_fields) > 1 else ""

    return FilenameInfo(
        survey=survey,
        flight=flight,
        cam_pos=cam_pos,
        timestamp=parse_timestamp(f"{CENTURY_PREFIX}{date_part}{time_part}{TIMESTAMP_SUFFIX}"),
        cam_type=cam_type,
        bit_depth=_BIT_DEPTHS.get(depth, 0),
    )
