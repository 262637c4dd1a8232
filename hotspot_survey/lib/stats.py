from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Set

from .filenames import parse_filename
from .timestamps import difference_ms


@dataclass(slots=True)
class BoundingBox:
    label: str
    left: int
    top: int
    right: int
    bottom: int


@dataclass(slots=True)
class ImageEntry:
    """Bounding boxes for one image, in the order the detections were read."""

    bboxes: List[BoundingBox] = field(default_factory=list)


@dataclass(slots=True)
class HotspotInfo:
    hotspot_type: str
    species_id: str


@dataclass
class ImageFileStats:
    """Running aggregate for one image category (thermal16, thermal8 or color)."""

    unique_images: Dict[str, ImageEntry] = field(default_factory=dict)
    timestamp_variations: int = 0
    sum_timestamp_variation_ms: int = 0
    max_timestamp_variation_ms: int = 0

    @property
    def mean_timestamp_variation_ms(self) -> float:
        if self.timestamp_variations == 0:
            return 0
        return self.sum_timestamp_variation_ms / self.timestamp_variations

    def ensure_image(self, filename: str) -> ImageEntry:
        entry = self.unique_images.get(filename)
        if entry is None:
            entry = ImageEntry()
            self.unique_images[filename] = entry
        return entry

    def record_variation(self, variation_ms: int) -> None:
        self.timestamp_variations += 1
        self.sum_timestamp_variation_ms += variation_ms
        if variation_ms > self.max_timestamp_variation_ms:
            self.max_timestamp_variation_ms = variation_ms

    def merge(self, other: "ImageFileStats") -> None:
        for filename, entry in other.unique_images.items():
            self.ensure_image(filename).bboxes.extend(entry.bboxes)
        self.timestamp_variations += other.timestamp_variations
        self.sum_timestamp_variation_ms += other.sum_timestamp_variation_ms
        self.max_timestamp_variation_ms = max(
            self.max_timestamp_variation_ms, other.max_timestamp_variation_ms
        )


@dataclass
class RecordStats:
    """Dataset-wide aggregate built in a single pass over hotspot records."""

    unique_hotspots: Dict[str, HotspotInfo] = field(default_factory=dict)
    total_hotspots: int = 0
    unique_timestamps: Set[int] = field(default_factory=set)
    thermal16_stats: ImageFileStats = field(default_factory=ImageFileStats)
    thermal8_stats: ImageFileStats = field(default_factory=ImageFileStats)
    color_stats: ImageFileStats = field(default_factory=ImageFileStats)
    hotspot_types: Counter = field(default_factory=Counter)
    species_types: Counter = field(default_factory=Counter)
    errors: int = 0

    def categories(self) -> Dict[str, ImageFileStats]:
        return {
            "thermal16": self.thermal16_stats,
            "thermal8": self.thermal8_stats,
            "color": self.color_stats,
        }

    def merge(self, other: "RecordStats") -> None:
        """
        Fold the stats of another shard into this one.

        Counts are summed, maps and sets are unioned (entries from ``other``
        win for duplicate hotspot ids) and maxima take the larger value.
        """
        self.unique_hotspots.update(other.unique_hotspots)
        self.total_hotspots += other.total_hotspots
        self.unique_timestamps |= other.unique_timestamps
        self.thermal16_stats.merge(other.thermal16_stats)
        self.thermal8_stats.merge(other.thermal8_stats)
        self.color_stats.merge(other.color_stats)
        self.hotspot_types.update(other.hotspot_types)
        self.species_types.update(other.species_types)
        self.errors += other.errors


def update_image_file_stats(
    record_timestamp: datetime,
    image_filename: str,
    stats: ImageFileStats,
) -> bool:
    """
    Register an image against a record's timestamp.

    Returns False, leaving ``stats`` untouched, when the timestamp embedded in
    the filename is malformed. Structurally broken filenames raise
    FilenameDecodeError.
    """
    info = parse_filename(image_filename)
    if info.timestamp is None:
        return False

    stats.ensure_image(image_filename)
    variation = abs(difference_ms(info.timestamp, record_timestamp))
    if variation != 0:
        stats.record_variation(variation)
    return True
