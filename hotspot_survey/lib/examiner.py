from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .config import DEFAULT_THERMAL_MARGIN
from .records import record_int
from .stats import BoundingBox, HotspotInfo, RecordStats, update_image_file_stats
from .timestamps import parse_timestamp, to_epoch_ms


logger = logging.getLogger("hotspots.examiner")
debug_logger = logging.getLogger("hotspots.debug.examiner")


def _reject(stats: RecordStats, record: Mapping[str, str], reason: str) -> bool:
    stats.errors += 1
    debug_logger.debug(
        "examiner.record_rejected",
        extra={"hotspot_id": record.get("hotspot_id"), "reason": reason},
    )
    return False


def examine_record(
    record: Mapping[str, str],
    stats: RecordStats,
    *,
    thermal_margin: int = DEFAULT_THERMAL_MARGIN,
) -> bool:
    """
    Fold one decoded hotspot row into ``stats``.

    The hotspot is always counted. A malformed record timestamp or a malformed
    timestamp in any image filename counts as one error and stops processing
    of the row; image categories already updated for the row are not rolled
    back. Returns True when the row was fully accepted.
    """
    hotspot_type = record["hotspot_type"]
    species_id = record["species_id"]
    stats.unique_hotspots[record["hotspot_id"]] = HotspotInfo(
        hotspot_type=hotspot_type,
        species_id=species_id,
    )
    stats.total_hotspots += 1

    timestamp = parse_timestamp(record["timestamp"])
    if timestamp is None:
        return _reject(stats, record, "record_timestamp")
    stats.unique_timestamps.add(to_epoch_ms(timestamp))

    for field, image_stats in (
        ("filt_thermal16", stats.thermal16_stats),
        ("filt_thermal8", stats.thermal8_stats),
        ("filt_color", stats.color_stats),
    ):
        if not update_image_file_stats(timestamp, record[field], image_stats):
            return _reject(stats, record, f"{field}_timestamp")

    # Thermal8 images get no box.
    x_pos = record_int(record, "x_pos")
    y_pos = record_int(record, "y_pos")
    stats.thermal16_stats.unique_images[record["filt_thermal16"]].bboxes.append(
        BoundingBox(
            label=hotspot_type,
            left=x_pos - thermal_margin,
            top=y_pos - thermal_margin,
            right=x_pos + thermal_margin,
            bottom=y_pos + thermal_margin,
        )
    )
    stats.color_stats.unique_images[record["filt_color"]].bboxes.append(
        BoundingBox(
            label=f"{hotspot_type} ({species_id})",
            left=record_int(record, "thumb_left"),
            top=record_int(record, "thumb_top"),
            right=record_int(record, "thumb_right"),
            bottom=record_int(record, "thumb_bottom"),
        )
    )

    stats.hotspot_types[hotspot_type] += 1
    stats.species_types[species_id] += 1
    return True


def collect_stats(
    records: Iterable[Mapping[str, str]],
    *,
    thermal_margin: int = DEFAULT_THERMAL_MARGIN,
) -> RecordStats:
    stats = RecordStats()
    for record in records:
        examine_record(record, stats, thermal_margin=thermal_margin)
    logger.info(
        "Examined %s hotspots (%s unique, %s errors)",
        stats.total_hotspots,
        len(stats.unique_hotspots),
        stats.errors,
    )
    return stats
