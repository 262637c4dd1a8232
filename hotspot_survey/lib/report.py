from __future__ import annotations

from typing import List

from .schemas import (
    AnnotationSet,
    BoundingBoxModel,
    CategorySummary,
    ImageAnnotations,
    StatsSummary,
)
from .stats import ImageFileStats, RecordStats


_CATEGORY_TITLES = (
    ("thermal16", "Thermal16"),
    ("thermal8", "Thermal8"),
    ("color", "Color"),
)


def _format_mean(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _format_image_file_stats(image_stats: ImageFileStats) -> List[str]:
    return [
        f"  Unique images: {len(image_stats.unique_images)}",
        f"  Timestamp variations: {image_stats.timestamp_variations}",
        f"  Avg timestamp variation (ms): {_format_mean(image_stats.mean_timestamp_variation_ms)}",
        f"  Max timestamp variation (ms): {image_stats.max_timestamp_variation_ms}",
    ]


def format_report(stats: RecordStats) -> List[str]:
    lines = [
        f"Total hotspots: {stats.total_hotspots}",
        f"Unique hotspots: {len(stats.unique_hotspots)}",
        f"Unique timestamps: {len(stats.unique_timestamps)}",
    ]
    categories = stats.categories()
    for key, title in _CATEGORY_TITLES:
        lines.append(f"{title} stats:")
        lines.extend(_format_image_file_stats(categories[key]))
    lines.append("Hot spot types:")
    lines.extend(f"  {name}: {count}" for name, count in stats.hotspot_types.items())
    lines.append("Species types:")
    lines.extend(f"  {name}: {count}" for name, count in stats.species_types.items())
    lines.append(f"Errors: {stats.errors}")
    return lines


def print_report(stats: RecordStats) -> None:
    for line in format_report(stats):
        print(line)


def _image_annotations(image_stats: ImageFileStats) -> List[ImageAnnotations]:
    return [
        ImageAnnotations(
            filename=filename,
            bboxes=[
                BoundingBoxModel(
                    label=bbox.label,
                    left=bbox.left,
                    top=bbox.top,
                    right=bbox.right,
                    bottom=bbox.bottom,
                )
                for bbox in entry.bboxes
            ],
        )
        for filename, entry in image_stats.unique_images.items()
    ]


def build_annotation_set(stats: RecordStats) -> AnnotationSet:
    return AnnotationSet(
        thermal16=_image_annotations(stats.thermal16_stats),
        thermal8=_image_annotations(stats.thermal8_stats),
        color=_image_annotations(stats.color_stats),
    )


def _category_summary(image_stats: ImageFileStats) -> CategorySummary:
    return CategorySummary(
        unique_images=len(image_stats.unique_images),
        timestamp_variations=image_stats.timestamp_variations,
        mean_timestamp_variation_ms=image_stats.mean_timestamp_variation_ms,
        max_timestamp_variation_ms=image_stats.max_timestamp_variation_ms,
    )


def build_summary(stats: RecordStats) -> StatsSummary:
    return StatsSummary(
        total_hotspots=stats.total_hotspots,
        unique_hotspots=len(stats.unique_hotspots),
        unique_timestamps=len(stats.unique_timestamps),
        errors=stats.errors,
        thermal16=_category_summary(stats.thermal16_stats),
        thermal8=_category_summary(stats.thermal8_stats),
        color=_category_summary(stats.color_stats),
        hotspot_types=dict(stats.hotspot_types),
        species_types=dict(stats.species_types),
    )
