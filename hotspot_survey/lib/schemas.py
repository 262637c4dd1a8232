from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class BoundingBoxModel(BaseModel):
    label: str
    left: int
    top: int
    right: int
    bottom: int


class ImageAnnotations(BaseModel):
    filename: str
    bboxes: List[BoundingBoxModel] = Field(default_factory=list)


class AnnotationSet(BaseModel):
    thermal16: List[ImageAnnotations] = Field(default_factory=list)
    thermal8: List[ImageAnnotations] = Field(default_factory=list)
    color: List[ImageAnnotations] = Field(default_factory=list)


class CategorySummary(BaseModel):
    unique_images: int = Field(..., ge=0)
    timestamp_variations: int = Field(..., ge=0)
    mean_timestamp_variation_ms: float = Field(..., ge=0.0)
    max_timestamp_variation_ms: int = Field(..., ge=0)


class StatsSummary(BaseModel):
    total_hotspots: int = Field(..., ge=0)
    unique_hotspots: int = Field(..., ge=0)
    unique_timestamps: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    thermal16: CategorySummary
    thermal8: CategorySummary
    color: CategorySummary
    hotspot_types: Dict[str, int] = Field(default_factory=dict)
    species_types: Dict[str, int] = Field(default_factory=dict)
