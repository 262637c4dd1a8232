from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_THERMAL_MARGIN = 10


@dataclass
class SurveyConfig:
    thermal_margin: int = DEFAULT_THERMAL_MARGIN
    filters: Optional[str] = None
    log_dir: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SurveyConfig":
        def to_optional_str(value: Any) -> Optional[str]:
            if value in (None, "", "null"):
                return None
            return str(value)

        data = data or {}
        raw_margin = to_optional_str(data.get("thermal_margin"))
        try:
            thermal_margin = DEFAULT_THERMAL_MARGIN if raw_margin is None else int(raw_margin)
        except ValueError as exc:
            raise ValueError(f"'thermal_margin' must be an integer, got {raw_margin!r}") from exc
        if thermal_margin < 0:
            raise ValueError("'thermal_margin' must not be negative")

        log_dir = to_optional_str(data.get("log_dir"))
        return cls(
            thermal_margin=thermal_margin,
            filters=to_optional_str(data.get("filters")),
            log_dir=Path(log_dir) if log_dir else None,
        )


@dataclass
class AppConfig:
    survey: SurveyConfig = field(default_factory=SurveyConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Dict]]) -> "AppConfig":
        data = data or {}
        return cls(survey=SurveyConfig.from_dict(data.get("survey")))


def app_config(file_path: Path | str) -> AppConfig:
    with open(file_path, "r", encoding="utf-8") as file:
        config_dict = yaml.safe_load(file)
    return AppConfig.from_dict(config_dict)
