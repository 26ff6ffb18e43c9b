"""Configuration loader for the label codec."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, PositiveInt, field_validator, model_validator


load_dotenv()

CONFIG_PATH = Path(os.getenv("VWLABEL_SETTINGS", "config/settings.yaml"))


class ParserSettings(BaseModel):
    label_kind: str = "simple"
    skip_malformed: bool = False
    pool_size: PositiveInt = 256


class CacheSettings(BaseModel):
    suffix: str = ".cache"

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError("cache suffix must start with '.'")
        return value


class ReportingSettings(BaseModel):
    quiet: bool = False
    progress_add: bool = False
    progress_interval: float = 2.0

    @model_validator(mode="after")
    def validate_interval(self) -> "ReportingSettings":
        if self.progress_add and self.progress_interval <= 0:
            raise ValueError("additive progress_interval must be positive")
        if not self.progress_add and self.progress_interval <= 1.0:
            raise ValueError("multiplicative progress_interval must be greater than 1")
        return self


class ActiveSettings(BaseModel):
    c0: float = 8.0
    initial_t: float = 0.0
    seed: Optional[int] = None

    @field_validator("c0")
    @classmethod
    def validate_c0(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("c0 must be positive")
        return value


class LabelBounds(BaseModel):
    lower: Optional[float] = None
    upper: Optional[float] = None

    @model_validator(mode="after")
    def validate_bounds(self) -> "LabelBounds":
        if self.lower is not None and self.upper is not None and self.lower > self.upper:
            raise ValueError("labels.lower must not exceed labels.upper")
        return self


class Settings(BaseModel):
    parser: ParserSettings = Field(default_factory=ParserSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    active: ActiveSettings = Field(default_factory=ActiveSettings)
    labels: LabelBounds = Field(default_factory=LabelBounds)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


@lru_cache(maxsize=8)
def get_settings(path: Optional[Path] = None) -> Settings:
    """Load and cache settings from YAML."""

    target_path = path or CONFIG_PATH
    raw = _load_yaml(Path(target_path))
    return Settings.model_validate(raw)


__all__ = [
    "ActiveSettings",
    "CacheSettings",
    "LabelBounds",
    "ParserSettings",
    "ReportingSettings",
    "Settings",
    "get_settings",
]
