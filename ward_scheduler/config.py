"""Configuration loading (JSON or YAML) for the ward scheduler."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from ward_scheduler.domain.types import OptimizationParameters, ShiftType
from ward_scheduler.errors import ValidationError


@dataclass
class ShiftSplit:
    """Fraction of the available staff placed on each work shift per day."""

    morning: float = 0.4
    afternoon: float = 0.3
    night: float = 0.2

    def __post_init__(self):
        values = (self.morning, self.afternoon, self.night)
        if any(v < 0 for v in values):
            raise ValidationError(f"Shift split fractions cannot be negative: {values}")
        if sum(values) > 1.0 + 1e-9:
            raise ValidationError(f"Shift split fractions sum above 1.0: {values}")

    def as_map(self) -> Dict[ShiftType, float]:
        return {
            ShiftType.MORNING: self.morning,
            ShiftType.AFTERNOON: self.afternoon,
            ShiftType.NIGHT: self.night,
        }


@dataclass
class ScoreWeights:
    """Points each quality component contributes to the 0-100 score."""

    workload_balance: float = 30.0
    weekend_balance: float = 25.0
    transition: float = 20.0
    base_distribution: float = 25.0


@dataclass
class SchedulerConfig:
    max_range_days: int = 31
    shift_hours: float = 8.0
    db_url: str = "sqlite:///ward_scheduler.db"
    shift_split: ShiftSplit = field(default_factory=ShiftSplit)
    score_weights: ScoreWeights = field(default_factory=ScoreWeights)
    optimization: OptimizationParameters = field(default_factory=OptimizationParameters)


def _pick(cls, data: Mapping[str, Any] | None) -> Dict[str, Any]:
    # Drop unknown keys so older config files keep loading
    if not data:
        return {}
    known = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in known}


def config_from_dict(raw: Mapping[str, Any] | None) -> SchedulerConfig:
    raw = raw or {}
    cfg = SchedulerConfig(**{
        k: v for k, v in _pick(SchedulerConfig, raw).items()
        if k not in ("shift_split", "score_weights", "optimization")
    })
    cfg.shift_split = ShiftSplit(**_pick(ShiftSplit, raw.get("shift_split")))
    cfg.score_weights = ScoreWeights(**_pick(ScoreWeights, raw.get("score_weights")))
    cfg.optimization = OptimizationParameters.from_dict(raw.get("optimization"))
    if cfg.max_range_days < 1:
        raise ValidationError(f"max_range_days must be at least 1, got {cfg.max_range_days}")
    return cfg


def load_config(path: str | Path) -> SchedulerConfig:
    """Load a ``SchedulerConfig`` from a ``.json``, ``.yaml`` or ``.yml`` file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        raw = json.loads(text)
    else:
        raw = yaml.safe_load(text)
    if raw is not None and not isinstance(raw, dict):
        raise ValidationError(f"Config file {path} must contain a mapping at the top level")
    return config_from_dict(raw)
