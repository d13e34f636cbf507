from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

# Board dimensions of the ruleset.
LAYERS = 5
COLUMNS = 15

# Cell codes.
EMPTY = 0
CLEARED = -1
MIN_TILE_TYPE = 1
WILDCARD = 101
SELECTED_OFFSET = 1000  # must stay above WILDCARD

# Scoring.
BASE_POINTS = 10
MIN_POINTS = 1
DECAY_UNIT_MS = 500
CLEAR_BONUS = 100

WIN_OUTCOME = "**** YOU WON! ****"
LOSS_OUTCOME = "Tough luck, you lost :("

DEFAULT_LOG_LEVEL = os.getenv("MAHJONGG_LOG_LEVEL", "INFO")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class RulesConfig:
    """Scoring and board-shape values used by the rules and the session."""
    layers: int = LAYERS
    columns: int = COLUMNS
    base_points: int = BASE_POINTS
    min_points: int = MIN_POINTS
    decay_unit_ms: int = DECAY_UNIT_MS
    clear_bonus: int = CLEAR_BONUS

    def __post_init__(self) -> None:
        if self.layers < 1 or self.columns < 1:
            raise ValueError(f"board needs at least one layer and column, got {self.layers}x{self.columns}")
        if self.decay_unit_ms <= 0:
            raise ValueError(f"decay_unit_ms must be positive, got {self.decay_unit_ms}")
        if self.min_points < 1:
            raise ValueError(f"min_points must be at least 1, got {self.min_points}")
        if self.base_points < self.min_points:
            raise ValueError(f"base_points ({self.base_points}) must not be below min_points ({self.min_points})")
        if self.clear_bonus < 0:
            raise ValueError(f"clear_bonus must not be negative, got {self.clear_bonus}")

    @classmethod
    def from_env(cls) -> 'RulesConfig':
        """Builds a config with optional MAHJONGG_* overrides for the scoring values."""
        return cls(
            base_points=_env_int("MAHJONGG_BASE_POINTS", BASE_POINTS),
            min_points=_env_int("MAHJONGG_MIN_POINTS", MIN_POINTS),
            decay_unit_ms=_env_int("MAHJONGG_DECAY_UNIT_MS", DECAY_UNIT_MS),
            clear_bonus=_env_int("MAHJONGG_CLEAR_BONUS", CLEAR_BONUS),
        )


DEFAULT_RULES = RulesConfig()


def configure_logging(level: Optional[str] = None) -> None:
    """Sets up root logging for the CLI and the Flask bridge."""
    name = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
