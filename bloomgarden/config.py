"""Configuration for BloomGarden.

Two flower presets ship with the sketch ("classic" and "meadow"). Runtime
settings are read from an optional JSON file; anything missing or invalid
falls back to the defaults so a bad file never prevents the garden opening.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from .constants import DEFAULT_HEIGHT, DEFAULT_WIDTH, FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)

# (base, spread): a value is drawn as base + random() * spread
Range = Tuple[float, float]


@dataclass(frozen=True)
class Preset:
    """Parameter set for flower generation, particles and milestones."""

    name: str
    stem_growth: Range
    petal_count: Tuple[int, int]
    petal_length: Range
    petal_width: Range
    sway_speed: Range
    leaf_count: Tuple[int, int]
    bloom_speed: Range
    yellow_weight: float
    particle_count: int
    milestones: Dict[int, str] = field(default_factory=dict)


PRESETS: Dict[str, Preset] = {
    "classic": Preset(
        name="classic",
        stem_growth=(2.5, 1.5),
        petal_count=(5, 3),
        petal_length=(22.0, 18.0),
        petal_width=(12.0, 8.0),
        sway_speed=(0.008, 0.006),
        leaf_count=(1, 2),
        bloom_speed=(0.012, 0.008),
        yellow_weight=0.55,
        particle_count=25,
    ),
    "meadow": Preset(
        name="meadow",
        stem_growth=(3.0, 2.0),
        petal_count=(6, 3),
        petal_length=(20.0, 16.0),
        petal_width=(10.0, 8.0),
        sway_speed=(0.008, 0.006),
        leaf_count=(1, 2),
        bloom_speed=(0.015, 0.01),
        yellow_weight=0.5,
        particle_count=30,
        milestones={
            5: "A little garden is taking shape.",
            15: "The meadow is filling up!",
            30: "A whole field in bloom.",
        },
    ),
}

DEFAULT_PRESET = "classic"
CONFIG_ENV_VAR = "BLOOMGARDEN_CONFIG"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_preset(name: str) -> Preset:
    """Return the preset called `name`.

    Raises ValueError for unknown names.
    """

    try:
        return PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"unknown preset {name!r} (expected one of: {known})") from None


@dataclass
class GardenConfig:
    """Runtime settings for one garden session."""

    preset: str = DEFAULT_PRESET
    frame_interval_ms: int = FRAME_INTERVAL_MS
    max_flowers: Optional[int] = None
    seed: Optional[int] = None
    log_level: str = "INFO"
    window_width: int = DEFAULT_WIDTH
    window_height: int = DEFAULT_HEIGHT

    @classmethod
    def load(cls, path: Optional[str] = None) -> "GardenConfig":
        """Load settings from a JSON file.

        `path` defaults to the BLOOMGARDEN_CONFIG environment variable. A
        missing file gives the defaults; a corrupt file is logged and ignored.
        """

        path = path or os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return cls()
        if not os.path.exists(path):
            logger.debug("No config file at %s, using defaults", path)
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError):
            logger.warning("Could not read config file %s, using defaults", path, exc_info=True)
            return cls()

        if not isinstance(loaded, dict):
            logger.warning("Config file %s is not a JSON object, using defaults", path)
            return cls()

        return cls.from_dict(loaded)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GardenConfig":
        """Build a config from a dict, keeping only valid known keys."""

        known = {f.name for f in fields(cls)}
        config = cls(**{k: v for k, v in data.items() if k in known})
        config._ensure_defaults()
        return config

    def _ensure_defaults(self) -> None:
        """Replace invalid values with defaults."""

        defaults = GardenConfig()

        if not isinstance(self.preset, str) or self.preset not in PRESETS:
            logger.warning("Unknown preset %r in config, using %r", self.preset, DEFAULT_PRESET)
            self.preset = DEFAULT_PRESET

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            logger.warning("Invalid log_level=%r in config, using default", self.log_level)
            self.log_level = defaults.log_level
        self.log_level = self.log_level.upper()

        for name in ("frame_interval_ms", "window_width", "window_height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                logger.warning("Invalid %s=%r in config, using default", name, value)
                setattr(self, name, getattr(defaults, name))

        if self.max_flowers is not None and (
            not isinstance(self.max_flowers, int)
            or isinstance(self.max_flowers, bool)
            or self.max_flowers <= 0
        ):
            logger.warning("Invalid max_flowers=%r in config, leaving it unbounded", self.max_flowers)
            self.max_flowers = None

        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            self.seed = None

    def get_preset(self) -> Preset:
        return get_preset(self.preset)
