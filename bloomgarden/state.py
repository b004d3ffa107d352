"""In-memory garden state for BloomGarden.

Holds the flowers and the ambient particle field and advances them one tick
at a time. Nothing here touches Qt: the rendering layer reads this state and
draws it (see `geometry` and `garden_scene`).
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import GardenConfig, Preset, Range, get_preset
from .constants import (
    BUD_GROWTH_STEP,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    IDLE_ROTATION_STEP,
    LEAF_GROWTH_STEP,
    MIN_STEM_HEIGHT,
    PARTICLE_MARGIN,
    SPROUT_STEP,
    STEM_EXTRA,
)

logger = logging.getLogger(__name__)

TWO_PI = math.pi * 2


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _pick(rng: random.Random, value_range: Range) -> float:
    """Draw base + random() * spread."""

    base, spread = value_range
    return base + rng.random() * spread


def _pick_count(rng: random.Random, value_range: Range) -> int:
    base, spread = value_range
    return int(base) + int(math.floor(rng.random() * spread))


class Phase(str, Enum):
    """Lifecycle stages of a flower, in order."""

    SPROUT = "sprout"
    GROWING = "growing"
    BUDDING = "budding"
    BLOOMING = "blooming"
    BLOOMED = "bloomed"


PHASE_ORDER: List[Phase] = list(Phase)


# ----------------------------------------------------------------------
# Flowers
# ----------------------------------------------------------------------
@dataclass
class Leaf:
    """A leaf attached somewhere along a flower stem."""

    height_ratio: float
    side: int
    size: float
    angle: float
    growth: float = 0.0

    @classmethod
    def random(cls, rng: random.Random) -> "Leaf":
        return cls(
            height_ratio=0.3 + rng.random() * 0.4,
            side=-1 if rng.random() < 0.5 else 1,
            size=12 + rng.random() * 10,
            angle=0.3 + rng.random() * 0.3,
        )


@dataclass
class Flower:
    """A single plant growing from the ground at `x` up to `target_y`."""

    x: float
    target_y: float
    ground_y: float
    max_stem_height: float
    stem_growth_speed: float
    color_type: str
    petal_count: int
    petal_length: float
    petal_width: float
    rotation: float
    sway_phase: float
    sway_speed: float
    bloom_speed: float
    leaves: List[Leaf] = field(default_factory=list)
    phase: Phase = Phase.SPROUT
    phase_progress: float = 0.0
    stem_height: float = 0.0
    bud_size: float = 0.0
    bloom_progress: float = 0.0

    @classmethod
    def create(
        cls,
        x: float,
        target_y: float,
        *,
        ground_y: float,
        preset: Preset,
        rng: Optional[random.Random] = None,
    ) -> "Flower":
        """Create a flower with randomised traits drawn from `preset`."""

        rng = rng or random.Random()
        max_stem = max(MIN_STEM_HEIGHT, ground_y - target_y + STEM_EXTRA)
        flower = cls(
            x=float(x),
            target_y=float(target_y),
            ground_y=float(ground_y),
            max_stem_height=max_stem,
            stem_growth_speed=_pick(rng, preset.stem_growth),
            color_type="yellow" if rng.random() < preset.yellow_weight else "green",
            petal_count=_pick_count(rng, preset.petal_count),
            petal_length=_pick(rng, preset.petal_length),
            petal_width=_pick(rng, preset.petal_width),
            rotation=rng.random() * TWO_PI,
            sway_phase=rng.random() * TWO_PI,
            sway_speed=_pick(rng, preset.sway_speed),
            bloom_speed=_pick(rng, preset.bloom_speed),
        )
        leaf_count = _pick_count(rng, preset.leaf_count)
        flower.leaves = [Leaf.random(rng) for _ in range(leaf_count)]
        return flower

    def update(self) -> None:
        """Advance the flower by one tick.

        At most one phase transition happens per tick.
        """

        self.sway_phase += self.sway_speed

        if self.phase is Phase.SPROUT:
            self.phase_progress = _clamp01(self.phase_progress + SPROUT_STEP)
            if self.phase_progress >= 1:
                self.phase = Phase.GROWING
                self.phase_progress = 0.0

        elif self.phase is Phase.GROWING:
            self.stem_height = min(self.max_stem_height, self.stem_height + self.stem_growth_speed)
            for leaf in self.leaves:
                if self.stem_height > self.max_stem_height * leaf.height_ratio:
                    leaf.growth = min(1.0, leaf.growth + LEAF_GROWTH_STEP)
            if self.stem_height >= self.max_stem_height:
                self.phase = Phase.BUDDING
                self.phase_progress = 0.0

        elif self.phase is Phase.BUDDING:
            self.bud_size = min(1.0, self.bud_size + BUD_GROWTH_STEP)
            if self.bud_size >= 1:
                self.phase = Phase.BLOOMING

        elif self.phase is Phase.BLOOMING:
            self.bloom_progress = min(1.0, self.bloom_progress + self.bloom_speed)
            if self.bloom_progress >= 1:
                self.phase = Phase.BLOOMED

        # Idle spin once fully open.
        if self.phase is Phase.BLOOMED:
            self.rotation += IDLE_ROTATION_STEP


# ----------------------------------------------------------------------
# Ambient particles
# ----------------------------------------------------------------------
@dataclass
class Particle:
    """A small drifting dot. Recycled in place, never reallocated."""

    x: float = 0.0
    y: float = 0.0
    size: float = 1.0
    speed_x: float = 0.0
    speed_y: float = -0.2
    opacity: float = 0.2
    color_type: str = "gold"

    def reset(self, width: float, height: float, rng: random.Random) -> None:
        """Give the particle a fresh random state anywhere on the surface."""

        self.x = rng.random() * width
        self.y = rng.random() * height
        self.size = 0.5 + rng.random() * 1.5
        self.speed_y = -(0.15 + rng.random() * 0.25)
        self.speed_x = (rng.random() - 0.5) * 0.15
        self.opacity = 0.1 + rng.random() * 0.25
        self.color_type = "gold" if rng.random() < 0.5 else "green"

    def update(self, width: float, height: float, rng: random.Random) -> None:
        self.y += self.speed_y
        self.x += self.speed_x

        if self.y < -PARTICLE_MARGIN:
            self.reset(width, height, rng)
            self.y = height + PARTICLE_MARGIN


class ParticleField:
    """Fixed-size pool of ambient particles."""

    def __init__(self, count: int, width: float, height: float, rng: random.Random) -> None:
        self.width = width
        self.height = height
        self._rng = rng
        self.particles: List[Particle] = []
        for _ in range(max(0, int(count))):
            particle = Particle()
            particle.reset(width, height, rng)
            self.particles.append(particle)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self):
        return iter(self.particles)

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def update(self) -> None:
        for particle in self.particles:
            particle.update(self.width, self.height, self._rng)


# ----------------------------------------------------------------------
# Garden
# ----------------------------------------------------------------------
@dataclass
class GardenState:
    """All live objects of one garden session.

    Flowers are kept in spawn order, which is also the draw order (later
    flowers are drawn on top).
    """

    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    preset: Preset = field(default_factory=lambda: get_preset("classic"))
    rng: random.Random = field(default_factory=random.Random)
    max_flowers: Optional[int] = None
    flowers: List[Flower] = field(default_factory=list)
    particles: ParticleField = field(init=False)

    def __post_init__(self) -> None:
        self.particles = ParticleField(
            self.preset.particle_count, self.width, self.height, self.rng
        )

    @classmethod
    def from_config(cls, config: GardenConfig, width: float, height: float) -> "GardenState":
        """Build a state from a `GardenConfig`."""

        return cls(
            width=width,
            height=height,
            preset=config.get_preset(),
            rng=random.Random(config.seed),
            max_flowers=config.max_flowers,
        )

    def spawn_flower_at(self, x: float, y: float) -> Flower:
        """Plant a new flower at `x` that will grow up to `y`."""

        flower = Flower.create(x, y, ground_y=self.height, preset=self.preset, rng=self.rng)
        self.flowers.append(flower)
        logger.debug(
            "Spawned %s flower at (%.0f, %.0f), stem %.0f",
            flower.color_type,
            x,
            y,
            flower.max_stem_height,
        )
        self._evict_overflow()
        return flower

    def _evict_overflow(self) -> None:
        """Drop the oldest flowers when a cap is configured."""

        if self.max_flowers is None or len(self.flowers) <= self.max_flowers:
            return
        overflow = len(self.flowers) - self.max_flowers
        del self.flowers[:overflow]
        logger.debug("Evicted %d oldest flower(s)", overflow)

    def step(self) -> None:
        """Advance particles, then flowers, by one tick."""

        self.particles.update()
        for flower in self.flowers:
            flower.update()

    def advance(self, ticks: int) -> None:
        for _ in range(max(0, int(ticks))):
            self.step()

    def resize(self, width: float, height: float) -> None:
        """Resync the surface size. Existing flowers keep their coordinates."""

        self.width = width
        self.height = height
        self.particles.resize(width, height)
        logger.debug("Surface resized to %.0fx%.0f", width, height)
