from __future__ import annotations

import math
import random

from bloomgarden.config import get_preset
from bloomgarden.constants import MIN_STEM_HEIGHT
from bloomgarden.state import PHASE_ORDER, Flower, GardenState, Phase


def _flower(seed: int = 7, x: float = 100.0, y: float = 500.0, ground: float = 600.0, preset: str = "classic") -> Flower:
    return Flower.create(x, y, ground_y=ground, preset=get_preset(preset), rng=random.Random(seed))


def test_phases_advance_in_order_without_skipping_or_reversing() -> None:
    for seed in range(5):
        flower = _flower(seed=seed)
        seen = [flower.phase]
        for _ in range(2000):
            flower.update()
            if flower.phase != seen[-1]:
                seen.append(flower.phase)
        assert seen == PHASE_ORDER


def test_stem_grows_monotonically_and_never_exceeds_its_maximum() -> None:
    flower = _flower(seed=3, y=120.0)
    last = 0.0
    for _ in range(1000):
        flower.update()
        assert flower.stem_height >= last
        assert flower.stem_height <= flower.max_stem_height
        last = flower.stem_height
    assert flower.stem_height == flower.max_stem_height


def test_progress_scalars_stay_clamped_under_continued_ticking() -> None:
    flower = _flower(seed=11)
    for _ in range(3000):
        flower.update()
        assert 0.0 <= flower.bud_size <= 1.0
        assert 0.0 <= flower.bloom_progress <= 1.0
        assert 0.0 <= flower.phase_progress <= 1.0
        assert all(0.0 <= leaf.growth <= 1.0 for leaf in flower.leaves)
    assert flower.phase is Phase.BLOOMED
    assert flower.bud_size == 1.0
    assert flower.bloom_progress == 1.0


def test_bloomed_flower_keeps_spinning_slowly() -> None:
    flower = _flower(seed=2)
    while flower.phase is not Phase.BLOOMED:
        flower.update()
    before = flower.rotation
    for _ in range(100):
        flower.update()
    assert flower.phase is Phase.BLOOMED
    assert math.isclose(flower.rotation - before, 100 * 0.0005)


def test_leaves_only_grow_after_the_stem_passes_them() -> None:
    flower = _flower(seed=5, y=100.0)
    while flower.phase is not Phase.BUDDING:
        flower.update()
        for leaf in flower.leaves:
            if flower.stem_height <= flower.max_stem_height * leaf.height_ratio:
                assert leaf.growth == 0.0
    assert all(leaf.growth > 0.0 for leaf in flower.leaves)


def test_bud_size_is_kept_when_blooming_starts() -> None:
    flower = _flower(seed=9)
    while flower.phase is not Phase.BLOOMING:
        flower.update()
    assert flower.bud_size == 1.0
    assert flower.bloom_progress == 0.0


def test_traits_follow_the_preset() -> None:
    classic = get_preset("classic")
    for seed in range(30):
        flower = _flower(seed=seed)
        assert 5 <= flower.petal_count <= 7
        assert 1 <= len(flower.leaves) <= 2
        assert flower.color_type in ("yellow", "green")
        lo, spread = classic.stem_growth
        assert lo <= flower.stem_growth_speed <= lo + spread
        assert all(leaf.side in (-1, 1) for leaf in flower.leaves)

    meadow_counts = {_flower(seed=seed, preset="meadow").petal_count for seed in range(30)}
    assert meadow_counts <= {6, 7, 8}


def test_same_seed_gives_the_same_flower() -> None:
    assert _flower(seed=42) == _flower(seed=42)
    assert _flower(seed=42) != _flower(seed=43)


def test_stem_height_is_derived_from_click_height() -> None:
    flower = _flower(y=500.0, ground=600.0)
    assert flower.max_stem_height == 130.0

    below_ground = _flower(y=700.0, ground=600.0)
    assert below_ground.max_stem_height == MIN_STEM_HEIGHT


def test_spawned_flower_reaches_each_phase_on_schedule() -> None:
    state = GardenState(width=800, height=600, rng=random.Random(1))
    flower = state.spawn_flower_at(100, 500)
    assert flower.phase is Phase.SPROUT

    # Sprout takes 40 ticks (41 with float rounding), then the stem grows.
    growth_ticks = math.ceil(flower.max_stem_height / flower.stem_growth_speed)
    state.advance(42 + growth_ticks)
    assert flower.phase is Phase.BUDDING
    assert flower.stem_height == flower.max_stem_height

    # The bud fills in about 67 ticks; blooming lasts at least 50.
    state.advance(70)
    assert flower.phase is Phase.BLOOMING

    state.advance(100)
    assert flower.phase is Phase.BLOOMED
    assert flower.bloom_progress == 1.0

    state.advance(500)
    assert flower.phase is Phase.BLOOMED
