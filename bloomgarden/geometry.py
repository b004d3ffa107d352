"""Procedural geometry for flowers and particles.

Shapes are rebuilt from the current state on every frame and are never
cached. Everything is expressed in surface coordinates (y grows downwards,
rotations in radians, clockwise on screen), so the Qt layer only has to map
each primitive onto a QPainter call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple, Union

from .constants import (
    LEAF_MIN_STEM,
    PALETTE,
    PARTICLE_COLORS,
    STEM_WIDTH,
    SWAY_AMPLITUDE,
)
from .state import Flower, Particle, Phase

Point = Tuple[float, float]
Color = Tuple[int, int, int, float]


@dataclass(frozen=True)
class Ellipse:
    center: Point
    rx: float
    ry: float
    rotation: float
    color: Color
    part: str
    # Only the lower half (in the ellipse's own frame) is filled.
    half: bool = False


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    color: Color
    part: str


@dataclass(frozen=True)
class Curve:
    """Cubic Bezier stroke."""

    start: Point
    c1: Point
    c2: Point
    end: Point
    width: float
    color: Color
    part: str


@dataclass(frozen=True)
class QuadPath:
    """Closed filled path made of quadratic segments, as (control, end) pairs."""

    start: Point
    segments: Tuple[Tuple[Point, Point], ...]
    color: Color
    part: str


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    width: float
    color: Color
    part: str


Shape = Union[Ellipse, Circle, Curve, QuadPath, Line]


def _rotate(x: float, y: float, angle: float) -> Point:
    c = math.cos(angle)
    s = math.sin(angle)
    return (x * c - y * s, x * s + y * c)


def _offset(origin: Point, delta: Point) -> Point:
    return (origin[0] + delta[0], origin[1] + delta[1])


def sway_offset(flower: Flower) -> float:
    return math.sin(flower.sway_phase) * SWAY_AMPLITUDE


def head_position(flower: Flower, ground_y: float) -> Point:
    """Top of the stem, where the bud/flower head sits."""

    return (flower.x + sway_offset(flower) * 0.8, ground_y - flower.stem_height)


# ----------------------------------------------------------------------
# Plant body
# ----------------------------------------------------------------------
def stem_shape(flower: Flower, ground_y: float, sway: float) -> Curve:
    h = flower.stem_height
    top_y = ground_y - h
    return Curve(
        start=(flower.x, ground_y),
        c1=(flower.x + sway * 0.3, ground_y - h * 0.4),
        c2=(flower.x + sway * 0.6, top_y + h * 0.3),
        end=(flower.x + sway * 0.8, top_y),
        width=STEM_WIDTH,
        color=PALETTE["stem"],
        part="stem",
    )


def leaf_shapes(flower: Flower, ground_y: float, sway: float) -> List[Shape]:
    shapes: List[Shape] = []
    for leaf in flower.leaves:
        if leaf.growth <= 0:
            continue

        origin = (
            flower.x + sway * (1 - leaf.height_ratio) * 0.5,
            ground_y - flower.stem_height * leaf.height_ratio,
        )
        angle = leaf.angle * leaf.side
        size = leaf.size * leaf.growth
        side = leaf.side

        def at(px: float, py: float, o=origin, a=angle) -> Point:
            return _offset(o, _rotate(px, py, a))

        shapes.append(
            QuadPath(
                start=origin,
                segments=(
                    (at(size * 0.5 * side, -size * 0.4), at(size * side, 0.0)),
                    (at(size * 0.5 * side, size * 0.4), origin),
                ),
                color=PALETTE["leaf"],
                part="leaf",
            )
        )
        shapes.append(
            Line(
                start=origin,
                end=at(size * 0.7 * side, 0.0),
                width=0.5,
                color=PALETTE["leaf_vein"],
                part="leaf_vein",
            )
        )
    return shapes


def sprout_shapes(flower: Flower, ground_y: float) -> List[Shape]:
    """Two small blades poking out of the ground."""

    height = 15 * flower.phase_progress
    width = 6 + 4 * flower.phase_progress
    base = (flower.x, ground_y - 5)
    shapes: List[Shape] = []
    for sign in (-1, 1):
        angle = sign * 0.3
        shapes.append(
            Ellipse(
                center=_offset(base, _rotate(0.0, -height / 2, angle)),
                rx=width / 2,
                ry=height,
                rotation=angle,
                color=PALETTE["bud"],
                part="sprout",
            )
        )
    return shapes


# ----------------------------------------------------------------------
# Flower head
# ----------------------------------------------------------------------
def bud_shapes(flower: Flower, head: Point) -> List[Shape]:
    colors = PALETTE[flower.color_type]
    bud_w = 12 * flower.bud_size
    bud_h = 18 * flower.bud_size

    shapes: List[Shape] = [
        Ellipse(
            center=_offset(head, (0.0, -bud_h / 2)),
            rx=bud_w,
            ry=bud_h,
            rotation=0.0,
            color=colors["petal_dark"],
            part="bud",
        )
    ]
    # Folds, 120 degrees apart
    for i in range(3):
        angle = i * math.pi * 2 / 3
        shapes.append(
            Ellipse(
                center=_offset(head, _rotate(0.0, -bud_h * 0.6, angle)),
                rx=bud_w * 0.4,
                ry=bud_h * 0.5,
                rotation=angle,
                color=colors["petal"],
                part="bud_fold",
                half=True,
            )
        )
    return shapes


def bloom_shapes(flower: Flower, head: Point) -> List[Shape]:
    """Open flower head; detail layers appear as the opening factor grows."""

    colors = PALETTE[flower.color_type]
    open_factor = flower.bloom_progress
    petal_len = flower.petal_length * open_factor
    petal_wid = flower.petal_width * open_factor
    count = flower.petal_count
    spread = 0.25 * open_factor
    shapes: List[Shape] = []

    for i in range(count):
        angle = (i / count) * math.pi * 2 + flower.rotation

        def at(px: float, py: float, a=angle) -> Point:
            local = _offset((0.0, -5.0), _rotate(px, py, spread))
            return _offset(head, _rotate(local[0], local[1], a))

        shapes.append(
            Ellipse(
                center=at(0.0, -petal_len / 2),
                rx=petal_wid / 2,
                ry=petal_len / 2,
                rotation=angle + spread,
                color=colors["petal"],
                part="petal",
            )
        )
        shapes.append(
            Ellipse(
                center=at(-petal_wid * 0.15, -petal_len * 0.35),
                rx=petal_wid * 0.2,
                ry=petal_len * 0.3,
                rotation=angle + spread - 0.2,
                color=colors["petal_light"],
                part="petal_highlight",
            )
        )

    if open_factor > 0.3:
        inner_len = petal_len * 0.6
        inner_wid = petal_wid * 0.5
        for i in range(count):
            angle = (i / count) * math.pi * 2 + flower.rotation + math.pi / count
            center = _rotate(0.0, -3.0 - inner_len / 2, angle)
            shapes.append(
                Ellipse(
                    center=_offset(head, center),
                    rx=inner_wid / 2,
                    ry=inner_len / 2,
                    rotation=angle,
                    color=colors["petal_light"],
                    part="inner_petal",
                )
            )

    if open_factor > 0.5:
        center_size = 6 * open_factor
        shapes.append(Circle(center=head, radius=center_size, color=colors["center"], part="center"))

        if open_factor > 0.8:
            for i in range(6):
                dot_angle = (i / 6) * math.pi * 2 + flower.rotation
                dot = (
                    math.cos(dot_angle) * center_size * 0.5,
                    math.sin(dot_angle) * center_size * 0.5,
                )
                shapes.append(
                    Circle(
                        center=_offset(head, dot),
                        radius=1.5,
                        color=PALETTE["center_dot"],
                        part="center_dot",
                    )
                )

    return shapes


def flower_shapes(flower: Flower, ground_y: float) -> List[Shape]:
    """Every primitive needed to draw `flower` this frame, back to front.

    `ground_y` is the current surface height; the plant is always rooted on
    it even if the surface was resized after the flower spawned.
    """

    sway = sway_offset(flower)
    shapes: List[Shape] = []

    if flower.stem_height > 0:
        shapes.append(stem_shape(flower, ground_y, sway))

    if flower.stem_height > LEAF_MIN_STEM:
        shapes.extend(leaf_shapes(flower, ground_y, sway))

    if flower.phase is Phase.SPROUT:
        shapes.extend(sprout_shapes(flower, ground_y))
    elif flower.phase is Phase.BUDDING:
        shapes.extend(bud_shapes(flower, head_position(flower, ground_y)))
    elif flower.phase in (Phase.BLOOMING, Phase.BLOOMED):
        shapes.extend(bloom_shapes(flower, head_position(flower, ground_y)))

    return shapes


def particle_shape(particle: Particle) -> Circle:
    r, g, b = PARTICLE_COLORS.get(particle.color_type, PARTICLE_COLORS["gold"])
    return Circle(
        center=(particle.x, particle.y),
        radius=particle.size,
        color=(r, g, b, particle.opacity),
        part="particle",
    )
