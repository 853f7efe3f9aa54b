# MIT License (see LICENSE)
"""
Seed point generation.

A field with density n places n seeds evenly on the circle of radius r
around its source, at angles k·2π/n measured from the +x axis (reference
phase 0). Identical inputs always produce identical seeds.
"""
from __future__ import annotations
import math
from typing import NamedTuple


class Seed(NamedTuple):
    """Starting point of one trace and the direction to trace in."""
    point: tuple[float, float]
    direction: int


def generate_seeds(
    position: tuple[float, float],
    r: float,
    density: int,
    magnitude: float,
) -> list[Seed]:
    """
    Seeds around one source charge.

    Args:
        position: Source position (x, y).
        r: Radius of the seed circle.
        density: Number of seeds; 0 yields none.
        magnitude: Signed source magnitude. Positive sources trace along
                   the field (+1), negative ones against it (-1).
    """
    if density <= 0:
        return []
    direction = 1 if magnitude > 0 else -1
    cx, cy = float(position[0]), float(position[1])
    step = 2.0 * math.pi / density
    return [
        Seed((cx + r * math.cos(k * step), cy + r * math.sin(k * step)), direction)
        for k in range(density)
    ]
