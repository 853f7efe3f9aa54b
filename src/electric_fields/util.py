# MIT License (see LICENSE)
"""
Utility functions for vector math and wire-format conversion.

Vectors are numpy float64 arrays of shape (2,). Points crossing the
computation boundary are plain ``{"x": ..., "y": ...}`` dicts.
"""
from __future__ import annotations
import math
import os
from typing import Any

import numpy as np


def f64(x) -> np.ndarray:
    """Convert any array-like to a float64 numpy array."""
    return np.array(x, dtype=np.float64)


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 2D vector."""
    return math.hypot(float(v[0]), float(v[1]))


def point_to_json(p) -> dict[str, float]:
    """Encode a 2D point as ``{"x": x, "y": y}``."""
    return {"x": float(p[0]), "y": float(p[1])}


def point_from_json(d: Any) -> tuple[float, float]:
    """
    Decode a ``{"x", "y"}`` mapping (or an ``[x, y]`` pair) into a tuple.

    Raises:
        ValueError: If the value is not a finite 2D point.
    """
    if isinstance(d, dict):
        try:
            x, y = d["x"], d["y"]
        except KeyError as exc:
            raise ValueError(f"Point is missing coordinate {exc}") from None
    elif isinstance(d, (list, tuple)) and len(d) == 2:
        x, y = d
    else:
        raise ValueError(f"Not a point: {d!r}")
    x, y = float(x), float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Point coordinates must be finite, got ({x}, {y})")
    return x, y


def use_process_pool() -> bool:
    """Check if tracing should run in a separate process (env switch)."""
    return os.environ.get("ELECTRIC_FIELDS_PROCESS_POOL", "0") == "1"
