# MIT License (see LICENSE)
"""
Numerical constants used by the field engine.

Magnitudes are in arbitrary relative units; there is no Coulomb constant
because only the direction of the superposed field matters for tracing.
"""
from __future__ import annotations

# Smallest effective distance between an evaluation point and a charge.
# Guards the r³ denominator when a point coincides with a charge that has
# no radius of its own.
EPS_DISTANCE: float = 1e-9

# Field strength below which a trace is considered stalled (equilibrium or
# saddle point). Also prevents normalizing a zero vector.
STALL_EPS: float = 1e-12

# Scroll adjusts |magnitude| by this much per notch.
SCROLL_INCREMENT: float = 0.1

# Floor for |magnitude| so scrolling never produces a neutral charge.
MIN_MAGNITUDE: float = 0.01

# Offset applied (in both axes) to a duplicated charge.
DUPLICATE_OFFSET: float = 20.0

# Minimum wall-clock interval between drag-triggered recomputes (~60 fps).
DRAG_INTERVAL: float = 1 / 60
