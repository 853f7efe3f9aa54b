# MIT License (see LICENSE)
"""
Core type definitions for the electrostatic field engine.

Defines the fundamental data structures:
- Charge: a point source with position and signed magnitude.
- Field: the per-charge tracing parameters plus the cached traced lines.
- Line: one traced polyline tagged with why it stopped.
- FieldSpec / FieldResult: the plain records exchanged with the
  computation boundary (see tracer.compute_fields).

The field of a set of charges is the Coulomb superposition
  E(p) = Σ qᵢ (p - pᵢ) / |p - pᵢ|³
in arbitrary relative units.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from .util import f64, point_to_json, point_from_json


class TerminationReason(str, Enum):
    """Why a field line trace stopped. All of these are normal outcomes."""
    OUT_OF_BOUNDS = "out_of_bounds"
    ABSORBED = "absorbed"
    STALLED = "stalled"
    MAX_STEPS = "max_steps"


class ChargeState(Enum):
    """Interaction state of a single charge."""
    IDLE = "idle"
    SELECTED = "selected"
    DRAGGING = "dragging"


class SimulationState(Enum):
    """Running while a recompute is outstanding, Resting once it settled."""
    RUNNING = "running"
    RESTING = "resting"


# =============================================================================
# Charges and Fields
# =============================================================================

@dataclass
class Charge:
    """
    A point charge.

    Attributes:
        id: Unique identifier assigned by the ChargeStore. Stable across
            recomputes and never reused within a simulation.
        position: Position [x, y] in scene coordinates.
        magnitude: Signed strength; the sign is the polarity.
        selected: Selection flag, maintained by the ChargeStore.
    """
    id: int
    position: np.ndarray | tuple[float, float] = (0.0, 0.0)
    magnitude: float = 1.0
    selected: bool = False

    def __post_init__(self) -> None:
        self.position = f64(self.position)
        self.magnitude = float(self.magnitude)
        if self.magnitude == 0.0:
            raise ValueError("Charge magnitude must be non-zero")

    @property
    def sign(self) -> int:
        """+1 for a positive charge, -1 for a negative one."""
        return 1 if self.magnitude > 0 else -1


@dataclass(frozen=True)
class Line:
    """
    One traced field line.

    Attributes:
        points: Ordered (x, y) tuples, starting at the seed point.
        reason: Why the trace stopped.
    """
    points: tuple[tuple[float, float], ...]
    reason: TerminationReason

    def __len__(self) -> int:
        return len(self.points)

    def to_json(self) -> list[dict[str, float]]:
        return [point_to_json(p) for p in self.points]


@dataclass
class Field:
    """
    A source charge together with its tracing parameters and cached lines.

    Attributes:
        source: The owning charge. Field lifetime equals charge lifetime.
        r: Source radius. Seeds lie on this circle and other lines are
           absorbed once they enter it.
        density: Number of lines seeded from this charge (>= 0).
        steps: Maximum integration steps per line (>= 0).
        delta: Arc length of one integration step (> 0).
        lines: Traced lines, only ever replaced as a whole.
    """
    source: Charge
    r: float
    density: int
    steps: int
    delta: float
    lines: tuple[Line, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        check_field_params(self.r, self.density, self.steps, self.delta)
        self.r = float(self.r)
        self.density = int(self.density)
        self.steps = int(self.steps)
        self.delta = float(self.delta)

    @property
    def id(self) -> int:
        return self.source.id

    def replace_lines(self, lines: tuple[Line, ...] | list[Line]) -> None:
        """Swap in a complete new set of lines."""
        self.lines = tuple(lines)

    def spec(self) -> "FieldSpec":
        """Snapshot of everything the tracer needs from this field."""
        return FieldSpec(
            source_id=self.source.id,
            position=(float(self.source.position[0]), float(self.source.position[1])),
            magnitude=self.source.magnitude,
            r=self.r,
            density=self.density,
            steps=self.steps,
            delta=self.delta,
        )


def check_field_params(r: float, density: int, steps: int, delta: float) -> None:
    """
    Validate per-field tracing parameters.

    Raises:
        ValueError: On a non-positive radius or step length, or a negative
            density or step count.
    """
    if not r > 0:
        raise ValueError(f"Field radius must be positive, got {r}")
    if int(density) != density or density < 0:
        raise ValueError(f"Field density must be a non-negative integer, got {density}")
    if int(steps) != steps or steps < 0:
        raise ValueError(f"Field steps must be a non-negative integer, got {steps}")
    if not delta > 0:
        raise ValueError(f"Field delta must be positive, got {delta}")


# =============================================================================
# Computation boundary records
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """
    Immutable tracing request for one field.

    Wire format (JSON-compatible):
        {"sourceId": int, "position": {"x", "y"}, "magnitude": float,
         "r": float, "density": int, "steps": int, "delta": float}
    """
    source_id: int
    position: tuple[float, float]
    magnitude: float
    r: float
    density: int
    steps: int
    delta: float

    def __post_init__(self) -> None:
        check_field_params(self.r, self.density, self.steps, self.delta)

    @property
    def direction(self) -> int:
        """Trace direction sign: +1 follows the field, -1 runs against it."""
        return 1 if self.magnitude > 0 else -1

    def to_json(self) -> dict[str, Any]:
        return {
            "sourceId": self.source_id,
            "position": point_to_json(self.position),
            "magnitude": self.magnitude,
            "r": self.r,
            "density": self.density,
            "steps": self.steps,
            "delta": self.delta,
        }

    @classmethod
    def from_json(cls, d: dict[str, Any]) -> "FieldSpec":
        """
        Parse a wire-format spec.

        Raises:
            ValueError: If a field is missing or out of range.
        """
        try:
            return cls(
                source_id=int(d["sourceId"]),
                position=point_from_json(d["position"]),
                magnitude=float(d["magnitude"]),
                r=float(d["r"]),
                density=int(d["density"]),
                steps=int(d["steps"]),
                delta=float(d["delta"]),
            )
        except KeyError as exc:
            raise ValueError(f"Field spec missing required key {exc}") from None
        except TypeError as exc:
            raise ValueError(f"Malformed field spec: {exc}") from None


@dataclass(frozen=True)
class FieldResult:
    """
    Traced lines for one source.

    Wire format:
        {"sourceId": int, "lines": [[{"x", "y"}, ...], ...],
         "terminations": ["absorbed", ...]}
    """
    source_id: int
    lines: tuple[Line, ...]

    def to_json(self) -> dict[str, Any]:
        return {
            "sourceId": self.source_id,
            "lines": [line.to_json() for line in self.lines],
            "terminations": [line.reason.value for line in self.lines],
        }

    @classmethod
    def from_json(cls, d: dict[str, Any]) -> "FieldResult":
        polylines = d.get("lines", [])
        reasons = d.get("terminations", [TerminationReason.MAX_STEPS.value] * len(polylines))
        if len(reasons) != len(polylines):
            raise ValueError("Field result has mismatched lines and terminations")
        lines = tuple(
            Line(
                points=tuple(point_from_json(p) for p in polyline),
                reason=TerminationReason(reason),
            )
            for polyline, reason in zip(polylines, reasons)
        )
        return cls(source_id=int(d["sourceId"]), lines=lines)
