# MIT License (see LICENSE)
"""
Field evaluation by Coulomb superposition.

Implements
    E(p) = Σᵢ qᵢ (p - pᵢ) / |p - pᵢ|³

over all charges in a scene, in arbitrary relative units. This is the inner
loop of tracing (one call per step per seed) so charges are packed into
contiguous float64 arrays once and the sum is vectorized over charges.

Singularity guard: the distance to charge i is clamped from below by its
radius rᵢ (or by EPS_DISTANCE when it has none), so evaluating inside or
exactly on top of a charge never divides by zero.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING

import numpy as np

from ..constants import EPS_DISTANCE
from ..util import f64, norm

if TYPE_CHECKING:
    from ..types import Charge, Field, FieldSpec


@dataclass(frozen=True)
class ChargeArrays:
    """
    Charges packed for evaluation.

    Attributes:
        positions: [N, 2] positions.
        magnitudes: [N] signed magnitudes.
        radii: [N] charge radii. Used as the minimum effective distance
               and, by the tracer, as the absorption radius.
    """
    positions: np.ndarray
    magnitudes: np.ndarray
    radii: np.ndarray

    def __len__(self) -> int:
        return len(self.magnitudes)

    @classmethod
    def pack(
        cls,
        positions: Iterable,
        magnitudes: Iterable[float],
        radii: Iterable[float] | None = None,
    ) -> "ChargeArrays":
        pos = f64(list(positions)).reshape(-1, 2)
        mag = f64(list(magnitudes)).reshape(-1)
        if len(pos) != len(mag):
            raise ValueError(f"Got {len(pos)} positions but {len(mag)} magnitudes")
        if radii is None:
            radii = np.full(len(mag), EPS_DISTANCE, dtype=np.float64)
        else:
            radii = np.maximum(f64(list(radii)).reshape(-1), EPS_DISTANCE)
        return cls(positions=pos, magnitudes=mag, radii=radii)

    @classmethod
    def from_specs(cls, specs: Iterable["FieldSpec"]) -> "ChargeArrays":
        specs = list(specs)
        return cls.pack(
            [s.position for s in specs],
            [s.magnitude for s in specs],
            [s.r for s in specs],
        )

    @classmethod
    def from_fields(cls, fields: Iterable["Field"]) -> "ChargeArrays":
        fields = list(fields)
        return cls.pack(
            [f.source.position for f in fields],
            [f.source.magnitude for f in fields],
            [f.r for f in fields],
        )

    @classmethod
    def from_charges(cls, charges: Iterable["Charge"]) -> "ChargeArrays":
        """Pack bare charges (epsilon guard only, no radius)."""
        charges = list(charges)
        return cls.pack([c.position for c in charges], [c.magnitude for c in charges])


def evaluate(point, charges: ChargeArrays) -> np.ndarray:
    """
    Field vector at ``point``.

    Args:
        point: Evaluation point [x, y].
        charges: Packed charges. An empty set yields the zero vector.

    Returns:
        Field vector [Ex, Ey] as float64.
    """
    if len(charges) == 0:
        return np.zeros(2, dtype=np.float64)
    d = np.asarray(point, dtype=np.float64) - charges.positions
    r = np.sqrt(np.einsum("ij,ij->i", d, d))
    r = np.maximum(r, charges.radii)
    w = charges.magnitudes / (r * r * r)
    return w @ d


def field_strength(point, charges: ChargeArrays) -> float:
    """|E| at ``point``."""
    return norm(evaluate(point, charges))
