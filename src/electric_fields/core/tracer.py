# MIT License (see LICENSE)
"""
Field line tracing.

A field line is an integral curve of the unit field direction. From each
seed p₀ with direction sign s the tracer takes fixed-length Euler steps

    p_{k+1} = p_k + δ · s · E(p_k) / |E(p_k)|

for at most ``steps`` iterations. Before each step the current point is
checked, in order, for:

    1. out_of_bounds: p outside [0, width] × [0, height]
    2. absorbed:      p inside the radius of a charge other than the source
                      (the point is kept so the line visibly reaches it)
    3. stalled:       |E(p)| < STALL_EPS (equilibrium / saddle point)

If none fires within ``steps`` iterations the line ends in open field with
reason max_steps.

Everything here is a pure function of its inputs. compute_fields() is the
computation boundary: it takes and returns plain JSON-compatible records so
it can run in a worker thread or another process.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Iterable

import numpy as np

from ..constants import STALL_EPS
from ..types import FieldResult, FieldSpec, Line, TerminationReason
from ..util import norm
from .evaluator import ChargeArrays, evaluate
from .seeds import generate_seeds

logger = logging.getLogger(__name__)


def trace_line(
    seed: tuple[float, float],
    direction: int,
    charges: ChargeArrays,
    source_index: int,
    steps: int,
    delta: float,
    width: float,
    height: float,
) -> Line:
    """
    Trace a single field line.

    Args:
        seed: Starting point.
        direction: +1 to follow the field, -1 to run against it.
        charges: All charges in the scene, including the source.
        source_index: Index of the line's own source in ``charges``; it
                      never absorbs its own lines. Use -1 for none.
        steps: Maximum number of integration steps.
        delta: Step length.
        width, height: Scene bounds.
    """
    p = np.array(seed, dtype=np.float64)
    points = [(float(p[0]), float(p[1]))]

    absorbers = np.ones(len(charges), dtype=bool)
    if 0 <= source_index < len(charges):
        absorbers[source_index] = False
    radii2 = charges.radii * charges.radii
    scale = delta * direction

    reason = TerminationReason.MAX_STEPS
    for k in range(steps + 1):
        if p[0] < 0.0 or p[0] > width or p[1] < 0.0 or p[1] > height:
            reason = TerminationReason.OUT_OF_BOUNDS
            break

        d = charges.positions - p
        inside = np.einsum("ij,ij->i", d, d) < radii2
        if np.any(inside & absorbers):
            reason = TerminationReason.ABSORBED
            break

        e = evaluate(p, charges)
        strength = norm(e)
        if strength < STALL_EPS:
            reason = TerminationReason.STALLED
            break

        if k == steps:
            break
        p = p + (scale / strength) * e
        points.append((float(p[0]), float(p[1])))

    return Line(points=tuple(points), reason=reason)


def trace_field(
    spec: FieldSpec,
    charges: ChargeArrays,
    source_index: int,
    width: float,
    height: float,
) -> FieldResult:
    """Trace every line seeded from one field."""
    seeds = generate_seeds(spec.position, spec.r, spec.density, spec.magnitude)
    lines = tuple(
        trace_line(
            seed.point, seed.direction, charges, source_index,
            spec.steps, spec.delta, width, height,
        )
        for seed in seeds
    )
    return FieldResult(source_id=spec.source_id, lines=lines)


def trace_fields(specs: Iterable[FieldSpec], width: float, height: float) -> list[FieldResult]:
    """
    Trace all fields of a scene.

    Every field's source contributes to the superposition, whatever its
    density.
    """
    specs = list(specs)
    charges = ChargeArrays.from_specs(specs)
    return [trace_field(spec, charges, i, width, height) for i, spec in enumerate(specs)]


def compute_fields(width: float, height: float, fields: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Computation boundary: trace fields given as wire-format records.

    Args:
        width, height: Scene bounds.
        fields: FieldSpec records (see types.FieldSpec).

    Returns:
        FieldResult records in the same order as ``fields``.

    Raises:
        ValueError: If a record is malformed.
    """
    specs = [FieldSpec.from_json(f) for f in fields]
    results = trace_fields(specs, float(width), float(height))
    logger.debug(
        "Traced %d fields (%d lines) in %.0fx%.0f",
        len(results), sum(len(r.lines) for r in results), width, height,
    )
    return [r.to_json() for r in results]


def compute_fields_json(width: float, height: float, payload: str) -> str:
    """
    String-in, string-out variant of compute_fields().

    A payload that cannot be parsed is logged and answered with an empty
    result list rather than an error.
    """
    try:
        fields = json.loads(payload)
        if not isinstance(fields, list):
            raise ValueError(f"Expected a list of field specs, got {type(fields).__name__}")
        results = compute_fields(width, height, fields)
    except ValueError as exc:
        logger.warning("Could not parse field specs: %s", exc)
        results = []
    return json.dumps(results)
