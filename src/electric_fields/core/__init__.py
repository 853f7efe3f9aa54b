# MIT License (see LICENSE)
"""
Numerical core of the field engine.

This subpackage provides:
    - Field evaluation: Coulomb superposition over packed charges.
    - Seed generation: evenly spaced starting points around a source.
    - Line tracing: fixed-step integration of field lines, and the
      compute_fields() boundary used by the recompute scheduler.

Typical usage:
    from electric_fields.core import ChargeArrays, evaluate

    charges = ChargeArrays.pack([(0, 0)], [1.0])
    evaluate((10.0, 0.0), charges)
"""
from .evaluator import ChargeArrays, evaluate, field_strength
from .seeds import Seed, generate_seeds
from .tracer import (
    trace_line,
    trace_field,
    trace_fields,
    compute_fields,
    compute_fields_json,
)

__all__ = [
    # Evaluation
    "ChargeArrays",
    "evaluate",
    "field_strength",
    # Seeds
    "Seed",
    "generate_seeds",
    # Tracing
    "trace_line",
    "trace_field",
    "trace_fields",
    "compute_fields",
    "compute_fields_json",
]
