import json

import numpy as np
import pytest

from electric_fields.core.evaluator import ChargeArrays
from electric_fields.core.seeds import generate_seeds
from electric_fields.core.tracer import (
    compute_fields,
    compute_fields_json,
    trace_fields,
    trace_line,
)
from electric_fields.types import FieldSpec, TerminationReason


def spec(source_id, x, y, magnitude, r=3.0, density=7, steps=5000, delta=0.5):
    return FieldSpec(
        source_id=source_id, position=(x, y), magnitude=magnitude,
        r=r, density=density, steps=steps, delta=delta,
    )


def test_lone_positive_charge_never_absorbed():
    """Lines from an isolated charge run off the scene or out of steps."""
    specs = [spec(1, 400.0, 300.0, 1.0, r=10.0, density=12, steps=300, delta=1.0)]
    (result,) = trace_fields(specs, 800.0, 600.0)

    assert len(result.lines) == 12
    for line in result.lines:
        assert line.reason in (TerminationReason.OUT_OF_BOUNDS, TerminationReason.MAX_STEPS)


def test_dipole_lines_end_on_negative_charge():
    """Classic dipole: every line from the positive charge is absorbed."""
    specs = [
        spec(1, 490.0, 500.0, 1.0),
        spec(2, 510.0, 500.0, -1.0, density=0),
    ]
    positive, negative = trace_fields(specs, 1000.0, 1000.0)

    assert len(positive.lines) == 7
    assert negative.lines == ()
    for line in positive.lines:
        assert line.reason is TerminationReason.ABSORBED
        x, y = line.points[-1]
        assert (x - 510.0) ** 2 + (y - 500.0) ** 2 < 3.0 ** 2


def test_negative_source_traces_against_field():
    """Lines from a negative charge run towards the positive one."""
    specs = [
        spec(1, 490.0, 500.0, -1.0, density=1),
        spec(2, 510.0, 500.0, 1.0, density=0),
    ]
    negative, _ = trace_fields(specs, 1000.0, 1000.0)
    (line,) = negative.lines
    assert line.reason is TerminationReason.ABSORBED
    assert line.points[-1][0] > 500.0


def test_zero_density_charge_still_contributes():
    """A charge with no lines of its own still bends (and absorbs) others."""
    alone = trace_fields([spec(1, 490.0, 500.0, -1.0, density=1)], 1000.0, 1000.0)
    paired = trace_fields(
        [spec(1, 490.0, 500.0, -1.0, density=1), spec(2, 510.0, 500.0, 1.0, density=0)],
        1000.0, 1000.0,
    )
    assert alone[0].lines[0].reason is not TerminationReason.ABSORBED
    assert paired[0].lines[0].reason is TerminationReason.ABSORBED


def test_equilibrium_point_stalls():
    charges = ChargeArrays.pack([(100.0, 100.0), (200.0, 100.0)], [1.0, 1.0], [5.0, 5.0])
    line = trace_line((150.0, 100.0), 1, charges, -1, 100, 1.0, 300.0, 200.0)
    assert line.reason is TerminationReason.STALLED
    assert line.points == ((150.0, 100.0),)


def test_max_steps_bounds_line_length():
    charges = ChargeArrays.pack([(400.0, 300.0)], [1.0], [10.0])
    line = trace_line((410.0, 300.0), 1, charges, 0, 25, 1.0, 800.0, 600.0)
    assert line.reason is TerminationReason.MAX_STEPS
    assert len(line) == 26
    assert line.points[-1] == pytest.approx((435.0, 300.0))


def test_zero_steps_yields_seed_only():
    charges = ChargeArrays.pack([(400.0, 300.0)], [1.0], [10.0])
    line = trace_line((410.0, 300.0), 1, charges, 0, 0, 1.0, 800.0, 600.0)
    assert line.points == ((410.0, 300.0),)
    assert line.reason is TerminationReason.MAX_STEPS


def test_seed_outside_bounds_stops_immediately():
    charges = ChargeArrays.pack([(5.0, 5.0)], [1.0], [10.0])
    line = trace_line((-5.0, 5.0), 1, charges, 0, 100, 1.0, 100.0, 100.0)
    assert line.reason is TerminationReason.OUT_OF_BOUNDS
    assert len(line) == 1


def test_line_leaving_scene_keeps_exit_point():
    charges = ChargeArrays.pack([(50.0, 50.0)], [1.0], [10.0])
    line = trace_line((60.0, 50.0), 1, charges, 0, 1000, 1.0, 100.0, 100.0)
    assert line.reason is TerminationReason.OUT_OF_BOUNDS
    assert line.points[-1][0] > 100.0
    assert all(x <= 100.0 for x, _ in line.points[:-1])


def test_tracing_is_deterministic():
    specs = [
        spec(1, 300.0, 300.0, 2.0, density=16, steps=800, delta=1.0),
        spec(2, 420.0, 260.0, -1.0, density=9, steps=800, delta=1.0),
        spec(3, 350.0, 420.0, 0.5, density=5, steps=800, delta=1.0),
    ]
    payload = [s.to_json() for s in specs]
    first = compute_fields(800.0, 600.0, payload)
    second = compute_fields(800.0, 600.0, payload)
    assert json.dumps(first) == json.dumps(second)


def test_negating_source_flips_direction_not_seeds():
    positive = generate_seeds((400.0, 300.0), 10.0, 6, 1.0)
    negative = generate_seeds((400.0, 300.0), 10.0, 6, -1.0)
    assert [s.point for s in positive] == [s.point for s in negative]
    assert all(p.direction == -n.direction for p, n in zip(positive, negative))

    # A lone charge's lines run outward either way
    (plus,) = trace_fields([spec(1, 400.0, 300.0, 1.0, r=10.0, density=6, steps=50)], 800.0, 600.0)
    (minus,) = trace_fields([spec(1, 400.0, 300.0, -1.0, r=10.0, density=6, steps=50)], 800.0, 600.0)
    for a, b in zip(plus.lines, minus.lines):
        assert a.points[0] == b.points[0]
        assert np.allclose(np.array(a.points), np.array(b.points))


def test_compute_fields_wire_format():
    payload = [spec(7, 200.0, 200.0, 1.0, r=5.0, density=3, steps=10, delta=2.0).to_json()]
    (result,) = compute_fields(400.0, 400.0, payload)

    assert result["sourceId"] == 7
    assert len(result["lines"]) == 3
    assert len(result["terminations"]) == 3
    assert set(result["lines"][0][0]) == {"x", "y"}
    assert result["lines"][0][0] == {"x": 205.0, "y": 200.0}
    json.dumps(result)


def test_compute_fields_rejects_malformed_spec():
    bad = spec(1, 0.0, 0.0, 1.0).to_json()
    del bad["delta"]
    with pytest.raises(ValueError):
        compute_fields(100.0, 100.0, [bad])


def test_compute_fields_json_recovers_from_bad_payload():
    assert compute_fields_json(100.0, 100.0, "{not json") == "[]"
    assert compute_fields_json(100.0, 100.0, '{"sourceId": 1}') == "[]"

    good = json.dumps([spec(1, 50.0, 50.0, 1.0, r=5.0, density=2, steps=5).to_json()])
    (result,) = json.loads(compute_fields_json(100.0, 100.0, good))
    assert result["sourceId"] == 1
