import math

import pytest

from electric_fields.core.seeds import generate_seeds


@pytest.mark.parametrize("density", [1, 2, 7, 20, 64])
def test_seed_count_matches_density(density):
    seeds = generate_seeds((100.0, 100.0), 10.0, density, 1.0)
    assert len(seeds) == density


def test_zero_density_yields_no_seeds():
    assert generate_seeds((100.0, 100.0), 10.0, 0, 1.0) == []


def test_seeds_lie_on_source_circle_evenly_spaced():
    cx, cy, r = 40.0, -15.0, 8.0
    seeds = generate_seeds((cx, cy), r, 8, 1.0)

    # Reference phase: the first seed is on the +x axis
    assert seeds[0].point == pytest.approx((cx + r, cy))
    for k, seed in enumerate(seeds):
        x, y = seed.point
        assert math.hypot(x - cx, y - cy) == pytest.approx(r)
        angle = math.atan2(y - cy, x - cx) % (2 * math.pi)
        assert angle == pytest.approx(k * 2 * math.pi / 8, abs=1e-12)


def test_direction_follows_source_sign():
    assert {s.direction for s in generate_seeds((0, 0), 5.0, 4, 2.0)} == {1}
    assert {s.direction for s in generate_seeds((0, 0), 5.0, 4, -0.3)} == {-1}


def test_seeds_are_deterministic():
    a = generate_seeds((123.4, 56.7), 9.5, 13, -1.0)
    b = generate_seeds((123.4, 56.7), 9.5, 13, -1.0)
    assert a == b
