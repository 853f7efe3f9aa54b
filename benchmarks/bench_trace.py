"""
Microbenchmark: compute_fields() time vs number of charges.
Run:
  python benchmarks/bench_trace.py
"""
import numpy as np

from electric_fields.core.tracer import compute_fields
from electric_fields.profiler import Profiler
from electric_fields.types import FieldSpec


def run(n: int, repeats: int = 3):
    prof = Profiler()
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)

    specs = []
    for i in range(n):
        x, y = rng.uniform(100.0, 700.0), rng.uniform(100.0, 500.0)
        sign = 1.0 if i % 2 == 0 else -1.0
        specs.append(FieldSpec(
            source_id=i + 1, position=(float(x), float(y)), magnitude=sign,
            r=10.0, density=20, steps=900, delta=1.0,
        ).to_json())

    for _ in range(repeats):
        with prof.section("compute_fields"):
            results = compute_fields(800.0, 600.0, specs)
    points = sum(len(line) for r in results for line in r["lines"])
    return points, prof.stats.summary()["compute_fields"]


if __name__ == "__main__":
    for n in [1, 2, 5, 10, 20]:
        points, stats = run(n)
        print(f"N={n:3d}  points={points:8d}  mean={stats['mean_ms']:9.1f} ms  max={stats['max_ms']:9.1f} ms")
