# MIT License (see LICENSE)
"""
Asynchronous recompute of field lines.

Tracing runs on an executor (a worker thread by default, a worker process
when ELECTRIC_FIELDS_PROCESS_POOL=1) so the interaction path never blocks.
Requests cross the boundary as plain JSON-compatible records.

Staleness is detected at delivery time rather than by cancelling work:
every request carries the tag issued by its Simulation, and a result is
applied only if that tag is still the latest one and the simulation is
still the active one. For any burst of requests the visible lines end up
equal to the result of the last request issued.
"""
from __future__ import annotations
import logging
import time
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from functools import partial
from typing import Callable

from .core.tracer import compute_fields
from .profiler import Profiler
from .simulation import Simulation
from .types import FieldResult
from .util import use_process_pool

logger = logging.getLogger(__name__)


class RecomputeScheduler:
    """
    Issues tagged recompute requests and applies only the freshest result.

    Args:
        executor: Where compute_fields() runs. Defaults to a single worker
                  owned (and shut down) by the scheduler.
        is_active: Predicate telling whether a simulation is still the
                   active one; results for inactive simulations are dropped.
                   When omitted every simulation counts as active.
        profiler: Optional Profiler; receives a "recompute" sample (submit
                  to delivery latency) per delivered result.
    """

    def __init__(
        self,
        executor: Executor | None = None,
        is_active: Callable[[Simulation], bool] | None = None,
        profiler: Profiler | None = None,
    ) -> None:
        self._owns_executor = executor is None
        if executor is None:
            if use_process_pool():
                executor = ProcessPoolExecutor(max_workers=1)
            else:
                executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="field-trace")
        self._executor = executor
        self._is_active = is_active
        self.profiler = profiler

    def request(self, simulation: Simulation) -> Future:
        """
        Start a recompute of every field in ``simulation``.

        Returns immediately. The returned future resolves to True once the
        result has been applied, or False if it was discarded as stale.
        Callers never need to wait on it.
        """
        tag, specs = simulation.begin_request()
        payload = [spec.to_json() for spec in specs]
        delivered: Future = Future()
        logger.debug("%s: request %d (%d fields)", simulation.name, tag, len(payload))

        work = self._executor.submit(compute_fields, simulation.width, simulation.height, payload)
        work.add_done_callback(partial(self._deliver, simulation, tag, time.perf_counter(), delivered))
        return delivered

    def _deliver(
        self,
        simulation: Simulation,
        tag: int,
        t0: float,
        delivered: Future,
        work: Future,
    ) -> None:
        """Done-callback for a compute future. Runs on the worker side."""
        if work.cancelled():
            simulation.abandon(tag)
            delivered.cancel()
            return
        exc = work.exception()
        if exc is not None:
            logger.error("%s: recompute %d failed", simulation.name, tag, exc_info=exc)
            simulation.abandon(tag)
            delivered.set_exception(exc)
            return

        if self.profiler is not None:
            self.profiler.record("recompute", time.perf_counter() - t0)

        if self._is_active is not None and not self._is_active(simulation):
            logger.debug("%s: discarding result %d, simulation no longer active", simulation.name, tag)
            simulation.abandon(tag)
            delivered.set_result(False)
            return

        results = [FieldResult.from_json(r) for r in work.result()]
        delivered.set_result(simulation.apply_result(tag, results))

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the executor if the scheduler created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "RecomputeScheduler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
