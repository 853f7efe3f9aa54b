from concurrent.futures import ThreadPoolExecutor, wait

from electric_fields.core.tracer import trace_fields
from electric_fields.profiler import Profiler
from electric_fields.project import Project
from electric_fields.scheduler import RecomputeScheduler
from electric_fields.settings import Settings
from electric_fields.simulation import Simulation
from electric_fields.store import ChargeStore
from electric_fields.types import SimulationState


def make_simulation(name="Simulation"):
    sim = Simulation(name=name, width=400, height=300, settings=Settings(r=5.0, density=6, steps=60, delta=2.0))
    sim.store.add((150.0, 150.0), 1.0, sim.settings)
    sim.store.add((250.0, 150.0), -1.0, sim.settings)
    return sim


def expected_lines(sim):
    return {r.source_id: r.lines for r in trace_fields(sim.field_specs(), sim.width, sim.height)}


def current_lines(sim):
    return {f.id: f.lines for f in sim.fields}


def test_request_applies_result(manual_scheduler, manual_executor):
    sim = make_simulation()
    delivered = manual_scheduler.request(sim)
    assert not delivered.done(), "The caller never blocks on tracing"
    assert sim.state is SimulationState.RUNNING

    manual_executor.run_all()
    assert delivered.result() is True
    assert sim.state is SimulationState.RESTING
    assert current_lines(sim) == expected_lines(sim)
    assert all(len(f.lines) == 6 for f in sim.fields)


def test_last_request_wins_when_results_arrive_out_of_order(manual_scheduler, manual_executor):
    """R1 then R2 issued; R2 resolves first, R1 late. Only R2 is visible."""
    sim = make_simulation()
    r1 = manual_scheduler.request(sim)

    sim.store.move(1, (120.0, 100.0))
    r2 = manual_scheduler.request(sim)
    after_r2 = expected_lines(sim)

    manual_executor.run(1)
    assert r2.result() is True
    assert current_lines(sim) == after_r2

    manual_executor.run(0)
    assert r1.result() is False, "Stale result must be discarded"
    assert current_lines(sim) == after_r2
    assert sim.state is SimulationState.RESTING


def test_stale_result_in_order_is_replaced(manual_scheduler, manual_executor):
    sim = make_simulation()
    r1 = manual_scheduler.request(sim)
    sim.store.get(2).source.magnitude = -3.0
    r2 = manual_scheduler.request(sim)

    manual_executor.run_all()
    assert r1.result() is False
    assert r2.result() is True
    assert current_lines(sim) == expected_lines(sim)


def test_result_for_inactive_simulation_is_discarded(manual_executor):
    project = Project(simulations=[make_simulation("A"), make_simulation("B")])
    scheduler = RecomputeScheduler(executor=manual_executor, is_active=project.is_active)
    a = project.active

    delivered = scheduler.request(a)
    project.activate(1)
    manual_executor.run_all()

    assert delivered.result() is False
    assert all(f.lines == () for f in a.fields)
    assert a.state is SimulationState.RESTING

    # Coming back to the tab retraces it
    project.activate(0)
    scheduler.request(a)
    manual_executor.run_all()
    assert current_lines(a) == expected_lines(a)


def test_deleted_charge_result_is_dropped(manual_scheduler, manual_executor):
    sim = make_simulation()
    delivered = manual_scheduler.request(sim)
    removed = sim.store.remove(2)
    manual_executor.run_all()

    # The tag is still current, so the surviving field is updated
    assert delivered.result() is True
    assert len(sim.fields) == 1
    assert len(sim.fields[0].lines) == 6
    assert removed.lines == ()


class DeletingStore(ChargeStore):
    """Deletes a charge right as its result is looked up."""

    def __init__(self, doomed):
        super().__init__()
        self.doomed = doomed

    def find(self, charge_id):
        if charge_id == self.doomed and charge_id in self._fields:
            self.remove(charge_id)
        return super().find(charge_id)


def test_delete_during_apply_still_settles(manual_scheduler, manual_executor):
    sim = Simulation(width=400, height=300, settings=Settings(r=5.0, density=6, steps=60, delta=2.0),
                     store=DeletingStore(doomed=1))
    sim.store.add((150.0, 150.0), 1.0, sim.settings)
    sim.store.add((250.0, 150.0), -1.0, sim.settings)

    delivered = manual_scheduler.request(sim)
    manual_executor.run_all()

    assert delivered.result() is True
    assert sim.state is SimulationState.RESTING
    assert [f.id for f in sim.fields] == [2]
    assert len(sim.fields[0].lines) == 6


def test_worker_failure_is_contained(manual_scheduler, manual_executor):
    sim = make_simulation()
    delivered = manual_scheduler.request(sim)
    manual_executor.fail(0, RuntimeError("boom"))

    assert isinstance(delivered.exception(), RuntimeError)
    assert sim.state is SimulationState.RESTING
    assert all(f.lines == () for f in sim.fields)


def test_simulations_do_not_interfere(manual_scheduler, manual_executor):
    a = make_simulation("A")
    b = make_simulation("B")
    b.store.move(1, (50.0, 50.0))

    ra = manual_scheduler.request(a)
    rb = manual_scheduler.request(b)
    manual_executor.run(1)
    manual_executor.run(0)

    assert ra.result() is True and rb.result() is True
    assert current_lines(a) == expected_lines(a)
    assert current_lines(b) == expected_lines(b)
    assert current_lines(a) != current_lines(b)


def test_burst_on_thread_pool_settles_on_last_request():
    """Many overlapping requests on real workers end at the last state."""
    sim = make_simulation()
    profiler = Profiler()
    with ThreadPoolExecutor(max_workers=4) as pool:
        scheduler = RecomputeScheduler(executor=pool, profiler=profiler)
        futures = []
        for i in range(12):
            sim.store.move(1, (100.0 + 5.0 * i, 150.0))
            futures.append(scheduler.request(sim))
        wait(futures)

    assert futures[-1].result() is True
    assert sum(f.result() for f in futures) >= 1
    assert current_lines(sim) == expected_lines(sim)
    assert sim.state is SimulationState.RESTING
    assert profiler.stats.summary()["recompute"]["n"] == 12


def test_default_executor_shuts_down():
    sim = make_simulation()
    with RecomputeScheduler() as scheduler:
        delivered = scheduler.request(sim)
        assert delivered.result(timeout=30) is True
    assert current_lines(sim) == expected_lines(sim)
