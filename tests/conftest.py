"""Shared fixtures."""
from concurrent.futures import Executor, Future

import pytest

from electric_fields.scheduler import RecomputeScheduler


class ManualExecutor(Executor):
    """
    Executor that only runs work when told to, in any order.

    Completing a future fires its done-callbacks synchronously, so the
    scheduler's delivery step runs inside run()/fail().
    """

    def __init__(self):
        self.pending: list[tuple[Future, object, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run(self, index: int = 0):
        future, fn, args, kwargs = self.pending.pop(index)
        future.set_result(fn(*args, **kwargs))

    def fail(self, index: int, exc: BaseException):
        future, _, _, _ = self.pending.pop(index)
        future.set_exception(exc)

    def run_all(self):
        while self.pending:
            self.run(0)


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def manual_scheduler(manual_executor):
    return RecomputeScheduler(executor=manual_executor)
