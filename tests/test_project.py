import logging

import pytest

from electric_fields.logging_config import setup_logging
from electric_fields.project import Project
from electric_fields.simulation import Simulation
from electric_fields.types import SimulationState


def test_new_project_has_one_active_simulation():
    project = Project()
    assert len(project.simulations) == 1
    assert project.is_active(project.simulations[0])


def test_add_and_activate():
    project = Project()
    second = project.add_simulation()
    assert project.active is second
    assert second.name == "Simulation 2"

    first = project.activate(0)
    assert project.is_active(first) and not project.is_active(second)
    with pytest.raises(IndexError):
        project.activate(5)


def test_remove_keeps_indices_on_same_simulations():
    a, b, c = Simulation(name="A"), Simulation(name="B"), Simulation(name="C")
    project = Project(simulations=[a, b, c], active_index=2, default_index=1)

    project.remove_simulation(0)
    assert project.active is c
    assert project.simulations[project.default_index] is b

    project.remove_simulation(1)
    assert project.active is b

    with pytest.raises(ValueError):
        project.remove_simulation(0)


def test_simulations_are_independent():
    project = Project(simulations=[Simulation(name="A"), Simulation(name="B")])
    a, b = project.simulations
    a.store.add((10.0, 10.0), 1.0, a.settings)
    a.update_settings({"density": 3})

    assert len(b.fields) == 0
    assert b.settings.density != 3
    assert b.store.next_id == 1


def test_request_tags_are_monotonic():
    sim = Simulation()
    first, _ = sim.begin_request()
    second, _ = sim.begin_request()
    assert second > first
    assert sim.latest_tag == second
    assert sim.is_current(second) and not sim.is_current(first)
    assert sim.state is SimulationState.RUNNING

    assert sim.apply_result(first, []) is False
    sim.abandon(first)
    assert sim.state is SimulationState.RUNNING
    assert sim.apply_result(second, []) is True
    assert sim.state is SimulationState.RESTING


def test_invalid_simulation_size():
    with pytest.raises(ValueError):
        Simulation(width=0, height=100)
    with pytest.raises(ValueError):
        Simulation().resize(100, -1)


def test_setup_logging_is_idempotent():
    logger = setup_logging("electric_fields.test", level="debug")
    setup_logging("electric_fields.test", level="debug")
    assert logger.level == logging.DEBUG
    assert sum(getattr(h, "_electric_fields", False) for h in logger.handlers) == 1
