# MIT License (see LICENSE)
"""
A project: several independent simulations, one of them active.

Tabs in the UI map to simulations here. Switching the active simulation
makes in-flight results for the previous one stale (see
RecomputeScheduler's ``is_active``); the caller should request a recompute
for the newly activated simulation.
"""
from __future__ import annotations
from dataclasses import dataclass, field

from .simulation import Simulation


@dataclass
class Project:
    """
    Attributes:
        simulations: All simulations, in tab order. Never empty.
        active_index: Index of the simulation being edited.
        default_index: Index of the simulation shown on startup.
    """
    simulations: list[Simulation] = field(default_factory=lambda: [Simulation()])
    active_index: int = 0
    default_index: int = 0

    def __post_init__(self) -> None:
        if not self.simulations:
            raise ValueError("A project needs at least one simulation")
        for name, index in (("active", self.active_index), ("default", self.default_index)):
            if not 0 <= index < len(self.simulations):
                raise ValueError(f"{name} simulation index {index} out of range")

    @property
    def active(self) -> Simulation:
        return self.simulations[self.active_index]

    def is_active(self, simulation: Simulation) -> bool:
        return self.active is simulation

    def activate(self, index: int) -> Simulation:
        if not 0 <= index < len(self.simulations):
            raise IndexError(f"No simulation at index {index}")
        self.active_index = index
        return self.active

    def add_simulation(self, simulation: Simulation | None = None) -> Simulation:
        """Append a simulation and make it active."""
        if simulation is None:
            simulation = Simulation(name=f"Simulation {len(self.simulations) + 1}")
        self.simulations.append(simulation)
        self.active_index = len(self.simulations) - 1
        return simulation

    def remove_simulation(self, index: int) -> Simulation:
        """
        Remove a simulation. The last remaining one cannot be removed.

        Active and default indices keep pointing at the same simulations
        where possible.
        """
        if len(self.simulations) == 1:
            raise ValueError("Cannot remove the last simulation")
        if not 0 <= index < len(self.simulations):
            raise IndexError(f"No simulation at index {index}")
        removed = self.simulations.pop(index)
        self.active_index = _shift(self.active_index, index, len(self.simulations))
        self.default_index = _shift(self.default_index, index, len(self.simulations))
        return removed

    def replace(self, other: "Project") -> None:
        """Take over another project's content in one step."""
        self.simulations, self.active_index, self.default_index = (
            other.simulations, other.active_index, other.default_index,
        )


def _shift(current: int, removed: int, remaining: int) -> int:
    if current > removed:
        return current - 1
    return min(current, remaining - 1)
