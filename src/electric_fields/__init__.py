# MIT License (see LICENSE)
"""
electric_fields - 2D electrostatic field line engine.

This package lets a user compose a scene of point charges and traces the
field lines of their superposed Coulomb field. Tracing runs off the
interaction path; only the result of the latest request is shown.

Main entry points:
    - Simulation: Scene bounds, charges (with their fields) and settings.
    - InteractionController: Pointer/scroll/menu events -> charge edits.
    - RecomputeScheduler: Asynchronous, last-request-wins retracing.
    - Project: Several independent simulations, one active.
    - Settings: Defaults for new charges and fields.

Submodules:
    - core: Field evaluation, seed generation and line tracing.
    - io: JSON project persistence.
    - renderer: Optional visualization/export adapters.

Example:
    from electric_fields import Simulation, InteractionController, RecomputeScheduler

    sim = Simulation(width=800, height=600)
    with RecomputeScheduler() as scheduler:
        controller = InteractionController(sim, scheduler)
        controller.add_charge((300, 300), +1)
        _, done = controller.add_charge((500, 300), -1)
        done.result()
"""
from .simulation import Simulation
from .settings import Settings, Colors
from .store import ChargeStore
from .types import (
    Charge,
    Field,
    Line,
    FieldSpec,
    FieldResult,
    TerminationReason,
    ChargeState,
    SimulationState,
)
from .interaction import InteractionController, ContextAction
from .scheduler import RecomputeScheduler
from .project import Project

__all__ = [
    # Simulation
    "Simulation",
    "Project",
    "ChargeStore",
    "Settings",
    "Colors",
    # Data model
    "Charge",
    "Field",
    "Line",
    "FieldSpec",
    "FieldResult",
    "TerminationReason",
    "ChargeState",
    "SimulationState",
    # Control
    "InteractionController",
    "ContextAction",
    "RecomputeScheduler",
]
