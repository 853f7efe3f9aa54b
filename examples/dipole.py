from electric_fields import InteractionController, RecomputeScheduler, Simulation, Settings
from electric_fields.logging_config import setup_logging
from electric_fields.renderer import DebugRenderer

setup_logging(level="DEBUG")

sim = Simulation(name="Dipole", width=800, height=600, settings=Settings(r=8.0, density=16, steps=2000, delta=1.0))

with RecomputeScheduler() as scheduler:
    controller = InteractionController(sim, scheduler)
    controller.add_charge((350.0, 300.0), +1)
    _, done = controller.add_charge((450.0, 300.0), -1)
    done.result()

DebugRenderer(verbose=True).render_simulation(sim)
