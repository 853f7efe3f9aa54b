# Simulates a fast drag: many requests, only the last one is shown.
from electric_fields import InteractionController, RecomputeScheduler, Simulation
from electric_fields.renderer import DebugRenderer

sim = Simulation(name="Drag", width=800, height=600)

with RecomputeScheduler() as scheduler:
    controller = InteractionController(sim, scheduler, drag_interval=0.0)
    pos, _ = controller.add_charge((200.0, 300.0), +1)
    controller.add_charge((600.0, 300.0), -1)

    controller.drag_start(pos.id, (200.0, 300.0))
    futures = [controller.drag_move((200.0 + 10.0 * i, 300.0 - 5.0 * i)) for i in range(20)]
    controller.drag_end()

    applied = [f.result() for f in futures if f is not None]
    print("applied:", applied.count(True), "discarded:", applied.count(False))

DebugRenderer().render_simulation(sim)
