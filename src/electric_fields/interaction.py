# MIT License (see LICENSE)
"""
Pointer interaction with charges.

Translates UI events into charge mutations and decides when traced
geometry is dirty. Each charge is Idle, Selected or Dragging; the charge
store keeps at most one charge selected.

    click            -> Selected (others deselected)       no recompute
    double click     -> magnitude negated                   recompute
    drag start/move  -> Dragging, position follows pointer  recompute (throttled)
    drag end         -> Selected                            flush throttled recompute
    context menu     -> delete / duplicate / deselect       recompute (not deselect)
    scroll           -> |magnitude| +/- increment           recompute
    background menu  -> add positive / negative charge      recompute

Selection changes alone never trigger a recompute.
"""
from __future__ import annotations
import logging
import time
from concurrent.futures import Future
from enum import Enum
from typing import Any, Callable, Mapping

import numpy as np

from .constants import DRAG_INTERVAL, DUPLICATE_OFFSET, MIN_MAGNITUDE, SCROLL_INCREMENT
from .scheduler import RecomputeScheduler
from .simulation import Simulation
from .types import Field
from .util import f64

logger = logging.getLogger(__name__)


class ContextAction(Enum):
    """Entries of the per-charge context menu."""
    DELETE = "delete"
    DUPLICATE = "duplicate"
    DESELECT = "deselect"


class InteractionController:
    """
    Event handler for one simulation.

    Args:
        simulation: The simulation whose charges are edited.
        scheduler: Receives a request whenever geometry becomes dirty.
        drag_interval: Minimum seconds between drag-triggered requests.
        clock: Monotonic time source (seconds).
    """

    def __init__(
        self,
        simulation: Simulation,
        scheduler: RecomputeScheduler,
        drag_interval: float = DRAG_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.simulation = simulation
        self.scheduler = scheduler
        self.drag_interval = drag_interval
        self._clock = clock
        self._grab_offset = np.zeros(2, dtype=np.float64)
        self._last_drag_request: float | None = None
        self._drag_dirty = False

    @property
    def store(self):
        return self.simulation.store

    def recompute(self) -> Future:
        """Mark all geometry dirty and request a retrace."""
        return self.scheduler.request(self.simulation)

    # -------------------------------------------------------------------------
    # Pointer events on charges
    # -------------------------------------------------------------------------

    def pointer_target(self, point) -> Field | None:
        """Hit-test ``point`` against the charges."""
        return self.store.charge_at(point)

    def click(self, charge_id: int) -> None:
        self.store.select(charge_id)

    def double_click(self, charge_id: int) -> Future:
        charge = self.store.get(charge_id).source
        charge.magnitude = -charge.magnitude
        logger.debug("Negated charge %d -> %g", charge_id, charge.magnitude)
        return self.recompute()

    def drag_start(self, charge_id: int, point) -> None:
        """
        Begin dragging. The grab offset is kept so the charge does not jump
        to the pointer.
        """
        f = self.store.begin_drag(charge_id)
        self._grab_offset = f.source.position - f64(point)
        self._last_drag_request = None
        self._drag_dirty = False

    def drag_move(self, point) -> Future | None:
        """
        Move the dragged charge.

        Returns:
            The request future, or None if there is no drag in progress or
            the request was throttled.
        """
        f = self.store.dragging
        if f is None:
            return None
        self.store.move(f.id, f64(point) + self._grab_offset)

        now = self._clock()
        if self._last_drag_request is not None and now - self._last_drag_request < self.drag_interval:
            self._drag_dirty = True
            return None
        self._last_drag_request = now
        self._drag_dirty = False
        return self.recompute()

    def drag_end(self) -> Future | None:
        """
        Finish the drag. If the last move was throttled, request a retrace
        now so the final position is always traced.
        """
        f = self.store.end_drag()
        dirty, self._drag_dirty = self._drag_dirty, False
        self._last_drag_request = None
        if f is not None and dirty:
            return self.recompute()
        return None

    def scroll(self, charge_id: int, direction: float) -> Future | None:
        """
        Grow (direction > 0) or shrink (direction < 0) a charge's magnitude.

        |magnitude| never drops below MIN_MAGNITUDE and the sign is kept.
        """
        if direction == 0:
            return None
        charge = self.store.get(charge_id).source
        step = SCROLL_INCREMENT if direction > 0 else -SCROLL_INCREMENT
        charge.magnitude = charge.sign * max(abs(charge.magnitude) + step, MIN_MAGNITUDE)
        return self.recompute()

    def context_action(self, charge_id: int, action: ContextAction) -> Future | None:
        if action is ContextAction.DELETE:
            self.store.remove(charge_id)
            return self.recompute()
        if action is ContextAction.DUPLICATE:
            self.store.duplicate(charge_id, (DUPLICATE_OFFSET, DUPLICATE_OFFSET))
            return self.recompute()
        if action is ContextAction.DESELECT:
            self.store.deselect()
            return None
        raise ValueError(f"Unknown context action: {action!r}")

    # -------------------------------------------------------------------------
    # Background events
    # -------------------------------------------------------------------------

    def add_charge(self, point, sign: int) -> tuple[Field, Future]:
        """Create a charge at ``point`` with the simulation's default settings."""
        if sign not in (1, -1):
            raise ValueError(f"Charge sign must be +1 or -1, got {sign}")
        s = self.simulation.settings
        f = self.store.add(point, sign * s.magnitude, s)
        return f, self.recompute()

    def deselect(self) -> None:
        self.store.deselect()

    def update_settings(self, changes: Mapping[str, Any], apply_to_all: bool = False) -> Future | None:
        """
        Apply a settings edit; retrace only if existing geometry changed.
        """
        if self.simulation.update_settings(changes, apply_to_all=apply_to_all):
            return self.recompute()
        return None

    def resize(self, width: float, height: float) -> Future | None:
        if self.simulation.resize(width, height):
            return self.recompute()
        return None
