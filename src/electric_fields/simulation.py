# MIT License (see LICENSE)
"""
A single electrostatic simulation.

The Simulation is the world container: scene bounds, the charge store,
the per-simulation settings and the recompute bookkeeping. Each instance
owns its data exclusively, so independent simulations never share state.

Recompute protocol:
    1. The control path mutates charges, then calls
       RecomputeScheduler.request(simulation).
    2. The scheduler calls begin_request(), which atomically issues a new
       tag and snapshots the field specs.
    3. When the traced result returns, apply_result(tag, ...) installs it
       only if ``tag`` is still the latest issued one.

The tag counter and line application are guarded by one lock, the single
source of truth for "current request".
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .settings import Settings
from .store import ChargeStore
from .types import Charge, Field, FieldResult, FieldSpec, SimulationState

logger = logging.getLogger(__name__)


@dataclass
class Simulation:
    """
    Electrostatic scene.

    Attributes:
        name: Display name (e.g. the tab title).
        width: Scene width; lines leaving [0, width] stop.
        height: Scene height.
        settings: Defaults for new charges and fields.
        store: The charges and their fields.
        state: RUNNING while a recompute is outstanding, else RESTING.
    """
    name: str = "Simulation"
    width: float = 800.0
    height: float = 600.0
    settings: Settings = field(default_factory=Settings)
    store: ChargeStore = field(default_factory=ChargeStore)
    state: SimulationState = SimulationState.RESTING

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Simulation size must be positive, got {self.width}x{self.height}")
        self.width = float(self.width)
        self.height = float(self.height)
        self._lock = threading.RLock()
        self._latest_tag = 0

    @property
    def fields(self) -> list[Field]:
        return self.store.fields

    @property
    def charges(self) -> list[Charge]:
        return self.store.charges

    @property
    def latest_tag(self) -> int:
        with self._lock:
            return self._latest_tag

    def field_specs(self) -> list[FieldSpec]:
        """Snapshot of every field as tracer input."""
        return [f.spec() for f in self.store]

    def resize(self, width: float, height: float) -> bool:
        """
        Change scene bounds.

        Returns:
            True if the bounds changed (lines must be retraced).
        """
        if not (width > 0 and height > 0):
            raise ValueError(f"Simulation size must be positive, got {width}x{height}")
        changed = (float(width), float(height)) != (self.width, self.height)
        self.width, self.height = float(width), float(height)
        return changed

    # -------------------------------------------------------------------------
    # Recompute bookkeeping
    # -------------------------------------------------------------------------

    def begin_request(self) -> tuple[int, list[FieldSpec]]:
        """
        Issue a new request tag and snapshot the specs it belongs to.

        Any result carrying an older tag becomes stale from this point on.
        """
        with self._lock:
            self._latest_tag += 1
            self.state = SimulationState.RUNNING
            return self._latest_tag, self.field_specs()

    def is_current(self, tag: int) -> bool:
        with self._lock:
            return tag == self._latest_tag

    def apply_result(self, tag: int, results: Iterable[FieldResult]) -> bool:
        """
        Install traced lines if ``tag`` is the latest request.

        Each field's line list is replaced as a whole. Results for charges
        deleted since the request was issued are dropped.

        Returns:
            True if the result was applied, False if it was stale.
        """
        with self._lock:
            if tag != self._latest_tag:
                logger.debug("%s: discarding stale result %d (latest %d)", self.name, tag, self._latest_tag)
                return False
            # The control path may delete charges concurrently; look up once
            for result in results:
                f = self.store.find(result.source_id)
                if f is not None:
                    f.replace_lines(result.lines)
            self.state = SimulationState.RESTING
            return True

    def abandon(self, tag: int) -> None:
        """
        Settle a request whose result will never be applied (failed or
        dropped). Lines are left as they are.
        """
        with self._lock:
            if tag == self._latest_tag:
                self.state = SimulationState.RESTING

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def update_settings(self, changes: Mapping[str, Any], apply_to_all: bool = False) -> bool:
        """
        Edit the simulation defaults.

        Args:
            changes: Mapping of setting name to new value. Malformed entries
                     are ignored and keep their previous value.
            apply_to_all: Also push r/magnitude/density/steps/delta to every
                          existing field (the user confirmed the push).
                          Each charge keeps its own sign.

        Returns:
            True if existing geometry changed and lines must be retraced.
        """
        self.settings, _ = self.settings.updated(changes)
        if not apply_to_all:
            return False

        s = self.settings
        changed = False
        for f in self.store:
            magnitude = f.source.sign * s.magnitude
            if (f.r, f.density, f.steps, f.delta, f.source.magnitude) != (
                s.r, s.density, s.steps, s.delta, magnitude
            ):
                f.r, f.density, f.steps, f.delta = s.r, s.density, s.steps, s.delta
                f.source.magnitude = magnitude
                changed = True
        return changed
