# MIT License (see LICENSE)
"""
The charge store: the set of charges (and their fields) of one simulation.

The store owns id assignment and the selection invariant: at most one
charge is selected at any time, and at most one (the selected one) is
being dragged.
"""
from __future__ import annotations
from typing import Iterator

from .settings import Settings
from .types import Charge, ChargeState, Field
from .util import f64


class ChargeStore:
    """
    Ordered collection of fields keyed by source charge id.

    Ids come from a monotonic counter and are never reused, even after the
    charge that held one is deleted.
    """

    def __init__(self, next_id: int = 1) -> None:
        self._fields: dict[int, Field] = {}
        self._next_id = next_id
        self._dragging: int | None = None

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(list(self._fields.values()))

    def __contains__(self, charge_id: int) -> bool:
        return charge_id in self._fields

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def fields(self) -> list[Field]:
        return list(self._fields.values())

    @property
    def charges(self) -> list[Charge]:
        return [f.source for f in self._fields.values()]

    def find(self, charge_id: int) -> Field | None:
        """Look up a field by id, or None if the charge is gone."""
        return self._fields.get(charge_id)

    def get(self, charge_id: int) -> Field:
        """
        Look up a field by its source charge id.

        Raises:
            KeyError: If no such charge exists.
        """
        try:
            return self._fields[charge_id]
        except KeyError:
            raise KeyError(f"No charge with id {charge_id}") from None

    # -------------------------------------------------------------------------
    # Creation / removal
    # -------------------------------------------------------------------------

    def _take_id(self) -> int:
        charge_id = self._next_id
        self._next_id += 1
        return charge_id

    def add(self, position, magnitude: float, settings: Settings) -> Field:
        """
        Create a charge and its field from the given settings.

        Args:
            position: Charge position [x, y].
            magnitude: Signed magnitude.
            settings: Source of r/density/steps/delta for the new field.

        Returns:
            The new field.
        """
        charge = Charge(id=self._take_id(), position=position, magnitude=magnitude)
        f = Field(
            source=charge,
            r=settings.r,
            density=settings.density,
            steps=settings.steps,
            delta=settings.delta,
        )
        self._fields[charge.id] = f
        return f

    def insert(self, f: Field) -> Field:
        """
        Insert an existing field (used when loading a project).

        Raises:
            ValueError: If the id is already taken.
        """
        charge_id = f.source.id
        if charge_id in self._fields:
            raise ValueError(f"Duplicate charge id {charge_id}")
        if f.source.selected:
            self._clear_selection()
        self._fields[charge_id] = f
        self._next_id = max(self._next_id, charge_id + 1)
        return f

    def remove(self, charge_id: int) -> Field:
        """Delete a charge together with its field."""
        f = self.get(charge_id)
        del self._fields[charge_id]
        if self._dragging == charge_id:
            self._dragging = None
        return f

    def duplicate(self, charge_id: int, offset: tuple[float, float]) -> Field:
        """
        Copy a charge and its field overrides under a fresh id.

        The copy is placed at ``position + offset``, is not selected, and
        starts without lines.
        """
        original = self.get(charge_id)
        charge = Charge(
            id=self._take_id(),
            position=original.source.position + f64(offset),
            magnitude=original.source.magnitude,
        )
        f = Field(
            source=charge,
            r=original.r,
            density=original.density,
            steps=original.steps,
            delta=original.delta,
        )
        self._fields[charge.id] = f
        return f

    def charge_at(self, point) -> Field | None:
        """
        Find the field whose source circle contains ``point``.

        Later charges are drawn on top, so they are checked first.
        """
        px, py = float(point[0]), float(point[1])
        for f in reversed(list(self._fields.values())):
            dx = px - f.source.position[0]
            dy = py - f.source.position[1]
            if dx * dx + dy * dy <= f.r * f.r:
                return f
        return None

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    @property
    def selected(self) -> Field | None:
        for f in self._fields.values():
            if f.source.selected:
                return f
        return None

    def _clear_selection(self) -> None:
        for f in self._fields.values():
            f.source.selected = False

    def select(self, charge_id: int) -> Field:
        """Select one charge, deselecting every other."""
        f = self.get(charge_id)
        self._clear_selection()
        f.source.selected = True
        return f

    def deselect(self) -> None:
        self._clear_selection()
        self._dragging = None

    def begin_drag(self, charge_id: int) -> Field:
        """Select a charge and mark it as being dragged."""
        f = self.select(charge_id)
        self._dragging = charge_id
        return f

    def end_drag(self) -> Field | None:
        """Stop dragging; the charge stays selected."""
        charge_id, self._dragging = self._dragging, None
        if charge_id is None or charge_id not in self._fields:
            return None
        return self._fields[charge_id]

    @property
    def dragging(self) -> Field | None:
        if self._dragging is None:
            return None
        return self._fields.get(self._dragging)

    def state_of(self, charge_id: int) -> ChargeState:
        f = self.get(charge_id)
        if self._dragging == charge_id:
            return ChargeState.DRAGGING
        if f.source.selected:
            return ChargeState.SELECTED
        return ChargeState.IDLE

    def move(self, charge_id: int, position) -> None:
        self.get(charge_id).source.position = f64(position)
