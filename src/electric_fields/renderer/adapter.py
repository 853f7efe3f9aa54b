# MIT License (see LICENSE)
"""
Renderer adapters: the read-only view of a simulation for drawing/export.

The engine has no drawing dependency. A renderer receives, per field, the
ordered polylines, and per charge its position, sign, magnitude and
selection flag. Styling and file formats (SVG and so on) belong to the
concrete adapter.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TextIO
import sys

from ..types import Charge, Field
from ..util import point_to_json

if TYPE_CHECKING:
    from ..simulation import Simulation


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Usage:
        renderer = MyRenderer()
        renderer.render_simulation(simulation)

    Lines are drawn first, then charges on top of them.
    """

    @abstractmethod
    def begin_frame(self, simulation: "Simulation") -> None:
        """Start a frame for ``simulation`` (bounds, settings, colours)."""
        ...

    @abstractmethod
    def draw_field(self, field: Field) -> None:
        """Draw the traced lines of one field."""
        ...

    @abstractmethod
    def draw_charge(self, charge: Charge, r: float) -> None:
        """Draw one charge with its source radius."""
        ...

    @abstractmethod
    def end_frame(self) -> None:
        ...

    def render_simulation(self, simulation: "Simulation") -> None:
        fields = simulation.fields
        self.begin_frame(simulation)
        for f in fields:
            self.draw_field(f)
        for f in fields:
            self.draw_charge(f.source, f.r)
        self.end_frame()


class DebugRenderer(RendererAdapter):
    """
    Console/text renderer for development and testing.

    Output:
        === Simulation 1 800x600 (resting) ===
        field [1] 20 lines, 4817 points
        charge [1] + 1.00 @ (300.00, 300.00) selected
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = False):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: If True, also list every line's termination reason.
        """
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, simulation: "Simulation") -> None:
        self.output.write(
            f"=== {simulation.name} {simulation.width:.0f}x{simulation.height:.0f} "
            f"({simulation.state.value}) ===\n"
        )

    def draw_field(self, field: Field) -> None:
        points = sum(len(line) for line in field.lines)
        self.output.write(f"field [{field.id}] {len(field.lines)} lines, {points} points\n")
        if self.verbose:
            for i, line in enumerate(field.lines):
                self.output.write(f"  line {i}: {len(line)} points, {line.reason.value}\n")

    def draw_charge(self, charge: Charge, r: float) -> None:
        x, y = charge.position
        sign = "+" if charge.sign > 0 else "-"
        line = f"charge [{charge.id}] {sign} {abs(charge.magnitude):.2f} @ ({x:.2f}, {y:.2f})"
        if charge.selected:
            line += " selected"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class BufferedRenderer(RendererAdapter):
    """
    Records each frame as plain data, for export or for tests.

    Frame layout:
        {"width", "height", "settings": Settings,
         "fields": [{"sourceId", "lines": [[{"x", "y"}, ...]]}],
         "charges": [{"id", "position", "sign", "magnitude", "selected", "r"}]}
    """

    def __init__(self):
        self.frames: list[dict[str, Any]] = []
        self._current: dict[str, Any] | None = None

    def begin_frame(self, simulation: "Simulation") -> None:
        self._current = {
            "width": simulation.width,
            "height": simulation.height,
            "settings": simulation.settings,
            "fields": [],
            "charges": [],
        }

    def draw_field(self, field: Field) -> None:
        if self._current is None:
            return
        self._current["fields"].append({
            "sourceId": field.id,
            "lines": [line.to_json() for line in field.lines],
        })

    def draw_charge(self, charge: Charge, r: float) -> None:
        if self._current is None:
            return
        self._current["charges"].append({
            "id": charge.id,
            "position": point_to_json(charge.position),
            "sign": charge.sign,
            "magnitude": charge.magnitude,
            "selected": charge.selected,
            "r": r,
        })

    def end_frame(self) -> None:
        if self._current is not None:
            self.frames.append(self._current)
            self._current = None

    @property
    def last_frame(self) -> dict[str, Any] | None:
        return self.frames[-1] if self.frames else None

    def clear(self) -> None:
        self.frames.clear()
