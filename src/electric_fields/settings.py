# MIT License (see LICENSE)
"""
Per-simulation default settings.

Settings seed every new charge and field. They are owned by a single
Simulation; there is no process-wide "current settings".
"""
from __future__ import annotations
import logging
import math
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class Colors:
    """
    Render colours as hex strings. The engine only stores and persists them.
    """
    positive_charge: str = "#ff5555"
    negative_charge: str = "#5555ff"
    positive_line: str = "#ffaaaa"
    negative_line: str = "#aaaaff"
    background: str = "#ffffff"

    def updated(self, changes: Mapping[str, Any]) -> tuple["Colors", list[str]]:
        """Apply colour edits, skipping unknown keys and non-hex values."""
        accepted: dict[str, str] = {}
        rejected: list[str] = []
        names = {f.name for f in fields(self)}
        for key, value in changes.items():
            if key in names and isinstance(value, str) and _HEX_COLOR.match(value):
                accepted[key] = value
            else:
                rejected.append(f"colors.{key}")
        return replace(self, **accepted), rejected


@dataclass(frozen=True)
class Settings:
    """
    Defaults for newly created charges and fields.

    Attributes:
        r: Source radius for new fields.
        density: Lines seeded per new field.
        steps: Maximum trace steps per line.
        delta: Step length.
        magnitude: Absolute magnitude given to new charges.
        colors: Render colours.
        show_source_value: Whether the render layer labels the selected
                           charge with its magnitude.
    """
    r: float = 10.0
    density: int = 20
    steps: int = 900
    delta: float = 1.0
    magnitude: float = 1.0
    colors: Colors = field(default_factory=Colors)
    show_source_value: bool = True

    def updated(self, changes: Mapping[str, Any]) -> tuple["Settings", list[str]]:
        """
        Return a copy with ``changes`` applied.

        Each entry is validated on its own. Unknown keys and malformed
        values are skipped and keep the previous value.

        Returns:
            The new Settings and the list of rejected keys.
        """
        accepted: dict[str, Any] = {}
        rejected: list[str] = []
        for key, value in changes.items():
            if key == "colors":
                if isinstance(value, Mapping):
                    colors, bad = self.colors.updated(value)
                    accepted["colors"] = colors
                    rejected.extend(bad)
                else:
                    rejected.append(key)
                continue
            parsed = _parse_value(key, value)
            if parsed is None:
                rejected.append(key)
            else:
                accepted[key] = parsed
        if rejected:
            logger.warning("Ignoring malformed settings: %s", ", ".join(rejected))
        return replace(self, **accepted), rejected


def _parse_value(key: str, value: Any) -> Any:
    """Validate one scalar setting. Returns None when the value is unusable."""
    if isinstance(value, bool) and key != "show_source_value":
        return None
    if key in ("r", "delta", "magnitude"):
        if not isinstance(value, (int, float)):
            return None
        value = float(value)
        if not math.isfinite(value) or value <= 0:
            return None
        return value
    if key in ("density", "steps"):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or value < 0:
            return None
        return value
    if key == "show_source_value":
        return value if isinstance(value, bool) else None
    return None
