# MIT License (see LICENSE)
"""
JSON serialization and deserialization for projects.

Traced lines are not stored: tracing is deterministic, so loading a
project and recomputing reproduces the same geometry.

JSON Schema Overview:
---------------------
{
  "simulations": [
    {
      "name": string,
      "width": float, "height": float,
      "nextId": int,                   # Optional; next charge id to hand out
      "settings": {                    # Optional, each key optional
        "r": float, "density": int, "steps": int, "delta": float,
        "magnitude": float,
        "colors": {"positiveCharge": "#rrggbb", "negativeCharge": ...,
                   "positiveLine": ..., "negativeLine": ..., "background": ...},
        "showSourceValue": bool
      },
      "fields": [
        {
          "source": {
            "id": int,
            "position": {"x": float, "y": float},
            "magnitude": float,        # Signed
            "selected": bool           # Optional, default false
          },
          "r": float, "density": int, "steps": int, "delta": float
        }
      ]
    }
  ],
  "activeSimulation": int,
  "defaultSimulationIndex": int
}

Older documents that store ``"sign": "Positive" | "Negative"`` next to an
unsigned magnitude (and ``r`` inside ``source``) are also accepted.
"""
from __future__ import annotations
import json
import logging
from typing import Any

from ..project import Project
from ..settings import Settings
from ..simulation import Simulation
from ..store import ChargeStore
from ..types import Charge, Field
from ..util import point_from_json, point_to_json

logger = logging.getLogger(__name__)

_SETTINGS_KEYS = {
    "r": "r",
    "density": "density",
    "steps": "steps",
    "delta": "delta",
    "magnitude": "magnitude",
    "showSourceValue": "show_source_value",
}
_COLOR_KEYS = {
    "positiveCharge": "positive_charge",
    "negativeCharge": "negative_charge",
    "positiveLine": "positive_line",
    "negativeLine": "negative_line",
    "background": "background",
}


class ProjectLoadError(ValueError):
    """A project document could not be parsed."""


# =============================================================================
# Settings
# =============================================================================

def settings_to_json(settings: Settings) -> dict[str, Any]:
    result: dict[str, Any] = {key: getattr(settings, attr) for key, attr in _SETTINGS_KEYS.items()}
    result["colors"] = {key: getattr(settings.colors, attr) for key, attr in _COLOR_KEYS.items()}
    return result


def settings_from_json(d: Any) -> Settings:
    """
    Build Settings from a document section.

    Unknown or malformed entries are skipped and keep their defaults.
    """
    if not isinstance(d, dict):
        logger.warning("Ignoring malformed settings section: %r", d)
        return Settings()
    changes: dict[str, Any] = {
        _SETTINGS_KEYS.get(key, key): value for key, value in d.items() if key != "colors"
    }
    if "colors" in d:
        colors = d["colors"]
        if isinstance(colors, dict):
            changes["colors"] = {_COLOR_KEYS.get(k, k): v for k, v in colors.items()}
        else:
            changes["colors"] = colors
    settings, _ = Settings().updated(changes)
    return settings


# =============================================================================
# Charges and fields
# =============================================================================

def charge_to_json(charge: Charge) -> dict[str, Any]:
    result = {
        "id": charge.id,
        "position": point_to_json(charge.position),
        "magnitude": charge.magnitude,
    }
    if charge.selected:
        result["selected"] = True
    return result


def _require_object(d: Any, what: str) -> dict[str, Any]:
    if not isinstance(d, dict):
        raise ValueError(f"Expected {what} to be a JSON object, got {type(d).__name__}")
    return d


def charge_from_json(d: dict[str, Any]) -> Charge:
    _require_object(d, "charge")
    magnitude = float(d["magnitude"])
    sign = d.get("sign")
    if sign is not None:
        if sign not in ("Positive", "Negative"):
            raise ValueError(f"Unknown charge sign: {sign!r}")
        magnitude = abs(magnitude) if sign == "Positive" else -abs(magnitude)
    return Charge(
        id=int(d["id"]),
        position=point_from_json(d["position"]),
        magnitude=magnitude,
        selected=d.get("selected") is True,
    )


def field_to_json(f: Field) -> dict[str, Any]:
    return {
        "source": charge_to_json(f.source),
        "r": f.r,
        "density": f.density,
        "steps": f.steps,
        "delta": f.delta,
    }


def field_from_json(d: dict[str, Any]) -> Field:
    """
    Parse a single field definition.

    Raises:
        ValueError: If a required key is missing or a value is out of range.
    """
    _require_object(d, "field")
    if "source" not in d:
        raise ValueError("Field definition missing required 'source' field.")
    source = d["source"]
    return Field(
        source=charge_from_json(source),
        r=float(d["r"] if "r" in d else source["r"]),
        density=int(d["density"]),
        steps=int(d["steps"]),
        delta=float(d["delta"]),
    )


# =============================================================================
# Simulations and projects
# =============================================================================

def simulation_to_json(simulation: Simulation) -> dict[str, Any]:
    return {
        "name": simulation.name,
        "width": simulation.width,
        "height": simulation.height,
        "nextId": simulation.store.next_id,
        "settings": settings_to_json(simulation.settings),
        "fields": [field_to_json(f) for f in simulation.fields],
    }


def simulation_from_json(d: dict[str, Any]) -> Simulation:
    _require_object(d, "simulation")
    store = ChargeStore(next_id=int(d.get("nextId", 1)))
    for field_data in d.get("fields", []):
        store.insert(field_from_json(field_data))
    return Simulation(
        name=str(d.get("name", "Simulation")),
        width=float(d.get("width", 800.0)),
        height=float(d.get("height", 600.0)),
        settings=settings_from_json(d.get("settings", {})),
        store=store,
    )


def project_to_json(project: Project) -> dict[str, Any]:
    return {
        "simulations": [simulation_to_json(s) for s in project.simulations],
        "activeSimulation": project.active_index,
        "defaultSimulationIndex": project.default_index,
    }


def project_from_json(data: Any) -> Project:
    """
    Build a Project from a parsed document.

    Raises:
        ProjectLoadError: If any part of the document is malformed. Nothing
            is partially constructed.
    """
    try:
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        simulations = [simulation_from_json(s) for s in data["simulations"]]
        return Project(
            simulations=simulations,
            active_index=int(data.get("activeSimulation", 0)),
            default_index=int(data.get("defaultSimulationIndex", 0)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ProjectLoadError(f"Invalid project document: {exc}") from exc


def project_from_string(text: str) -> Project:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectLoadError(f"Project is not valid JSON: {exc}") from exc
    return project_from_json(data)


def load_project_raw(path: str) -> dict[str, Any]:
    """Load the raw JSON document without object construction."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_project(path: str) -> Project:
    """
    Load a project file.

    Raises:
        FileNotFoundError: If the file cannot be found.
        ProjectLoadError: If the file is not a valid project document.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as exc:
            raise ProjectLoadError(f"Project is not valid UTF-8: {exc}") from exc
    return project_from_string(text)


def load_project_into(project: Project, path: str) -> bool:
    """
    Replace ``project``'s content with the file at ``path``.

    On any failure the error is logged and ``project`` is left untouched.

    Returns:
        True if the project was replaced.
    """
    try:
        loaded = load_project(path)
    except (OSError, ProjectLoadError) as exc:
        logger.error("Could not load project from %s: %s", path, exc)
        return False
    project.replace(loaded)
    return True


def save_project(project: Project, path: str, indent: int = 2) -> None:
    """Save a project to a JSON file on disk."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(project_to_json(project), f, indent=indent)
