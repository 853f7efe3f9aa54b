# MIT License (see LICENSE)
"""
Input/Output utilities for projects.

This subpackage provides:
    - JSON serialization: Save and load projects (several simulations).
    - Round-trip support: charges, field overrides and settings survive a
      save/load cycle; lines are recomputed after loading.

Typical usage:
    from electric_fields.io import load_project_into, save_project

    save_project(project, "fields.json")

    # Keeps the current project if the file is broken
    load_project_into(project, "fields.json")
"""
from .json_io import (
    ProjectLoadError,
    load_project,
    load_project_raw,
    load_project_into,
    project_from_string,
    save_project,
    project_to_json,
    project_from_json,
    simulation_to_json,
    simulation_from_json,
    settings_to_json,
    settings_from_json,
)

__all__ = [
    "ProjectLoadError",
    # Loading
    "load_project",
    "load_project_raw",
    "load_project_into",
    "project_from_string",
    # Saving
    "save_project",
    # Serialization
    "project_to_json",
    "project_from_json",
    "simulation_to_json",
    "simulation_from_json",
    "settings_to_json",
    "settings_from_json",
]
