# MIT License (see LICENSE)
"""
Rendering adapters for visualization and export.

This subpackage provides:
    - RendererAdapter: Abstract base class defining the rendering interface.
    - DebugRenderer: Text/console output for debugging.
    - BufferedRenderer: Records frames as plain data for export.

The field engine has no rendering dependency; these adapters are optional.

Typical usage:
    from electric_fields.renderer import DebugRenderer

    DebugRenderer().render_simulation(simulation)
"""
from .adapter import (
    RendererAdapter,
    DebugRenderer,
    BufferedRenderer,
)

__all__ = [
    "RendererAdapter",
    "DebugRenderer",
    "BufferedRenderer",
]
