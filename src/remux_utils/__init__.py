"""
Remux utilities package for the NAS media importer.

This package contains the materialization step: moving or remuxing a file
into its library destination.
"""

from .remuxer import (
    MaterializationError,
    MaterializeOutcome,
    MediaMaterializer,
    RemuxError,
    RemuxTool,
    ToolResult,
    cleanup_all_processes,
    primary_remux_tool,
    run_tool,
    secondary_remux_tool,
)

__all__ = [
    "MaterializationError",
    "MaterializeOutcome",
    "MediaMaterializer",
    "RemuxError",
    "RemuxTool",
    "ToolResult",
    "cleanup_all_processes",
    "primary_remux_tool",
    "run_tool",
    "secondary_remux_tool",
]
