"""
60° thread tooth and thread-cutting tool.

The tooth is a 4-point polygon in the radial/axial plane. Its inner edge sits
just inside the minor radius and is a quarter pitch tall; its outer edge sits
one thread depth (0.614P) further out and spans nearly the full pitch. Both
radii carry a 5 % pitch clearance so the tool always cuts through the blank
surface. Subtracting the swept tooth from a cylinder of the major diameter
leaves a continuous 60° helical groove.
"""

from __future__ import annotations

import cadquery as cq

from .helix_sweep import make_helical_sweep
from .revolve_profile import Point3

# ISO external thread depth h3 / P
THREAD_DEPTH_RATIO = 0.614

# Radial clearance margin / P
RADIAL_CLEARANCE_RATIO = 0.05

# Half-height of the root edge / P (root edge is P/4 tall)
ROOT_HALF_WIDTH_RATIO = 0.125

# Half-height of the crest edge / P. Kept just under 0.5 so adjacent turns
# of the swept tool never touch.
CREST_HALF_WIDTH_RATIO = 0.49


def thread_profile_points(minor_diameter: float, pitch: float) -> list[Point3]:
    """Tooth polygon for a thread of the given minor diameter and pitch."""
    depth = THREAD_DEPTH_RATIO * pitch
    clearance = RADIAL_CLEARANCE_RATIO * pitch
    inner = 0.5 * minor_diameter - clearance
    outer = 0.5 * minor_diameter + depth + clearance
    return [
        (inner, 0.0, -ROOT_HALF_WIDTH_RATIO * pitch),
        (inner, 0.0, ROOT_HALF_WIDTH_RATIO * pitch),
        (outer, 0.0, CREST_HALF_WIDTH_RATIO * pitch),
        (outer, 0.0, -CREST_HALF_WIDTH_RATIO * pitch),
    ]


def make_thread_tool(minor_diameter: float, pitch: float, length: float) -> cq.Solid:
    """Helical thread-cutting tool over ``length`` (plus a quarter pitch each end)."""
    return make_helical_sweep(thread_profile_points(minor_diameter, pitch), minor_diameter, pitch, length)
