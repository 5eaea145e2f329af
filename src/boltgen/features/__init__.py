"""
Geometric Feature Primitives

Leaf solids the fastener builders are assembled from.
"""

from .helix_sweep import helix_angle, helix_overlap, make_helical_sweep, make_helix_wire
from .hex_prism import HEX_METHODS, hexagon_area, hexagon_points, make_hex_prism
from .revolve_profile import make_polygon_wire, make_revolved_profile
from .thread_profile import make_thread_tool, thread_profile_points

__all__ = [
    "HEX_METHODS",
    "helix_angle",
    "helix_overlap",
    "hexagon_area",
    "hexagon_points",
    "make_helical_sweep",
    "make_helix_wire",
    "make_hex_prism",
    "make_polygon_wire",
    "make_revolved_profile",
    "make_thread_tool",
    "thread_profile_points",
]
