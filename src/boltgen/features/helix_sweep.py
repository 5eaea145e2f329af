"""
Helical Sweep

Carries a closed cross-section along a helix to build a thread-cutting tool.

The guide helix is a straight line in the (angle, z) parameter space of a
cylinder of radius ``guide_diameter / 2``, rising one pitch per turn. At
height z it sits at angle 360·z/P, so every tool built for the same pitch
shares one phase. It is trimmed a quarter pitch beyond both ends, so the
swept solid spans roughly ``[-overlap, length + overlap]`` along Z. Callers
trim the excess with masks; the sweep itself never trims.

The profile is given in the X-Z half-plane (angle 0) at z = 0 and is moved
onto the start of the helix before sweeping. The pipe shell keeps the
profile's binormal fixed to +Z, so the cross-section stays in a plane
containing the axis for the whole sweep.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import cadquery as cq
from OCP.BRepBuilderAPI import BRepBuilderAPI_MakeEdge, BRepBuilderAPI_MakeWire
from OCP.BRepLib import BRepLib
from OCP.BRepOffsetAPI import BRepOffsetAPI_MakePipeShell
from OCP.Geom import Geom_CylindricalSurface
from OCP.Geom2d import Geom2d_Line, Geom2d_TrimmedCurve
from OCP.gp import gp_Ax2, gp_Ax2d, gp_Ax3, gp_Dir, gp_Dir2d, gp_Pnt, gp_Pnt2d

from ..errors import ConstructionError, ValidationError
from ..solids import largest_solid
from .revolve_profile import Point3, make_polygon_wire

logger = logging.getLogger(__name__)

# Extra helix length at each end, as a fraction of the pitch
HELIX_OVERLAP_FRACTION = 0.25


def helix_overlap(pitch: float) -> float:
    """Axial overlap added at each end of the helix."""
    return HELIX_OVERLAP_FRACTION * pitch


def helix_angle(pitch: float, z: float) -> float:
    """Angle in radians of the helix at height ``z``."""
    return 2.0 * math.pi * z / pitch


def make_helix_wire(guide_diameter: float, pitch: float, z_start: float, z_end: float) -> cq.Wire:
    """
    Right-handed helix from ``z_start`` to ``z_end``.

    The helix passes through (guide_diameter/2, 0, 0) and turns 360° per
    pitch, whatever its trimmed extent.

    Args:
        guide_diameter: Diameter of the supporting cylinder
        pitch: Rise per full turn
        z_start: Height of the first end
        z_end: Height of the second end

    Returns:
        Helix wire
    """
    cylinder = Geom_CylindricalSurface(gp_Ax3(gp_Ax2(gp_Pnt(0, 0, 0), gp_Dir(0, 0, 1))), guide_diameter / 2.0)

    # Unit-speed line through the origin of the (angle, z) plane
    line = Geom2d_Line(gp_Ax2d(gp_Pnt2d(0.0, 0.0), gp_Dir2d(2.0 * math.pi, pitch)))
    speed = math.hypot(2.0 * math.pi, pitch) / pitch
    segment = Geom2d_TrimmedCurve(line, z_start * speed, z_end * speed)

    edge = BRepBuilderAPI_MakeEdge(segment, cylinder).Edge()
    BRepLib.BuildCurves3d_s(edge)
    return cq.Wire(BRepBuilderAPI_MakeWire(edge).Wire())


def _place_on_helix(profile: Sequence[Point3], pitch: float, z: float) -> list[Point3]:
    """Move a profile drawn at z = 0 along the helix to height ``z``."""
    angle = helix_angle(pitch, z)
    c, s = math.cos(angle), math.sin(angle)
    return [(x * c - y * s, x * s + y * c, pz + z) for x, y, pz in profile]


def make_helical_sweep(
    profile: Sequence[Point3],
    guide_diameter: float,
    pitch: float,
    length: float,
) -> cq.Solid:
    """
    Sweep a closed profile along a helix into a solid.

    Args:
        profile: Closed polyline (x, 0, z) near z = 0, x being the radius
        guide_diameter: Diameter of the helix cylinder
        pitch: Axial advance per turn
        length: Nominal axial length; the result extends a quarter pitch beyond both ends

    Returns:
        Swept solid spanning approximately [-pitch/4, length + pitch/4] along Z

    Raises:
        ValidationError: If pitch, guide_diameter or length is not positive
        ConstructionError: If the pipe shell cannot be built or capped
    """
    if pitch <= 0:
        raise ValidationError("pitch", f"must be > 0 (got {pitch})")
    if guide_diameter <= 0:
        raise ValidationError("guide_diameter", f"must be > 0 (got {guide_diameter})")
    if length <= 0:
        raise ValidationError("length", f"must be > 0 (got {length})")

    overlap = helix_overlap(pitch)
    details = {"guide_diameter": guide_diameter, "pitch": pitch, "length": length}

    spine = make_helix_wire(guide_diameter, pitch, -overlap, length + overlap)
    section = make_polygon_wire(_place_on_helix(profile, pitch, -overlap), stage="helix")

    logger.debug("Sweeping thread profile: d=%.4g P=%.4g length=%.4g", guide_diameter, pitch, length)
    try:
        pipe = BRepOffsetAPI_MakePipeShell(spine.wrapped)
        pipe.SetMode(gp_Dir(0.0, 0.0, 1.0))
        pipe.Add(section, False, False)
        pipe.Build()
    except Exception as e:
        raise ConstructionError("helix", f"pipe shell construction failed: {e}", details) from e

    if not pipe.IsDone():
        raise ConstructionError("helix", "pipe shell construction failed", details)
    if not pipe.MakeSolid():
        raise ConstructionError("helix", "could not cap pipe shell into a solid", details)

    swept = largest_solid(cq.Shape.cast(pipe.Shape()), "helix")
    if swept.Volume() <= 0:
        raise ConstructionError("helix", "swept solid has no volume", details)
    return swept
