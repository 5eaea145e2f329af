"""
Solids of revolution from a closed polyline profile.

The profile is given in the X-Z half-plane (y = 0, x >= 0), closed into a
planar face and revolved a full turn about the Z axis. The shank builder uses
this to make the conical lead-in chamfer tool at the thread tip.
"""

from __future__ import annotations

from collections.abc import Sequence

import cadquery as cq
from OCP.BRepBuilderAPI import BRepBuilderAPI_MakeFace, BRepBuilderAPI_MakePolygon
from OCP.BRepPrimAPI import BRepPrimAPI_MakeRevol
from OCP.gp import gp_Ax1, gp_Dir, gp_Pnt
from OCP.TopoDS import TopoDS_Wire

from ..errors import ConstructionError
from ..solids import largest_solid

Point3 = tuple[float, float, float]

# Points closer than this to the y = 0 plane count as lying on it
PLANE_TOLERANCE = 1e-9


def make_polygon_wire(points: Sequence[Point3], stage: str = "profile") -> TopoDS_Wire:
    """Build a closed polygonal wire through ``points``.

    Args:
        points: Ordered vertices; the closing edge back to the first point is implicit
        stage: Pipeline stage reported on failure

    Returns:
        Closed OCP wire

    Raises:
        ConstructionError: If fewer than 3 distinct points are given
    """
    if len(points) < 3:
        raise ConstructionError(stage, f"profile needs at least 3 points, got {len(points)}")

    polygon = BRepBuilderAPI_MakePolygon()
    for x, y, z in points:
        polygon.Add(gp_Pnt(x, y, z))
    polygon.Close()

    if not polygon.IsDone():
        raise ConstructionError(stage, "could not build a closed polygon from profile points")
    return polygon.Wire()


def make_revolved_profile(points: Sequence[Point3]) -> cq.Solid:
    """
    Revolve a closed X-Z polyline 360° about the Z axis.

    Args:
        points: At least 3 points (x, 0, z) with x >= 0

    Returns:
        Solid of revolution

    Raises:
        ConstructionError: For off-plane, negative-radius, degenerate or
            self-intersecting profiles
    """
    for x, y, z in points:
        if abs(y) > PLANE_TOLERANCE:
            raise ConstructionError("chamfer", "profile point is not in the X-Z plane", {"x": x, "y": y, "z": z})
        if x < 0:
            raise ConstructionError("chamfer", "profile point has negative radius", {"x": x, "z": z})

    wire = make_polygon_wire(points, stage="chamfer")

    face_maker = BRepBuilderAPI_MakeFace(wire, True)
    if not face_maker.IsDone():
        raise ConstructionError("chamfer", "profile wire is not planar")
    face = cq.Face(face_maker.Face())
    if not face.isValid() or face.Area() <= 0:
        raise ConstructionError("chamfer", "profile face is degenerate or self-intersecting")

    try:
        revol = BRepPrimAPI_MakeRevol(face.wrapped, gp_Ax1(gp_Pnt(0, 0, 0), gp_Dir(0, 0, 1)))
        revol.Build()
    except Exception as e:
        raise ConstructionError("chamfer", f"revolve failed: {e}") from e

    if not revol.IsDone():
        raise ConstructionError("chamfer", "revolve failed")

    solid = largest_solid(cq.Shape.cast(revol.Shape()), "chamfer")
    if not solid.isValid() or solid.Volume() <= 0:
        raise ConstructionError("chamfer", "revolved profile is not a valid solid")
    return solid
