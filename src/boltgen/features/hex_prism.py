"""
Hexagonal right prisms for bolt heads, nut blanks and hex sockets.

``across_flats`` is always the flat-to-flat distance (wrench size s), never
the corner-to-corner distance. The hexagon is centred on the Z axis with
flats normal to the X axis and is extruded from z = 0 to z = height.

Two equivalent constructions are available:

- ``"polygon"``: closed 6-vertex polygon with circumradius s/sqrt(3),
  vertices at pi/6 + i*pi/3, extruded along +Z.
- ``"petals"``: cylinder of diameter 2s/sqrt(3) with six box "petals"
  removed beyond the flat midpoints.
"""

from __future__ import annotations

import math

import cadquery as cq
from OCP.BRepBuilderAPI import BRepBuilderAPI_MakeFace
from OCP.BRepPrimAPI import BRepPrimAPI_MakePrism
from OCP.gp import gp_Vec

from ..errors import ConstructionError, ValidationError
from ..solids import cut_solid, largest_solid
from .revolve_profile import make_polygon_wire

HEX_METHODS = ("polygon", "petals")


def hexagon_points(across_flats: float, z: float = 0.0) -> list[tuple[float, float, float]]:
    """Vertices of a regular hexagon with the given flat-to-flat width."""
    circumradius = across_flats / math.sqrt(3.0)
    points = []
    for i in range(6):
        angle = math.pi / 6.0 + i * (math.pi / 3.0)
        points.append((circumradius * math.cos(angle), circumradius * math.sin(angle), z))
    return points


def hexagon_area(across_flats: float) -> float:
    """Cross-section area of a regular hexagon: (sqrt(3)/2) * s^2."""
    return math.sqrt(3.0) / 2.0 * across_flats**2


def make_hex_prism(across_flats: float, height: float, method: str = "polygon") -> cq.Solid:
    """
    Build a hexagonal prism standing on the XY plane.

    Args:
        across_flats: Flat-to-flat width (s)
        height: Extrusion height along +Z
        method: "polygon" (default) or "petals"

    Returns:
        Hexagonal prism spanning z in [0, height]

    Raises:
        ValidationError: If across_flats or height is not positive, or the method is unknown
    """
    if across_flats <= 0:
        raise ValidationError("across_flats", f"must be > 0 (got {across_flats})")
    if height <= 0:
        raise ValidationError("height", f"must be > 0 (got {height})")

    if method == "polygon":
        return _hex_from_polygon(across_flats, height)
    if method == "petals":
        return _hex_from_petals(across_flats, height)
    raise ValidationError("method", f"must be one of {HEX_METHODS} (got {method!r})")


def _hex_from_polygon(across_flats: float, height: float) -> cq.Solid:
    wire = make_polygon_wire(hexagon_points(across_flats), stage="hex")
    face = BRepBuilderAPI_MakeFace(wire, True)
    if not face.IsDone():
        raise ConstructionError("hex", "could not build hexagon face", {"across_flats": across_flats})

    prism = BRepPrimAPI_MakePrism(face.Face(), gp_Vec(0.0, 0.0, height))
    return largest_solid(cq.Shape.cast(prism.Shape()), "hex")


def _hex_from_petals(across_flats: float, height: float) -> cq.Solid:
    circumradius = across_flats / math.sqrt(3.0)
    apothem = across_flats / 2.0
    margin = 0.1 * across_flats

    body = cq.Solid.makeCylinder(circumradius, height)

    # One petal covers everything beyond the +X flat; the others are rotated copies
    petal_depth = circumradius - apothem + margin
    petal = cq.Solid.makeBox(
        petal_depth,
        2.0 * circumradius,
        height + 2.0 * margin,
        pnt=cq.Vector(apothem, -circumradius, -margin),
    )
    for i in range(6):
        rotated = petal.rotate(cq.Vector(0, 0, 0), cq.Vector(0, 0, 1), 60.0 * i)
        body = cut_solid(body, rotated, "hex")
    return body
